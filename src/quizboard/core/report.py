"""End-of-game summary reports."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

import structlog

from .errors import ReportWriteError, UnsupportedFormatError
from .models import Contestant, TurnRecord

LOGGER = structlog.get_logger(__name__)

REPORT_TITLE = "JEOPARDY GAME SUMMARY REPORT"
GENERATED_FMT = "%Y-%m-%d %H:%M:%S"
DEFAULT_BASENAME = "game_report"
RULE = "=" * 37
THIN_RULE = "-" * 37


class ReportFormat(str, Enum):
    """Report output formats; PDF and DOCX need a registered document sink."""

    TXT = "txt"
    MARKDOWN = "md"
    PDF = "pdf"
    DOCX = "docx"

    @classmethod
    def from_tag(cls, tag: "ReportFormat | str") -> "ReportFormat":
        if isinstance(tag, cls):
            return tag
        normalized = str(tag).strip().lower().lstrip(".")
        if normalized == "markdown":
            normalized = cls.MARKDOWN.value
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedFormatError(tag, kind="report format") from None

    @property
    def is_binary(self) -> bool:
        return self in {ReportFormat.PDF, ReportFormat.DOCX}


@dataclass(frozen=True, slots=True)
class StandingEntry:
    rank: int
    name: str
    score: int


@dataclass(frozen=True, slots=True)
class ContestantBreakdown:
    name: str
    score: int
    turns: Tuple[TurnRecord, ...]


@dataclass(frozen=True, slots=True)
class SummaryReport:
    """Format-independent report content."""

    title: str
    generated_at: str
    standings: Tuple[StandingEntry, ...]
    breakdowns: Tuple[ContestantBreakdown, ...]

    @classmethod
    def build(
        cls,
        contestants: Iterable[Contestant],
        *,
        title: str = REPORT_TITLE,
        generated_at: Optional[datetime] = None,
    ) -> "SummaryReport":
        # sorted() is stable, so ties keep registration order.
        ranked = sorted(contestants, key=lambda contestant: -contestant.score)
        stamp = (generated_at or datetime.now()).strftime(GENERATED_FMT)
        return cls(
            title=title,
            generated_at=stamp,
            standings=tuple(
                StandingEntry(rank=index, name=contestant.name, score=contestant.score)
                for index, contestant in enumerate(ranked, start=1)
            ),
            breakdowns=tuple(
                ContestantBreakdown(name=contestant.name, score=contestant.score, turns=contestant.turn_history)
                for contestant in ranked
            ),
        )


class DocumentSink(Protocol):
    """Renders a report into a binary document such as PDF or DOCX."""

    def write(self, report: SummaryReport, path: Path) -> None:
        ...


def render_text(report: SummaryReport) -> str:
    lines: List[str] = [
        RULE,
        f"    {report.title}     ",
        RULE,
        f"Generated: {report.generated_at}",
        "",
        "FINAL SCORES:",
        THIN_RULE,
    ]
    for entry in report.standings:
        lines.append(f"{entry.rank}. {entry.name}: {entry.score} points")
    lines.append("")
    lines.append("DETAILED TURN-BY-TURN BREAKDOWN:")
    lines.append(RULE)
    lines.append("")
    for breakdown in report.breakdowns:
        lines.append(f"Player: {breakdown.name}")
        lines.append(THIN_RULE)
        for number, turn in enumerate(breakdown.turns, start=1):
            lines.append(f"Turn {number}:")
            lines.append(f"  Category: {turn.category}")
            lines.append(f"  Question Value: {turn.question_value} points")
            lines.append(f"  Question: {turn.question_text}")
            lines.append(f"  Given Answer: {turn.given_answer}")
            lines.append(f"  Result: {turn.result_label}")
            lines.append(f"  Points Earned: {turn.points_earned:+d}")
            lines.append(f"  Running Total: {turn.running_total}")
            lines.append("")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def render_markdown(report: SummaryReport) -> str:
    lines: List[str] = [f"# {report.title.title()}", "", f"- Generated: {report.generated_at}", ""]
    lines.append("## Final Scores")
    lines.append("")
    lines.append("| Rank | Player | Score |")
    lines.append("| ---: | --- | ---: |")
    for entry in report.standings:
        lines.append(f"| {entry.rank} | {entry.name} | {entry.score} |")
    lines.append("")
    for breakdown in report.breakdowns:
        lines.append(f"## {breakdown.name}")
        if not breakdown.turns:
            lines.append("- No turns played")
        for number, turn in enumerate(breakdown.turns, start=1):
            lines.append(
                f"- Turn {number}: {turn.category} for {turn.question_value}: {turn.question_text}"
            )
            lines.append(
                f"  - Answer `{turn.given_answer}` -> {turn.result_label} ({turn.points_earned:+d}, total {turn.running_total})"
            )
        lines.append("")
    return "\n".join(lines).strip() + "\n"


_TEXT_RENDERERS = {
    ReportFormat.TXT: render_text,
    ReportFormat.MARKDOWN: render_markdown,
}


class SummaryExporter:
    """Writes summary reports to ``reports_dir/<basename>.<format>``."""

    def __init__(
        self,
        reports_dir: Path | str = Path("reports"),
        *,
        basename: str = DEFAULT_BASENAME,
        sinks: Optional[Mapping[ReportFormat, DocumentSink]] = None,
    ) -> None:
        self.reports_dir = Path(reports_dir)
        self.basename = basename
        self._sinks: Dict[ReportFormat, DocumentSink] = dict(sinks or {})

    def register_sink(self, fmt: ReportFormat | str, sink: DocumentSink) -> None:
        self._sinks[ReportFormat.from_tag(fmt)] = sink

    def supported_formats(self) -> List[ReportFormat]:
        return [fmt for fmt in ReportFormat if fmt in _TEXT_RENDERERS or fmt in self._sinks]

    def path_for(self, fmt: ReportFormat) -> Path:
        return self.reports_dir / f"{self.basename}.{fmt.value}"

    def export(
        self,
        contestants: Iterable[Contestant],
        fmt: ReportFormat | str = ReportFormat.TXT,
        *,
        generated_at: Optional[datetime] = None,
    ) -> Path:
        report_format = ReportFormat.from_tag(fmt)
        sink = self._sinks.get(report_format)
        renderer = _TEXT_RENDERERS.get(report_format)
        if sink is None and renderer is None:
            raise UnsupportedFormatError(report_format.value, kind="report format without a document sink")

        report = SummaryReport.build(contestants, generated_at=generated_at)
        target = self.path_for(report_format)
        try:
            self.reports_dir.mkdir(parents=True, exist_ok=True)
            if sink is not None:
                sink.write(report, target)
            else:
                target.write_text(renderer(report), encoding="utf-8")
        except OSError as exc:
            LOGGER.error("report.write_failed", format=report_format.value, path=str(target), error=str(exc))
            raise ReportWriteError(f"Could not write {report_format.value} report to {target}: {exc}") from exc

        LOGGER.info("report.written", format=report_format.value, path=str(target), contestants=len(report.standings))
        return target


__all__ = [
    "REPORT_TITLE",
    "ReportFormat",
    "StandingEntry",
    "ContestantBreakdown",
    "SummaryReport",
    "DocumentSink",
    "render_text",
    "render_markdown",
    "SummaryExporter",
]
