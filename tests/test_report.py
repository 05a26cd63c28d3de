"""Tests for summary report building and export."""

from datetime import datetime
from pathlib import Path

import pytest

from quizboard.core.errors import UnsupportedFormatError
from quizboard.core.models import Contestant
from quizboard.core.report import (
    REPORT_TITLE,
    ReportFormat,
    SummaryExporter,
    SummaryReport,
    render_markdown,
    render_text,
)

GENERATED = datetime(2026, 3, 1, 12, 30, 0)


def _contestant(name, *turns):
    contestant = Contestant(name=name)
    for category, value, correct in turns:
        contestant.record_turn(
            category=category,
            question_value=value,
            question_text=f"{category} {value}?",
            given_answer="A" if correct else "B",
            is_correct=correct,
            points_earned=value if correct else -value,
        )
    return contestant


@pytest.fixture
def roster():
    return [
        _contestant("Alice", ("Variables", 100, True), ("Loops", 300, False)),
        _contestant("Bob", ("Variables", 200, True)),
        _contestant("Carol", ("Loops", 100, True), ("Loops", 200, False), ("Loops", 300, True)),
    ]


class TestSummaryReport:
    def test_ranking_descends_with_stable_ties(self, roster):
        report = SummaryReport.build(roster, generated_at=GENERATED)
        # Bob 200, Carol 200, Alice -200
        assert [(e.rank, e.name, e.score) for e in report.standings] == [
            (1, "Bob", 200),
            (2, "Carol", 200),
            (3, "Alice", -200),
        ]
        assert report.generated_at == "2026-03-01 12:30:00"
        assert report.title == REPORT_TITLE

    def test_breakdown_keeps_play_order(self, roster):
        report = SummaryReport.build(roster, generated_at=GENERATED)
        carol = next(b for b in report.breakdowns if b.name == "Carol")
        assert [t.question_value for t in carol.turns] == [100, 200, 300]
        assert [t.running_total for t in carol.turns] == [100, -100, 200]


class TestRenderers:
    def test_text_layout(self, roster):
        text = render_text(SummaryReport.build(roster, generated_at=GENERATED))
        assert REPORT_TITLE in text
        assert "Generated: 2026-03-01 12:30:00" in text
        assert "1. Bob: 200 points" in text
        assert "3. Alice: -200 points" in text
        assert "  Result: INCORRECT" in text
        assert "  Points Earned: -300" in text
        assert "  Points Earned: +100" in text
        assert text.index("Player: Bob") < text.index("Player: Alice")

    def test_markdown_table(self, roster):
        text = render_markdown(SummaryReport.build(roster, generated_at=GENERATED))
        assert "| 1 | Bob | 200 |" in text
        assert "## Alice" in text
        assert "CORRECT (+100, total 100)" in text

    def test_markdown_player_without_turns(self):
        text = render_markdown(SummaryReport.build([Contestant(name="Dana")], generated_at=GENERATED))
        assert "- No turns played" in text


class RecordingSink:
    def __init__(self):
        self.calls = []

    def write(self, report, path: Path) -> None:
        self.calls.append((report, path))
        path.write_bytes(b"%PDF-fake")


class TestSummaryExporter:
    def test_text_export_creates_directory(self, roster, tmp_path):
        exporter = SummaryExporter(tmp_path / "reports")
        path = exporter.export(roster, "txt", generated_at=GENERATED)
        assert path == tmp_path / "reports" / "game_report.txt"
        assert "FINAL SCORES:" in path.read_text(encoding="utf-8")

    def test_markdown_alias(self, roster, tmp_path):
        path = SummaryExporter(tmp_path, basename="final").export(roster, "markdown")
        assert path.name == "final.md"

    def test_binary_format_without_sink(self, roster, tmp_path):
        with pytest.raises(UnsupportedFormatError):
            SummaryExporter(tmp_path).export(roster, "pdf")

    def test_binary_format_goes_through_sink(self, roster, tmp_path):
        sink = RecordingSink()
        exporter = SummaryExporter(tmp_path)
        exporter.register_sink("pdf", sink)

        path = exporter.export(roster, ReportFormat.PDF)

        assert path.name == "game_report.pdf"
        assert path.read_bytes() == b"%PDF-fake"
        report, _ = sink.calls[0]
        assert report.standings[0].name == "Bob"
        assert ReportFormat.PDF in exporter.supported_formats()
        assert ReportFormat.DOCX not in exporter.supported_formats()

    def test_unknown_format(self, roster, tmp_path):
        with pytest.raises(UnsupportedFormatError):
            SummaryExporter(tmp_path).export(roster, "html")
