"""Typer CLI entry point for running quizboard games."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import structlog
import typer
from dotenv import load_dotenv
from rich.table import Table

from ..config import DEFAULT_CONFIG_PATH, load_game_config
from ..console import BoardNarrator, console, play_session
from ..core.errors import IngestionError, QuizboardError, UnsupportedFormatError
from ..core.ingestion import SourceFormat, load_records
from ..core.report import ReportFormat, SummaryExporter, SummaryReport
from ..core.session import GameSession

LOGGER = structlog.get_logger(__name__)

app = typer.Typer(help="Play category/value trivia games.", invoke_without_command=False)
_configured_logging = False


def configure_logging(level: int = logging.INFO) -> None:
    global _configured_logging
    if _configured_logging:
        return
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured_logging = True


def configure_play_logging() -> None:
    """Keep the console quiet while a human is playing."""
    configure_logging(logging.ERROR)


def _resolve_format(bank: Path, fmt: Optional[str]) -> SourceFormat:
    try:
        return SourceFormat.from_tag(fmt) if fmt else SourceFormat.from_path(bank)
    except UnsupportedFormatError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc


@app.command("play")
def play(
    bank: Path = typer.Argument(..., help="Question bank file (csv, json or xml)"),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="Bank format; defaults to the file extension"),
    players: Optional[int] = typer.Option(None, "--players", "-p", min=1, max=4, help="Number of players (1-4)"),
    report_format: Optional[str] = typer.Option(None, "--report", help="Summary report format (txt or md; pdf and docx need a document sink)"),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to quizboard configuration JSON"),
) -> None:
    """Run an interactive game, then write the summary report and event log."""

    load_dotenv()
    configure_play_logging()
    game_config = load_game_config(config)
    source_format = _resolve_format(bank, fmt)

    session = GameSession()
    try:
        session.ingest_questions(bank, source_format)
    except IngestionError as exc:
        typer.echo(f"Error: could not load question bank: {exc}")
        raise typer.Exit(code=1) from exc

    count = players or typer.prompt("How many players? (1-4)", default=2, type=int)
    if not 1 <= count <= 4:
        typer.echo("Error: player count must be between 1 and 4")
        raise typer.Exit(code=1)
    session.record_player_count(count)
    for number in range(1, count + 1):
        name = typer.prompt(f"Name for player {number}").strip() or f"Player {number}"
        session.add_contestant(name)

    session.start()
    play_session(session, game_config.build_policies())
    session.end()

    narrator = BoardNarrator()
    narrator.final_standings(SummaryReport.build(session.contestants))

    exporter = SummaryExporter(game_config.reports_dir, basename=game_config.report_basename)
    try:
        report_path = session.generate_summary_report(exporter, report_format or game_config.report_format)
        typer.echo(f"Summary report saved to {report_path}")
    except QuizboardError as exc:
        typer.echo(f"Report not written: {exc}")

    try:
        log_path = session.generate_event_log(game_config.event_log_path)
        typer.echo(f"Event log saved to {log_path}")
    except QuizboardError as exc:
        typer.echo(f"Event log not written: {exc}")


@app.command("inspect")
def inspect(
    bank: Path = typer.Argument(..., help="Question bank file (csv, json or xml)"),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="Bank format; defaults to the file extension"),
) -> None:
    """Validate a question bank and print its category/value board."""

    load_dotenv()
    configure_logging(logging.WARNING)
    source_format = _resolve_format(bank, fmt)
    try:
        records = load_records(str(bank), source_format)
    except IngestionError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc

    board: dict[str, List[int]] = {}
    for record in records:
        board.setdefault(record.category, []).append(record.value)

    table = Table(show_header=True, header_style="bold cyan", title=f"{bank.name}: {len(records)} questions")
    table.add_column("Category", style="bold")
    table.add_column("Values")
    for category, values in board.items():
        table.add_row(category, ", ".join(str(v) for v in sorted(values)))
    console.print(table)


@app.command("formats")
def formats() -> None:
    """List the supported bank and report formats."""

    typer.echo("Question banks: " + ", ".join(fmt.value for fmt in SourceFormat))
    supported = SummaryExporter().supported_formats()
    typer.echo("Reports: " + ", ".join(fmt.value for fmt in supported))
    pending = [fmt.value for fmt in ReportFormat if fmt not in supported]
    if pending:
        typer.echo("Reports needing a document sink: " + ", ".join(pending))


if __name__ == "__main__":  # pragma: no cover
    app()
