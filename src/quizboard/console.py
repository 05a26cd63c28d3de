"""Console front end for interactive games."""

from typing import Callable, Iterable, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.errors import InvalidStateError
from .core.models import OPTION_KEYS, Contestant, QuestionRecord, TurnOutcome
from .core.policies import CategoryPolicies
from .core.report import SummaryReport
from .core.session import GameSession

console = Console()

Prompt = Callable[..., str]
QUIT_WORD = "quit"


class BoardNarrator:
    """Prints board state and turn results."""

    def __init__(self, out: Optional[Console] = None):
        self.console = out or console

    def divider(self, title: str = "") -> None:
        if title:
            self.console.print(f"\n{'='*60}")
            self.console.print(f"{title.center(60)}")
            self.console.print('='*60)
        else:
            self.console.print('-'*60)

    def board(self, session: GameSession) -> None:
        table = Table(show_header=True, header_style="bold cyan", title="Board")
        table.add_column("Category", style="bold")
        table.add_column("Values left")
        for category in sorted(session.available_categories()):
            values = session.available_values(category)
            table.add_row(category, ", ".join(str(v) for v in values))
        self.console.print(table)

    def scores(self, contestants: Iterable[Contestant], current: Optional[Contestant] = None) -> None:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Player", width=20)
        table.add_column("Score", justify="right")
        for contestant in contestants:
            marker = " *" if contestant is current else ""
            table.add_row(f"{contestant.name}{marker}", str(contestant.score))
        self.console.print(table)

    def question(self, record: QuestionRecord) -> None:
        body = "\n".join([record.prompt, ""] + [f"{key}. {text}" for key, text in record.options.items()])
        self.console.print(Panel(body, title=f"{record.category} for {record.value}", style="cyan"))

    def outcome(self, contestant: Contestant, outcome: TurnOutcome) -> None:
        if not outcome.question_found:
            self.console.print("[yellow]No such question on the board, pick again.[/yellow]")
            return
        if outcome.is_correct:
            self.console.print(f"[green]Correct![/green] {contestant.name} earns {outcome.points_earned:+d}")
        else:
            self.console.print(
                f"[red]Incorrect.[/red] The answer was {outcome.correct_answer}. "
                f"{contestant.name} loses {abs(outcome.points_earned)}"
            )
        self.console.print(f"[dim]{contestant.name} now has {outcome.new_score} points[/dim]\n")

    def final_standings(self, report: SummaryReport) -> None:
        self.divider("GAME OVER")
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Rank", justify="right", width=6)
        table.add_column("Player", width=20)
        table.add_column("Score", justify="right")
        for entry in report.standings:
            table.add_row(str(entry.rank), entry.name, str(entry.score))
        self.console.print(table)


def _peek_question(session: GameSession, category: str, value: int) -> Optional[QuestionRecord]:
    for record in session.questions:
        if record.category == category and record.value == value and not record.answered:
            return record
    return None


def _choose_category(session: GameSession, prompt: Prompt) -> Optional[str]:
    categories = sorted(session.available_categories())
    while True:
        raw = prompt("Category (name or number, 'quit' to stop)").strip()
        if raw.lower() == QUIT_WORD:
            return None
        if raw.isdigit() and 1 <= int(raw) <= len(categories):
            return categories[int(raw) - 1]
        matches = [c for c in categories if c.lower() == raw.lower()]
        if matches:
            return matches[0]
        console.print(f"[red]Unknown category. Choose from: {', '.join(categories)}[/red]")


def _choose_value(session: GameSession, category: str, prompt: Prompt) -> int:
    values = session.available_values(category)
    while True:
        raw = prompt(f"Value ({', '.join(str(v) for v in values)})").strip()
        try:
            return int(raw)
        except ValueError:
            console.print("[red]Please enter a number.[/red]")


def _choose_answer(prompt: Prompt) -> str:
    while True:
        raw = prompt(f"Your answer ({'/'.join(OPTION_KEYS)})").strip()
        if raw.upper() in OPTION_KEYS:
            return raw.upper()
        console.print(f"[red]Answer with one of {', '.join(OPTION_KEYS)}.[/red]")


def play_session(
    session: GameSession,
    policies: CategoryPolicies,
    *,
    narrator: Optional[BoardNarrator] = None,
    prompt: Prompt = typer.prompt,
) -> None:
    """Run turns until the board is empty or a player types 'quit'."""

    if not session.is_started:
        raise InvalidStateError("Start the session before playing")
    narrator = narrator or BoardNarrator()

    while not session.is_complete():
        contestant = session.current_contestant()
        narrator.divider(f"{contestant.name.upper()}'S TURN")
        narrator.scores(session.contestants, current=contestant)
        narrator.board(session)

        category = _choose_category(session, prompt)
        if category is None:
            break
        value = _choose_value(session, category, prompt)
        record = _peek_question(session, category, value)
        answer = ""
        if record is not None:
            narrator.question(record)
            answer = _choose_answer(prompt)

        outcome = session.submit_turn(category, value, answer, policies.for_category(category))
        narrator.outcome(contestant, outcome)


__all__ = ["BoardNarrator", "play_session", "console"]
