"""Session engine driving a game from registration to the final report."""

from __future__ import annotations

import time
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple

import structlog

from .errors import InvalidStateError, NoContestantsError, QuizboardError
from .event_log import Activity, InteractionLog
from .ingestion import SourceFormat, load_records
from .models import Contestant, QuestionRecord, TurnOutcome
from .policies import DEFAULT_POLICY, ValidationPolicy
from .report import ReportFormat, SummaryExporter

LOGGER = structlog.get_logger(__name__)

RecordLoader = Callable[[str, SourceFormat], Sequence[QuestionRecord]]


class SessionState(str, Enum):
    """Session lifecycle states."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    ENDED = "ENDED"


def new_session_id() -> str:
    return f"GAME_{int(time.time() * 1000)}"


class GameSession:
    """Owns the question bank, the roster and the turn order of one game.

    Only this class flips ``QuestionRecord.answered`` and changes contestant
    scores. Reaching :meth:`is_complete` does not end the session; the caller
    decides when to call :meth:`end`.
    """

    def __init__(
        self,
        *,
        log: Optional[InteractionLog] = None,
        session_id: Optional[str] = None,
        loader: RecordLoader = load_records,
    ) -> None:
        self.session_id = session_id or new_session_id()
        self.log = log if log is not None else InteractionLog()
        self.log.set_session_id(self.session_id)
        self._loader = loader

        self.state = SessionState.NOT_STARTED
        self._questions: List[QuestionRecord] = []
        self._by_category: Dict[str, List[QuestionRecord]] = {}
        self._roster: List[Contestant] = []
        self._turn_index = 0
        self._logger = LOGGER.bind(session_id=self.session_id)

    # Read-only views -------------------------------------------------------------

    @property
    def questions(self) -> Tuple[QuestionRecord, ...]:
        return tuple(self._questions)

    @property
    def contestants(self) -> Tuple[Contestant, ...]:
        return tuple(self._roster)

    @property
    def is_started(self) -> bool:
        return self.state is not SessionState.NOT_STARTED

    @property
    def is_ended(self) -> bool:
        return self.state is SessionState.ENDED

    def _require(self, expected: SessionState, operation: str) -> None:
        if self.state is not expected:
            raise InvalidStateError(
                f"Cannot {operation} while session is {self.state.value} (requires {expected.value})"
            )

    # Setup -------------------------------------------------------------------------

    def ingest_questions(self, source_id: str | Path, format_tag: SourceFormat | str) -> int:
        """Load questions from ``source_id`` and return how many were added."""

        self._require(SessionState.NOT_STARTED, "load questions")
        source = str(source_id)
        self.log.record_system_event(Activity.LOAD_FILE, f"Attempting to load: {source}")
        try:
            source_format = SourceFormat.from_tag(format_tag)
            records = list(self._loader(source, source_format))
        except QuizboardError as exc:
            self.log.record_system_event(Activity.LOAD_FILE_FAILED, f"Error: {exc}")
            self._logger.warning("session.ingest_failed", source=source, error=str(exc), kind=type(exc).__name__)
            raise

        for record in records:
            self._questions.append(record)
            self._by_category.setdefault(record.category, []).append(record)

        self.log.record_system_event(Activity.FILE_LOADED, f"Loaded {len(records)} questions")
        self._logger.info("session.ingested", source=source, added=len(records), total=len(self._questions))
        return len(records)

    def add_questions(self, records: Sequence[QuestionRecord]) -> int:
        """Append already-built records to the bank (no file involved)."""

        self._require(SessionState.NOT_STARTED, "add questions")
        for record in records:
            self._questions.append(record)
            self._by_category.setdefault(record.category, []).append(record)
        return len(records)

    def record_player_count(self, count: int) -> None:
        self.log.record_system_event(Activity.SELECT_PLAYER_COUNT, str(count))

    def add_contestant(self, name: str) -> str:
        """Register a contestant; registration order is the turn order."""

        self._require(SessionState.NOT_STARTED, "add a contestant")
        contestant = Contestant(name=name, contestant_id=f"P{len(self._roster) + 1}")
        self._roster.append(contestant)
        self.log.record_detailed_event(
            contestant.player_id,
            Activity.ENTER_PLAYER_NAME,
            category=name,
            score_after=contestant.score,
        )
        self._logger.info("session.contestant_added", contestant=contestant.contestant_id, name=name)
        return contestant.contestant_id

    def start(self) -> None:
        self._require(SessionState.NOT_STARTED, "start the game")
        self.log.record_system_event(Activity.START_GAME, "Game Started")
        self.state = SessionState.IN_PROGRESS
        self._logger.info("session.started", contestants=len(self._roster), questions=len(self._questions))

    # Board queries -----------------------------------------------------------------

    def available_categories(self) -> FrozenSet[str]:
        return frozenset(
            category
            for category, records in self._by_category.items()
            if any(not record.answered for record in records)
        )

    def available_values(self, category: str) -> List[int]:
        return sorted({record.value for record in self._by_category.get(category, []) if not record.answered})

    def is_complete(self) -> bool:
        return all(record.answered for record in self._questions)

    def current_contestant(self) -> Contestant:
        if not self._roster:
            raise NoContestantsError("No contestants registered")
        return self._roster[self._turn_index % len(self._roster)]

    def _find_question(self, category: str, value: int) -> Optional[QuestionRecord]:
        for record in self._by_category.get(category, []):
            if record.value == value and not record.answered:
                return record
        return None

    # Turns -------------------------------------------------------------------------

    def submit_turn(
        self,
        category: str,
        value: int,
        answer: str,
        policy: ValidationPolicy = DEFAULT_POLICY,
    ) -> TurnOutcome:
        """Resolve one turn for the current contestant.

        A category/value pair with no unanswered question returns
        ``TurnOutcome.not_found`` and leaves the board and the turn order as
        they were. A wrong answer always costs exactly ``value`` points.
        """

        if self.state is not SessionState.IN_PROGRESS:
            raise InvalidStateError(f"Cannot submit a turn while session is {self.state.value}")
        contestant = self.current_contestant()
        actor = contestant.player_id

        self.log.record_detailed_event(actor, Activity.SELECT_CATEGORY, category=category, score_after=contestant.score)

        record = self._find_question(category, value)
        if record is None:
            self._logger.info("session.question_not_found", contestant=contestant.contestant_id, category=category, value=value)
            return TurnOutcome.not_found(contestant.score)

        self.log.record_detailed_event(
            actor, Activity.SELECT_QUESTION, category=category, value=value, score_after=contestant.score
        )

        is_correct = policy.validate(answer, record.correct_option)
        points = policy.calculate_points(value) if is_correct else -value

        contestant.record_turn(
            category=category,
            question_value=value,
            question_text=record.prompt,
            given_answer=answer,
            is_correct=is_correct,
            points_earned=points,
        )
        record.mark_answered()

        self.log.record_detailed_event(
            actor,
            Activity.ANSWER_QUESTION,
            category=category,
            value=value,
            answer=answer,
            result="Correct" if is_correct else "Incorrect",
            score_after=contestant.score,
        )
        self._turn_index = (self._turn_index + 1) % len(self._roster)

        self._logger.info(
            "session.turn_resolved",
            contestant=contestant.contestant_id,
            category=category,
            value=value,
            correct=is_correct,
            points=points,
            score=contestant.score,
        )
        return TurnOutcome(
            is_correct=is_correct,
            correct_answer=record.correct_option,
            points_earned=points,
            new_score=contestant.score,
        )

    def end(self) -> None:
        """Finish the game. A second call is a no-op."""

        if self.state is SessionState.ENDED:
            self._logger.warning("session.already_ended")
            return
        self.log.record_system_event(Activity.EXIT_GAME, "Game Ended")
        self.state = SessionState.ENDED
        self._logger.info("session.ended", complete=self.is_complete())

    # Output ------------------------------------------------------------------------

    def generate_summary_report(self, exporter: SummaryExporter, fmt: ReportFormat | str = ReportFormat.TXT) -> Path:
        report_format = ReportFormat.from_tag(fmt)
        self.log.record_system_event(Activity.GENERATE_REPORT, f"Format: {report_format.value}")
        return exporter.export(self._roster, report_format)

    def generate_event_log(self, path: Path | str) -> Path:
        self.log.record_system_event(Activity.GENERATE_EVENT_LOG, "Creating process mining log")
        return self.log.export(path)


__all__ = ["SessionState", "GameSession", "RecordLoader", "new_session_id"]
