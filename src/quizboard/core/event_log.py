"""Chronological interaction log exported as a process-mining CSV table."""

from __future__ import annotations

import csv
import io
import threading
from dataclasses import astuple, dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import structlog

from .errors import ReportWriteError

LOGGER = structlog.get_logger(__name__)

SYSTEM_ACTOR = "SYSTEM"
TIMESTAMP_FMT = "%Y-%m-%dT%H:%M:%S"
CSV_HEADER: Tuple[str, ...] = (
    "Case_ID",
    "Player_ID",
    "Activity",
    "Timestamp",
    "Category",
    "Question_Value",
    "Answer_Given",
    "Result",
    "Score_After_Play",
)


class Activity:
    """Activity names used by the engine; other names are accepted too."""

    START_GAME = "Start Game"
    LOAD_FILE = "Load File"
    FILE_LOADED = "File Loaded Successfully"
    LOAD_FILE_FAILED = "Load File Failed"
    SELECT_PLAYER_COUNT = "Select Player Count"
    ENTER_PLAYER_NAME = "Enter Player Name"
    SELECT_CATEGORY = "Select Category"
    SELECT_QUESTION = "Select Question"
    ANSWER_QUESTION = "Answer Question"
    GENERATE_REPORT = "Generate Report"
    GENERATE_EVENT_LOG = "Generate Event Log"
    EXIT_GAME = "Exit Game"


@dataclass(frozen=True, slots=True)
class LogEvent:
    """One row of the interaction log."""

    session_id: Optional[str]
    actor_id: str
    activity: str
    timestamp: str
    category: Optional[str] = None
    question_value: Optional[int] = None
    answer_given: Optional[str] = None
    result: Optional[str] = None
    score_after: Optional[int] = None

    def to_row(self) -> List[str]:
        return ["" if value is None else str(value) for value in astuple(self)]


def _local_timestamp() -> str:
    return datetime.now().strftime(TIMESTAMP_FMT)


class InteractionLog:
    """Append-only event list scoped by a session id.

    The log is never cleared implicitly. A caller that reuses one log across
    several sessions must call :meth:`reset` itself, otherwise the export holds
    the events of every session.
    """

    def __init__(self, *, session_id: Optional[str] = None, clock: Callable[[], str] = _local_timestamp) -> None:
        self._events: List[LogEvent] = []
        self._session_id = session_id
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    @property
    def events(self) -> Tuple[LogEvent, ...]:
        with self._lock:
            return tuple(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def set_session_id(self, session_id: str) -> None:
        with self._lock:
            self._session_id = session_id

    def record_detailed_event(
        self,
        actor_id: str,
        activity: str,
        category: Optional[str] = None,
        value: Optional[int] = None,
        answer: Optional[str] = None,
        result: Optional[str] = None,
        score_after: Optional[int] = None,
    ) -> LogEvent:
        with self._lock:
            event = LogEvent(
                session_id=self._session_id,
                actor_id=actor_id,
                activity=activity,
                timestamp=self._clock(),
                category=category,
                question_value=value,
                answer_given=answer,
                result=result,
                score_after=score_after,
            )
            self._events.append(event)
        return event

    def record_system_event(self, activity: str, detail: Optional[str] = None) -> LogEvent:
        return self.record_detailed_event(SYSTEM_ACTOR, activity, category=detail)

    def reset(self) -> None:
        with self._lock:
            self._events.clear()

    # Export ---------------------------------------------------------------------

    def render_csv(self, events: Optional[Tuple[LogEvent, ...]] = None) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for event in self.events if events is None else events:
            writer.writerow(event.to_row())
        return buffer.getvalue()

    def export(self, path: Path | str) -> Path:
        """Write the table to ``path``, creating parent directories as needed."""

        target = Path(path)
        events = self.events
        content = self.render_csv(events)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            LOGGER.error("event_log.write_failed", path=str(target), error=str(exc))
            raise ReportWriteError(f"Could not write event log to {target}: {exc}") from exc

        LOGGER.info("event_log.written", path=str(target), events=len(events))
        return target


__all__ = [
    "SYSTEM_ACTOR",
    "TIMESTAMP_FMT",
    "CSV_HEADER",
    "Activity",
    "LogEvent",
    "InteractionLog",
]
