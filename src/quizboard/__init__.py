"""Core package for the quizboard trivia game."""

from .core import errors, event_log, ingestion, models, policies, report, schemas, session
from .core.errors import *  # noqa: F403, F401
from .core.event_log import Activity, InteractionLog, LogEvent
from .core.ingestion import SourceFormat, load_records
from .core.models import Contestant, QuestionRecord, TurnOutcome, TurnRecord
from .core.policies import CaseInsensitivePolicy, CategoryPolicies, ValidationPolicy
from .core.report import ReportFormat, SummaryExporter, SummaryReport
from .core.session import GameSession, SessionState

__all__ = [
    "errors",
    "event_log",
    "ingestion",
    "models",
    "policies",
    "report",
    "schemas",
    "session",
    "Activity",
    "InteractionLog",
    "LogEvent",
    "SourceFormat",
    "load_records",
    "Contestant",
    "QuestionRecord",
    "TurnOutcome",
    "TurnRecord",
    "CaseInsensitivePolicy",
    "CategoryPolicies",
    "ValidationPolicy",
    "ReportFormat",
    "SummaryExporter",
    "SummaryReport",
    "GameSession",
    "SessionState",
]
