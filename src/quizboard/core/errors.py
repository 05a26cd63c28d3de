"""Exception hierarchy shared by the quizboard core."""

from __future__ import annotations


class QuizboardError(Exception):
    """Base class for all quizboard errors."""


class InvalidStateError(QuizboardError, RuntimeError):
    """Raised when a session operation is called outside its valid state."""


class NoContestantsError(QuizboardError, RuntimeError):
    """Raised when a roster-dependent operation runs on an empty roster."""


class UnsupportedFormatError(QuizboardError, ValueError):
    """Raised for a source or report format tag outside the known set."""

    def __init__(self, tag: object, *, kind: str = "format") -> None:
        self.tag = tag
        self.kind = kind
        super().__init__(f"Unsupported {kind}: {tag!r}")


class IngestionError(QuizboardError):
    """Base class for question bank loading failures."""

    def __init__(self, source_id: str, message: str) -> None:
        self.source_id = source_id
        super().__init__(f"{source_id}: {message}")


class SourceUnavailableError(IngestionError):
    """Raised when a question source cannot be opened or read."""


class MalformedRecordError(IngestionError):
    """Raised when a question source is readable but its content is invalid."""

    def __init__(self, source_id: str, message: str, *, index: int | None = None, errors: list | None = None) -> None:
        self.index = index
        self.errors = errors or []
        where = f" (record {index})" if index is not None else ""
        super().__init__(source_id, f"{message}{where}")


class ReportWriteError(QuizboardError, OSError):
    """Raised when a report or event log cannot be written."""


__all__ = [
    "QuizboardError",
    "InvalidStateError",
    "NoContestantsError",
    "UnsupportedFormatError",
    "IngestionError",
    "SourceUnavailableError",
    "MalformedRecordError",
    "ReportWriteError",
]
