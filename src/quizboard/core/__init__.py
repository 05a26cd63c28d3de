"""Core game logic and data structures."""

from . import errors, event_log, ingestion, models, policies, report, schemas, session

__all__ = ["errors", "event_log", "ingestion", "models", "policies", "report", "schemas", "session"]
