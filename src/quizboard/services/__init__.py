"""Command line services."""

from . import cli

__all__ = ["cli"]
