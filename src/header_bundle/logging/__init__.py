"""Structured logging utilities."""

from .audit import BuildEvent, JsonlAuditLogger, utc_timestamp

__all__ = ["BuildEvent", "JsonlAuditLogger", "utc_timestamp"]
