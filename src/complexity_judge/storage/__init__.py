"""Issue sinks: in-memory and SQLite."""

from .base import IssueSink, StoredIssue
from .database import SqliteIssueSink
from .memory import MemoryIssueSink

__all__ = ["IssueSink", "StoredIssue", "MemoryIssueSink", "SqliteIssueSink"]
