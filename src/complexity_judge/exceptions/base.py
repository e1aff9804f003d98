"""Base exception for complexity-judge."""

from typing import Any, Dict, Optional


class JudgeError(Exception):
    """Base exception for all complexity-judge errors.

    ``details`` holds structured context (check name, extension path, tool
    command) that is rendered after the message as ``key=value`` pairs.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})

    def add_context(self, **context: Any) -> "JudgeError":
        """Fill in context the raiser did not know; existing keys are kept."""
        for key, value in context.items():
            self.details.setdefault(key, value)
        return self

    def __str__(self) -> str:
        if not self.details:
            return self.message
        details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({details_str})"
