"""Exception hierarchy for complexity-judge."""

from .base import JudgeError
from .checks import (
    CheckError,
    MalformedReportError,
    ToolInvocationError,
    ToolTimeoutError,
)
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    ThresholdConfigError,
)


class StorageError(JudgeError):
    """Raised when the issue database cannot be written or read."""

    pass


__all__ = [
    "JudgeError",
    "CheckError",
    "ToolInvocationError",
    "ToolTimeoutError",
    "MalformedReportError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidPathError",
    "ThresholdConfigError",
    "StorageError",
]
