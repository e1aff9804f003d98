"""Configuration exceptions: paths, settings, metric thresholds."""

from pathlib import Path
from typing import Any

from .base import JudgeError


class ConfigurationError(JudgeError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when an extension path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class ThresholdConfigError(ConfigurationError):
    """Raised when an evaluated metric has no configured threshold."""

    def __init__(self, metric_name: str, reason: str = "no threshold configured"):
        super().__init__(
            f"Missing threshold for metric {metric_name}",
            details={"metric": metric_name, "reason": reason},
        )
        self.metric_name = metric_name
        self.reason = reason
