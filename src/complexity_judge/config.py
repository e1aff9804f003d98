"""Configuration loading and management for complexity-judge.

Configuration sources are merged in priority order:
    1. Defaults (defined in the config dataclasses)
    2. Global config (~/.complexity-judge.toml)
    3. Project config (./complexity-judge.toml)
    4. Explicit config file
    5. Environment variables (JUDGE_* prefix, top-level fields only)
    6. Keyword overrides (typically from CLI flags)

Each check reads its own TOML table:

    [metrics]
    use_metrics = ["ccn", "ccn2"]
    allowed_metric_violations = 0

    [metrics.thresholds]
    ccn = 10
    ccn2 = 12

    [duplication]
    percentage_good = 5.0

    [mess_detector]
    allowed_issues = 10

Example:
    >>> config = load_config(database_path="/tmp/issues.db")
    >>> config.metrics.enabled
    True
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, FrozenSet, Literal, Mapping, Optional, Type, TypeVar

from .exceptions import InvalidConfigError, JudgeError, ThresholdConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

DEFAULT_DATABASE_PATH = ".judge/issues.db"
CONFIG_FILE_NAME = "complexity-judge.toml"
ENV_PREFIX = "JUDGE_"

# pdepend summary attributes worth watching by default
DEFAULT_METRIC_THRESHOLDS: Dict[str, float] = {
    "ccn": 500.0,
    "ccn2": 600.0,
    "maxDIT": 6.0,
    "nom": 400.0,
}


@dataclass(frozen=True)
class MetricsConfig:
    """Complexity metrics check (pdepend).

    Attributes:
        use_metrics: Metric names evaluated against ``thresholds``
        thresholds: Metric name -> highest acceptable value
        allowed_metric_violations: Breaches tolerated before scoring ``bad``
        tmp_xml_filename: Template for the summary XML path; the process id
            and a digest of the extension path are added to the file name.
            A fresh temp file is used when unset
    """

    enabled: bool = True
    executable: str = "pdepend"
    timeout_seconds: int = 600
    tmp_xml_filename: Optional[str] = None
    use_metrics: FrozenSet[str] = field(default_factory=lambda: frozenset(DEFAULT_METRIC_THRESHOLDS))
    thresholds: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_METRIC_THRESHOLDS))
    allowed_metric_violations: int = 0
    good: float = 1.0
    bad: float = -1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "use_metrics", frozenset(self.use_metrics))
        if self.allowed_metric_violations < 0:
            raise InvalidConfigError(
                "metrics.allowed_metric_violations",
                self.allowed_metric_violations,
                "must be non-negative",
            )
        if self.timeout_seconds < 1:
            raise InvalidConfigError("metrics.timeout_seconds", self.timeout_seconds, "must be at least 1")
        for name, value in self.thresholds.items():
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise InvalidConfigError(f"metrics.thresholds.{name}", value, "must be a number")
        for name in sorted(self.use_metrics):
            if name not in self.thresholds:
                raise ThresholdConfigError(name)

    def threshold_for(self, metric_name: str) -> float:
        try:
            return float(self.thresholds[metric_name])
        except KeyError:
            raise ThresholdConfigError(metric_name) from None


@dataclass(frozen=True)
class DuplicationConfig:
    """Copy/paste detection check (phpcpd)."""

    enabled: bool = True
    executable: str = "phpcpd"
    timeout_seconds: int = 600
    min_lines: int = 5
    min_tokens: int = 70
    percentage_good: float = 5.0
    good: float = 1.0
    bad: float = -1.0

    def __post_init__(self) -> None:
        if self.min_lines < 1:
            raise InvalidConfigError("duplication.min_lines", self.min_lines, "must be at least 1")
        if self.min_tokens < 1:
            raise InvalidConfigError("duplication.min_tokens", self.min_tokens, "must be at least 1")
        if not 0.0 <= self.percentage_good <= 100.0:
            raise InvalidConfigError(
                "duplication.percentage_good", self.percentage_good, "must be between 0 and 100"
            )
        if self.timeout_seconds < 1:
            raise InvalidConfigError(
                "duplication.timeout_seconds", self.timeout_seconds, "must be at least 1"
            )


@dataclass(frozen=True)
class MessDetectorConfig:
    """Mess/anti-pattern detection check (phpmd).

    ``issue_per_line`` records one issue per diagnostic line instead of a
    single issue for the last line.
    """

    enabled: bool = True
    executable: str = "phpmd"
    timeout_seconds: int = 600
    rule_sets: str = "codesize,unusedcode,naming"
    allowed_issues: int = 10
    good: float = 1.0
    bad: float = -1.0
    issue_per_line: bool = False

    def __post_init__(self) -> None:
        if self.allowed_issues < 0:
            raise InvalidConfigError(
                "mess_detector.allowed_issues", self.allowed_issues, "must be non-negative"
            )
        if not self.rule_sets:
            raise InvalidConfigError("mess_detector.rule_sets", self.rule_sets, "must not be empty")
        if self.timeout_seconds < 1:
            raise InvalidConfigError(
                "mess_detector.timeout_seconds", self.timeout_seconds, "must be at least 1"
            )


@dataclass(frozen=True)
class JudgeConfig:
    """Top-level configuration: one section per check plus storage/output."""

    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    duplication: DuplicationConfig = field(default_factory=DuplicationConfig)
    mess_detector: MessDetectorConfig = field(default_factory=MessDetectorConfig)

    database_path: str = DEFAULT_DATABASE_PATH
    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet, normal or verbose")

    def to_dict(self) -> Dict[str, Any]:
        raw = asdict(self)
        raw["metrics"]["use_metrics"] = sorted(self.metrics.use_metrics)
        raw["metrics"]["thresholds"] = dict(self.metrics.thresholds)
        return raw


# Section name -> dataclass
_SECTIONS: Dict[str, type] = {
    "metrics": MetricsConfig,
    "duplication": DuplicationConfig,
    "mess_detector": MessDetectorConfig,
}

_T = TypeVar("_T")


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> JudgeConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides. Section overrides may be given as
            dicts (``metrics={"enabled": False}``) or as config instances.

    Returns:
        Validated JudgeConfig instance

    Raises:
        JudgeError: If a config file is unreadable or missing
        InvalidConfigError: If a value is out of range or a key is unknown
        ThresholdConfigError: If an evaluated metric has no threshold
    """
    merged: Dict[str, Any] = {}

    global_config = Path.home() / f".{CONFIG_FILE_NAME}"
    if global_config.exists():
        _merge(merged, _read_config_file(global_config, "global"))

    project_config = Path.cwd() / CONFIG_FILE_NAME
    if project_config.exists():
        _merge(merged, _read_config_file(project_config, "project"))

    if config_file is not None:
        if not config_file.exists():
            raise JudgeError(f"Config file not found: {config_file}")
        _merge(merged, _read_config_file(config_file, "explicit"))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides.pop("verbose"):
            overrides["verbosity"] = "verbose"
    if "quiet" in overrides:
        if overrides.pop("quiet"):
            overrides["verbosity"] = "quiet"
    _merge(merged, overrides)

    return build_config(merged)


def build_config(raw: Mapping[str, Any]) -> JudgeConfig:
    """Decode a plain mapping (e.g. parsed TOML) into a JudgeConfig."""
    kwargs: Dict[str, Any] = {}
    known = {f.name for f in fields(JudgeConfig)}
    for key, value in raw.items():
        if key not in known:
            raise InvalidConfigError(key, value, "unknown configuration key")
        section_cls = _SECTIONS.get(key)
        if section_cls is not None and isinstance(value, Mapping):
            kwargs[key] = _build_section(section_cls, key, value)
        else:
            kwargs[key] = value
    return JudgeConfig(**kwargs)


def _build_section(cls: Type[_T], section: str, values: Mapping[str, Any]) -> _T:
    known = {f.name for f in fields(cls)}
    for key, value in values.items():
        if key not in known:
            raise InvalidConfigError(f"{section}.{key}", value, "unknown configuration key")
    kwargs = dict(values)
    if "use_metrics" in kwargs:
        kwargs["use_metrics"] = frozenset(kwargs["use_metrics"])
    if "thresholds" in kwargs:
        kwargs["thresholds"] = dict(kwargs["thresholds"])
    return cls(**kwargs)


def _merge(base: Dict[str, Any], incoming: Mapping[str, Any]) -> None:
    """Merge ``incoming`` into ``base``; section tables merge key by key."""
    for key, value in incoming.items():
        if key in _SECTIONS and isinstance(value, Mapping) and isinstance(base.get(key), dict):
            base[key].update(value)
        elif key in _SECTIONS and isinstance(value, Mapping):
            base[key] = dict(value)
        else:
            base[key] = value


def _read_config_file(path: Path, label: str) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise JudgeError(f"Invalid {label} config '{path}': {e}")


def _load_env_vars() -> Dict[str, Any]:
    """Load top-level scalar fields from JUDGE_* environment variables.

    Supported environment variables:
        JUDGE_DATABASE_PATH: str
        JUDGE_VERBOSITY: quiet/normal/verbose
        JUDGE_LOG_FILE: str
    """
    result: Dict[str, Any] = {}
    for f in fields(JudgeConfig):
        if f.name in _SECTIONS:
            continue
        env_value = os.environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if env_value is not None:
            result[f.name] = env_value
    return result
