"""Data models for complexity-judge"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

# Identity under which the pipeline records its total score
PLUGIN_NAME = "SourceCodeComplexity"

METRICS_CHECK = "metrics"
DUPLICATION_CHECK = "duplication"
MESS_DETECTOR_CHECK = "mess_detector"

# Fixed execution order of the checks
CHECK_ORDER: Tuple[str, ...] = (METRICS_CHECK, DUPLICATION_CHECK, MESS_DETECTOR_CHECK)


@dataclass(frozen=True)
class ExtensionTarget:
    """The extension under review, identified by its filesystem path."""

    path: str

    def __str__(self) -> str:
        return self.path


# ── raw tool output ─────────────────────────────────────────────


@dataclass(frozen=True)
class MetricReport:
    """Metric name -> numeric value, as summarised by the metrics tool.

    ``attributes`` keeps the non-numeric report attributes (generator
    version, timestamp) so the report can be recorded verbatim.
    """

    metrics: Dict[str, float]
    attributes: Dict[str, str] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        raw: Dict[str, Any] = dict(self.attributes)
        raw.update(self.metrics)
        return raw


@dataclass(frozen=True)
class LineReport:
    """Ordered diagnostic lines from the mess detector."""

    lines: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class DuplicationReport:
    """Share of duplicated code in percent (0-100)."""

    percentage: float
    duplicated_lines: Optional[int] = None
    total_lines: Optional[int] = None


RawToolOutput = Union[MetricReport, LineReport, DuplicationReport]


# ── scoring results ─────────────────────────────────────────────


@dataclass(frozen=True)
class Issue:
    """A single persisted finding."""

    check_name: str
    category: str
    value: Any
    file_name: Optional[str] = None
    line_number: Optional[int] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class Comment:
    """Free-text annotation for the human reviewer."""

    check_name: str
    text: str
    level: str = "info"  # "info" | "warning"


@dataclass(frozen=True)
class ScoreContribution:
    check_name: str
    score: float


@dataclass
class CheckResult:
    """Everything one check produced: score, issues, comments, raw values."""

    contribution: ScoreContribution
    issues: List[Issue] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)
    result_values: Dict[str, Any] = field(default_factory=dict)

    @property
    def check_name(self) -> str:
        return self.contribution.check_name

    @property
    def score(self) -> float:
        return self.contribution.score


@dataclass
class PipelineReport:
    """Outcome of one pipeline run over one extension."""

    target: ExtensionTarget
    results: List[CheckResult] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(r.score for r in self.results)

    @property
    def issues(self) -> List[Issue]:
        return [issue for r in self.results for issue in r.issues]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "extension": self.target.path,
            "total": self.total,
            "checks": [
                {
                    "check": r.check_name,
                    "score": r.score,
                    "issues": [
                        {
                            "category": i.category,
                            "value": i.value,
                            "file": i.file_name,
                            "line": i.line_number,
                            "message": i.message,
                        }
                        for i in r.issues
                    ],
                    "comments": [c.text for c in r.comments],
                }
                for r in self.results
            ],
        }
