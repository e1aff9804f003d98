"""Metric scoring: per-metric thresholds, count-based pass/fail.

Each evaluated metric is compared with its own threshold and every breach
is recorded as an issue. The score itself only depends on how many
breaches there were: more than ``allowed_metric_violations`` scores
``bad``, otherwise ``good``.
"""

from ..config import MetricsConfig
from ..exceptions import MalformedReportError
from ..logging_config import get_logger
from ..models import METRICS_CHECK, CheckResult, Comment, Issue, MetricReport, ScoreContribution

logger = get_logger(__name__)


def score_metrics(report: MetricReport, config: MetricsConfig) -> CheckResult:
    if not report.metrics:
        raise MalformedReportError(METRICS_CHECK, "metric report is empty")

    issues = []
    comments = []
    for name, value in report.metrics.items():
        if name not in config.use_metrics:
            continue
        if value > config.threshold_for(name):
            comments.append(
                Comment(METRICS_CHECK, f"Critical metric {name} value: {value}", level="warning")
            )
            issues.append(Issue(METRICS_CHECK, category=name, value=value))

    violations = len(issues)
    if violations > config.allowed_metric_violations:
        score = config.bad
    else:
        score = config.good
    logger.info("%d metric violations found", violations)

    return CheckResult(
        contribution=ScoreContribution(METRICS_CHECK, score),
        issues=issues,
        comments=comments,
        result_values={"metrics": report.as_dict()},
    )
