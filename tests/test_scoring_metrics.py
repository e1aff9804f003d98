"""Tests for scoring/metrics.py - threshold breaches and count-based scoring."""

import pytest

from complexity_judge.config import MetricsConfig
from complexity_judge.exceptions import MalformedReportError, ThresholdConfigError
from complexity_judge.models import METRICS_CHECK, MetricReport
from complexity_judge.scoring import score_metrics


def _config(**overrides) -> MetricsConfig:
    values = dict(
        use_metrics=frozenset({"ccn", "ccn2", "nom"}),
        thresholds={"ccn": 10, "ccn2": 12, "nom": 50},
        allowed_metric_violations=0,
        good=5,
        bad=-5,
    )
    values.update(overrides)
    return MetricsConfig(**values)


class TestViolationCounting:
    """Issues are emitted per breached metric."""

    def test_worked_example(self):
        """cyclomaticComplexity 15 over threshold 10 scores bad with one issue."""
        config = MetricsConfig(
            use_metrics=frozenset({"cyclomaticComplexity"}),
            thresholds={"cyclomaticComplexity": 10},
            allowed_metric_violations=0,
            good=5,
            bad=-5,
        )
        result = score_metrics(MetricReport({"cyclomaticComplexity": 15}), config)

        assert result.score == -5
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.check_name == METRICS_CHECK
        assert issue.category == "cyclomaticComplexity"
        assert issue.value == 15

    def test_only_evaluated_metrics_count(self):
        """Metrics outside use_metrics are ignored even when huge."""
        report = MetricReport({"ccn": 11, "loc": 100000, "nom": 10})
        result = score_metrics(report, _config(allowed_metric_violations=5))
        assert [i.category for i in result.issues] == ["ccn"]

    def test_equal_to_threshold_is_not_a_violation(self):
        """Threshold comparison is strictly greater-than."""
        result = score_metrics(MetricReport({"ccn": 10}), _config())
        assert result.issues == []
        assert result.score == 5

    def test_evaluated_metric_missing_from_report(self):
        """A configured metric absent from the report is simply not checked."""
        result = score_metrics(MetricReport({"ccn2": 13}), _config())
        assert [i.category for i in result.issues] == ["ccn2"]

    def test_one_warning_comment_per_violation(self):
        """Each breach also gets a warning comment naming the metric."""
        result = score_metrics(MetricReport({"ccn": 11, "ccn2": 13}), _config())
        assert len(result.comments) == 2
        assert all(c.level == "warning" for c in result.comments)
        assert "ccn" in result.comments[0].text


class TestScoreDecision:
    """The score depends on violation count, not severity."""

    def test_within_allowance_scores_good(self):
        """Two violations with two allowed still score good."""
        report = MetricReport({"ccn": 11, "ccn2": 13})
        result = score_metrics(report, _config(allowed_metric_violations=2))
        assert len(result.issues) == 2
        assert result.score == 5

    def test_over_allowance_scores_bad_alone(self):
        """Bad is returned on its own, never added to good."""
        report = MetricReport({"ccn": 11, "ccn2": 13, "nom": 51})
        result = score_metrics(report, _config(allowed_metric_violations=2))
        assert result.score == -5
        assert result.score != 5 + -5

    def test_idempotent(self):
        """Same report and config give the same score and issues."""
        report = MetricReport({"ccn": 11, "nom": 60})
        config = _config()
        first = score_metrics(report, config)
        second = score_metrics(report, config)
        assert first.score == second.score
        assert first.issues == second.issues


class TestRawReportRecording:
    def test_full_report_recorded(self):
        """The whole report, attributes included, is kept as result value."""
        report = MetricReport({"ccn": 3, "loc": 200}, attributes={"pdepend": "2.16.2"})
        result = score_metrics(report, _config())
        assert result.result_values["metrics"] == {"ccn": 3, "loc": 200, "pdepend": "2.16.2"}


class TestErrors:
    def test_empty_report_is_malformed(self):
        with pytest.raises(MalformedReportError) as exc_info:
            score_metrics(MetricReport({}), _config())
        assert exc_info.value.check_name == METRICS_CHECK

    def test_threshold_lookup_fails_loudly(self):
        """threshold_for never falls back to a silent default."""
        config = _config()
        with pytest.raises(ThresholdConfigError) as exc_info:
            config.threshold_for("npath")
        assert exc_info.value.metric_name == "npath"
