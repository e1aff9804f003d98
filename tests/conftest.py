"""Shared test fixtures for complexity-judge."""

from typing import Optional

import pytest

from complexity_judge.config import (
    DuplicationConfig,
    JudgeConfig,
    MessDetectorConfig,
    MetricsConfig,
)
from complexity_judge.models import (
    DUPLICATION_CHECK,
    MESS_DETECTOR_CHECK,
    METRICS_CHECK,
    DuplicationReport,
    ExtensionTarget,
    LineReport,
    MetricReport,
    RawToolOutput,
)
from complexity_judge.runners import ToolRunner
from complexity_judge.storage import MemoryIssueSink


class FakeRunner(ToolRunner):
    """Returns canned output (or raises) instead of starting a process."""

    def __init__(self, check_name: str, output: Optional[RawToolOutput] = None, error=None):
        super().__init__(executable="fake")
        self.check_name = check_name
        self.output = output
        self.error = error
        self.calls = []

    def run(self, target: ExtensionTarget, timeout: Optional[float] = None) -> RawToolOutput:
        self.calls.append((target, timeout))
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def extension_dir(tmp_path):
    """An (empty) extension directory on disk."""
    path = tmp_path / "Vendor_Module"
    path.mkdir()
    return path


@pytest.fixture
def target(extension_dir):
    return ExtensionTarget(str(extension_dir))


@pytest.fixture
def sink():
    return MemoryIssueSink()


@pytest.fixture
def judge_config():
    """Config matching the worked examples: one metric, small allowances."""
    return JudgeConfig(
        metrics=MetricsConfig(
            use_metrics=frozenset({"cyclomaticComplexity"}),
            thresholds={"cyclomaticComplexity": 10},
            allowed_metric_violations=0,
            good=5,
            bad=-5,
        ),
        duplication=DuplicationConfig(percentage_good=10, good=5, bad=0),
        mess_detector=MessDetectorConfig(allowed_issues=2, good=5, bad=-5),
    )


@pytest.fixture
def clean_runners():
    """Runners whose output passes every check in ``judge_config``."""
    return {
        METRICS_CHECK: FakeRunner(METRICS_CHECK, MetricReport({"cyclomaticComplexity": 3})),
        DUPLICATION_CHECK: FakeRunner(DUPLICATION_CHECK, DuplicationReport(1.5)),
        MESS_DETECTOR_CHECK: FakeRunner(MESS_DETECTOR_CHECK, LineReport(())),
    }


@pytest.fixture
def fake_runner():
    """Factory for runners with canned output: ``fake_runner(check, output, error=...)``."""
    return FakeRunner
