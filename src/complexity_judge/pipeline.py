"""ScoringPipeline: runs the enabled checks and records their output."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .config import JudgeConfig
from .exceptions import InvalidPathError, JudgeError
from .logging_config import get_logger
from .models import (
    CHECK_ORDER,
    DUPLICATION_CHECK,
    MESS_DETECTOR_CHECK,
    METRICS_CHECK,
    PLUGIN_NAME,
    CheckResult,
    ExtensionTarget,
    PipelineReport,
)
from .runners import DuplicationRunner, MessRunner, MetricRunner, ToolRunner
from .scoring import score_duplication, score_mess, score_metrics
from .storage import IssueSink

logger = get_logger(__name__)

Scorer = Callable[[Any, Any], CheckResult]


@dataclass(frozen=True)
class Check:
    """One runner/scorer pair with the config section that drives both."""

    name: str
    runner: ToolRunner
    scorer: Scorer
    config: Any

    @property
    def enabled(self) -> bool:
        return bool(self.config.enabled)


def default_runners(config: JudgeConfig) -> Dict[str, ToolRunner]:
    """Build the external tool runners described by ``config``."""
    return {
        METRICS_CHECK: MetricRunner(
            executable=config.metrics.executable,
            timeout=config.metrics.timeout_seconds,
            xml_filename=config.metrics.tmp_xml_filename,
        ),
        DUPLICATION_CHECK: DuplicationRunner(
            executable=config.duplication.executable,
            timeout=config.duplication.timeout_seconds,
            min_lines=config.duplication.min_lines,
            min_tokens=config.duplication.min_tokens,
        ),
        MESS_DETECTOR_CHECK: MessRunner(
            executable=config.mess_detector.executable,
            timeout=config.mess_detector.timeout_seconds,
            rule_sets=config.mess_detector.rule_sets,
        ),
    }


def validate_target(target: Union[ExtensionTarget, str, Path]) -> ExtensionTarget:
    if not isinstance(target, ExtensionTarget):
        target = ExtensionTarget(str(target))
    if not Path(target.path).exists():
        raise InvalidPathError(Path(target.path), "Path does not exist")
    return target


class ScoringPipeline:
    """Runs metrics, duplication and mess detection, in that order.

    Each enabled check's score is added to the total; its comments, issues
    and raw result values go to the sink before the next check starts. The
    total is recorded under ``PLUGIN_NAME``.

    A failing check aborts the run: nothing written during the run is kept
    and the error propagates with the check name and extension in its
    ``details``.
    """

    def __init__(
        self,
        config: JudgeConfig,
        sink: IssueSink,
        runners: Optional[Mapping[str, ToolRunner]] = None,
    ):
        self.config = config
        self.sink = sink
        runners = {**default_runners(config), **(runners or {})}
        sections = {
            METRICS_CHECK: (config.metrics, score_metrics),
            DUPLICATION_CHECK: (config.duplication, score_duplication),
            MESS_DETECTOR_CHECK: (config.mess_detector, score_mess),
        }
        self.checks: List[Check] = [
            Check(name=name, runner=runners[name], scorer=sections[name][1], config=sections[name][0])
            for name in CHECK_ORDER
        ]

    def execute(self, target: Union[ExtensionTarget, str, Path]) -> float:
        """Score ``target`` and return the summed score of all enabled checks."""
        return self.run(target).total

    def run(self, target: Union[ExtensionTarget, str, Path]) -> PipelineReport:
        """Like ``execute`` but returns the per-check results as well."""
        target = validate_target(target)
        report = PipelineReport(target=target)

        with self.sink.transaction(target):
            for check in self.checks:
                if not check.enabled:
                    logger.debug("Check %s disabled, skipping", check.name)
                    continue
                result = self._run_check(check, target)
                self._record(target, result)
                report.results.append(result)

            self.sink.set_score(target, PLUGIN_NAME, report.total)

        logger.info("Scored %s: %s", target, report.total)
        return report

    def _run_check(self, check: Check, target: ExtensionTarget) -> CheckResult:
        try:
            raw = check.runner.run(target, timeout=check.config.timeout_seconds)
            result = check.scorer(raw, check.config)
        except JudgeError as exc:
            exc.add_context(check=check.name, extension=target.path)
            logger.error("Check %s failed for %s: %s", check.name, target, exc)
            raise
        logger.info(
            "Check %s scored %s with %d issue(s)", check.name, result.score, len(result.issues)
        )
        return result

    def _record(self, target: ExtensionTarget, result: CheckResult) -> None:
        sink = self.sink
        for key, value in result.result_values.items():
            sink.set_result_value(target, result.check_name, key, value)
        for comment in result.comments:
            sink.add_comment(target, comment.check_name, comment.text, comment.level)
        for issue in result.issues:
            if issue.line_number is not None:
                sink.add_detail("lineNumber", issue.line_number)
            if issue.message:
                sink.add_detail("message", issue.message)
            if issue.file_name:
                sink.add_files_for_issue([issue.file_name])
            sink.add_issue(issue.check_name, issue.category, issue.value)
            sink.save()
        sink.set_score(target, result.check_name, result.score)
