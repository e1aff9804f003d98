"""Duplication scoring: a single pass/fail on the duplicated-code share."""

from ..config import DuplicationConfig
from ..models import (
    DUPLICATION_CHECK,
    CheckResult,
    Comment,
    DuplicationReport,
    Issue,
    ScoreContribution,
)

DUPLICATED_CODE = "duplicated_code"


def score_duplication(report: DuplicationReport, config: DuplicationConfig) -> CheckResult:
    percentage = report.percentage
    result_values = {"duplication_percentage": percentage}

    if percentage > config.percentage_good:
        return CheckResult(
            contribution=ScoreContribution(DUPLICATION_CHECK, config.bad),
            issues=[Issue(DUPLICATION_CHECK, category=DUPLICATED_CODE, value=percentage)],
            comments=[
                Comment(
                    DUPLICATION_CHECK,
                    f"Extension contains {percentage}% of duplicated code.",
                    level="warning",
                )
            ],
            result_values=result_values,
        )

    return CheckResult(
        contribution=ScoreContribution(DUPLICATION_CHECK, config.good),
        result_values=result_values,
    )
