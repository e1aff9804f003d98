"""Mess detector scoring and the diagnostic line tokenizer."""

import re
from dataclasses import dataclass
from typing import List, Optional

from ..config import MessDetectorConfig
from ..models import MESS_DETECTOR_CHECK, CheckResult, Comment, Issue, LineReport, ScoreContribution

MESS_DETECTOR = "mess_detector"

# phpmd separates location and description with a tab; older renderers use a space
_FIELD_SEP = re.compile(r"\s+")


@dataclass(frozen=True)
class DiagnosticLine:
    """One ``<file>:<line> <message>`` diagnostic, split into its parts.

    ``token`` is everything before the first run of whitespace. ``file_name`` and
    ``line_number`` are only set when the token contains a colon;
    ``line_number`` additionally needs the part after the colon to be an
    integer. Without whitespace the message is empty.
    """

    token: str
    message: str
    file_name: Optional[str] = None
    line_number: Optional[int] = None


def parse_diagnostic_line(line: str) -> DiagnosticLine:
    parts = _FIELD_SEP.split(line.strip(), maxsplit=1)
    token = parts[0]
    message = parts[1] if len(parts) > 1 else ""
    file_name, colon, line_part = token.partition(":")
    if not colon:
        return DiagnosticLine(token=token, message=message.strip())

    line_number: Optional[int] = None
    if line_part.isdigit():
        line_number = int(line_part)
    return DiagnosticLine(
        token=token,
        message=message.strip(),
        file_name=file_name or None,
        line_number=line_number,
    )


def _issue_from_line(line: str) -> Issue:
    parsed = parse_diagnostic_line(line)
    return Issue(
        MESS_DETECTOR_CHECK,
        category=MESS_DETECTOR,
        value=parsed.token,
        file_name=parsed.file_name,
        line_number=parsed.line_number,
        message=parsed.message or None,
    )


def score_mess(report: LineReport, config: MessDetectorConfig) -> CheckResult:
    count = len(report.lines)

    if count > config.allowed_issues:
        comments = [
            Comment(MESS_DETECTOR_CHECK, f"Mess detector found an issue: {line}", level="warning")
            for line in report.lines
        ]
        if config.issue_per_line:
            issues: List[Issue] = [_issue_from_line(line) for line in report.lines]
        else:
            issues = [_issue_from_line(report.lines[-1])]
        return CheckResult(
            contribution=ScoreContribution(MESS_DETECTOR_CHECK, config.bad),
            issues=issues,
            comments=comments,
            result_values={"mess_detector_results": count},
        )

    return CheckResult(
        contribution=ScoreContribution(MESS_DETECTOR_CHECK, config.good),
        comments=[Comment(MESS_DETECTOR_CHECK, f"Mess detector found {count} results only")],
        result_values={"mess_detector_results": count},
    )
