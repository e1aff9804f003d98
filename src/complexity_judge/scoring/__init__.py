"""Pure scoring functions: raw tool output + config -> CheckResult."""

from .duplication import DUPLICATED_CODE, score_duplication
from .mess import MESS_DETECTOR, DiagnosticLine, parse_diagnostic_line, score_mess
from .metrics import score_metrics

__all__ = [
    "score_metrics",
    "score_duplication",
    "score_mess",
    "parse_diagnostic_line",
    "DiagnosticLine",
    "DUPLICATED_CODE",
    "MESS_DETECTOR",
]
