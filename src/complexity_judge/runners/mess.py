"""Mess detection via phpmd's text renderer."""

from typing import Optional

from ..models import MESS_DETECTOR_CHECK, ExtensionTarget, LineReport
from .base import ToolRunner


class MessRunner(ToolRunner):
    """Runs ``phpmd <path> text <rule_sets>`` and keeps the non-blank lines."""

    check_name = MESS_DETECTOR_CHECK
    # phpmd exits with 2 when it found violations
    ok_exit_codes = frozenset({0, 2})

    def __init__(
        self,
        executable: str = "phpmd",
        timeout: Optional[float] = None,
        rule_sets: str = "codesize,unusedcode,naming",
    ):
        super().__init__(executable, timeout)
        self.rule_sets = rule_sets

    def run(self, target: ExtensionTarget, timeout: Optional[float] = None) -> LineReport:
        lines = self._invoke(
            [self.executable, target.path, "text", self.rule_sets],
            timeout=timeout,
        )
        return LineReport(lines=tuple(line.strip() for line in lines if line.strip()))
