"""Copy/paste detection via phpcpd."""

import re
from typing import Optional, Sequence

from ..exceptions import MalformedReportError
from ..models import DUPLICATION_CHECK, DuplicationReport, ExtensionTarget
from .base import ToolRunner

# "3.21% duplicated lines out of 1245 total lines of code."
_SUMMARY_RE = re.compile(r"(\d+(?:\.\d+)?)%\s+duplicated lines out of\s+(\d+)\s+total lines")
# "Found 2 clones with 40 duplicated lines in 3 files:"
_FOUND_RE = re.compile(r"Found\s+\d+\s+(?:exact\s+)?clones?\s+with\s+(\d+)\s+duplicated lines")
_NO_CLONES = "No clones found"


def parse_cpd_output(lines: Sequence[str]) -> DuplicationReport:
    """Extract the duplication percentage from phpcpd's text output."""
    duplicated: Optional[int] = None
    for line in lines:
        found = _FOUND_RE.search(line)
        if found:
            duplicated = int(found.group(1))
            continue
        summary = _SUMMARY_RE.search(line)
        if summary:
            return DuplicationReport(
                percentage=float(summary.group(1)),
                duplicated_lines=duplicated,
                total_lines=int(summary.group(2)),
            )

    if any(_NO_CLONES in line for line in lines):
        return DuplicationReport(percentage=0.0, duplicated_lines=0)
    raise MalformedReportError(DUPLICATION_CHECK, "no duplication summary in phpcpd output")


class DuplicationRunner(ToolRunner):
    """Runs ``phpcpd --min-lines N --min-tokens N <path>``."""

    check_name = DUPLICATION_CHECK
    # phpcpd exits with 1 when it found clones
    ok_exit_codes = frozenset({0, 1})

    def __init__(
        self,
        executable: str = "phpcpd",
        timeout: Optional[float] = None,
        min_lines: int = 5,
        min_tokens: int = 70,
    ):
        super().__init__(executable, timeout)
        self.min_lines = min_lines
        self.min_tokens = min_tokens

    def run(self, target: ExtensionTarget, timeout: Optional[float] = None) -> DuplicationReport:
        lines = self._invoke(
            [
                self.executable,
                "--min-lines",
                str(self.min_lines),
                "--min-tokens",
                str(self.min_tokens),
                target.path,
            ],
            timeout=timeout,
        )
        return parse_cpd_output(lines)
