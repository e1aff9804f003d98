"""Shared subprocess plumbing for the external analysis tools."""

import subprocess
from abc import ABC, abstractmethod
from typing import FrozenSet, List, Optional, Sequence

from ..exceptions import ToolInvocationError, ToolTimeoutError
from ..logging_config import get_logger, get_tool_logger
from ..models import ExtensionTarget, RawToolOutput

logger = get_logger(__name__)

# Longest stderr excerpt kept in error details
_MAX_STDERR_CHARS = 2000


class ToolRunner(ABC):
    """Runs one external tool against an extension and returns its raw output.

    Subclasses build the command line and parse the output; this class owns
    process execution, timeouts and exit-code policy.
    """

    check_name: str = ""
    # Exit codes that mean "the tool ran"; anything else is a failure
    ok_exit_codes: FrozenSet[int] = frozenset({0})

    def __init__(self, executable: str, timeout: Optional[float] = None):
        self.executable = executable
        self.timeout = timeout

    @abstractmethod
    def run(self, target: ExtensionTarget, timeout: Optional[float] = None) -> RawToolOutput:
        """Execute the tool against ``target``.

        Raises:
            ToolInvocationError: The process could not be started or failed
            ToolTimeoutError: The process exceeded ``timeout`` seconds
            MalformedReportError: The output could not be parsed
        """

    def _invoke(self, command: Sequence[str], timeout: Optional[float] = None) -> List[str]:
        """Run ``command`` and return its stdout split into lines."""
        effective_timeout = timeout if timeout is not None else self.timeout
        logger.debug("Running %s: %s", self.check_name, " ".join(command))
        try:
            result = subprocess.run(
                list(command),
                capture_output=True,
                text=True,
                timeout=effective_timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ToolTimeoutError(self.check_name, command, effective_timeout or 0) from e
        except OSError as e:
            raise ToolInvocationError(self.check_name, command, str(e)) from e

        stdout_lines = result.stdout.splitlines() if result.stdout else []
        tool_log = get_tool_logger(self.check_name)
        for line in (result.stderr or "").splitlines():
            if line.strip():
                tool_log.debug("stderr: %s", line)
        tool_log.debug("exit status %d, %d stdout line(s)", result.returncode, len(stdout_lines))

        if result.returncode not in self.ok_exit_codes:
            stderr = (result.stderr or "").strip()[:_MAX_STDERR_CHARS]
            raise ToolInvocationError(
                self.check_name,
                command,
                stderr or f"exited with status {result.returncode}",
                returncode=result.returncode,
            )

        return stdout_lines
