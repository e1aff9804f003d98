"""Check exceptions: tool invocation, timeouts, unparseable reports."""

from typing import Dict, Optional, Sequence

from .base import JudgeError


class CheckError(JudgeError):
    """Base class for failures inside one check.

    ``check_name`` always identifies the failing check. The pipeline adds
    the extension path to ``details`` before re-raising.
    """

    def __init__(self, check_name: str, message: str, details: Optional[Dict[str, str]] = None):
        merged = {"check": check_name}
        merged.update(details or {})
        super().__init__(message, details=merged)
        self.check_name = check_name


class ToolInvocationError(CheckError):
    """Raised when an external analysis tool fails to run."""

    def __init__(
        self,
        check_name: str,
        command: Sequence[str],
        reason: str,
        returncode: Optional[int] = None,
    ):
        details = {"command": " ".join(command), "reason": reason}
        if returncode is not None:
            details["returncode"] = str(returncode)
        super().__init__(check_name, f"Tool for check {check_name} failed", details=details)
        self.command = list(command)
        self.reason = reason
        self.returncode = returncode


class ToolTimeoutError(ToolInvocationError, TimeoutError):
    """Raised when an external analysis tool exceeds its timeout."""

    def __init__(self, check_name: str, command: Sequence[str], timeout: float):
        super().__init__(check_name, command, f"timed out after {timeout}s")
        self.timeout = timeout


class MalformedReportError(CheckError):
    """Raised when tool output cannot be parsed into the expected report."""

    def __init__(self, check_name: str, reason: str):
        super().__init__(
            check_name,
            f"Malformed report from check {check_name}",
            details={"reason": reason},
        )
        self.reason = reason
