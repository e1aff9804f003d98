"""Tests for the complexity-judge exception hierarchy."""

import pytest

from complexity_judge.exceptions import (
    CheckError,
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    JudgeError,
    MalformedReportError,
    StorageError,
    ThresholdConfigError,
    ToolInvocationError,
    ToolTimeoutError,
)


class TestHierarchy:
    """Every error can be caught as JudgeError."""

    @pytest.mark.parametrize(
        "error",
        [
            ToolInvocationError("metrics", ["pdepend"], "not found"),
            ToolTimeoutError("duplication", ["phpcpd"], 30),
            MalformedReportError("mess_detector", "empty"),
            InvalidPathError("/nope", "Path does not exist"),
            InvalidConfigError("metrics.good", "x", "must be a number"),
            ThresholdConfigError("ccn"),
            StorageError("disk full"),
        ],
    )
    def test_all_are_judge_errors(self, error):
        assert isinstance(error, JudgeError)

    def test_check_errors(self):
        assert issubclass(ToolInvocationError, CheckError)
        assert issubclass(MalformedReportError, CheckError)
        assert issubclass(ToolTimeoutError, ToolInvocationError)

    def test_config_errors(self):
        assert issubclass(InvalidPathError, ConfigurationError)
        assert issubclass(ThresholdConfigError, ConfigurationError)

    def test_timeout_is_builtin_timeout(self):
        with pytest.raises(TimeoutError):
            raise ToolTimeoutError("metrics", ["pdepend", "/ext"], 600)


class TestDetails:
    def test_check_name_in_details(self):
        err = MalformedReportError("metrics", "no numeric attributes")
        assert err.check_name == "metrics"
        assert err.details["check"] == "metrics"
        assert err.details["reason"] == "no numeric attributes"

    def test_invocation_details(self):
        err = ToolInvocationError("mess_detector", ["phpmd", "/ext", "text"], "boom", returncode=3)
        assert err.details["command"] == "phpmd /ext text"
        assert err.details["returncode"] == "3"
        assert err.command == ["phpmd", "/ext", "text"]

    def test_str_includes_details(self):
        err = ThresholdConfigError("npath")
        text = str(err)
        assert text.startswith("Missing threshold for metric npath")
        assert "metric=npath" in text

    def test_str_without_details(self):
        assert str(JudgeError("plain")) == "plain"


class TestAddContext:
    def test_fills_missing_keys(self):
        err = MalformedReportError("metrics", "empty").add_context(extension="/ext/Vendor_Module")
        assert err.details["extension"] == "/ext/Vendor_Module"
        assert "extension=/ext/Vendor_Module" in str(err)

    def test_keeps_existing_keys(self):
        err = ToolInvocationError("duplication", ["phpcpd"], "boom")
        err.add_context(check="metrics", reason="other")
        assert err.details["check"] == "duplication"
        assert err.details["reason"] == "boom"

    def test_details_are_copied(self):
        details = {"path": "/ext"}
        err = JudgeError("bad", details)
        err.add_context(extension="/ext")
        assert details == {"path": "/ext"}
