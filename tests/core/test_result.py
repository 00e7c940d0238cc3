"""Tests for core.result"""

from termresurrect.core.result import Error, ErrorKind, Result


class TestResult:
    def test_ok(self):
        result = Result.ok("p1")
        assert result.is_ok()
        assert not result.is_err()
        assert result.value == "p1"
        assert result.error is None

    def test_err_carries_context(self):
        exc = RuntimeError("boom")
        result = Result.err(ErrorKind.SPLIT_FAILURE, "host refused", exc=exc, pane_id="p1")

        assert result.is_err()
        assert result.value is None
        assert result.error.kind is ErrorKind.SPLIT_FAILURE
        assert result.error.context == {"pane_id": "p1"}
        assert result.error.original_exception is exc

    def test_error_str(self):
        error = Error(ErrorKind.ACTIVATION_FAILURE, "pane is absent")
        assert str(error) == "activation_failure: pane is absent"
