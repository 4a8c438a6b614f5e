"""
Tests for core.services.

Test Classes:
    TestServiceResult: Constructors and helpers
    TestBaseServiceCapture: Exceptions converted to failed results
"""

from core.exceptions import ConfigurationError
from core.services import BaseService, ServiceResult


class TestServiceResult:
    def test_success_is_truthy(self):
        result = ServiceResult.success(3)

        assert result
        assert result.data == 3
        assert result.unwrap_or(0) == 3

    def test_failure_is_falsy(self):
        result = ServiceResult.failure("nope", "NOPE")

        assert not result
        assert result.unwrap_or(0) == 0
        assert result.to_response() == {
            "success": False,
            "error": "nope",
            "error_code": "NOPE",
        }

    def test_map_skips_failures(self):
        assert ServiceResult.success(2).map(lambda x: x * 2).data == 4
        assert not ServiceResult.failure("x").map(lambda x: x * 2)

    def test_from_exception_uses_class_name(self):
        result = ServiceResult.from_exception(KeyError("k"))

        assert result.error_code == "KEYERROR"


class TestBaseServiceCapture:
    def test_wraps_return_value(self):
        assert BaseService.capture(lambda: "value").data == "value"

    def test_converts_exception_and_logs(self, caplog):
        def fail():
            raise ConfigurationError("missing key")

        result = BaseService.capture(fail, context="load key")

        assert not result
        assert result.error_code == "CONFIGURATIONERROR"
        assert "load key" in caplog.text
