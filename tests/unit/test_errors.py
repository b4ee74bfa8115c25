"""
错误处理单元测试
"""

import pytest

from idseries.core.errors import (
    ConfigurationError,
    ErrorSeverity,
    IdSeriesError,
    MalformedTemplateError,
    Result,
    StorageError,
    UnknownSeriesError,
)


class TestErrorSeverity:
    """ErrorSeverity 测试"""

    def test_severity_values(self):
        assert ErrorSeverity.WARNING.value == "warning"
        assert ErrorSeverity.ERROR.value == "error"
        assert ErrorSeverity.CRITICAL.value == "critical"


class TestIdSeriesError:
    """IdSeriesError 测试"""

    def test_error_str(self):
        err = IdSeriesError(message="Test error", code="TEST")
        assert "[TEST] Test error" in str(err)

    def test_error_with_context(self):
        err = IdSeriesError(message="Failed", context={"key": "value"})
        assert err.context == {"key": "value"}

    def test_errors_are_raisable_and_catchable_by_base(self):
        with pytest.raises(IdSeriesError):
            raise StorageError(message="db down")


class TestSpecificErrors:
    """特定错误类型测试"""

    def test_unknown_series_error(self):
        err = UnknownSeriesError(message="no such series")
        assert err.code == "UNKNOWN_SERIES"
        assert err.severity == ErrorSeverity.ERROR

    def test_storage_error(self):
        err = StorageError(message="timeout")
        assert err.code == "STORAGE_ERROR"

    def test_startup_errors_are_critical(self):
        assert MalformedTemplateError(message="bad").severity == ErrorSeverity.CRITICAL
        assert MalformedTemplateError(message="bad").code == "MALFORMED_TEMPLATE"
        assert ConfigurationError(message="dup").severity == ErrorSeverity.CRITICAL
        assert ConfigurationError(message="dup").code == "CONFIG_ERROR"


class TestResult:
    """Result 类型测试"""

    def test_ok_result(self):
        result = Result.ok("MBR-0001")
        assert result.is_ok() is True
        assert result.unwrap() == "MBR-0001"
        assert result.error is None

    def test_err_result(self):
        err = StorageError(message="Failed")
        result = Result.err(err)
        assert result.is_ok() is False
        assert result.error is err

        with pytest.raises(StorageError):
            result.unwrap()

    def test_unwrap_or_returns_default(self):
        result = Result.err(IdSeriesError(message="Failed"))
        assert result.unwrap_or("default") == "default"

    def test_map_transforms_ok(self):
        assert Result.ok(5).map(lambda x: x * 2).unwrap() == 10

    def test_map_preserves_err(self):
        mapped = Result.err(IdSeriesError(message="Failed")).map(lambda x: x * 2)
        assert mapped.is_ok() is False
