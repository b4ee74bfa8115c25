"""
核心层 - 错误类型与结果封装。
"""

from .errors import (
    ErrorSeverity,
    IdSeriesError,
    UnknownSeriesError,
    StorageError,
    MalformedTemplateError,
    ConfigurationError,
    Result,
)

__all__ = [
    "ErrorSeverity",
    "IdSeriesError",
    "UnknownSeriesError",
    "StorageError",
    "MalformedTemplateError",
    "ConfigurationError",
    "Result",
]
