"""
统一错误模块。
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
