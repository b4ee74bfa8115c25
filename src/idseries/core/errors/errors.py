"""
统一错误与 Result 封装：编号服务只向调用方抛出这里定义的错误。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, TypeVar, Union, cast


class ErrorSeverity(Enum):
    WARNING = "warning"      # 调用方可重试
    ERROR = "error"          # 本次请求失败
    CRITICAL = "critical"    # 配置缺陷，进程不应启动


@dataclass(eq=False)
class IdSeriesError(Exception):
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    code: str = "UNKNOWN"
    context: Dict[str, Any] | None = None

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


@dataclass(eq=False)
class UnknownSeriesError(IdSeriesError):
    """Series code absent from the registry. Never retried automatically."""

    code: str = "UNKNOWN_SERIES"


@dataclass(eq=False)
class StorageError(IdSeriesError):
    """The atomic increment failed; no sequence number was consumed."""

    code: str = "STORAGE_ERROR"


@dataclass(eq=False)
class MalformedTemplateError(IdSeriesError):
    code: str = "MALFORMED_TEMPLATE"
    severity: ErrorSeverity = ErrorSeverity.CRITICAL


@dataclass(eq=False)
class ConfigurationError(IdSeriesError):
    code: str = "CONFIG_ERROR"
    severity: ErrorSeverity = ErrorSeverity.CRITICAL


T = TypeVar("T")
E = TypeVar("E", bound=IdSeriesError)


@dataclass
class Result(Generic[T, E]):
    """函数式结果封装，供不希望捕获异常的调用方使用。"""

    _value: Union[T, E]
    _is_ok: bool

    @classmethod
    def ok(cls, value: T) -> "Result[T, E]":
        return cls(_value=value, _is_ok=True)

    @classmethod
    def err(cls, error: E) -> "Result[T, E]":
        return cls(_value=error, _is_ok=False)

    def is_ok(self) -> bool:
        return self._is_ok

    @property
    def error(self) -> E | None:
        return None if self._is_ok else cast(E, self._value)

    def unwrap(self) -> T:
        if not self._is_ok:
            raise cast(E, self._value)
        return cast(T, self._value)

    def unwrap_or(self, default: T) -> T:
        return cast(T, self._value) if self._is_ok else default

    def map(self, fn) -> "Result[T, E]":
        if self._is_ok:
            return Result.ok(fn(self._value))  # type: ignore[arg-type]
        return self
