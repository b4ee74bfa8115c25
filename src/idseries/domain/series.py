"""
编号序列的领域模型：作用域、序列定义、计数键与模板格式化。
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from idseries.core.errors import ConfigurationError, MalformedTemplateError

SEQ_TOKEN = "SEQ"
YEAR_TOKEN = "YYYY"
DEFAULT_WIDTH = 4
MAX_CODE_LENGTH = 64

_CODE_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_PLACEHOLDER_RE = re.compile(r"\{([^{}]*)\}")
_SEQ_RE = re.compile(r"^SEQ(?::(\d+))?$")


class Scope(str, Enum):
    perpetual = "perpetual"
    yearly = "yearly"


@dataclass(frozen=True)
class CounterKey:
    """Storage lookup key: the series code alone, or the code plus a calendar year."""

    series_code: str
    year: Optional[int] = None

    @property
    def is_yearly(self) -> bool:
        return self.year is not None

    def __str__(self) -> str:
        if self.year is None:
            return self.series_code
        return f"{self.series_code}:{self.year}"


@dataclass(frozen=True)
class TemplatePart:
    kind: str  # literal/seq/year
    text: str = ""


def parse_template(template: str) -> Tuple[List[TemplatePart], Optional[int]]:
    """
    Split a template into literal text and placeholders.

    Returns (parts, width declared inside `{SEQ:N}` or None).
    Raises MalformedTemplateError on unknown tokens, stray braces,
    a missing or repeated `{SEQ}` or a repeated `{YYYY}`.
    """
    parts: List[TemplatePart] = []
    width: Optional[int] = None
    seq_count = 0
    year_count = 0
    pos = 0

    for match in _PLACEHOLDER_RE.finditer(template):
        literal = template[pos:match.start()]
        if "{" in literal or "}" in literal:
            raise MalformedTemplateError(
                message=f"Unbalanced brace in template {template!r}",
                context={"template": template},
            )
        if literal:
            parts.append(TemplatePart("literal", literal))

        token = match.group(1)
        seq_match = _SEQ_RE.match(token)
        if seq_match:
            seq_count += 1
            if seq_match.group(1) is not None:
                width = int(seq_match.group(1))
            parts.append(TemplatePart("seq"))
        elif token == YEAR_TOKEN:
            year_count += 1
            parts.append(TemplatePart("year"))
        else:
            raise MalformedTemplateError(
                message=f"Unknown placeholder {{{token}}} in template {template!r}",
                context={"template": template, "token": token},
            )
        pos = match.end()

    tail = template[pos:]
    if "{" in tail or "}" in tail:
        raise MalformedTemplateError(
            message=f"Unbalanced brace in template {template!r}",
            context={"template": template},
        )
    if tail:
        parts.append(TemplatePart("literal", tail))

    if seq_count != 1:
        raise MalformedTemplateError(
            message=f"Template {template!r} must contain exactly one {{SEQ}} placeholder (found {seq_count})",
            context={"template": template},
        )
    if year_count > 1:
        raise MalformedTemplateError(
            message=f"Template {template!r} contains more than one {{YYYY}} placeholder",
            context={"template": template},
        )
    if width is not None and width < 1:
        raise MalformedTemplateError(
            message=f"Template {template!r} declares a zero width",
            context={"template": template},
        )
    return parts, width


@dataclass(frozen=True)
class SeriesDefinition:
    code: str
    template: str
    scope: Scope = Scope.perpetual
    width: int = DEFAULT_WIDTH
    _parts: Tuple[TemplatePart, ...] = field(default=(), repr=False, compare=False)

    @classmethod
    def build(
        cls,
        code: str,
        template: str,
        scope: Scope | str = Scope.perpetual,
        width: Optional[int] = None,
    ) -> "SeriesDefinition":
        """Validate the raw configuration values and return an immutable definition."""
        if not code or not _CODE_RE.match(code) or len(code) > MAX_CODE_LENGTH:
            raise ConfigurationError(
                message=f"Invalid series code {code!r}",
                context={"code": code},
            )
        try:
            scope = Scope(scope)
        except ValueError as exc:
            raise ConfigurationError(
                message=f"Series {code!r} has unknown scope {scope!r}",
                context={"code": code, "scope": str(scope)},
            ) from exc

        parts, template_width = parse_template(template)
        if scope is Scope.yearly and not any(p.kind == "year" for p in parts):
            raise MalformedTemplateError(
                message=f"Yearly series {code!r} needs a {{YYYY}} placeholder in {template!r}",
                context={"code": code, "template": template},
            )

        if width is not None and (isinstance(width, bool) or not isinstance(width, int)):
            raise ConfigurationError(
                message=f"Series {code!r}: width must be an integer >= 1, got {width!r}",
                context={"code": code, "width": width},
            )
        if width is not None and template_width is not None and width != template_width:
            raise MalformedTemplateError(
                message=f"Series {code!r}: width {width} disagrees with template {template!r}",
                context={"code": code, "template": template, "width": width},
            )
        resolved = width if width is not None else (template_width or DEFAULT_WIDTH)
        if isinstance(resolved, bool) or not isinstance(resolved, int) or resolved < 1:
            raise ConfigurationError(
                message=f"Series {code!r}: width must be an integer >= 1, got {resolved!r}",
                context={"code": code, "width": resolved},
            )
        return cls(code=code, template=template, scope=scope, width=resolved, _parts=tuple(parts))

    @property
    def is_yearly(self) -> bool:
        return self.scope is Scope.yearly

    def counter_key(self, now: datetime) -> CounterKey:
        if self.is_yearly:
            return CounterKey(self.code, now.year)
        return CounterKey(self.code)

    def format(self, value: int, year: Optional[int] = None) -> str:
        return format_identifier(self._parts or tuple(parse_template(self.template)[0]), value, self.width, year)


def format_identifier(parts, value: int, width: int, year: Optional[int] = None) -> str:
    """
    Pure formatting of one identifier.

    `width` is a minimum: values wider than it are rendered in full.
    """
    if value < 1:
        raise ValueError(f"Sequence value must be >= 1, got {value}")
    out = []
    for part in parts:
        if part.kind == "seq":
            out.append(str(value).zfill(width))
        elif part.kind == "year":
            if year is None:
                raise ValueError("Template needs a year but none was given")
            out.append(f"{year:04d}")
        else:
            out.append(part.text)
    return "".join(out)
