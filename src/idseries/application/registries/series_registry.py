from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from idseries.core.errors import ConfigurationError, UnknownSeriesError
from idseries.domain.series import Scope, SeriesDefinition

logger = logging.getLogger(__name__)


class SeriesRegistry:
    """
    In-process registry of series definitions.

    Loaded once at startup from static configuration; every defect is raised
    while loading, never per request. After freeze() the registry is read-only.
    """

    def __init__(self) -> None:
        self._series: Dict[str, SeriesDefinition] = {}
        self._frozen = False

    def register(self, desc: SeriesDefinition) -> None:
        if self._frozen:
            raise ConfigurationError(
                message=f"Series registry is frozen; cannot register {desc.code!r}",
                context={"code": desc.code},
            )
        if desc.code in self._series:
            raise ConfigurationError(
                message=f"Duplicate series code {desc.code!r}",
                context={"code": desc.code},
            )
        self._series[desc.code] = desc

    def freeze(self) -> "SeriesRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, code: str) -> Optional[SeriesDefinition]:
        return self._series.get(code)

    def resolve(self, code: str) -> SeriesDefinition:
        desc = self._series.get(code)
        if desc is None:
            raise UnknownSeriesError(
                message=f"Unknown series {code!r}",
                context={"code": code, "known": sorted(self._series)},
            )
        return desc

    def all(self) -> Dict[str, SeriesDefinition]:
        return dict(self._series)

    def __contains__(self, code: object) -> bool:
        return code in self._series

    def __len__(self) -> int:
        return len(self._series)

    @classmethod
    def from_config(cls, entries: Iterable[Any]) -> "SeriesRegistry":
        """
        Build a frozen registry from config entries.

        Entries may be mappings or objects exposing code/template/scope/width
        (e.g. the SeriesConfig dataclass).
        """
        registry = cls()
        for entry in entries:
            if isinstance(entry, Mapping):
                raw = dict(entry)
            else:
                raw = {
                    "code": getattr(entry, "code", None),
                    "template": getattr(entry, "template", None),
                    "scope": getattr(entry, "scope", Scope.perpetual.value),
                    "width": getattr(entry, "width", None),
                }
            code = raw.get("code")
            template = raw.get("template")
            if not isinstance(code, str) or not isinstance(template, str):
                raise ConfigurationError(
                    message=f"Series entry needs string 'code' and 'template': {raw!r}",
                    context={"entry": raw},
                )
            registry.register(
                SeriesDefinition.build(
                    code=code,
                    template=template,
                    scope=raw.get("scope") or Scope.perpetual,
                    width=raw.get("width"),
                )
            )
        logger.info("Loaded %d series definitions: %s", len(registry), ", ".join(sorted(registry.all())))
        return registry.freeze()
