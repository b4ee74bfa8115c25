# idseries/config/__init__.py

from .settings import (
    Settings,
    DatabaseConfig,
    LoggingConfig,
    IssuanceConfig,
    SeriesConfig,
    create_settings,
)
from .validated_settings import load_validated_settings

__all__ = [
    "Settings",
    "DatabaseConfig",
    "LoggingConfig",
    "IssuanceConfig",
    "SeriesConfig",
    "create_settings",
    "load_validated_settings",
]
