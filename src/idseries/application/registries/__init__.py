from .series_registry import SeriesRegistry
from .default_series import DEFAULT_SERIES, register_default_series

__all__ = ["SeriesRegistry", "DEFAULT_SERIES", "register_default_series"]
