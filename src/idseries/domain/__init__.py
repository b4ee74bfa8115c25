"""
领域模型 - 序列定义与计数键。
"""

from .series import CounterKey, Scope, SeriesDefinition, format_identifier, parse_template

__all__ = ["CounterKey", "Scope", "SeriesDefinition", "format_identifier", "parse_template"]
