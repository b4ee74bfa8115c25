# idseries/__init__.py
"""
idseries - 会员登记系统的顺序编号签发服务

- 持久化计数器（永久序列 / 按年重置序列）
- 原子化的 "自增并返回" 操作，支持多进程并发
- 模板格式化，如 APP-MBR-2025-0001
"""

from __future__ import annotations

__version__ = "1.0.0"
__author__ = "idseries Team"
