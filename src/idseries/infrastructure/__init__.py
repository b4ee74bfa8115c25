"""
基础设施层 - 计数器存储与数据库迁移。
"""
