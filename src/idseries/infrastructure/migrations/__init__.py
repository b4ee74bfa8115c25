from .manager import MigrationManager

__all__ = ["MigrationManager"]
