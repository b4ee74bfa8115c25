# idseries/config/settings.py

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field


@dataclass
class DatabaseConfig:
    """数据库配置"""
    url: str = ""
    timeout: int = 30
    pool_size: int = 10


@dataclass
class LoggingConfig:
    """日志配置"""
    level: str = "INFO"
    file: Optional[str] = None  # 例如 logs/idseries.log，None 表示只输出到控制台
    max_size: int = 10485760  # 10MB
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class IssuanceConfig:
    """签发配置"""
    timezone: str = "UTC"  # 决定 "当前年份" 的日历


@dataclass
class SeriesConfig:
    """序列配置（code / template / scope / width）"""
    code: str = ""
    template: str = ""
    scope: str = "perpetual"  # perpetual / yearly
    width: Optional[int] = None  # None 时取模板 {SEQ:N} 中的宽度


def _default_series() -> List[SeriesConfig]:
    from idseries.application.registries.default_series import DEFAULT_SERIES

    return [
        SeriesConfig(code=s["code"], template=s["template"], scope=str(s["scope"].value))
        for s in DEFAULT_SERIES
    ]


@dataclass
class Settings:
    """主配置类"""
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    issuance: IssuanceConfig = field(default_factory=IssuanceConfig)
    series: List[SeriesConfig] = field(default_factory=_default_series)

    @classmethod
    def load_from_file(cls, config_path: Optional[str] = None) -> 'Settings':
        """从文件加载配置"""
        if config_path is None:
            config_path = Path(__file__).parent / "config.yaml"

        config_path = Path(config_path)

        if not config_path.exists():
            # 返回默认配置
            return cls()

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> 'Settings':
        """从字典创建配置"""
        settings = cls()

        if 'database' in config_data:
            settings.database = DatabaseConfig(**config_data['database'])

        if 'logging' in config_data:
            settings.logging = LoggingConfig(**config_data['logging'])

        if 'issuance' in config_data:
            settings.issuance = IssuanceConfig(**config_data['issuance'])

        if 'series' in config_data:
            settings.series = [SeriesConfig(**entry) for entry in (config_data['series'] or [])]

        return settings

    def load_environment_variables(self):
        """加载环境变量"""
        db_url = os.getenv('IDSERIES_DB_URL')
        if db_url:
            self.database.url = db_url
        log_level = os.getenv('IDSERIES_LOG_LEVEL')
        if log_level:
            self.logging.level = log_level
        tz = os.getenv('IDSERIES_TIMEZONE')
        if tz:
            self.issuance.timezone = tz

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            'database': self.database.__dict__,
            'logging': self.logging.__dict__,
            'issuance': self.issuance.__dict__,
            'series': [s.__dict__ for s in self.series],
        }


def create_settings(config_path: Optional[str] = None) -> Settings:
    """创建设置实例"""
    settings = Settings.load_from_file(config_path or os.getenv('IDSERIES_CONFIG'))
    settings.load_environment_variables()
    return settings
