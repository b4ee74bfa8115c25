"""
基于 pydantic 的配置校验与对象化加载。

提供 SettingsModel（忽略多余字段），并转换为 dataclass Settings。
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
import yaml

from idseries.core.errors import ConfigurationError

from .settings import (
    DatabaseConfig,
    LoggingConfig,
    IssuanceConfig,
    SeriesConfig,
    Settings,
)


class DatabaseConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str = ""
    timeout: int = Field(default=30, gt=0)
    pool_size: int = Field(default=10, gt=0)


class LoggingConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    level: str = "INFO"
    file: Optional[str] = None
    max_size: int = 10485760
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class IssuanceConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    timezone: str = "UTC"


class SeriesConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: str = Field(min_length=1, max_length=64)
    template: str = Field(min_length=1)
    scope: Literal["perpetual", "yearly"] = "perpetual"
    width: Optional[int] = Field(default=None, ge=1)


class SettingsModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    database: DatabaseConfigModel = DatabaseConfigModel()
    logging: LoggingConfigModel = LoggingConfigModel()
    issuance: IssuanceConfigModel = IssuanceConfigModel()
    series: Optional[List[SeriesConfigModel]] = None

    def to_dataclass(self) -> Settings:
        s = Settings()
        s.database = DatabaseConfig(**self.database.model_dump())
        s.logging = LoggingConfig(**self.logging.model_dump())
        s.issuance = IssuanceConfig(**self.issuance.model_dump())
        if self.series is not None:
            s.series = [SeriesConfig(**entry.model_dump()) for entry in self.series]
        return s


def load_validated_settings(config_path: Optional[str] = None) -> Settings:
    """使用 pydantic 校验后返回 Settings dataclass；校验失败视为配置缺陷。"""
    cfg_file = Path(config_path) if config_path else Path(__file__).parent / "config.yaml"
    data = {}
    if cfg_file.exists():
        data = yaml.safe_load(cfg_file.read_text(encoding="utf-8")) or {}
    try:
        model = SettingsModel(**data)
    except ValidationError as exc:
        raise ConfigurationError(
            message=f"Invalid configuration in {cfg_file}: {exc}",
            context={"path": str(cfg_file)},
        ) from exc
    settings = model.to_dataclass()
    settings.load_environment_variables()
    return settings
