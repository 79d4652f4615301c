"""Warm pool configuration management.

Configuration sources (in priority order):
1. Environment variables (WARMPOOL_ prefix)
2. Config file (config.yaml)
3. Defaults
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WarmPoolConfig(BaseModel):
    """Dynamic warm pool configuration."""

    enabled: bool = True
    # Seconds between two warm target computations by the scheduler
    interval_seconds: float = Field(default=60.0, gt=0)
    run_on_startup: bool = True
    # Smallest target ever returned, even with no activity
    min_target: int = Field(default=2, ge=0)
    # Above this rounded stddev the p75 of the histogram is considered
    stddev_threshold: int = Field(default=5, ge=0)


class Settings(BaseSettings):
    """Warm pool application settings."""

    model_config = SettingsConfigDict(
        env_prefix="WARMPOOL_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    warm_pool: WarmPoolConfig = Field(default_factory=WarmPoolConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # File values arrive as init kwargs; environment must win over them
        return env_settings, init_settings, dotenv_settings, file_secret_settings


def _load_config_file() -> dict:
    """Load configuration from YAML file if exists.

    Looks for config file in order:
    1. WARMPOOL_CONFIG_FILE environment variable
    2. ./config.yaml
    3. /etc/warmpool/config.yaml
    """
    import os

    config_paths = [
        os.environ.get("WARMPOOL_CONFIG_FILE"),
        Path("config.yaml"),
        Path("/etc/warmpool/config.yaml"),
    ]

    for path in config_paths:
        if path is None:
            continue
        path = Path(path)
        if path.exists():
            with open(path) as f:
                return yaml.safe_load(f) or {}

    return {}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Configuration is loaded from:
    1. YAML config file (if exists)
    2. Environment variables (override)
    3. Defaults
    """
    file_config = _load_config_file()

    # Environment variables override file values via pydantic-settings
    return Settings(**file_config)
