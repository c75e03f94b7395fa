"""Configuration management for ledconsole.

Loads settings from a YAML configuration file with environment variable
overrides (``LEDCONSOLE_`` prefix, ``__`` for nested sections). Supports
.env files.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/ledconsole.yaml")


class ServerConfig(BaseModel):
    host: str = Field(default="localhost")
    port: int = Field(default=6, ge=1, le=65535)
    connect_timeout: float = Field(default=5.0, gt=0)


class ConsoleConfig(BaseModel):
    quiet: bool = Field(default=False, description="Headless mode: dispatch without rendering")
    overlap_rows: int = Field(default=2, ge=0, description="Rows kept visible across a page flip")
    history_limit: int = Field(default=500, gt=0)
    suppress_animation_info: bool = Field(
        default=True,
        description="Hide animation info messages until a command has been sent",
    )
    auto_connect: bool = Field(default=True)
    poll_interval: float = Field(default=0.1, gt=0)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for ledconsole.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "LEDCONSOLE_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    server: ServerConfig = Field(default_factory=ServerConfig)
    console: ConsoleConfig = Field(default_factory=ConsoleConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables."""
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    return Settings(**yaml_data)
