"""Configuration management for ledbar.

Loads settings from a YAML configuration file with environment variable
overrides (``LEDBAR_`` prefix, ``__`` between nested keys). Supports
.env files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/ledbar/ledbar.yaml")
DEFAULT_SOCKET_PATH = "/tmp/waybar-led"


class LocalConfig(BaseModel):
    socket_path: str = Field(default=DEFAULT_SOCKET_PATH, description="Unix socket the bar writes to")
    read_size: int = Field(default=4096, gt=0)


class RemoteConfig(BaseModel):
    transport: Literal["websocket", "http"] = Field(default="websocket")
    websocket_url: str = Field(default="ws://raspberrypi.local:8080")
    http_base_url: str = Field(default="http://raspberrypi.local")
    poll_interval: float = Field(default=1.0, gt=0)
    timeout: float = Field(default=5.0, gt=0)


class SupervisorConfig(BaseModel):
    backoff: float = Field(default=10.0, ge=0, description="Seconds between a failed run and the next attempt")
    indicator_interval: float = Field(default=0.5, gt=0)


class GateConfig(BaseModel):
    ssid: str | None = Field(default=None, description="Only run on this wireless network")
    command: list[str] = Field(default_factory=lambda: ["iwgetid", "-r"])


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(default="[%(asctime)s] %(message)s")
    datefmt: str = Field(default="%Y-%m-%dT%H:%M:%S")
    file: str | None = Field(default=None, description="Defaults to <socket_path>.log")
    console: bool = Field(default=False, description="Mirror log lines to stderr")


class Settings(BaseSettings):
    """Root configuration for ledbar.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "LEDBAR_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    local: LocalConfig = Field(default_factory=LocalConfig)
    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    supervisor: SupervisorConfig = Field(default_factory=SupervisorConfig)
    gate: GateConfig = Field(default_factory=GateConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # YAML values arrive as init kwargs and must lose to the environment
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @property
    def log_file(self) -> Path:
        if self.logging.file:
            return Path(self.logging.file).expanduser()
        return Path(self.local.socket_path + ".log")


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    path = path.expanduser()

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.debug("Config file %s not found, using defaults + env vars", path)

    return Settings(**yaml_data)
