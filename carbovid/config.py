"""Configuration management for Carbovid service."""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yml"
CONFIG_ENV_VAR = "CARBOVID_CONFIG"


class UpstreamConfig(BaseModel):
    """Configuration for the upstream data APIs."""

    carbon_base_url: str = "https://api.carbonintensity.org.uk"
    covid_base_url: str = "https://api.coronavirus.data.gov.uk"
    timeout_seconds: float = Field(default=30.0, gt=0)


class CorrelationConfig(BaseModel):
    """Configuration for the day-by-day correlation loop."""

    max_workers: int = Field(default=1, ge=1)
    max_range_days: int = Field(default=366, ge=1)


class ServerConfig(BaseModel):
    """Configuration for the HTTP listener."""

    host: str = "0.0.0.0"
    port: int = Field(default=4000, ge=1, le=65535)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Only accept level names the logging module knows about."""
        if not isinstance(logging.getLevelName(v.upper()), int):
            raise ValueError(f"Unknown logging level '{v}'")
        return v.upper()


class Config(BaseModel):
    """Main configuration for Carbovid service."""

    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)
    correlation: CorrelationConfig = Field(default_factory=CorrelationConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _config_path() -> Optional[Path]:
    env_path = os.getenv(CONFIG_ENV_VAR)
    return Path(env_path) if env_path else None


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file.

    Without an explicit path (argument or ``CARBOVID_CONFIG``) a missing
    ``config.yml`` falls back to the built-in defaults.
    """
    if config_path is None:
        config_path = _config_path()

    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.info("No %s found, using default configuration", DEFAULT_CONFIG_PATH.name)
            return Config()
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}. "
            f"Copy config.example.yml to config.yml and adjust it."
        )

    logger.info("Loading configuration from %s", config_path)

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    try:
        return Config(**config_data)
    except Exception as e:
        raise ValueError(f"Invalid configuration: {e}") from e


try:
    # Load configuration eagerly so callers can simply import `config`
    config: Config = load_config()
except Exception:
    logger.exception("Failed to load configuration")
    raise
