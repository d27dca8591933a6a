"""Configuration management for awsri"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ("config.yaml", "config.yml", "config.json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AWSConfig(BaseModel):
    """Session and API settings"""
    profile: Optional[str] = None
    region: str = "ap-northeast-1"
    # The Price List and Savings Plans APIs only have a us-east-1 endpoint
    pricing_region: str = "us-east-1"
    max_results: int = Field(default=100, ge=1, le=100)


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    file: Optional[Path] = None
    structured: bool = False

    @field_validator("level")
    @classmethod
    def check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"must be one of: {', '.join(LOG_LEVELS)}")
        return level


class OutputConfig(BaseModel):
    """Defaults for the rendering flags of the comparison and total commands"""
    format: str = Field(default="table", pattern="^(table|csv)$")
    no_header: bool = False
    unit: str = Field(default="monthly", pattern="^(monthly|yearly)$")


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        with open(path, 'r') as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot parse configuration file {path}: {e}")
    return data or {}


class Settings(BaseSettings):
    """Settings from AWSRI_* environment variables and an optional config file.

    Values read from a config file take precedence over the environment.

    Nested values use a double underscore: ``AWSRI_AWS__REGION=eu-west-1``.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AWSRI_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    app_name: str = "awsri"
    debug: bool = False

    aws: AWSConfig = Field(default_factory=AWSConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def from_file(cls, path: Path) -> "Settings":
        """Load a YAML (.yaml/.yml) or JSON file; a missing file yields defaults"""
        if not path.exists():
            logger.warning(f"Configuration file {path} not found, using defaults")
            return cls.load()
        return cls.load(**_read_config_file(path))

    @classmethod
    def load(cls, **values: Any) -> "Settings":
        """Build settings, reporting invalid values as a ConfigurationError"""
        try:
            return cls(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration: {problems}")


def config_search_paths() -> List[Path]:
    """User config directory first, then the working directory"""
    directories = [Path.home() / ".awsri", Path(".")]
    return [directory / name for directory in directories for name in CONFIG_FILE_NAMES]


settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Settings loaded from the first config file found, cached for the process"""
    global settings
    if settings is not None:
        return settings

    for path in config_search_paths():
        if path.exists():
            settings = Settings.from_file(path)
            logger.info(f"Loaded configuration from {path}")
            return settings

    settings = Settings.load()
    logger.debug("Using default configuration")
    return settings


def reload_settings(path: Optional[Path] = None) -> Settings:
    """Replace the cached settings, from ``path`` or by searching again"""
    global settings
    settings = Settings.from_file(path) if path else None
    return settings or get_settings()
