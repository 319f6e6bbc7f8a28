# File: parkir/infrastructure/config.py
"""
Application configuration

Settings are resolved in layers, later layers winning:
1. Defaults declared on ParkingConfig
2. An optional YAML file
3. PARKIR_* environment variables
4. Explicit overrides (command-line flags)
"""

from typing import Any, Dict, Mapping, Optional
from pathlib import Path
import logging
import os

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


ENV_PREFIX = "PARKIR_"

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or is invalid"""
    pass


class ParkingConfig(BaseModel):
    """Runtime settings for the facility and the console"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    capacity: int = Field(default=20, gt=0, description="Number of parking spots")
    timestamp_format: str = Field(default="%Y-%m-%d %H:%M:%S")
    timezone_label: str = Field(default="WIT", description="Suffix shown after timestamps")
    clear_screen: bool = Field(default=True, description="Clear the terminal between screens")
    log_level: str = Field(default="WARNING")
    log_file: Optional[str] = Field(default=None)
    event_history_size: int = Field(default=50, gt=0)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    # accept either a flat mapping or one nested under "parkir"
    return dict(data.get("parkir", data))


def _read_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    values = {}
    for name in ParkingConfig.model_fields:
        key = ENV_PREFIX + name.upper()
        if key in environ:
            values[name] = environ[key]
    return values


def load_config(
    path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> ParkingConfig:
    """
    Build the configuration from file, environment and overrides
    Raises: ConfigError on unreadable files or invalid values
    """
    values: Dict[str, Any] = {}

    if path:
        values.update(_read_yaml(Path(path)))
        logger.debug(f"Loaded config file {path}")

    values.update(_read_env(os.environ if environ is None else environ))

    if overrides:
        values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ParkingConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
