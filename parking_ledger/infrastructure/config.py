# File: parking_ledger/infrastructure/config.py
"""
Configuration for the Parking Ledger

Settings come from an optional YAML file, then environment variables:
    PARKING_LEDGER_RATE       rate per second (integer)
    PARKING_LEDGER_LOG_LEVEL  logging level name
    PARKING_LEDGER_LOG_FILE   path of an extra log file
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
import logging
import os

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


ENV_PREFIX = "PARKING_LEDGER_"

_ENV_FIELDS = {
    "RATE": "rate_per_second",
    "LOG_LEVEL": "log_level",
    "LOG_FILE": "log_file",
}


class ConfigurationError(ValueError):
    """Raised when settings cannot be read or do not validate"""
    pass


class LedgerSettings(BaseModel):
    """Validated ledger configuration"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    rate_per_second: int = Field(default=10, ge=0, description="Currency units per parked second")
    log_level: str = Field(default="INFO", description="Logging level name")
    log_file: Optional[str] = Field(default=None, description="Optional log file path")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        level = str(v).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


def _read_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def load_settings(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None
) -> LedgerSettings:
    """
    Build settings from a YAML file and environment overrides

    Args:
        path: Optional YAML file with LedgerSettings fields
        environ: Environment mapping, defaults to os.environ

    Raises: ConfigurationError on unreadable or invalid input
    """
    data: Dict[str, Any] = _read_yaml(path) if path else {}

    env = os.environ if environ is None else environ
    for suffix, field_name in _ENV_FIELDS.items():
        value = env.get(ENV_PREFIX + suffix)
        if value:
            data[field_name] = value

    try:
        return LedgerSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid ledger settings: {e}") from e
