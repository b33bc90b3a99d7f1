"""Configuration management for fieldverify using Pydantic models."""

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".fieldverify.json"


class OutputFormat(str, Enum):
    """CLI output formats."""
    TABLE = "table"
    JSON = "json"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class VerifierConfig(BaseModel):
    """Verifier configuration section."""
    tag_key: str = Field(alias="tagKey", default="verify")
    strict_keywords: bool = Field(alias="strictKeywords", default=False)

    @field_validator("tag_key")
    @classmethod
    def validate_tag_key(cls, v):
        if not v:
            raise ValueError("tag_key must not be empty")
        return v

    model_config = ConfigDict(populate_by_name=True)


class OutputConfig(BaseModel):
    """Output configuration section."""
    format: OutputFormat = OutputFormat.TABLE

    model_config = ConfigDict(use_enum_values=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True)


class VerifyConfig(BaseModel):
    """Complete fieldverify configuration model."""
    verifier: VerifierConfig = Field(default_factory=VerifierConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> VerifyConfig:
    """Load configuration from an explicit file or the nearest .fieldverify.json.

    Args:
        config_path: Path given by the caller. If None, searches the current
                    directory and its parents, using defaults when none is found

    Returns:
        VerifyConfig: Loaded and validated configuration

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValueError: If the file is not valid JSON or not a valid configuration
    """
    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            return create_default_config()
        logger.debug(f"Using config file {config_path}")
    else:
        config_path = Path(config_path)
        if not config_path.is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        config_data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {config_path}: {e}")

    if not isinstance(config_data, dict):
        raise ValueError(f"Config file {config_path} must contain a JSON object")

    try:
        return VerifyConfig.model_validate(config_data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e}")


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .fieldverify.json by searching up the directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    start = Path(start_dir or Path.cwd()).resolve()

    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate

    return None


def create_default_config() -> VerifyConfig:
    """Create default configuration."""
    return VerifyConfig()
