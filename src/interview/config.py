"""Configuration for the interview runner.

Settings come from an optional YAML file and explicit arguments only.
The environment is never consulted, so the same file always produces the
same behaviour.

    debug: false
    log_level: INFO
    storage:
      state_path: .interview_state.json
      state_key: interview_state
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


logger = logging.getLogger(__name__)

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class StorageConfig(BaseModel):
    state_path: Path = Field(default=Path(".interview_state.json"))
    state_key: str = Field(default="interview_state")

    @field_validator("state_key")
    @classmethod
    def key_must_be_non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("storage.state_key must be a non-empty string")
        return v


class InterviewConfig(BaseModel):
    debug: bool = False
    log_level: str = "INFO"
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @field_validator("log_level")
    @classmethod
    def level_must_be_known(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level


def _read_yaml_file(path: Path) -> dict:
    try:
        if path.exists():
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
            return data if isinstance(data, dict) else {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.error("Failed to read config %s: %s", path, e)
    return {}


def load_config(path: Optional[Union[str, Path]] = None, **overrides) -> InterviewConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Keyword overrides that are not None
    2) The YAML file at ``path`` (optional)
    3) Model defaults
    """
    base = _read_yaml_file(Path(path)) if path else {}
    base.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return InterviewConfig(**base)
    except PydanticValidationError as e:
        logger.error("Invalid interview configuration: %s", e)
        raise


__all__ = [
    "InterviewConfig",
    "StorageConfig",
    "load_config",
]
