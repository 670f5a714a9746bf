"""
Pydantic configuration for TaskLogger.

Every field has a default, so an empty YAML document is a valid config.

Usage:
    config = LoggerConfig.from_yaml("tasklog.yaml")
    log = TaskLogger(config)

    # tasklog.yaml
    debug_threshold: WARNING
    flush_every_write: true
    log_directory: logs
    default_file_name: main.log
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class LoggerConfig(BaseModel):
    # ── Flags (consumed as two booleans) ──────────────────────────
    flush_every_write: bool = False
    mirror_all_to_console: bool = False

    # ── Level and layout ──────────────────────────────────────────
    debug_threshold: int = 0  # DEBUG
    max_columns: int = Field(160, ge=24)  # fits "///// CRITICAL FAILURE /"
    indent_width: int = Field(5, ge=0)

    # ── Placement ─────────────────────────────────────────────────
    log_directory: Optional[str] = None
    default_file_name: Optional[str] = None  # None: the console

    @field_validator("debug_threshold", mode="before")
    @classmethod
    def resolve_threshold(cls, value: int | str) -> int:
        """Accept a level name ("warning") as well as a number."""
        from tasklog.logger.records import resolve_level
        return resolve_level(value)

    @field_validator("log_directory", mode="before")
    @classmethod
    def stringify_directory(cls, value):
        if isinstance(value, Path):
            return str(value)
        return value

    @classmethod
    def from_yaml(cls, path: str | Path) -> "LoggerConfig":
        """Load and validate from a YAML file."""
        path = Path(path)
        return cls.from_yaml_string(path.read_text(encoding="utf-8"))

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "LoggerConfig":
        """Load and validate from a YAML string."""
        data = yaml.safe_load(yaml_string) or {}
        return cls.model_validate(data)

    @classmethod
    def from_dict(cls, data: dict) -> "LoggerConfig":
        """Load and validate from a dict."""
        return cls.model_validate(data)

    def to_dict(self, exclude_none: bool = True) -> dict:
        return self.model_dump(exclude_none=exclude_none)
