"""Reader configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator


class ReaderConfig(BaseModel):
    """QVD reader configuration - supports YAML and ENV."""

    max_workers: Optional[int] = Field(
        None,
        ge=1,
        description="Size of the field decoding pool (None = min(32, cpu + 4))",
    )
    log_level: str = Field(
        "INFO",
        description="Log level name: DEBUG, INFO, WARNING, ERROR",
    )
    log_json: bool = Field(
        False,
        description="Render logs as JSON instead of console output",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {value}")
        return level

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ReaderConfig":
        with open(path, "r", encoding="utf-8") as f:
            data: Any = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        # Settings may live at top level or under a "reader" section
        section = data.get("reader", data)
        if not isinstance(section, dict):
            raise ValueError(f"Section 'reader' in {path} must be a mapping")
        return cls(**section)

    @classmethod
    def from_env(cls) -> "ReaderConfig":
        workers_raw = os.getenv("QVD_MAX_WORKERS", "")
        return cls(
            max_workers=int(workers_raw) if workers_raw.strip() else None,
            log_level=os.getenv("QVD_LOG_LEVEL", "INFO"),
            log_json=os.getenv("QVD_LOG_JSON", "false").lower() == "true",
        )


__all__ = ["ReaderConfig"]
