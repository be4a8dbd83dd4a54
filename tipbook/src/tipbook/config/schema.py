"""Pydantic models describing the tipbook runtime configuration."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentSettings(BaseModel):
    """Where the corpus lives and how its files are read."""

    model_config = ConfigDict(extra="forbid")

    directory: Optional[str] = None
    pattern: str = "*.tip"
    encoding: str = "utf-8"

    @field_validator("pattern")
    @classmethod
    def _validate_pattern(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content.pattern must not be empty")
        return value


class CheckSettings(BaseModel):
    """Exit policy and optional rules for ``tipbook check``."""

    model_config = ConfigDict(extra="forbid")

    fail_on_warnings: bool = False
    https_only_docs: bool = True


class RenderSettings(BaseModel):
    """Terminal rendering options."""

    model_config = ConfigDict(extra="forbid")

    width: int = Field(default=80, gt=20)


class LoggingSettings(BaseModel):
    """Log threshold shared by the JSON logger and stdlib logging."""

    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class RuntimeConfig(BaseModel):
    """Root configuration loaded from ``tipbook.yaml``."""

    model_config = ConfigDict(extra="forbid")

    version: Literal[1] = 1
    content: ContentSettings = Field(default_factory=ContentSettings)
    checks: CheckSettings = Field(default_factory=CheckSettings)
    render: RenderSettings = Field(default_factory=RenderSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
