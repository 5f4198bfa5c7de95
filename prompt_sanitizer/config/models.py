"""Configuration models for prompt-sanitizer."""

from __future__ import annotations

import codecs

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class IOConfig(BaseModel):
    """Input/output file handling."""

    encoding: str = Field(default="utf-8", description="Text encoding for input and output files.")

    @field_validator("encoding")
    @classmethod
    def _known_codec(cls, value: str) -> str:
        normalized = value.strip()
        try:
            codecs.lookup(normalized)
        except LookupError as exc:
            raise ValueError(f"unknown encoding: {value}") from exc
        return normalized


class ReportConfig(BaseModel):
    """Verbose change report settings."""

    max_changed_lines: int = Field(default=0, ge=0, description="Cap on changed lines shown; 0 shows all.")


class LoggingConfig(BaseModel):
    """Diagnostic logging settings."""

    level: str = Field(default="WARNING", description="Minimum diagnostic log level: DEBUG, INFO, WARNING or ERROR.")

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"level must be one of {'/'.join(_LOG_LEVELS)}")
        return normalized


class PromptSanitizerConfig(BaseSettings):
    """Root configuration model for prompt-sanitizer."""

    io: IOConfig = Field(default_factory=IOConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="PROMPT_SANITIZER_",
        env_nested_delimiter="__",
        extra="ignore",
    )
