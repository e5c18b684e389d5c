"""Pydantic configuration models for bidder round resolution."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class ResolutionConfig(BaseModel):
    """Round resolution parameters."""

    annualization_factor: int = Field(default=12, ge=1)


class DatabaseConfig(BaseModel):
    """Database configuration."""

    url: str = "sqlite:///bidderround.db"
    echo: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    json_output: bool = True
    log_dir: str = "logs"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid}")
        return upper


class AppConfig(BaseModel):
    """Top-level application configuration."""

    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        return cls.model_validate(data)
