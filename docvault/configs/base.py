"""
Root DocVault settings.

Process-wide switches read from the environment or a local .env file. The
domain config modules (database, storage, ingestion, users) are nested
under Settings and read their own prefixed variables.

Dependencies: pydantic_settings
System role: Environment and logging switches for the service
"""

import logging
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Environment name, debug flag and root log level."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "test", "staging", "production"] = Field(
        default="development",
        description="Deployment environment DocVault runs in",
    )
    debug: bool = Field(
        default=False,
        description="Return FastAPI debug tracebacks (never enable in production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level
