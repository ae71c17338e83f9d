"""
Ingestion pipeline configuration.

Delays used by the simulated background ingestion advancement.

Dependencies: pydantic_settings
System role: Ingestion engine timing configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class IngestionSettings(BaseSettings):
    """Timing settings for the ingestion state machine."""

    model_config = SettingsConfigDict(
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    processing_delay_seconds: float = Field(
        default=2.0,
        description="Delay before a queued ingestion moves to PROCESSING",
    )
    completion_delay_seconds: float = Field(
        default=3.0,
        description="Delay before a processing ingestion reaches a terminal state",
    )
    drain_timeout_seconds: float = Field(
        default=10.0,
        description="How long shutdown waits for pending ingestions before cancelling",
    )
