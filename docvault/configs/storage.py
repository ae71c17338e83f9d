"""
Blob storage configuration.

Settings for the local storage root where uploaded document files live.

Dependencies: pydantic_settings
System role: Storage adapter configuration
"""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Settings for local document blob storage."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        case_sensitive=False,
        extra="ignore",
    )

    root: str = Field(
        default_factory=os.getcwd,
        description="Absolute storage root; persisted file paths are relative to it",
    )
    upload_dir: str = Field(
        default="uploads",
        description="Directory under the root that receives uploaded files",
    )
    allowed_extensions: set[str] = Field(
        default={"pdf", "docx"},
        description="File extensions accepted on upload",
    )
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum accepted upload size in bytes",
    )
