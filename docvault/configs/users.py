"""
User registry configuration.

Bootstrap account created at startup so that an ADMIN exists before anyone
can be promoted through the API.

Dependencies: pydantic_settings
System role: User registry bootstrap configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class UserSettings(BaseSettings):
    """Bootstrap admin settings (USERS_ prefix)."""

    model_config = SettingsConfigDict(
        env_prefix="USERS_",
        case_sensitive=False,
        extra="ignore",
    )

    bootstrap_admin_email: str | None = Field(
        default=None,
        description="Email of the ADMIN ensured at startup; unset skips the bootstrap",
    )
    bootstrap_admin_name: str = Field(
        default="DocVault Administrator",
        description="Full name used when the bootstrap ADMIN is first created",
    )
