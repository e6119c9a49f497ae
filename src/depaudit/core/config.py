"""Configuration management for depaudit.

Loads configuration from environment variables using Pydantic. Provides
sensible defaults for all settings while allowing override via environment.

Provides:
- Config: Pydantic model with all application settings
- load_config: Factory function to create Config instance
"""

import os

from pydantic import BaseModel, Field

from depaudit.core.ci import is_ci


class Config(BaseModel):
    """Application configuration loaded from environment.

    Attributes:
        api_token: API token for the vulnerability service (DEPAUDIT_TOKEN)
        org: Default organisation when --org is not given (DEPAUDIT_ORG)
        root_url: Base URL for vulnerability info links (DEPAUDIT_API)
        engine_command: Scan engine binary name or path (DEPAUDIT_ENGINE)
        engine_timeout: Seconds allowed per engine invocation
        support_email: Address shown when projects fail to test
        is_ci: Whether we run under continuous integration
    """

    # API
    api_token: str = Field(default_factory=lambda: os.getenv("DEPAUDIT_TOKEN", ""))
    org: str | None = Field(default_factory=lambda: os.getenv("DEPAUDIT_ORG") or None)
    root_url: str = Field(
        default_factory=lambda: os.getenv("DEPAUDIT_API", "https://depaudit.io").rstrip("/")
    )

    # Scan engine
    engine_command: str = Field(
        default_factory=lambda: os.getenv("DEPAUDIT_ENGINE", "depaudit-engine")
    )
    engine_timeout: int = Field(
        default_factory=lambda: int(os.getenv("DEPAUDIT_ENGINE_TIMEOUT", "300"))
    )

    support_email: str = Field(default="support@depaudit.io")
    is_ci: bool = Field(default_factory=is_ci)


def load_config() -> Config:
    """Load configuration from the environment.

    Returns:
        Populated Config instance
    """
    return Config()
