"""
Gallery configuration.

This module provides settings for the gallery publisher loaded from
environment variables.
"""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Find .env file in project root
_env_file = Path(__file__).parent.parent.parent.parent / ".env"


class GallerySettings(BaseSettings):
    """
    Gallery publisher configuration from environment variables.

    Settings are prefixed with GALLERY_ in environment, except the GitHub
    values which use the names CI runners already export.
    """

    model_config = SettingsConfigDict(
        env_prefix="GALLERY_",
        env_file=str(_env_file) if _env_file.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Commit status reporting (disabled without a token)
    github_token: str | None = Field(
        default=None, validation_alias=AliasChoices("GH_TOKEN", "GALLERY_GITHUB_TOKEN")
    )
    github_repository: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_REPOSITORY", "GALLERY_GITHUB_REPOSITORY"),
    )  # owner/repo fallback when source.json omits it
    github_api_url: str = "https://api.github.com"
    http_timeout: float = Field(default=30.0, gt=0, le=300)

    feed_file_name: str = "atom.xml"
    log_level: str = "INFO"

    @property
    def notifications_enabled(self) -> bool:
        return bool(self.github_token)
