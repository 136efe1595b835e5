"""Application configuration for the content backend.

Values are read from ``DELIGHTS_CMS_*`` environment variables. The defaults
target a local SQLite document store and a filesystem blob store under
``./var`` so that the admin API can run without external services.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_media_root() -> Path:
    return Path("./var/media")


class AppConfig(BaseSettings):
    """Pydantic settings container for stores and repositories."""

    model_config = SettingsConfigDict(env_prefix="DELIGHTS_CMS_")

    database_url: str = Field(
        default="sqlite+aiosqlite:///./var/cms.db",
        description="Async SQLAlchemy URL of the document database.",
    )
    media_root: Path = Field(
        default_factory=_default_media_root,
        description="Filesystem root used by the blob store.",
    )
    public_base_url: str = Field(
        default="http://localhost:8000/media",
        description="Base of retrievable blob URLs (``<base>/o/<path>?alt=media``).",
    )
    upload_concurrency: int = Field(
        default=4,
        ge=1,
        description="Maximum number of concurrent uploads during fan-out.",
    )
    escalate_cleanup_failures: bool = Field(
        default=False,
        description="Log best-effort blob deletion failures at ERROR instead of WARNING.",
    )
    seed_on_startup: bool = Field(
        default=False,
        description="Populate default catalog data when the HTTP app starts.",
    )
    log_level: str = Field(default="INFO", description="Root log level.")

    @classmethod
    def build_default(cls) -> "AppConfig":
        """Construct configuration from the environment and defaults."""

        return cls()


__all__ = ["AppConfig"]
