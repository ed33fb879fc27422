from __future__ import annotations

import os
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """routedoc settings, read from ROUTEDOC_* env vars or .env.routedoc"""

    model_config = SettingsConfigDict(  # type: ignore[misc]
        env_prefix="ROUTEDOC_",
        env_file=os.environ.get("ROUTEDOC_ENV_FILE", ".env.routedoc"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Listing
    api_version: str = "1.0"
    base_path: str = "/"

    # Where the documentation itself is served; never documented
    docs_path: str = "/api-docs"

    # Resource exclusion: keys containing the marker are dropped unless the
    # owner's dotted name contains the trusted marker
    excluded_path_marker: str = "oauth"
    trusted_namespace_marker: str = ""

    # Packages scanned for model classes
    model_packages: list[str] = []

    # Logging
    log_level: str = "INFO"
    log_categories: str = ""

    @property
    def log_category_list(self) -> list[str]:
        if not self.log_categories:
            return []
        return [c.strip() for c in self.log_categories.split(",") if c.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
