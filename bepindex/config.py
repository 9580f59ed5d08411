"""Runtime configuration — env-driven via pydantic-settings.

Reads from a .env file and BEPINDEX_* environment variables.
"""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class IndexSettings(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export BEPINDEX_LOG_LEVEL=DEBUG
        export BEPINDEX_MAX_WORKERS=8

    Or via .env file::

        BEPINDEX_ENVIRONMENT=production
        BEPINDEX_WARN_ON_DANGLING_FILE_SETS=false
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BEPINDEX_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"

    # Shared worker pool for aggregating event streams off the caller's thread
    max_workers: int = 4
    thread_name_prefix: str = "bepindex"

    # Target references to undefined file sets are always dropped;
    # this only picks WARNING (True) or DEBUG (False) for the log line.
    warn_on_dangling_file_sets: bool = True

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


def configure_logging(level: str | None = None) -> None:
    """Apply *level* (default: ``settings.log_level``) to the ``bepindex`` logger."""
    logging.getLogger("bepindex").setLevel((level or settings.log_level).upper())


# Module-level singleton — import as `from bepindex.config import settings`
settings = IndexSettings()
