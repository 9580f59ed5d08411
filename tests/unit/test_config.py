"""Tests for runtime settings — env-driven configuration."""

from __future__ import annotations

import logging

from bepindex.config import IndexSettings, configure_logging


class TestIndexSettings:
    def test_defaults(self):
        settings = IndexSettings()
        assert settings.environment == "development"
        assert settings.log_level == "INFO"
        assert settings.max_workers == 4
        assert settings.warn_on_dangling_file_sets is True

    def test_is_production_false_by_default(self):
        assert IndexSettings().is_production is False

    def test_is_production_when_set(self):
        assert IndexSettings(environment="production").is_production is True

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("BEPINDEX_MAX_WORKERS", "16")
        monkeypatch.setenv("BEPINDEX_WARN_ON_DANGLING_FILE_SETS", "false")
        settings = IndexSettings()
        assert settings.max_workers == 16
        assert settings.warn_on_dangling_file_sets is False


class TestConfigureLogging:
    def test_sets_package_level(self):
        logger = logging.getLogger("bepindex")
        previous = logger.level
        try:
            configure_logging("debug")
            assert logger.level == logging.DEBUG
        finally:
            logger.setLevel(previous)
