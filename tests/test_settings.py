# tests/test_settings.py
"""
Settings Tests - Unit Tests for Configuration Validation

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- exrate.config.settings (Settings for testing)
- exrate.shared.logging_conf (setup_logging)
"""
import logging

import pytest
from pydantic import ValidationError

from exrate.config.settings import Settings
from exrate.shared.logging_conf import LOG_FILE_NAME, setup_logging


class TestSettings:
    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.http_max_attempts == 3
        assert s.rate_cache_enabled is True
        assert s.rate_cache_max_entries == 0

    def test_admin_username_strips_at(self):
        assert Settings(_env_file=None, ADMIN_USERNAME="@rates_admin").admin_username == "rates_admin"

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, LOG_LEVEL="debug").log_level == "DEBUG"

    @pytest.mark.parametrize("field, value", [
        ("BOT_TOKEN", "not-a-token"),
        ("EXCHANGE_API_URL", "ftp://rates.example.com"),
        ("LOG_LEVEL", "chatty"),
        ("HTTP_MAX_ATTEMPTS", 0),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})


class TestSetupLogging:
    def test_log_dir_creates_rotating_file(self, tmp_path):
        setup_logging(level="INFO", log_dir=tmp_path / "logs", log_stdout=False)
        try:
            logging.getLogger("exrate.test").info("hello")
            assert (tmp_path / "logs" / LOG_FILE_NAME).exists()
        finally:
            logging.basicConfig(handlers=[logging.NullHandler()], force=True)
