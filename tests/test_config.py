"""
tests/test_config.py - Engine settings
"""

import logging

import pytest
from pydantic import ValidationError

from saturation import SaturationSettings, configure_logging, get_settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("MAX_ROUNDS", "MAX_FACTS", "BOTTOM_PREDICATE", "EXHAUSTIVE_MATCHING", "LOG_LEVEL"):
            monkeypatch.delenv(f"SATURATION_{name}", raising=False)
        settings = SaturationSettings(_env_file=None)
        assert settings.max_rounds == 1000
        assert settings.max_facts == 100_000
        assert settings.bottom_predicate == "bottom"
        assert settings.exhaustive_matching is False
        assert settings.log_level == "WARNING"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("SATURATION_MAX_ROUNDS", "5")
        monkeypatch.setenv("SATURATION_EXHAUSTIVE_MATCHING", "true")
        settings = SaturationSettings(_env_file=None)
        assert settings.max_rounds == 5
        assert settings.exhaustive_matching is True

    @pytest.mark.parametrize("field", ["max_rounds", "max_facts"])
    def test_ceiling_must_be_positive(self, field):
        with pytest.raises(ValidationError):
            SaturationSettings(_env_file=None, **{field: 0})

    def test_ceiling_may_be_disabled(self):
        assert SaturationSettings(_env_file=None, max_rounds=None).max_rounds is None

    def test_log_level_normalised(self):
        assert SaturationSettings(_env_file=None, log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            SaturationSettings(_env_file=None, log_level="chatty")

    def test_get_settings_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()


class TestLogging:

    def test_configure_logging(self):
        logger = configure_logging(SaturationSettings(_env_file=None, log_level="INFO"))
        assert logger.name == "saturation"
        assert logger.level == logging.INFO
        logger.setLevel(logging.NOTSET)
