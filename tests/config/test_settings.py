"""Tests for RefinekitSettings — env vars, defaults, and the process cache."""

import pytest
from pydantic import ValidationError

from refinekit.config.settings import RefinekitSettings, get_settings, reset_settings


class TestRefinekitSettingsDefaults:
    def test_all_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """With no env vars, all fields use code defaults."""
        for name in ("VERBOSE", "LOG_JSON", "REGEX_CACHE_SIZE", "CHECK_ENUM_DISTINCT"):
            monkeypatch.delenv(f"REFINEKIT_{name}", raising=False)
        settings = RefinekitSettings()
        assert settings.verbose is False
        assert settings.log_json is False
        assert settings.regex_cache_size == 256
        assert settings.check_enum_distinct is False

    def test_frozen(self) -> None:
        settings = RefinekitSettings()
        with pytest.raises(Exception):
            settings.verbose = True  # type: ignore[misc]


class TestEnvSource:
    def test_env_overrides_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REFINEKIT_VERBOSE", "1")
        monkeypatch.setenv("REFINEKIT_REGEX_CACHE_SIZE", "8")
        settings = RefinekitSettings()
        assert settings.verbose is True
        assert settings.regex_cache_size == 8
        assert settings.log_json is False  # default preserved

    def test_init_kwargs_beat_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REFINEKIT_LOG_JSON", "true")
        assert RefinekitSettings(log_json=False).log_json is False

    def test_cache_size_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            RefinekitSettings(regex_cache_size=0)


class TestSettingsCache:
    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_reset_rereads_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("REFINEKIT_CHECK_ENUM_DISTINCT", raising=False)
        assert get_settings().check_enum_distinct is False
        monkeypatch.setenv("REFINEKIT_CHECK_ENUM_DISTINCT", "true")
        assert get_settings().check_enum_distinct is False
        reset_settings()
        assert get_settings().check_enum_distinct is True
