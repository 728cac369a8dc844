"""Tests for application settings."""

from elixhauser.core.config import Settings


class TestSettings:
    """Test pydantic-settings configuration."""

    def test_defaults(self) -> None:
        """Test default scoring configuration."""
        settings = Settings()
        assert settings.default_method == "van_walraven"
        assert settings.default_include_cardiac_arrhythmia is False
        assert settings.api_v1_prefix == "/api/v1"

    def test_environment_override(self, monkeypatch) -> None:
        """Test values are read from the environment, case-insensitively."""
        monkeypatch.setenv("DEFAULT_METHOD", "sid_30")
        monkeypatch.setenv("default_include_cardiac_arrhythmia", "true")
        settings = Settings()
        assert settings.default_method == "sid_30"
        assert settings.default_include_cardiac_arrhythmia is True
