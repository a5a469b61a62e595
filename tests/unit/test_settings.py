"""
Unit tests for configuration loading.
"""

import pytest

from shared.config import Environment, LogLevel, Settings, StoreBackend


class TestSettings:
    """Tests for environment-driven settings."""

    def test_testing_environment(self) -> None:
        settings = Settings()

        assert settings.environment == Environment.TESTING
        assert settings.is_testing
        assert settings.store.backend == StoreBackend.MEMORY

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.service_name == "warranty-registry"
        assert settings.warranty.code_max_attempts == 5
        assert settings.warranty.expiring_soon_days == 30
        assert settings.mongodb.db == "warranty_registry"

    def test_nested_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STORE_BACKEND", "mongodb")
        monkeypatch.setenv("WARRANTY_EXPIRING_SOON_DAYS", "14")
        monkeypatch.setenv("MONGODB_HOST", "mongo.internal")

        settings = Settings()

        assert settings.store.backend == StoreBackend.MONGODB
        assert settings.warranty.expiring_soon_days == 14
        assert "@mongo.internal:27017/warranty_registry" in settings.mongodb.uri

    def test_log_level_case_insensitive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Settings().log_level == LogLevel.DEBUG

    def test_cors_origins_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
        assert Settings().cors.origins_list == ["https://a.example", "https://b.example"]

    def test_only_used_settings_exposed(self) -> None:
        assert "project_root" not in Settings.model_fields
        assert not hasattr(Settings, "is_development")
        assert Settings().is_production is False
