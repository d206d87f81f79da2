"""Тесты загрузки конфигурации."""

import pytest

from catalog_engine.config import ConfigValidationError, load_settings
from catalog_engine.config import settings as settings_module

ENV_VARS = (
    "CATALOG_API_URL",
    "CATALOG_API_TOKEN",
    "CATALOG_API_TIMEOUT",
    "PAGE_SIZE",
    "PRICE_CEILING",
    "SEARCH_DEBOUNCE",
    "FILTER_DEBOUNCE",
    "CATALOG_EDIT_PRODUCT_ID",
    "PRESETS_DB_PATH",
    "LOG_LEVEL",
    "LOG_FILE_PATH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Изолирует тесты от .env и окружения разработчика."""
    monkeypatch.setattr(settings_module, "_load_env", lambda: None)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    """Валидация и значения по умолчанию."""

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("CATALOG_API_URL", "https://api.example.com/api/")

        settings = load_settings()

        assert settings.api.base_url == "https://api.example.com/api"
        assert settings.api.api_token == ""
        assert settings.api.timeout == 30.0
        assert settings.pipeline.page_size == 24
        assert settings.pipeline.price_ceiling == 1000.0
        assert settings.pipeline.search_debounce == 0.3
        assert settings.pipeline.filter_debounce == 0.5
        assert settings.pipeline.edit_product_id == ""
        assert settings.database.db_path == "data/catalog_presets.db"
        assert settings.log.level == "INFO"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("CATALOG_API_URL", "http://localhost:8080")
        monkeypatch.setenv("CATALOG_API_TOKEN", " secret ")
        monkeypatch.setenv("PAGE_SIZE", "12")
        monkeypatch.setenv("PRICE_CEILING", "5000")
        monkeypatch.setenv("CATALOG_EDIT_PRODUCT_ID", "p-42")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = load_settings()

        assert settings.api.api_token == "secret"
        assert settings.pipeline.page_size == 12
        assert settings.pipeline.price_ceiling == 5000.0
        assert settings.pipeline.edit_product_id == "p-42"
        assert settings.log.level == "DEBUG"

    def test_missing_url(self):
        with pytest.raises(ConfigValidationError, match="CATALOG_API_URL"):
            load_settings()

    def test_all_errors_reported_together(self, monkeypatch):
        monkeypatch.setenv("CATALOG_API_URL", "ftp://example.com")
        monkeypatch.setenv("PAGE_SIZE", "many")
        monkeypatch.setenv("SEARCH_DEBOUNCE", "-1")
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_settings()

        message = str(exc_info.value)
        assert "CATALOG_API_URL" in message
        assert "PAGE_SIZE" in message
        assert "SEARCH_DEBOUNCE" in message
        assert "LOUD" in message
