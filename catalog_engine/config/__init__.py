"""Пакет конфигурации движка каталога.

Предоставляет централизованный доступ к настройкам и логированию:
    from catalog_engine.config import load_settings, get_logger, setup_logging
"""

from catalog_engine.config.logger import (
    ContextLogger,
    get_logger,
    get_trace_id,
    set_trace_id,
    setup_logging,
)
from catalog_engine.config.settings import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_PRICE_CEILING,
    CatalogApiSettings,
    ConfigValidationError,
    DatabaseSettings,
    LogSettings,
    PipelineSettings,
    Settings,
    load_settings,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_PRICE_CEILING",
    "CatalogApiSettings",
    "ConfigValidationError",
    "ContextLogger",
    "DatabaseSettings",
    "LogSettings",
    "PipelineSettings",
    "Settings",
    "get_logger",
    "get_trace_id",
    "load_settings",
    "set_trace_id",
    "setup_logging",
]
