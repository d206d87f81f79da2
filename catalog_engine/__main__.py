"""Точка входа движка каталога.

Связывает все компоненты системы и выполняет один цикл:
1. Загрузка конфигурации и инициализация логирования.
2. Загрузка словаря категорий (бэкенд или встроенный).
3. Загрузка первой страницы каталога для фильтров по умолчанию
   (или сохранённого пресета "default").
4. Опционально: загрузка товара для редактирования с объединёнными
   связками магазинов (CATALOG_EDIT_PRODUCT_ID).
5. Вывод сводки в stdout в формате JSON.

Запуск: python -m catalog_engine
"""

import asyncio
import json
import sys
from typing import Any

from catalog_engine.config import (
    ConfigValidationError,
    Settings,
    get_logger,
    load_settings,
    set_trace_id,
    setup_logging,
)
from catalog_engine.models import FilterState
from catalog_engine.repositories import SQLiteKeyValueStore
from catalog_engine.services import (
    CatalogService,
    FilterPresetService,
    HttpCatalogApi,
    page_window,
)

logger = get_logger("main")

DEFAULT_PRESET_NAME: str = "default"


def create_store(settings: Settings) -> SQLiteKeyValueStore:
    """Создаёт и инициализирует хранилище состояния интерфейса.

    Args:
        settings: Настройки приложения.

    Returns:
        Инициализированное SQLite-хранилище.
    """
    store = SQLiteKeyValueStore(db_path=settings.database.db_path)
    store.initialize()
    return store


def create_catalog_api(settings: Settings) -> HttpCatalogApi:
    """Создаёт HTTP-клиент API каталога.

    Args:
        settings: Настройки приложения.

    Returns:
        Экземпляр HttpCatalogApi.
    """
    return HttpCatalogApi(settings=settings.api)


def create_catalog_service(api: HttpCatalogApi, settings: Settings) -> CatalogService:
    """Создаёт сервис каталога.

    Args:
        api: Клиент API каталога.
        settings: Настройки приложения.

    Returns:
        Экземпляр CatalogService.
    """
    return CatalogService(api=api, price_ceiling=settings.pipeline.price_ceiling)


def resolve_initial_filters(
    presets: FilterPresetService,
    settings: Settings,
) -> FilterState:
    """Возвращает стартовое состояние фильтров.

    Берёт сохранённый пресет "default", если он есть,
    иначе пустое состояние с размером страницы из настроек.
    """
    saved = presets.load(DEFAULT_PRESET_NAME)
    if saved is not None:
        logger.info("default_preset_applied", preset=DEFAULT_PRESET_NAME)
        return saved
    return FilterState(page_size=settings.pipeline.page_size)


async def run_pipeline(settings: Settings) -> dict[str, Any]:
    """Выполняет один цикл загрузки каталога.

    Гарантирует закрытие HTTP-сессии и хранилища
    через блок try/finally.

    Args:
        settings: Полностью валидированные настройки приложения.

    Returns:
        Сводка для вывода в stdout.
    """
    store = create_store(settings)
    api = create_catalog_api(settings)
    summary: dict[str, Any] = {}

    try:
        service = create_catalog_service(api, settings)
        presets = FilterPresetService(store)

        # === ЭТАП 1: Словарь категорий ===
        with logger.stage("vocabulary") as stage:
            vocabulary = await service.load_vocabulary()
            summary["categories"] = {
                "source": vocabulary.source,
                "slugs": vocabulary.slugs(),
            }
            stage["source"] = vocabulary.source

        # === ЭТАП 2: Первая страница каталога ===
        filters = resolve_initial_filters(presets, settings)
        with logger.stage("catalog_page", page=filters.page) as stage:
            page = await service.load_page(filters)
            if page is not None:
                summary["catalog"] = {
                    "products": [product.to_dict() for product in page.products],
                    "pagination": page.pagination.to_dict(),
                    "page_window": page_window(
                        page.pagination.page, page.pagination.total_pages
                    ),
                    "brands_count": len(page.brands),
                }
                stage["products_count"] = len(page.products)

        # === ЭТАП 3: Товар для редактирования ===
        edit_id = settings.pipeline.edit_product_id
        if edit_id:
            with logger.stage("edit_load", product_id=edit_id):
                product = await service.load_product_for_edit(edit_id)
                summary["edit_product"] = product.to_dict() if product else None
        else:
            logger.debug("edit_load_skipped", reason="no_product_id")

    finally:
        await api.close()
        store.close()
        logger.info("all_resources_closed")

    return summary


def main() -> None:
    """Главная функция приложения.

    Загружает конфигурацию, настраивает логирование,
    устанавливает trace_id и запускает асинхронный цикл.
    Обрабатывает все верхнеуровневые ошибки.
    """
    try:
        settings = load_settings()
    except ConfigValidationError as e:
        print(f"\n[ОШИБКА КОНФИГУРАЦИИ]\n{e}")
        print("\nПроверьте файл .env (см. .env.example для справки).")
        sys.exit(1)

    setup_logging(
        level=settings.log.level,
        log_file_path=settings.log.file_path,
    )

    trace_id = set_trace_id()

    logger.info(
        "application_started",
        trace_id=trace_id,
        api_url=settings.api.base_url,
        page_size=settings.pipeline.page_size,
        price_ceiling=settings.pipeline.price_ceiling,
    )

    try:
        summary = asyncio.run(run_pipeline(settings))
    except KeyboardInterrupt:
        logger.info("application_interrupted_by_user")
        print("\nПрограмма остановлена пользователем (Ctrl+C).")
        return
    except Exception as e:
        logger.critical(
            "application_fatal_error",
            exc_info=True,
            error=str(e),
            error_type=type(e).__name__,
        )
        print(f"\nКритическая ошибка: {e}")
        sys.exit(1)

    print(json.dumps(summary, ensure_ascii=False, indent=2))
    logger.info("application_finished", trace_id=trace_id)


if __name__ == "__main__":
    main()
