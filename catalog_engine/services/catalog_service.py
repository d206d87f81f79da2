"""Оркестрация конвейера каталога.

Связывает источник данных (CatalogApi) с чистыми этапами:
нормализацией, слиянием связок с магазинами, фильтрацией,
сортировкой и пагинацией.

Основные сценарии:
    - load_product_for_edit: товар для редактирования с объединёнными
      связками из детального ответа и эндпоинта магазинов;
    - load_page: серверная страница каталога, где побеждает
      последний запрос;
    - query: локальный конвейер фильтр → сортировка → страница.
"""

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from catalog_engine.config import DEFAULT_PRICE_CEILING, get_logger
from catalog_engine.models import (
    CatalogPage,
    FilterState,
    NormalizedProduct,
    QueryResult,
)
from catalog_engine.services.catalog_api import CatalogApi, CatalogApiError
from catalog_engine.services.category_normalizer import (
    CategoryVocabulary,
    detect_search_facet,
)
from catalog_engine.services.filter_engine import FacetFilterEngine
from catalog_engine.services.paginator import paginate, resolve_pagination
from catalog_engine.services.reconciler import merge
from catalog_engine.services.record_normalizer import (
    normalize_product,
    normalize_products,
    normalize_store_associations,
    unwrap_items,
    unwrap_payload,
)
from catalog_engine.services.sorter import sort_products

logger = get_logger("catalog_service")


class CatalogService:
    """Сервис каталога поверх внедрённого CatalogApi.

    Attributes:
        _api: Источник сырых данных каталога.
        _engine: Движок фасетной фильтрации.
        _request_seq: Номер последнего отправленного запроса страницы.
        _latest_fingerprint: Отпечаток фильтров последнего запроса.
    """

    def __init__(
        self,
        api: CatalogApi,
        price_ceiling: float = DEFAULT_PRICE_CEILING,
    ) -> None:
        self._api = api
        self._engine = FacetFilterEngine(price_ceiling=price_ceiling)
        self._request_seq = 0
        self._latest_fingerprint: str | None = None

    @property
    def engine(self) -> FacetFilterEngine:
        return self._engine

    @property
    def latest_fingerprint(self) -> str | None:
        return self._latest_fingerprint

    async def load_product_for_edit(self, product_id: str) -> NormalizedProduct | None:
        """Загружает товар для редактирования.

        Детальный ответ и список магазинов запрашиваются параллельно.
        Ошибка детального запроса пробрасывается; ошибка запроса
        магазинов логируется и трактуется как пустой список.

        Args:
            product_id: Идентификатор товара.

        Returns:
            Товар с объединёнными связками или None, если детальный
            ответ не содержит пригодной записи.

        Raises:
            CatalogApiError: Если не удалось получить детальный ответ.
        """
        detail_result, stores_result = await asyncio.gather(
            self._api.fetch_product_detail(product_id),
            self._api.fetch_product_stores(product_id),
            return_exceptions=True,
        )

        if isinstance(detail_result, BaseException):
            logger.error(
                "product_detail_failed",
                product_id=product_id,
                error=str(detail_result),
            )
            raise detail_result

        if isinstance(stores_result, BaseException):
            if not isinstance(stores_result, Exception):
                raise stores_result
            logger.warning(
                "stores_source_failed",
                product_id=product_id,
                error=str(stores_result),
                error_type=type(stores_result).__name__,
            )
            stores_result = []

        product = normalize_product(unwrap_payload(detail_result))
        if product is None:
            logger.warning("product_edit_unusable", product_id=product_id)
            return None

        secondary = normalize_store_associations(unwrap_items(stores_result))
        merged = merge(product.stores, secondary)

        logger.info(
            "product_edit_loaded",
            product_id=product.id,
            detail_stores=len(product.stores),
            endpoint_stores=len(secondary),
            merged_stores=len(merged),
        )
        return replace(product, stores=tuple(merged))

    async def load_page(self, filters: FilterState) -> CatalogPage | None:
        """Загружает страницу каталога для состояния фильтров.

        Каждый вызов получает порядковый номер. Если за время
        ожидания ответа был отправлен более новый запрос, ответ
        отбрасывается.

        Args:
            filters: Текущее состояние фильтров.

        Returns:
            CatalogPage или None, если ответ (или ошибка) устарел.

        Raises:
            CatalogApiError: Если актуальный запрос к API завершился ошибкой.
        """
        self._request_seq += 1
        seq = self._request_seq
        fingerprint = filters.fingerprint()
        self._latest_fingerprint = fingerprint

        try:
            response = await self._api.fetch_catalog_page(filters)
        except CatalogApiError as e:
            if seq != self._request_seq:
                logger.debug(
                    "stale_page_failure_discarded",
                    request_seq=seq,
                    latest_seq=self._request_seq,
                    error=str(e),
                )
                return None
            raise

        if seq != self._request_seq:
            logger.debug(
                "stale_page_discarded",
                request_seq=seq,
                latest_seq=self._request_seq,
            )
            return None

        payload: Mapping[str, Any] = response if isinstance(response, Mapping) else {}
        raw_products = payload.get("products")
        if raw_products is None:
            raw_products = unwrap_items(response)
        products = tuple(normalize_products(unwrap_items(raw_products)))

        pagination = resolve_pagination(
            payload.get("pagination"), filters.page, products, filters.page_size
        )
        brands = payload.get("brands")
        seo = payload.get("seo")

        logger.info(
            "catalog_page_loaded",
            page=pagination.page,
            total_pages=pagination.total_pages,
            products_count=len(products),
        )
        return CatalogPage(
            products=products,
            pagination=pagination,
            brands=tuple(brands) if isinstance(brands, (list, tuple)) else (),
            seo=seo if isinstance(seo, Mapping) else None,
            fingerprint=fingerprint,
        )

    def query(
        self,
        products: Iterable[NormalizedProduct],
        filters: FilterState,
    ) -> QueryResult:
        """Локальный конвейер: фильтрация, сортировка, пагинация.

        Args:
            products: Полная коллекция нормализованных товаров.
            filters: Текущее состояние фильтров.
        """
        filtered = self._engine.apply(products, filters)
        ordered = sort_products(filtered, filters.sort)
        visible, meta = paginate(ordered, filters.page, filters.page_size)
        return QueryResult(visible_products=visible, pagination=meta)

    def apply_search_text(self, filters: FilterState, text: str) -> FilterState:
        """Применяет поисковую строку к состоянию фильтров.

        Запрос, совпадающий с названием цвета или категории,
        включает соответствующий фасет вместо текстового поиска.
        """
        detected = detect_search_facet(text)
        if detected is None:
            return filters.with_search(text)

        facet, value = detected
        logger.debug("search_mapped_to_facet", facet=facet, value=value)
        cleared = filters.with_search("")
        if value in getattr(cleared, facet):
            return cleared
        return cleared.toggle(facet, value)

    async def load_vocabulary(self) -> CategoryVocabulary:
        """Загружает словарь категорий; при ошибке API — встроенный."""
        try:
            raw = await self._api.get_category_vocabulary()
        except CatalogApiError as e:
            logger.warning("category_vocabulary_failed", error=str(e))
            return CategoryVocabulary.builtin()
        return CategoryVocabulary.from_backend(raw)
