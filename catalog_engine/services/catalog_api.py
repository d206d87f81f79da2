"""Клиент API каталога — граница ввода-вывода движка.

Определяет протокол CatalogApi, через который ядро получает
сырые данные, и его HTTP-реализацию на aiohttp. Ядро не повторяет
неудачные запросы: ошибка транспорта или статус не 2xx
превращается в CatalogApiError и передаётся вызывающему коду.

Паттерн Strategy: в тестах и в других окружениях вместо
HttpCatalogApi подставляется любая реализация протокола.
"""

import asyncio
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from catalog_engine.config import CatalogApiSettings, get_logger
from catalog_engine.models import FilterState

logger = get_logger("catalog_api")


class CatalogApiError(Exception):
    """Ошибка при обращении к API каталога.

    Выбрасывается при сетевых ошибках, статусах не 2xx
    и ответах, которые не являются JSON.

    Attributes:
        status: HTTP-статус ответа (None для сетевых ошибок).
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class CatalogApi(Protocol):
    """Контракт источника данных каталога."""

    async def fetch_catalog_page(self, filters: FilterState) -> Mapping[str, Any]:
        """Страница каталога: {products, pagination, brands, seo}."""
        ...

    async def fetch_product_detail(self, product_id: str) -> Any:
        """Детальный ответ товара (может содержать product_stores)."""
        ...

    async def fetch_product_stores(self, product_id: str) -> Any:
        """Связки товара с магазинами из отдельного эндпоинта."""
        ...

    async def get_category_vocabulary(self) -> Any:
        """Словарь категорий [{slug, name, parentId}] или None."""
        ...


class HttpCatalogApi:
    """HTTP-реализация CatalogApi поверх aiohttp.

    Attributes:
        _settings: Настройки подключения (URL, токен, таймаут).
        _session: Общая aiohttp-сессия для переиспользования соединений.
    """

    def __init__(self, settings: CatalogApiSettings) -> None:
        self._settings = settings
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Возвращает активную сессию, создавая её при первом вызове."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._settings.timeout),
                headers=self._build_headers(),
            )
        return self._session

    def _build_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._settings.api_token:
            headers["Authorization"] = f"Bearer {self._settings.api_token}"
        return headers

    async def _get_json(
        self,
        path: str,
        params: list[tuple[str, str]] | None = None,
    ) -> Any:
        """Выполняет GET-запрос и возвращает разобранный JSON.

        Args:
            path: Путь относительно base_url (начинается с '/').
            params: Параметры запроса; ключи могут повторяться.

        Raises:
            CatalogApiError: При сетевой ошибке, статусе не 2xx
                или невалидном JSON.
        """
        session = await self._get_session()
        url = f"{self._settings.base_url}{path}"

        try:
            async with session.get(url, params=params) as response:
                if response.status < 200 or response.status >= 300:
                    body = await response.text()
                    raise CatalogApiError(
                        f"API каталога вернул статус {response.status} "
                        f"для {path}: {body[:300]}",
                        status=response.status,
                    )
                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise CatalogApiError(
                        f"API каталога вернул не JSON для {path}",
                        status=response.status,
                    ) from e
        except aiohttp.ClientError as e:
            logger.error("catalog_request_failed", path=path, error=str(e))
            raise CatalogApiError(f"Сетевая ошибка при запросе {path}: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error("catalog_request_timeout", path=path, timeout=self._settings.timeout)
            raise CatalogApiError(f"Таймаут запроса {path}") from e

        logger.debug("catalog_request_completed", path=path)
        return data

    async def fetch_catalog_page(self, filters: FilterState) -> Mapping[str, Any]:
        data = await self._get_json("/items", params=filters.to_query_params())
        return data if isinstance(data, Mapping) else {"products": data}

    async def fetch_product_detail(self, product_id: str) -> Any:
        return await self._get_json(f"/items/{product_id}")

    async def fetch_product_stores(self, product_id: str) -> Any:
        return await self._get_json(f"/items/{product_id}/stores")

    async def get_category_vocabulary(self) -> Any:
        data = await self._get_json("/categories")
        if isinstance(data, Mapping):
            return data.get("items") or data.get("data") or data.get("categories")
        return data

    async def close(self) -> None:
        """Закрывает aiohttp-сессию и освобождает ресурсы."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None
            logger.info("catalog_session_closed")
