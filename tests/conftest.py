"""Общие фикстуры тестов движка каталога."""

import asyncio
from collections.abc import Mapping
from typing import Any

import pytest

from catalog_engine.models import FilterState, NormalizedProduct


class FakeCatalogApi:
    """Подставная реализация протокола CatalogApi.

    Ответы задаются заранее; исключение в качестве ответа
    выбрасывается при вызове. Для load_page можно задать задержку
    по номеру страницы, чтобы воспроизвести гонку запросов.
    """

    def __init__(
        self,
        detail: Any = None,
        stores: Any = None,
        vocabulary: Any = None,
        pages: Mapping[int, Any] | None = None,
        delays: Mapping[int, float] | None = None,
    ) -> None:
        self.detail = detail
        self.stores = stores
        self.vocabulary = vocabulary
        self.pages = dict(pages or {})
        self.delays = dict(delays or {})
        self.page_requests: list[FilterState] = []

    @staticmethod
    def _resolve(value: Any) -> Any:
        if isinstance(value, BaseException):
            raise value
        return value

    async def fetch_catalog_page(self, filters: FilterState) -> Mapping[str, Any]:
        self.page_requests.append(filters)
        await asyncio.sleep(self.delays.get(filters.page, 0))
        return self._resolve(self.pages.get(filters.page, {"products": []}))

    async def fetch_product_detail(self, product_id: str) -> Any:
        return self._resolve(self.detail)

    async def fetch_product_stores(self, product_id: str) -> Any:
        return self._resolve(self.stores)

    async def get_category_vocabulary(self) -> Any:
        return self._resolve(self.vocabulary)


def make_product(product_id: str, **overrides: Any) -> NormalizedProduct:
    """Товар с разумными значениями по умолчанию."""
    defaults: dict[str, Any] = {
        "name": f"Product {product_id}",
        "category": "shoes",
        "price": 100.0,
    }
    defaults.update(overrides)
    return NormalizedProduct(id=product_id, **defaults)


@pytest.fixture
def catalog() -> list[NormalizedProduct]:
    """Небольшой каталог для проверки фильтров, сортировки и пагинации."""
    return [
        make_product(
            "1",
            name="Runner Sneakers",
            category="shoes",
            color="Black",
            gender="men",
            brand="Stride",
            brand_id="b1",
            price=120.0,
            materials=("leather",),
            sizes=("41", "42"),
        ),
        make_product(
            "2",
            name="Trail Boots",
            category="shoes",
            color="Brown",
            gender="women",
            brand="Peak",
            brand_id="b2",
            price=180.0,
            materials=("suede", "rubber"),
            sizes=("38",),
        ),
        make_product(
            "3",
            name="Basic Tee",
            category="T-shirts",
            color="White",
            gender="unisex",
            brand="Stride",
            brand_id="b1",
            price=25.0,
            materials=("cotton",),
            sizes=("M", "L"),
        ),
        make_product(
            "4",
            name="Élan Hoodie",
            category="hoodies",
            color="Gray",
            brand="Peak",
            brand_id="b2",
            price=None,
            description="Warm fleece hoodie",
        ),
        make_product(
            "5",
            name="Court Shoes",
            category="shoes",
            color="White",
            gender="women",
            price=140.0,
            sizes=("39",),
        ),
    ]


@pytest.fixture
def fake_api() -> FakeCatalogApi:
    return FakeCatalogApi()
