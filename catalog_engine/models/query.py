"""Модели запроса к каталогу и его результата.

FilterState принадлежит слою интерфейса: движок фильтрации,
сортировщик и пагинатор только читают его. Все «изменения»
возвращают новый экземпляр через dataclasses.replace.
"""

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from catalog_engine.config import DEFAULT_PAGE_SIZE
from catalog_engine.models.product import NormalizedProduct
from catalog_engine.utils.fields import (
    FieldExtractor,
    as_identifier,
    as_number,
    as_present,
    as_string,
)


class SortKey(str, Enum):
    """Допустимые порядки сортировки."""

    NAME = "name"
    NAME_DESC = "name-desc"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NEWEST = "newest"


# Мультивыборные фасеты: поле FilterState -> параметр запроса к бэкенду.
FACET_FIELDS: dict[str, str] = {
    "categories": "type",
    "colors": "color",
    "genders": "gender",
    "materials": "material",
    "technologies": "technology",
    "sizes": "size",
}

_search_field = FieldExtractor(("search", "q"), as_string)
_brand_field = FieldExtractor(("brand_id", "brand"), as_identifier)
_price_min_field = FieldExtractor(("price_min",), as_number)
_price_max_field = FieldExtractor(("price_max",), as_number)
_page_field = FieldExtractor(("page",), as_number)
_page_size_field = FieldExtractor(("page_size", "limit"), as_number)
_sort_field = FieldExtractor(("sort",), as_string)


def _clean_values(values: Iterable[Any]) -> frozenset[str]:
    return frozenset(
        str(v).strip() for v in values if v is not None and str(v).strip()
    )


@dataclass(frozen=True)
class FilterState:
    """Активные выборы фасетов, поисковый запрос, сортировка и страница.

    Attributes:
        search: Свободный текст для поиска.
        categories: Выбранные категории.
        colors: Выбранные цвета.
        genders: Выбранные значения пола.
        materials: Выбранные материалы.
        technologies: Выбранные технологии.
        sizes: Выбранные размеры.
        brand_id: Единственный выбранный бренд (None — фасет неактивен).
        price_min: Нижняя граница цены, 0 по умолчанию.
        price_max: Верхняя граница цены; None — потолок домена.
        sort: Ключ сортировки.
        page: Номер страницы, начиная с 1.
        page_size: Размер страницы.
    """

    search: str = ""
    categories: frozenset[str] = field(default_factory=frozenset)
    colors: frozenset[str] = field(default_factory=frozenset)
    genders: frozenset[str] = field(default_factory=frozenset)
    materials: frozenset[str] = field(default_factory=frozenset)
    technologies: frozenset[str] = field(default_factory=frozenset)
    sizes: frozenset[str] = field(default_factory=frozenset)
    brand_id: str | None = None
    price_min: float = 0.0
    price_max: float | None = None
    sort: SortKey = SortKey.NEWEST
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def toggle(self, facet: str, value: str) -> "FilterState":
        """Добавляет значение в фасет или убирает его, сбрасывая страницу.

        Raises:
            ValueError: Если facet не является мультивыборным фасетом.
        """
        if facet not in FACET_FIELDS:
            raise ValueError(f"Неизвестный фасет: {facet}")
        current: frozenset[str] = getattr(self, facet)
        updated = current - {value} if value in current else current | {value}
        return replace(self, page=1, **{facet: updated})

    def with_search(self, text: str) -> "FilterState":
        return replace(self, search=text, page=1)

    def with_brand(self, brand_id: str | None) -> "FilterState":
        return replace(self, brand_id=brand_id or None, page=1)

    def with_price_range(self, price_min: float, price_max: float | None) -> "FilterState":
        return replace(self, price_min=price_min, price_max=price_max, page=1)

    def with_sort(self, sort: SortKey) -> "FilterState":
        return replace(self, sort=sort)

    def with_page(self, page: int) -> "FilterState":
        return replace(self, page=page)

    def cleared(self) -> "FilterState":
        """Сбрасывает все фасеты и поиск, сохраняя сортировку и размер страницы."""
        return FilterState(sort=self.sort, page_size=self.page_size)

    def is_price_active(self, price_ceiling: float) -> bool:
        """Ценовой фасет неактивен только при min == 0 и max == потолку."""
        upper_is_default = self.price_max is None or self.price_max == price_ceiling
        return not (self.price_min == 0 and upper_is_default)

    def has_active_filters(self, price_ceiling: float) -> bool:
        return (
            bool(self.search.strip())
            or any(getattr(self, name) for name in FACET_FIELDS)
            or self.brand_id is not None
            or self.is_price_active(price_ceiling)
        )

    def to_dict(self) -> dict[str, Any]:
        """Сериализует состояние в JSON-совместимый словарь (для пресетов)."""
        data: dict[str, Any] = {
            "search": self.search,
            "brand_id": self.brand_id,
            "price_min": self.price_min,
            "price_max": self.price_max,
            "sort": self.sort.value,
            "page": self.page,
            "page_size": self.page_size,
        }
        for name in FACET_FIELDS:
            data[name] = sorted(getattr(self, name))
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FilterState":
        """Восстанавливает состояние из словаря, игнорируя мусорные поля."""
        facets: dict[str, frozenset[str]] = {}
        for name in FACET_FIELDS:
            raw = FieldExtractor((name,), as_present)(data)
            if isinstance(raw, (list, tuple, set, frozenset)):
                facets[name] = _clean_values(raw)

        sort_raw = _sort_field(data)
        try:
            sort = SortKey(sort_raw) if sort_raw else SortKey.NEWEST
        except ValueError:
            sort = SortKey.NEWEST

        page = int(_page_field.or_default(data, 1))
        page_size = int(_page_size_field.or_default(data, DEFAULT_PAGE_SIZE))

        return cls(
            search=_search_field.or_default(data, ""),
            brand_id=_brand_field(data),
            price_min=max(0.0, _price_min_field.or_default(data, 0.0)),
            price_max=_price_max_field(data),
            sort=sort,
            page=page if page >= 1 else 1,
            page_size=page_size if page_size >= 1 else DEFAULT_PAGE_SIZE,
            **facets,
        )

    def fingerprint(self, include_page: bool = True) -> str:
        """Стабильный отпечаток состояния.

        Одинаковые состояния дают одинаковую строку независимо
        от порядка добавления значений в фасеты.

        Args:
            include_page: Учитывать ли номер и размер страницы.
        """
        data = self.to_dict()
        if not include_page:
            data.pop("page")
            data.pop("page_size")
        return json.dumps(data, sort_keys=True, ensure_ascii=False)

    def to_query_params(self) -> list[tuple[str, str]]:
        """Параметры запроса к бэкенду; мультивыборы повторяют ключ."""
        params: list[tuple[str, str]] = [
            ("page", str(self.page)),
            ("limit", str(self.page_size)),
        ]
        if self.search.strip():
            params.append(("q", self.search.strip()))
        for name, param in FACET_FIELDS.items():
            for value in sorted(getattr(self, name)):
                params.append((param, value))
        if self.brand_id:
            params.append(("brand", self.brand_id))
        if self.price_min:
            params.append(("price_min", f"{self.price_min:g}"))
        if self.price_max is not None:
            params.append(("price_max", f"{self.price_max:g}"))
        if self.sort is not SortKey.NEWEST:
            params.append(("sort", self.sort.value))
        return params


@dataclass(frozen=True)
class PaginationMeta:
    """Метаданные страницы.

    Attributes:
        page: Текущая страница (с 1).
        total_pages: Всего страниц (не меньше 1).
        total_items: Всего элементов.
        has_next: Есть ли следующая страница.
        has_prev: Есть ли предыдущая страница.
    """

    page: int
    total_pages: int
    total_items: int
    has_next: bool
    has_prev: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "total_pages": self.total_pages,
            "total_items": self.total_items,
            "has_next": self.has_next,
            "has_prev": self.has_prev,
        }


@dataclass(frozen=True)
class QueryResult:
    """Результат локального конвейера фильтр → сортировка → страница."""

    visible_products: tuple[NormalizedProduct, ...]
    pagination: PaginationMeta


@dataclass(frozen=True)
class CatalogPage:
    """Страница каталога, полученная от бэкенда.

    Attributes:
        products: Нормализованные товары страницы.
        pagination: Метаданные (серверные, если бэкенд их прислал).
        brands: Список брендов как есть.
        seo: SEO-данные как есть.
        fingerprint: Отпечаток FilterState, для которого получена страница.
    """

    products: tuple[NormalizedProduct, ...]
    pagination: PaginationMeta
    brands: tuple[Any, ...] = ()
    seo: Mapping[str, Any] | None = None
    fingerprint: str = ""
