"""Фасетная фильтрация коллекции товаров.

Каждый активный фасет — независимый предикат; движок — их
конъюнкция (AND). Порядок применения не влияет на результат,
повторное применение тех же фильтров ничего не меняет.

Правила фасетов:
    search      — подстрока без учёта регистра в name/description/brand
    categories, colors, genders, materials, technologies, sizes —
                  хотя бы одно совпадение нормализованного значения;
                  пустой выбор = фасет неактивен
    brand_id    — точное совпадение; None = неактивен
    price       — включительно [min, max]; неактивен только при
                  min == 0 и max == потолку домена

Товар без поля, которое требует активный фасет, исключается.
"""

from collections.abc import Callable, Iterable

from catalog_engine.config import DEFAULT_PRICE_CEILING, get_logger
from catalog_engine.models import FilterState, NormalizedProduct
from catalog_engine.services.category_normalizer import (
    normalize_category,
    normalize_color,
    normalize_gender,
)

logger = get_logger("filter_engine")

Predicate = Callable[[NormalizedProduct], bool]


def _fold(values: Iterable[str]) -> frozenset[str]:
    return frozenset(v.strip().casefold() for v in values if v and v.strip())


def _matches_search(query: str) -> Predicate:
    needle = query.strip().casefold()

    def predicate(product: NormalizedProduct) -> bool:
        haystacks = (product.name, product.description, product.brand)
        return any(h and needle in h.casefold() for h in haystacks)

    return predicate


def _matches_single(selected: frozenset[str], attribute: str, canonical: Callable[[str], str]) -> Predicate:
    wanted = _fold(canonical(value) for value in selected)

    def predicate(product: NormalizedProduct) -> bool:
        value = getattr(product, attribute)
        if not value:
            return False
        return canonical(value).casefold() in wanted

    return predicate


def _matches_any(selected: frozenset[str], attribute: str) -> Predicate:
    wanted = _fold(selected)

    def predicate(product: NormalizedProduct) -> bool:
        labels: tuple[str, ...] = getattr(product, attribute)
        return any(label.strip().casefold() in wanted for label in labels)

    return predicate


def _matches_brand(brand_id: str) -> Predicate:
    def predicate(product: NormalizedProduct) -> bool:
        return product.brand_id == brand_id

    return predicate


def _matches_price(price_min: float, price_max: float) -> Predicate:
    def predicate(product: NormalizedProduct) -> bool:
        if product.price is None:
            return False
        return price_min <= product.price <= price_max

    return predicate


class FacetFilterEngine:
    """Чистый фильтр коллекции товаров по FilterState.

    Attributes:
        _price_ceiling: Верхняя граница цены домена (значение
            price_max по умолчанию).
    """

    def __init__(self, price_ceiling: float = DEFAULT_PRICE_CEILING) -> None:
        self._price_ceiling = price_ceiling

    @property
    def price_ceiling(self) -> float:
        return self._price_ceiling

    def predicates(self, filters: FilterState) -> list[Predicate]:
        """Строит список предикатов для активных фасетов.

        Args:
            filters: Текущее состояние фильтров.

        Returns:
            Список предикатов; пустой, если ни один фасет не активен.
        """
        active: list[Predicate] = []

        if filters.search.strip():
            active.append(_matches_search(filters.search))
        if filters.categories:
            active.append(_matches_single(filters.categories, "category", normalize_category))
        if filters.colors:
            active.append(_matches_single(filters.colors, "color", normalize_color))
        if filters.genders:
            active.append(_matches_single(filters.genders, "gender", normalize_gender))
        if filters.materials:
            active.append(_matches_any(filters.materials, "materials"))
        if filters.technologies:
            active.append(_matches_any(filters.technologies, "technologies"))
        if filters.sizes:
            active.append(_matches_any(filters.sizes, "sizes"))
        if filters.brand_id:
            active.append(_matches_brand(filters.brand_id))
        if filters.is_price_active(self._price_ceiling):
            upper = self._price_ceiling if filters.price_max is None else filters.price_max
            active.append(_matches_price(filters.price_min, upper))

        return active

    def apply(
        self,
        products: Iterable[NormalizedProduct],
        filters: FilterState,
    ) -> tuple[NormalizedProduct, ...]:
        """Возвращает товары, проходящие все активные фасеты.

        Исходная коллекция не изменяется, порядок сохраняется.

        Args:
            products: Коллекция товаров.
            filters: Текущее состояние фильтров.

        Returns:
            Новый кортеж отфильтрованных товаров.
        """
        source = tuple(products)
        active = self.predicates(filters)
        if not active:
            return source

        result = tuple(p for p in source if all(check(p) for check in active))
        logger.debug(
            "products_filtered",
            active_facets=len(active),
            input_count=len(source),
            output_count=len(result),
        )
        return result
