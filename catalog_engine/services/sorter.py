"""Сортировка отфильтрованной коллекции товаров.

Сортировка устойчива: товары с равными ключами сохраняют
исходный порядок, чтобы строки не «прыгали» при повторной
отрисовке с тем же состоянием фильтров.
"""

import unicodedata
from collections.abc import Iterable

from catalog_engine.models import NormalizedProduct, SortKey

# Названия сортировок витрины -> SortKey
_SORT_ALIASES: dict[str, SortKey] = {
    "default": SortKey.NEWEST,
    "name-asc": SortKey.NAME,
}


def parse_sort_key(value: str | None) -> SortKey:
    """Разбирает ключ сортировки; неизвестное значение даёт NEWEST."""
    if not value:
        return SortKey.NEWEST
    cleaned = value.strip().lower()
    if cleaned in _SORT_ALIASES:
        return _SORT_ALIASES[cleaned]
    try:
        return SortKey(cleaned)
    except ValueError:
        return SortKey.NEWEST


def name_collation_key(name: str) -> str:
    """Ключ сравнения названий: без диакритики и без учёта регистра."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def _price(product: NormalizedProduct) -> float:
    return product.price if product.price is not None else 0.0


def sort_products(
    products: Iterable[NormalizedProduct],
    sort: SortKey,
) -> tuple[NormalizedProduct, ...]:
    """Сортирует товары выбранным способом.

    Args:
        products: Коллекция товаров.
        sort: Ключ сортировки. NEWEST сохраняет порядок бэкенда,
            так как дата создания приходит не всегда.

    Returns:
        Новый отсортированный кортеж.
    """
    items = tuple(products)
    if sort is SortKey.NAME:
        return tuple(sorted(items, key=lambda p: name_collation_key(p.name)))
    if sort is SortKey.NAME_DESC:
        return tuple(sorted(items, key=lambda p: name_collation_key(p.name), reverse=True))
    if sort is SortKey.PRICE_ASC:
        return tuple(sorted(items, key=_price))
    if sort is SortKey.PRICE_DESC:
        return tuple(sorted(items, key=_price, reverse=True))
    return items
