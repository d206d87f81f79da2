"""Слияние списков связок товар-магазин из нескольких источников.

Детальный ответ товара (product_stores) и эндпоинт магазинов товара
описывают одни и те же связки с разной полнотой: один отдаёт
размеры, другой — актуальную цену. Слияние идёт по store_id:
первичный список задаёт набор и порядок ключей, вторичный
дополняет его по таблице правил MERGE_RULES.

Правила (поле -> стратегия):
    sizes       — оставить имеющийся непустой список, иначе взять входящий
    price       — взять входящую цену, только если она конечна и > 0
    store_name  — взять входящее имя, только если оно непустое
                  и не является заглушкой UNKNOWN_STORE_NAME
    остальные   — входящее значение перезаписывает имеющееся,
                  если оно присутствует (не None)

merge(A, B) не коммутативно: A — первичный источник.
"""

import math
from collections.abc import Callable, Iterable
from dataclasses import fields
from typing import Any

from catalog_engine.config import get_logger
from catalog_engine.models import UNKNOWN_STORE_NAME, NormalizedStoreAssociation

logger = get_logger("reconciler")

# Стратегия получает (имеющееся, входящее) и возвращает итоговое значение.
MergeStrategy = Callable[[Any, Any], Any]

KEY_FIELD: str = "store_id"


def keep_existing_unless_empty(existing: Any, incoming: Any) -> Any:
    """Имеющийся непустой список побеждает; пустой заменяется входящим."""
    if existing:
        return existing
    return incoming if incoming is not None else existing


def take_incoming_if_positive(existing: Any, incoming: Any) -> Any:
    """Входящее число побеждает, только если оно конечно и больше нуля."""
    if (
        isinstance(incoming, (int, float))
        and not isinstance(incoming, bool)
        and math.isfinite(incoming)
        and incoming > 0
    ):
        return incoming
    return existing


def take_incoming_if_named(existing: Any, incoming: Any) -> Any:
    """Входящее имя побеждает, если оно непустое и не заглушка."""
    if isinstance(incoming, str) and incoming.strip():
        if incoming != UNKNOWN_STORE_NAME or not existing:
            return incoming
    return existing


def take_incoming_if_present(existing: Any, incoming: Any) -> Any:
    """Входящее значение перезаписывает имеющееся, если оно есть."""
    return existing if incoming is None else incoming


MERGE_RULES: dict[str, MergeStrategy] = {
    "sizes": keep_existing_unless_empty,
    "price": take_incoming_if_positive,
    "store_name": take_incoming_if_named,
}

DEFAULT_STRATEGY: MergeStrategy = take_incoming_if_present


def merge_association(
    existing: NormalizedStoreAssociation,
    incoming: NormalizedStoreAssociation,
    rules: dict[str, MergeStrategy] | None = None,
) -> NormalizedStoreAssociation:
    """Сливает две связки с одинаковым store_id по таблице правил.

    Args:
        existing: Связка, уже находящаяся в наборе.
        incoming: Связка из следующего источника.
        rules: Таблица правил; по умолчанию MERGE_RULES.

    Returns:
        Новая связка; исходные объекты не изменяются.
    """
    table = MERGE_RULES if rules is None else rules
    merged: dict[str, Any] = {KEY_FIELD: existing.store_id}
    for f in fields(NormalizedStoreAssociation):
        if f.name == KEY_FIELD:
            continue
        strategy = table.get(f.name, DEFAULT_STRATEGY)
        merged[f.name] = strategy(getattr(existing, f.name), getattr(incoming, f.name))
    return NormalizedStoreAssociation(**merged)


def merge(
    primary: Iterable[NormalizedStoreAssociation],
    secondary: Iterable[NormalizedStoreAssociation],
) -> list[NormalizedStoreAssociation]:
    """Сливает первичный и вторичный списки связок по store_id.

    Дубликаты внутри первичного списка: побеждает последняя запись,
    позиция — первого появления. Новые ключи вторичного списка
    добавляются в конец в порядке появления.

    Args:
        primary: Связки из основного источника (детальный ответ товара).
        secondary: Связки из дополнительного источника (эндпоинт магазинов).

    Returns:
        Список, в котором каждый store_id встречается ровно один раз.
    """
    by_store: dict[str, NormalizedStoreAssociation] = {}
    for entry in primary:
        by_store[entry.store_id] = entry

    conflicts = 0
    for entry in secondary:
        existing = by_store.get(entry.store_id)
        if existing is None:
            by_store[entry.store_id] = entry
            continue
        conflicts += 1
        by_store[entry.store_id] = merge_association(existing, entry)

    logger.debug(
        "store_associations_merged",
        merged_count=len(by_store),
        conflicts_count=conflicts,
    )
    return list(by_store.values())


def merge_many(*sources: Iterable[NormalizedStoreAssociation]) -> list[NormalizedStoreAssociation]:
    """Сливает любое количество источников слева направо.

    Первый источник — первичный, каждый следующий вливается
    в результат предыдущих по тем же правилам.
    """
    if not sources:
        return []
    result = merge(sources[0], [])
    for source in sources[1:]:
        result = merge(result, source)
    return result
