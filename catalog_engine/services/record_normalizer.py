"""Нормализация сырых записей товаров и связок с магазинами.

Разные эндпоинты бэкенда описывают одну сущность по-разному:
store_id или id или вложенный stores.id; цена строкой, числом или
объектом {amount, currency}; размеры списком, JSON-строкой или
строкой через запятую. Модуль приводит всё это к каноническим
моделям NormalizedStoreAssociation и NormalizedProduct.

Нормализация никогда не выбрасывает исключений на плохих данных:
запись без идентификатора отбрасывается (None), неразбираемые
числа и размеры заменяются безопасными значениями (0 / пустой список).
"""

import json
from collections.abc import Iterable, Mapping
from typing import Any

from catalog_engine.config import get_logger
from catalog_engine.models import (
    UNKNOWN_STORE_NAME,
    NormalizedProduct,
    NormalizedStoreAssociation,
)
from catalog_engine.services.category_normalizer import (
    normalize_category,
    normalize_color,
    normalize_gender,
)
from catalog_engine.utils.fields import (
    FieldExtractor,
    as_boolean,
    as_identifier,
    as_mapping,
    as_number,
    as_present,
    as_string,
    get_path,
)

logger = get_logger("record_normalizer")


# --- Связка товар <-> магазин ---

_store_object = FieldExtractor(("stores", "store"), as_mapping)
_store_id = FieldExtractor(
    ("store_id", "storeId", "id", "stores.id", "store.id"), as_identifier
)
_store_name = FieldExtractor(
    ("store_name", "storeName", "name", "stores.name", "store.name"), as_string
)
_store_price = FieldExtractor(
    (
        "price",
        "product_price",
        "store_price",
        "item_price",
        "stores.price",
        "store.price",
    ),
    as_present,
)
_store_sizes = FieldExtractor(("sizes", "available_sizes"), as_present)
_currency = FieldExtractor(("currency", "price.currency", "price_currency"), as_string)
_telegram = FieldExtractor(
    ("telegram_url", "telegram", "stores.telegram_url", "store.telegram_url"), as_string
)
_instagram = FieldExtractor(
    ("instagram_url", "instagram", "stores.instagram_url", "store.instagram_url"),
    as_string,
)
_shipping = FieldExtractor(
    ("shipping_info", "shipping", "location", "stores.shipping_info", "store.shipping_info"),
    as_string,
)
_logo = FieldExtractor(
    ("logo_url", "logo", "stores.logo_url", "store.logo_url"), as_string
)
_recommended = FieldExtractor(
    (
        "is_recommended",
        "recommended",
        "stores.is_recommended",
        "store.is_recommended",
    ),
    as_boolean,
)

# Ключи, под которыми цена лежит внутри объекта {amount, currency}
_PRICE_OBJECT_KEYS: tuple[str, ...] = ("amount", "value", "price")

# Ключи конвертов со списками: {items: [...]}, {data: [...]}, {values: [...]}
_ENVELOPE_KEYS: tuple[str, ...] = ("items", "data", "values")

# Поля меток внутри объектов таксономий
_LABEL_KEYS: tuple[str, ...] = ("name", "title", "slug", "value", "label")


def coerce_price(value: Any) -> float:
    """Приводит цену к числу.

    Объект вида {amount, currency} разворачивается на один уровень.
    Всё, что не удалось разобрать в конечное число, даёт 0.0.

    Args:
        value: Найденное значение цены любой формы.

    Returns:
        Цена как float.
    """
    if isinstance(value, Mapping):
        value = next(
            (value[key] for key in _PRICE_OBJECT_KEYS if value.get(key) is not None),
            None,
        )
    number = as_number(value)
    return 0.0 if number is None else number


def _split_text_list(text: str) -> list[str]:
    """Разбирает строку-список: JSON-массив, значения через запятую или одно значение."""
    trimmed = text.strip()
    if not trimmed:
        return []

    if trimmed.startswith("[") and trimmed.endswith("]"):
        try:
            parsed = json.loads(trimmed)
        except json.JSONDecodeError:
            # '[M, L]' без кавычек: снимаем скобки и кавычки, делим по запятой
            inner = trimmed[1:-1]
            return [
                part.strip().strip("'\"").strip()
                for part in inner.split(",")
                if part.strip().strip("'\"").strip()
            ]
        if isinstance(parsed, list):
            return [str(item).strip() for item in parsed if item is not None and str(item).strip()]
        return []

    if "," in trimmed:
        return [part.strip() for part in trimmed.split(",") if part.strip()]

    return [trimmed]


def parse_sizes(value: Any) -> tuple[str, ...]:
    """Разбирает размеры из списка, JSON-строки или строки через запятую.

    Повторы на этом уровне не удаляются.

    Args:
        value: Сырое значение поля sizes.

    Returns:
        Кортеж размеров; пустой, если разобрать не удалось.
    """
    if isinstance(value, (list, tuple)):
        sizes: list[str] = []
        for item in value:
            if isinstance(item, Mapping):
                label = _taxonomy_label(item)
                if label:
                    sizes.append(label)
            elif item is not None and not isinstance(item, bool) and str(item).strip():
                sizes.append(str(item).strip())
        return tuple(sizes)
    if isinstance(value, str):
        return tuple(_split_text_list(value))
    return ()


def normalize_store_association(raw: Any) -> NormalizedStoreAssociation | None:
    """Приводит одну сырую связку товар-магазин к канонической форме.

    Args:
        raw: Запись из product_stores детального ответа или из
            эндпоинта магазинов товара.

    Returns:
        NormalizedStoreAssociation или None, если не удалось
        определить store_id (запись непригодна для слияния).
    """
    if not isinstance(raw, Mapping):
        return None

    store_id = _store_id(raw)
    if store_id is None:
        return None

    store = _store_object(raw) or {}

    return NormalizedStoreAssociation(
        store_id=store_id,
        store_name=_store_name.or_default(raw, UNKNOWN_STORE_NAME),
        price=coerce_price(_store_price(raw)),
        sizes=parse_sizes(_store_sizes(raw)),
        currency=_currency(raw) or _currency(store),
        telegram_url=_telegram(raw),
        instagram_url=_instagram(raw),
        shipping_info=_shipping(raw),
        logo_url=_logo(raw),
        is_recommended=_recommended(raw),
    )


def normalize_store_associations(raws: Any) -> list[NormalizedStoreAssociation]:
    """Нормализует список связок, отбрасывая записи без store_id.

    Args:
        raws: Список сырых записей (не-список даёт пустой результат).

    Returns:
        Список нормализованных связок в исходном порядке.
    """
    if not isinstance(raws, (list, tuple)):
        return []

    normalized: list[NormalizedStoreAssociation] = []
    for raw in raws:
        association = normalize_store_association(raw)
        if association is not None:
            normalized.append(association)

    dropped = len(raws) - len(normalized)
    if dropped:
        logger.debug(
            "store_records_dropped",
            dropped_count=dropped,
            total_count=len(raws),
        )
    return normalized


# --- Товар ---

_product_id = FieldExtractor(("id", "product_id", "productId"), as_identifier)
_product_name = FieldExtractor(
    ("name", "product_name", "name_en", "name_ua", "title"), as_string
)
_product_category = FieldExtractor(
    ("type", "category", "category_slug", "category_name"), as_present
)
_product_color = FieldExtractor(("color", "colour"), as_present)
_product_gender = FieldExtractor(("gender",), as_present)
_product_brand = FieldExtractor(
    ("brand", "brand_name", "brands.name", "brand.name"), as_present
)
_product_brand_id = FieldExtractor(
    ("brand_id", "brandId", "brand.id", "brands.id"), as_identifier
)
_product_price = FieldExtractor(
    ("price", "price_min", "min_price", "max_price"), as_present
)
_product_description = FieldExtractor(
    ("description", "description_en", "description_ua", "description_uk"), as_string
)
_product_materials = FieldExtractor(("materials", "material"), as_present)
_product_technologies = FieldExtractor(("technologies", "technology"), as_present)
_product_sizes = FieldExtractor(("sizes", "available_sizes", "size"), as_present)
_product_stores = FieldExtractor(("product_stores", "stores"), as_present)


def _taxonomy_label(value: Any) -> str | None:
    """Метка значения таксономии: строка, число или {name|title|slug|value|label}."""
    if isinstance(value, Mapping):
        for key in _LABEL_KEYS:
            label = as_string(value.get(key))
            if label is not None:
                return label
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    return as_string(value)


def normalize_taxonomy_list(value: Any) -> tuple[str, ...]:
    """Приводит список значений таксономии к кортежу уникальных меток.

    Принимает голый список, конверт {items|data|values: [...]},
    строку (JSON-массив или через запятую) или одиночный объект.

    Args:
        value: Сырое значение поля materials / technologies / sizes.

    Returns:
        Кортеж меток без повторов в порядке первого появления.
    """
    if isinstance(value, Mapping):
        for key in _ENVELOPE_KEYS:
            inner = value.get(key)
            if isinstance(inner, (list, tuple)):
                return normalize_taxonomy_list(inner)
        label = _taxonomy_label(value)
        return (label,) if label else ()

    if isinstance(value, str):
        items: Iterable[Any] = _split_text_list(value)
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        return ()

    labels: list[str] = []
    seen: set[str] = set()
    for item in items:
        label = _taxonomy_label(item)
        if label is None or label in seen:
            continue
        seen.add(label)
        labels.append(label)
    return tuple(labels)


def _single_label(value: Any) -> str | None:
    """Метка для однозначного поля, которое может быть и объектом таксономии."""
    if value is None:
        return None
    return _taxonomy_label(value)


def normalize_product(raw: Any) -> NormalizedProduct | None:
    """Приводит сырую запись товара к канонической форме.

    Args:
        raw: Запись товара из списка каталога или детального ответа.

    Returns:
        NormalizedProduct или None, если у записи нет идентификатора.
    """
    if not isinstance(raw, Mapping):
        return None

    product_id = _product_id(raw)
    if product_id is None:
        return None

    category = normalize_category(_single_label(_product_category(raw)))
    color = normalize_color(_single_label(_product_color(raw)))
    gender = normalize_gender(_single_label(_product_gender(raw)))

    price_raw = _product_price(raw)
    price = coerce_price(price_raw) if price_raw is not None else None

    return NormalizedProduct(
        id=product_id,
        name=_product_name.or_default(raw, ""),
        category=category or None,
        color=color or None,
        gender=gender or None,
        brand=_single_label(_product_brand(raw)),
        brand_id=_product_brand_id(raw),
        price=price,
        currency=_currency(raw),
        description=_product_description(raw),
        materials=normalize_taxonomy_list(_product_materials(raw)),
        technologies=normalize_taxonomy_list(_product_technologies(raw)),
        sizes=normalize_taxonomy_list(_product_sizes(raw)),
        stores=tuple(normalize_store_associations(_product_stores(raw))),
    )


def normalize_products(raws: Any) -> list[NormalizedProduct]:
    """Нормализует список товаров, отбрасывая записи без идентификатора."""
    if not isinstance(raws, (list, tuple)):
        return []

    products = [p for p in (normalize_product(raw) for raw in raws) if p is not None]

    dropped = len(raws) - len(products)
    if dropped:
        logger.debug(
            "product_records_dropped",
            dropped_count=dropped,
            total_count=len(raws),
        )
    return products


# --- Конверты ответов ---

def unwrap_payload(response: Any) -> Mapping[str, Any] | None:
    """Достаёт сущность из конверта ответа.

    Проверяет по порядку: item, data.item, data (если это объект),
    product, затем сам ответ.

    Returns:
        Словарь сущности или None, если ответ не является объектом.
    """
    for path in ("item", "data.item", "data", "product"):
        candidate = get_path(response, path)
        if isinstance(candidate, Mapping):
            return candidate
    return response if isinstance(response, Mapping) else None


def unwrap_items(response: Any) -> list[Any]:
    """Достаёт список из конверта ответа.

    Проверяет: голый список, items, data (список), data.items, products, stores.
    Возвращает пустой список, если ничего не подошло.
    """
    if isinstance(response, (list, tuple)):
        return list(response)
    for path in ("items", "data", "data.items", "products", "stores"):
        candidate = get_path(response, path)
        if isinstance(candidate, (list, tuple)):
            return list(candidate)
    return []
