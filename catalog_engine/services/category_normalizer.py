"""Канонизация категорий, цветов и пола.

Бэкенд и пользователи пишут одну и ту же категорию по-разному:
"T Shirts", "t-shirts", "TSHIRTS", "футболки". Внутри системы
используется один фиксированный словарь значений: категории —
слаги в нижнем регистре (кроме "T-shirts"), цвета — "Black", "Gray".

Неизвестные значения не подменяются категорией по умолчанию:
они возвращаются обрезанными по краям и остаются видимыми
и фильтруемыми как есть.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from catalog_engine.config import get_logger
from catalog_engine.utils.fields import FieldExtractor, as_identifier, as_string

logger = get_logger("category_normalizer")


TSHIRTS_LABEL: str = "T-shirts"

PRODUCT_CATEGORIES: tuple[str, ...] = (
    "jackets",
    "hoodies",
    TSHIRTS_LABEL,
    "pants",
    "jeans",
    "shorts",
    "shoes",
    "accessories",
)

# Варианты написания (EN/UK, ед./мн. число) -> канонический слаг
CATEGORY_ALIASES: dict[str, str] = {
    "jackets": "jackets",
    "jacket": "jackets",
    "hoodies": "hoodies",
    "hoodie": "hoodies",
    "pants": "pants",
    "pant": "pants",
    "jeans": "jeans",
    "jean": "jeans",
    "shorts": "shorts",
    "short": "shorts",
    "shoes": "shoes",
    "shoe": "shoes",
    "accessories": "accessories",
    "accessory": "accessories",
    "куртки": "jackets",
    "куртка": "jackets",
    "худі": "hoodies",
    "футболки": TSHIRTS_LABEL,
    "футболка": TSHIRTS_LABEL,
    "штани": "pants",
    "джинси": "jeans",
    "джинс": "jeans",
    "шорти": "shorts",
    "взуття": "shoes",
    "аксесуари": "accessories",
    "аксесуар": "accessories",
}

COLOR_ALIASES: dict[str, str] = {
    "black": "Black",
    "white": "White",
    "gray": "Gray",
    "grey": "Gray",
    "beige": "Beige",
    "brown": "Brown",
    "red": "Red",
    "blue": "Blue",
    "navy": "Navy",
    "green": "Green",
    "olive": "Olive",
    "yellow": "Yellow",
    "orange": "Orange",
    "pink": "Pink",
    "purple": "Purple",
    "cream": "Cream",
    "maroon": "Maroon",
    "чорний": "Black",
    "білий": "White",
    "сірий": "Gray",
    "синій": "Blue",
    "червоний": "Red",
    "зелений": "Green",
    "жовтий": "Yellow",
    "помаранчевий": "Orange",
    "рожевий": "Pink",
    "фіолетовий": "Purple",
    "коричневий": "Brown",
    "бежевий": "Beige",
    "темно-синій": "Navy",
    "бордовий": "Maroon",
}

GENDER_ALIASES: dict[str, str] = {
    "men": "men",
    "man": "men",
    "male": "men",
    "women": "women",
    "woman": "women",
    "female": "women",
    "unisex": "unisex",
}

_WHITESPACE = re.compile(r"\s+")
_NON_LETTERS = re.compile(r"[^a-z]")


def _collapse(value: str) -> str:
    return _WHITESPACE.sub(" ", value.strip().lower())


def normalize_category(raw: Any) -> str:
    """Приводит категорию к каноническому значению.

    Args:
        raw: Значение из бэкенда или из интерфейса.

    Returns:
        "T-shirts" для любых написаний футболок, канонический слаг
        для известных категорий, обрезанное исходное значение для
        неизвестных, пустая строка для не-строк и пустых строк.
    """
    if not isinstance(raw, str):
        return ""
    value = raw.strip()
    if not value:
        return ""

    collapsed = _collapse(value)
    if _NON_LETTERS.sub("", collapsed) in ("tshirts", "tshirt"):
        return TSHIRTS_LABEL

    return CATEGORY_ALIASES.get(collapsed, value)


def normalize_color(raw: Any) -> str:
    """Приводит цвет к каноническому названию ("grey" -> "Gray").

    Неизвестный цвет возвращается обрезанным; не-строка — пустая строка.
    """
    if not isinstance(raw, str):
        return ""
    value = raw.strip()
    if not value:
        return ""
    return COLOR_ALIASES.get(_collapse(value), value)


def normalize_gender(raw: Any) -> str:
    """Приводит пол к men / women / unisex; неизвестное — в нижнем регистре."""
    if not isinstance(raw, str):
        return ""
    collapsed = _collapse(raw)
    return GENDER_ALIASES.get(collapsed, collapsed)


def detect_search_facet(query: str) -> tuple[str, str] | None:
    """Определяет, является ли поисковый запрос названием цвета или категории.

    Args:
        query: Поисковая строка пользователя.

    Returns:
        ("colors", "Black") или ("categories", "T-shirts"), либо None.
    """
    if not query or not query.strip():
        return None
    collapsed = _collapse(query)
    if collapsed in COLOR_ALIASES:
        return "colors", COLOR_ALIASES[collapsed]
    category = normalize_category(query)
    if category == TSHIRTS_LABEL or collapsed in CATEGORY_ALIASES:
        return "categories", category
    return None


@dataclass(frozen=True)
class CategoryEntry:
    """Элемент словаря категорий.

    Attributes:
        slug: Канонический слаг категории.
        name: Отображаемое название.
        parent_id: Идентификатор родительской категории.
    """

    slug: str
    name: str
    parent_id: str | None = None


_slug_field = FieldExtractor(("slug", "value", "name"), as_string)
_name_field = FieldExtractor(("name", "title", "label", "slug"), as_string)
_parent_field = FieldExtractor(("parentId", "parent_id", "parent.id"), as_identifier)


class CategoryVocabulary:
    """Словарь категорий: от бэкенда или встроенный.

    Attributes:
        _entries: Элементы словаря в порядке поступления.
        _source: "backend" или "builtin".
    """

    def __init__(self, entries: Iterable[CategoryEntry], source: str) -> None:
        self._entries: tuple[CategoryEntry, ...] = tuple(entries)
        self._source = source

    @classmethod
    def builtin(cls) -> "CategoryVocabulary":
        """Встроенный фиксированный список категорий."""
        entries = [
            CategoryEntry(slug=slug, name=slug[:1].upper() + slug[1:])
            for slug in PRODUCT_CATEGORIES
        ]
        return cls(entries, source="builtin")

    @classmethod
    def from_backend(cls, raw_entries: Any) -> "CategoryVocabulary":
        """Строит словарь из ответа бэкенда ({slug, name, parentId}).

        Элементы без слага пропускаются. Если список отсутствует
        или пуст после разбора — используется встроенный словарь.
        """
        if not isinstance(raw_entries, (list, tuple)):
            return cls.builtin()

        entries: list[CategoryEntry] = []
        seen: set[str] = set()
        for raw in raw_entries:
            if not isinstance(raw, Mapping):
                continue
            slug_raw = _slug_field(raw)
            if slug_raw is None:
                continue
            slug = normalize_category(slug_raw)
            if slug in seen:
                continue
            seen.add(slug)
            entries.append(
                CategoryEntry(
                    slug=slug,
                    name=_name_field.or_default(raw, slug),
                    parent_id=_parent_field(raw),
                )
            )

        if not entries:
            logger.info("category_vocabulary_fallback", reason="empty_backend_list")
            return cls.builtin()

        logger.debug("category_vocabulary_loaded", entries_count=len(entries))
        return cls(entries, source="backend")

    @property
    def source(self) -> str:
        return self._source

    @property
    def entries(self) -> tuple[CategoryEntry, ...]:
        return self._entries

    def slugs(self) -> list[str]:
        return [entry.slug for entry in self._entries]

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, str):
            return False
        return normalize_category(value) in self.slugs()
