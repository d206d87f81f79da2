"""Пакет утилит.

Предоставляет переиспользуемые компоненты:
    from catalog_engine.utils import FieldExtractor, QueryDebouncer
"""

from catalog_engine.utils.debounce import QueryDebouncer
from catalog_engine.utils.fields import (
    FieldExtractor,
    as_boolean,
    as_identifier,
    as_mapping,
    as_number,
    as_present,
    as_string,
    as_string_list,
    first_of,
    get_path,
)

__all__ = [
    "FieldExtractor",
    "QueryDebouncer",
    "as_boolean",
    "as_identifier",
    "as_mapping",
    "as_number",
    "as_present",
    "as_string",
    "as_string_list",
    "first_of",
    "get_path",
]
