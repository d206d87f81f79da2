"""Пакет доменных моделей.

Предоставляет модели всех этапов конвейера каталога:
    from catalog_engine.models import NormalizedProduct, FilterState
"""

from catalog_engine.models.product import (
    UNKNOWN_STORE_NAME,
    NormalizedProduct,
    NormalizedStoreAssociation,
)
from catalog_engine.models.query import (
    FACET_FIELDS,
    CatalogPage,
    FilterState,
    PaginationMeta,
    QueryResult,
    SortKey,
)

__all__ = [
    "FACET_FIELDS",
    "UNKNOWN_STORE_NAME",
    "CatalogPage",
    "FilterState",
    "NormalizedProduct",
    "NormalizedStoreAssociation",
    "PaginationMeta",
    "QueryResult",
    "SortKey",
]
