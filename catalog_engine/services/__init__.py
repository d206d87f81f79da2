"""Пакет сервисов каталога.

Предоставляет этапы конвейера и сервисы верхнего уровня:
    from catalog_engine.services import (
        CatalogService,
        FacetFilterEngine,
        FilterPresetService,
        HttpCatalogApi,
        merge,
        normalize_product,
    )
"""

from catalog_engine.services.catalog_api import (
    CatalogApi,
    CatalogApiError,
    HttpCatalogApi,
)
from catalog_engine.services.catalog_service import CatalogService
from catalog_engine.services.category_normalizer import (
    CategoryEntry,
    CategoryVocabulary,
    detect_search_facet,
    normalize_category,
    normalize_color,
    normalize_gender,
)
from catalog_engine.services.filter_engine import FacetFilterEngine
from catalog_engine.services.paginator import (
    PageCursor,
    page_window,
    paginate,
    parse_server_pagination,
    resolve_pagination,
)
from catalog_engine.services.preset_service import FilterPresetService
from catalog_engine.services.reconciler import MERGE_RULES, merge, merge_many
from catalog_engine.services.record_normalizer import (
    normalize_product,
    normalize_products,
    normalize_store_association,
    normalize_store_associations,
    normalize_taxonomy_list,
    unwrap_items,
    unwrap_payload,
)
from catalog_engine.services.sorter import parse_sort_key, sort_products

__all__ = [
    "MERGE_RULES",
    "CatalogApi",
    "CatalogApiError",
    "CatalogService",
    "CategoryEntry",
    "CategoryVocabulary",
    "FacetFilterEngine",
    "FilterPresetService",
    "HttpCatalogApi",
    "PageCursor",
    "detect_search_facet",
    "merge",
    "merge_many",
    "normalize_category",
    "normalize_color",
    "normalize_gender",
    "normalize_product",
    "normalize_products",
    "normalize_store_association",
    "normalize_store_associations",
    "normalize_taxonomy_list",
    "page_window",
    "paginate",
    "parse_server_pagination",
    "parse_sort_key",
    "resolve_pagination",
    "sort_products",
    "unwrap_items",
    "unwrap_payload",
]
