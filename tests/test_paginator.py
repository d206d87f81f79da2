"""Тесты пагинации."""

import pytest

from catalog_engine.models import PaginationMeta
from catalog_engine.services.paginator import (
    PageCursor,
    count_pages,
    page_window,
    paginate,
    parse_server_pagination,
    resolve_pagination,
)


class TestPaginate:
    """Локальная пагинация."""

    def test_middle_page(self):
        items, meta = paginate(list(range(10)), page=2, page_size=4)

        assert items == (4, 5, 6, 7)
        assert meta == PaginationMeta(
            page=2, total_pages=3, total_items=10, has_next=True, has_prev=True
        )

    def test_page_beyond_range_is_clamped(self):
        items, meta = paginate(list(range(10)), page=99, page_size=4)
        assert items == (8, 9)
        assert meta.page == 3
        assert meta.has_next is False

    def test_page_below_one_is_clamped(self):
        items, meta = paginate(list(range(10)), page=-3, page_size=4)
        assert items == (0, 1, 2, 3)
        assert meta.page == 1
        assert meta.has_prev is False

    def test_empty_collection_has_one_page(self):
        items, meta = paginate([], page=5, page_size=24)
        assert items == ()
        assert meta.page == 1
        assert meta.total_pages == 1
        assert meta.total_items == 0

    def test_non_positive_page_size_uses_default(self):
        items, meta = paginate(list(range(30)), page=1, page_size=0)
        assert len(items) == 24
        assert meta.total_pages == 2

        items, meta = paginate(list(range(30)), page=2, page_size=-5)
        assert items == tuple(range(24, 30))
        assert meta.has_next is False

    def test_count_pages(self):
        assert count_pages(0, 24) == 1
        assert count_pages(24, 24) == 1
        assert count_pages(25, 24) == 2


class TestServerPagination:
    """Метаданные бэкенда замещают локальный расчёт."""

    def test_camel_case(self):
        meta = parse_server_pagination({"page": 2, "totalPages": 7, "totalItems": 160})
        assert meta == PaginationMeta(
            page=2, total_pages=7, total_items=160, has_next=True, has_prev=True
        )

    def test_snake_case_with_explicit_flags(self):
        meta = parse_server_pagination(
            {"page": "3", "total_pages": 3, "total": 50, "has_next": True, "has_prev": False}
        )
        assert meta.page == 3
        assert meta.has_next is True
        assert meta.has_prev is False

    def test_not_metadata(self):
        assert parse_server_pagination(None) is None
        assert parse_server_pagination({"page": 1}) is None

    def test_server_meta_wins_over_items(self):
        meta = resolve_pagination({"page": 1, "totalPages": 4, "totalItems": 96}, 1, [1, 2])
        assert meta.total_pages == 4
        assert meta.total_items == 96

    def test_total_only_uses_limit(self):
        meta = parse_server_pagination({"page": 3, "total": 100, "limit": 24})
        assert meta == PaginationMeta(
            page=3, total_pages=5, total_items=100, has_next=True, has_prev=True
        )

    def test_total_only_uses_request_page_size(self):
        meta = resolve_pagination({"page": 1, "totalItems": 45}, 1, [1, 2], page_size=10)
        assert meta.total_pages == 5
        assert meta.has_next is True

    def test_total_only_defaults_page_size(self):
        meta = parse_server_pagination({"page": 1, "total": 50})
        assert meta.total_pages == 3

    def test_fallback_without_server_meta(self):
        meta = resolve_pagination(None, 3, ["a", "b"])
        assert meta == PaginationMeta(
            page=3, total_pages=1, total_items=2, has_next=False, has_prev=True
        )


class TestPageWindow:
    """Панель номеров страниц."""

    @pytest.mark.parametrize(
        "current, total, expected",
        [
            (3, 3, [1, 2, 3]),
            (1, 10, [1, 2, None, 10]),
            (6, 10, [1, None, 5, 6, 7, None, 10]),
            (10, 10, [1, None, 9, 10]),
        ],
    )
    def test_window(self, current, total, expected):
        assert page_window(current, total) == expected


class TestPageCursor:
    """Переходы по страницам."""

    def test_out_of_range_is_noop(self):
        cursor = PageCursor(page=2, total_pages=3)

        assert cursor.go_to(0) is False
        assert cursor.go_to(4) is False
        assert cursor.page == 2

    def test_navigation(self):
        cursor = PageCursor(page=1, total_pages=2)

        assert cursor.has_prev is False
        assert cursor.previous() is False
        assert cursor.next() is True
        assert cursor.page == 2
        assert cursor.has_next is False
        assert cursor.next() is False

    def test_update_shrinks_current_page(self):
        cursor = PageCursor(page=5, total_pages=5)
        cursor.update(PaginationMeta(page=1, total_pages=2, total_items=30, has_next=True, has_prev=False))
        assert cursor.page == 2
        assert cursor.total_pages == 2

    def test_reset(self):
        cursor = PageCursor(page=3, total_pages=4)
        cursor.reset()
        assert cursor.page == 1
