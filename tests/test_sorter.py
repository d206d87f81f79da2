"""Тесты сортировки."""

import pytest

from catalog_engine.models import SortKey
from catalog_engine.services.sorter import name_collation_key, parse_sort_key, sort_products
from tests.conftest import make_product


def ids(products):
    return [p.id for p in products]


class TestSortProducts:
    """Порядки сортировки."""

    def test_name_ascending_ignores_accents_and_case(self, catalog):
        result = sort_products(catalog, SortKey.NAME)
        assert ids(result) == ["3", "5", "4", "1", "2"]

    def test_name_descending(self, catalog):
        result = sort_products(catalog, SortKey.NAME_DESC)
        assert ids(result) == ["2", "1", "4", "5", "3"]

    def test_price_missing_counts_as_zero(self, catalog):
        assert ids(sort_products(catalog, SortKey.PRICE_ASC)) == ["4", "3", "1", "5", "2"]
        assert ids(sort_products(catalog, SortKey.PRICE_DESC)) == ["2", "5", "1", "3", "4"]

    def test_newest_keeps_backend_order(self, catalog):
        assert ids(sort_products(catalog, SortKey.NEWEST)) == ["1", "2", "3", "4", "5"]

    def test_stable_for_equal_keys(self):
        products = [
            make_product("a", price=10.0),
            make_product("b", price=5.0),
            make_product("c", price=10.0),
            make_product("d", price=10.0),
        ]
        assert ids(sort_products(products, SortKey.PRICE_ASC)) == ["b", "a", "c", "d"]
        assert ids(sort_products(products, SortKey.PRICE_DESC)) == ["a", "c", "d", "b"]

    def test_returns_new_sequence(self, catalog):
        result = sort_products(catalog, SortKey.PRICE_ASC)
        assert isinstance(result, tuple)
        assert ids(catalog) == ["1", "2", "3", "4", "5"]


class TestParseSortKey:
    """Разбор ключа сортировки."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("price-asc", SortKey.PRICE_ASC),
            ("NAME-DESC", SortKey.NAME_DESC),
            ("name-asc", SortKey.NAME),
            ("default", SortKey.NEWEST),
            ("popular", SortKey.NEWEST),
            (None, SortKey.NEWEST),
        ],
    )
    def test_values(self, raw, expected):
        assert parse_sort_key(raw) is expected

    def test_collation_key(self):
        assert name_collation_key("Élan") == name_collation_key("elan")
