"""Тесты канонизации категорий, цветов и словаря категорий."""

import pytest

from catalog_engine.services.category_normalizer import (
    PRODUCT_CATEGORIES,
    CategoryVocabulary,
    detect_search_facet,
    normalize_category,
    normalize_color,
    normalize_gender,
)


class TestNormalizeCategory:
    """Канонизация категорий."""

    @pytest.mark.parametrize("raw", ["T Shirts", "tshirts", "T-SHIRTS", "t-shirt", "  T  shirts "])
    def test_tshirt_variants(self, raw):
        assert normalize_category(raw) == "T-shirts"

    def test_aliases(self):
        assert normalize_category("Jacket") == "jackets"
        assert normalize_category("HOODIES") == "hoodies"
        assert normalize_category("взуття") == "shoes"
        assert normalize_category("Футболки") == "T-shirts"

    def test_unknown_returned_trimmed(self):
        assert normalize_category("  Scarves ") == "Scarves"

    def test_blank_and_non_string(self):
        assert normalize_category("   ") == ""
        assert normalize_category(None) == ""
        assert normalize_category(12) == ""

    def test_idempotent(self):
        for category in PRODUCT_CATEGORIES:
            assert normalize_category(normalize_category(category)) == category


class TestColorAndGender:
    """Цвета и пол."""

    def test_colors(self):
        assert normalize_color("grey") == "Gray"
        assert normalize_color(" BLACK ") == "Black"
        assert normalize_color("чорний") == "Black"
        assert normalize_color("Teal") == "Teal"
        assert normalize_color(None) == ""

    def test_genders(self):
        assert normalize_gender("Female") == "women"
        assert normalize_gender("unisex") == "unisex"
        assert normalize_gender("Kids") == "kids"


class TestDetectSearchFacet:
    """Поиск, совпадающий с названием фасета."""

    def test_color_query(self):
        assert detect_search_facet("Grey") == ("colors", "Gray")

    def test_category_query(self):
        assert detect_search_facet("t shirts") == ("categories", "T-shirts")
        assert detect_search_facet("jacket") == ("categories", "jackets")

    def test_plain_text(self):
        assert detect_search_facet("runner") is None
        assert detect_search_facet("  ") is None


class TestCategoryVocabulary:
    """Словарь категорий."""

    def test_builtin(self):
        vocabulary = CategoryVocabulary.builtin()
        assert vocabulary.source == "builtin"
        assert vocabulary.slugs() == list(PRODUCT_CATEGORIES)

    def test_from_backend(self):
        vocabulary = CategoryVocabulary.from_backend(
            [
                {"slug": "jackets", "name": "Jackets"},
                {"slug": "t-shirts", "name": "Tees", "parentId": 3},
                {"slug": "Jackets", "name": "Duplicate"},
                {"name": ""},
                "junk",
            ]
        )

        assert vocabulary.source == "backend"
        assert vocabulary.slugs() == ["jackets", "T-shirts"]
        assert vocabulary.entries[1].parent_id == "3"
        assert "TSHIRTS" in vocabulary
        assert "shoes" not in vocabulary

    @pytest.mark.parametrize("raw", [None, [], [{"title": ""}], {"items": []}])
    def test_fallback_to_builtin(self, raw):
        assert CategoryVocabulary.from_backend(raw).source == "builtin"
