"""Тесты слияния связок товар-магазин."""

from catalog_engine.models import UNKNOWN_STORE_NAME, NormalizedStoreAssociation
from catalog_engine.services.reconciler import (
    MERGE_RULES,
    merge,
    merge_association,
    merge_many,
)


def store(store_id: str, **fields) -> NormalizedStoreAssociation:
    return NormalizedStoreAssociation(store_id=store_id, **fields)


class TestMergePrecedence:
    """Правила приоритета полей."""

    def test_sizes_taken_from_secondary_when_primary_empty(self):
        result = merge([store("s1", sizes=())], [store("s1", sizes=("M", "L"))])
        assert result[0].sizes == ("M", "L")

    def test_existing_sizes_kept(self):
        result = merge([store("s1", sizes=("S",))], [store("s1", sizes=("M", "L"))])
        assert result[0].sizes == ("S",)

    def test_positive_incoming_price_wins(self):
        result = merge([store("s1", price=0.0)], [store("s1", price=42.0)])
        assert result[0].price == 42.0

    def test_zero_incoming_price_ignored(self):
        result = merge([store("s1", price=42.0)], [store("s1", price=0.0)])
        assert result[0].price == 42.0

    def test_placeholder_name_does_not_overwrite(self):
        result = merge(
            [store("s1", store_name="Real Shop")],
            [store("s1", store_name=UNKNOWN_STORE_NAME)],
        )
        assert result[0].store_name == "Real Shop"

    def test_named_incoming_overwrites(self):
        result = merge([store("s1")], [store("s1", store_name="Renamed")])
        assert result[0].store_name == "Renamed"

    def test_other_fields_overwrite_when_present(self):
        result = merge(
            [store("s1", telegram_url="https://t.me/old", logo_url="https://x/a.png")],
            [store("s1", telegram_url="https://t.me/new")],
        )
        assert result[0].telegram_url == "https://t.me/new"
        assert result[0].logo_url == "https://x/a.png"

    def test_rule_table_covers_special_fields(self):
        assert set(MERGE_RULES) == {"sizes", "price", "store_name"}

    def test_custom_rules(self):
        merged = merge_association(
            store("s1", price=10.0),
            store("s1", price=0.0),
            rules={"price": lambda existing, incoming: incoming},
        )
        assert merged.price == 0.0


class TestMergeShape:
    """Состав и порядок результата."""

    def test_scenario_detail_and_endpoint(self):
        detail = [store("s1", price=0.0, sizes=())]
        endpoint = [store("s1", price=49.99, sizes=("M",))]

        result = merge(detail, endpoint)

        assert len(result) == 1
        assert result[0].store_id == "s1"
        assert result[0].price == 49.99
        assert result[0].sizes == ("M",)

    def test_completeness_and_uniqueness(self):
        primary = [store("a"), store("b"), store("a", price=5.0)]
        secondary = [store("c"), store("b"), store("d")]

        result = merge(primary, secondary)
        ids = [entry.store_id for entry in result]

        assert ids == ["a", "b", "c", "d"]
        assert len(ids) == len(set(ids))

    def test_primary_duplicates_last_wins_at_first_position(self):
        result = merge([store("a", price=1.0), store("b"), store("a", price=5.0)], [])
        assert [e.store_id for e in result] == ["a", "b"]
        assert result[0].price == 5.0

    def test_not_commutative(self):
        a = [store("s1", store_name="Alpha", sizes=("S",))]
        b = [store("s1", store_name="Beta", sizes=("M",))]

        assert merge(a, b)[0].sizes == ("S",)
        assert merge(b, a)[0].sizes == ("M",)
        assert merge(a, b) != merge(b, a)

    def test_inputs_not_mutated(self):
        primary = [store("s1", price=0.0)]
        secondary = [store("s1", price=3.0)]
        merge(primary, secondary)
        assert primary == [store("s1", price=0.0)]

    def test_empty_inputs(self):
        assert merge([], []) == []
        assert merge_many() == []

    def test_merge_many_folds_left(self):
        result = merge_many(
            [store("s1", price=0.0)],
            [store("s1", price=10.0), store("s2")],
            [store("s1", price=20.0, sizes=("L",))],
        )
        assert [e.store_id for e in result] == ["s1", "s2"]
        assert result[0].price == 20.0
        assert result[0].sizes == ("L",)
