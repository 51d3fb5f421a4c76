import pytest

from conftest import make_item, make_settings
from grocery_models import GroceryItem
from price_catalog import InMemoryPriceCatalog
from recommender import BasketRecommender


def test_unchanged_snapshot_is_not_recomputed(scenario_items):
    recommender = BasketRecommender()
    settings = make_settings(["S1", "S2"], max_stores=1)

    first = recommender.refresh(scenario_items, settings)
    second = recommender.refresh(list(scenario_items), make_settings(["S1", "S2"], max_stores=1))

    assert first is second
    assert recommender.computations == 1
    assert recommender.attribution.per_store_item_counts == {"s1": 2}


def test_changed_settings_trigger_recompute():
    items = [
        make_item("X", {"S1": 1.50, "S2": 1.00}),
        make_item("Y", {"S1": 2.00}),
    ]
    recommender = BasketRecommender()

    one = recommender.refresh(items, make_settings(["S1", "S2"], max_stores=1))
    two = recommender.refresh(items, make_settings(["S1", "S2"], max_stores=2))

    assert recommender.computations == 2
    assert one.total_price == pytest.approx(3.50)
    assert two.total_price == pytest.approx(3.00)


def test_invalidate_forces_recompute(scenario_items):
    recommender = BasketRecommender()
    settings = make_settings(["S1", "S2"], max_stores=1)

    recommender.refresh(scenario_items, settings)
    recommender.invalidate()
    recommender.refresh(scenario_items, settings)

    assert recommender.computations == 2


def test_catalog_fills_in_missing_quotes():
    catalog = InMemoryPriceCatalog({"p1": [{"name": "Dirk", "price": 0.89}]})
    recommender = BasketRecommender(catalog=catalog)

    rec = recommender.refresh(
        [GroceryItem(id="1", name="Bananen", product_id="p1")],
        {"maxStores": 1, "selectedStores": [{"name": "Dirk", "isSelected": True}]},
    )

    assert rec.stores == ["dirk"]
    assert rec.total_price == pytest.approx(0.89)


def test_invalid_settings_yield_no_recommendation(scenario_items):
    recommender = BasketRecommender()
    assert recommender.refresh(scenario_items, {"maxStores": 0, "selectedStores": []}) is None
    assert recommender.recommendation is None


class _BrokenCatalog:
    def quotes_for(self, product_id):
        raise RuntimeError("catalog offline")


def test_catalog_failure_yields_no_recommendation():
    recommender = BasketRecommender(catalog=_BrokenCatalog())
    rec = recommender.refresh(
        [GroceryItem(id="1", name="Bananen", product_id="p1")],
        make_settings(["Dirk"], max_stores=1),
    )
    assert rec is None
    assert recommender.computations == 0


def test_missing_settings_clear_previous_result(scenario_items):
    recommender = BasketRecommender()
    recommender.refresh(scenario_items, make_settings(["S1", "S2"], max_stores=1))

    assert recommender.refresh(scenario_items, None) is None
    assert recommender.attribution is None


def test_duplicate_item_ids_yield_no_recommendation():
    recommender = BasketRecommender()
    items = [make_item("1", {"AH": 1.00}), make_item("1", {"AH": 2.00})]

    assert recommender.refresh(items, make_settings(["AH"], max_stores=1)) is None
    assert recommender.recommendation is None
    assert recommender.computations == 0


def test_missing_items_yield_no_recommendation():
    recommender = BasketRecommender()

    assert recommender.refresh(None, make_settings(["S1"], max_stores=1)) is None
    assert recommender.computations == 1
