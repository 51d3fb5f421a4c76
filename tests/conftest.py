from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so the top-level modules import when running from anywhere
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from database import DatabaseManager  # noqa: E402
from grocery_models import GroceryItem, HouseholdSettings, StoreConfig, StoreQuote  # noqa: E402


def make_item(item_id, quotes, product_id="auto"):
    """GroceryItem with {store: price} quotes; product_id defaults to a linked product."""
    if product_id == "auto":
        product_id = f"prod-{item_id}"
    return GroceryItem(
        id=item_id,
        name=item_id,
        product_id=product_id,
        stores=[StoreQuote(name=store, price=price) for store, price in quotes.items()],
    )


def make_settings(stores, max_stores, disabled=()):
    return HouseholdSettings(
        max_stores=max_stores,
        selected_stores=[StoreConfig(name=s, is_selected=s not in disabled) for s in stores],
    )


@pytest.fixture
def scenario_items():
    return [
        make_item("X", {"S1": 1.00, "S2": 1.20}),
        make_item("Y", {"S1": 2.00}),
    ]


@pytest.fixture
def db_manager():
    db = DatabaseManager("sqlite:///:memory:")
    db.init_db()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db_session(db_manager):
    session = db_manager.get_session()
    try:
        yield session
    finally:
        session.close()
