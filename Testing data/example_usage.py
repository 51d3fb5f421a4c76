"""
Example usage of the basket optimizer.

Demonstrates:
- Building grocery items with store quotes (raw store names, Dutch price text)
- Household settings with a store limit
- Running the solver and printing per-store badges
- Letting the orchestrator skip recomputation for an unchanged snapshot
- Filling in quotes from the SQL price catalog (DATABASE_URL in .env)
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from config import configure_logging
from database import get_db_manager
from price_catalog import SQLPriceCatalog
from recommender import BasketRecommender
from solver import print_recommendation, recommend_with_attribution


def main():
    """Example grocery list across four supermarkets."""
    configure_logging()

    items = [
        {
            "id": "1",
            "name": "Halfvolle melk",
            "productId": "melk-1l",
            "stores": [
                {"name": "AH", "price": "1,19"},
                {"name": "Jumbo", "price": "1,15"},
                {"name": "Lidl", "price": 0.99},
            ],
        },
        {
            "id": "2",
            "name": "Volkoren brood",
            "productId": "brood-800g",
            "stores": [
                {"name": "Albert Heijn", "price": "2,49"},
                {"name": "Jumbo", "price": "2,29", "originalPrice": "2,69", "saleType": "bonus"},
            ],
        },
        {
            "id": "3",
            "name": "Pindakaas",
            "productId": "pindakaas-350g",
            "stores": [
                {"name": "Dirk van den Broek", "price": "2,05"},
                {"name": "AH", "price": "2,39"},
            ],
        },
        {
            # Not linked to a product: ignored by the optimizer
            "id": "4",
            "name": "Bloemen voor oma",
            "stores": [],
        },
    ]

    settings = {
        "maxStores": 2,
        "selectedStores": [
            {"name": "Albert Heijn", "isSelected": True},
            {"name": "Jumbo", "isSelected": True},
            {"name": "Dirk", "isSelected": True},
            {"name": "Lidl", "isSelected": False},
        ],
    }

    result = recommend_with_attribution(items, settings)
    if result is None:
        print_recommendation(None)
    else:
        recommendation, attribution = result
        print_recommendation(recommendation, attribution)
        print(recommendation.to_json())

    recommender = BasketRecommender()
    recommender.refresh(items, settings)
    recommender.refresh(items, settings)
    print(f"\nOptimizer runs for two identical refreshes: {recommender.computations}")

    catalog_example(settings)


def catalog_example(settings):
    """Same household, but the list only links products; prices come from the catalog."""
    db = get_db_manager()
    db.init_db()
    if not db.health_check():
        print("Price catalog unavailable, skipping catalog example")
        return

    db.seed_stores()
    with db.session_scope() as session:
        catalog = SQLPriceCatalog(session)
        catalog.record_quote("melk-1l", "AH", "1,19", product_name="Halfvolle melk")
        catalog.record_quote("melk-1l", "Jumbo", "1,15", product_name="Halfvolle melk")
        catalog.record_quote("kaas-500g", "Dirk", "4,99", product_name="Jonge kaas")
        catalog.record_quote(
            "kaas-500g", "Albert Heijn", "5,49", product_name="Jonge kaas",
            original_price="6,29", sale_type="bonus",
        )

    session = db.get_session()
    try:
        recommender = BasketRecommender(catalog=SQLPriceCatalog(session))
        items = [
            {"id": "1", "name": "Halfvolle melk", "productId": "melk-1l"},
            {"id": "2", "name": "Jonge kaas", "productId": "kaas-500g"},
        ]
        print_recommendation(recommender.refresh(items, settings), recommender.attribution)
    finally:
        session.close()


if __name__ == "__main__":
    main()
