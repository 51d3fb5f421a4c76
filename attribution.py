"""
Per-item store attribution for the chosen store combination.

Answers two display questions:
- which of the chosen stores is cheapest for each item
- how many items each chosen store "wins" (badge: "N items cheapest here")

Exact price ties are kept: every tied store is flagged as best.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from grocery_models import GroceryItem
from price_matrix import NOT_AVAILABLE, PriceMatrix
from store_names import StoreNameNormalizer


@dataclass
class Attribution:
    """Cheapest-store annotations for a grocery list."""
    per_item_best_store: Dict[str, List[str]] = field(default_factory=dict)
    per_item_best_price: Dict[str, float] = field(default_factory=dict)
    per_store_item_counts: Dict[str, int] = field(default_factory=dict)

    def is_best(self, item_id: str, store_name: str) -> bool:
        """Check if a store (raw or canonical name) is cheapest for an item."""
        key = StoreNameNormalizer.normalize(store_name)
        return key in self.per_item_best_store.get(item_id, [])

    def to_dict(self) -> Dict:
        return {
            "per_item_best_store": self.per_item_best_store,
            "per_item_best_price": {
                item_id: round(price, 2)
                for item_id, price in self.per_item_best_price.items()
            },
            "per_store_item_counts": self.per_store_item_counts,
        }


def attribute_matrix(matrix: PriceMatrix, chosen_stores: Iterable[str]) -> Attribution:
    """
    Attribute items to their cheapest store(s) among the chosen ones.

    Args:
        matrix: PriceMatrix of the grocery list
        chosen_stores: Store names of the recommended combination

    Returns:
        Attribution; items no chosen store quotes are left out
    """
    stores = [
        store for store in StoreNameNormalizer.canonical_set(chosen_stores)
        if store in matrix.data.columns
    ]
    counts = {store: 0 for store in stores}
    if not stores:
        return Attribution(per_store_item_counts=counts)

    sub = matrix.data[stores]
    best = sub.min(axis=1)

    per_item_best_store = {}
    per_item_best_price = {}
    for item_id, row in sub.iterrows():
        lowest = float(best[item_id])
        if lowest == NOT_AVAILABLE:
            continue

        winners = [store for store in stores if row[store] == lowest]
        per_item_best_store[item_id] = winners
        per_item_best_price[item_id] = lowest
        for store in winners:
            counts[store] += 1

    return Attribution(
        per_item_best_store=per_item_best_store,
        per_item_best_price=per_item_best_price,
        per_store_item_counts=counts,
    )


def attribute_items(items: Iterable[GroceryItem], chosen_stores: Iterable[str]) -> Attribution:
    """Attribute grocery items directly, building the price matrix first."""
    chosen = list(chosen_stores)
    return attribute_matrix(PriceMatrix.from_items(items, chosen), chosen)
