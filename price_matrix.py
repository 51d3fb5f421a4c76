"""
Price matrix: rows are grocery items, columns are canonical store names.

Values are the item's price at that store. If a store has no quote for an
item, the value is float('inf').
"""

import logging
from typing import Iterable, List, Sequence

import pandas as pd

from grocery_models import GroceryItem
from store_names import StoreNameNormalizer

logger = logging.getLogger(__name__)

NOT_AVAILABLE = float('inf')


class PriceMatrix:
    """
    Two-sided price matrix: rows are item ids, columns are stores.

    Every cell starts as float('inf') (no quote).
    """

    def __init__(self, item_ids: Sequence[str], store_names: Sequence[str]):
        """
        Initialize the price matrix with items and stores.

        Args:
            item_ids: Unique grocery item ids
            store_names: Canonical store names
        """
        self.item_ids = list(item_ids)
        self.store_names = list(store_names)
        self.excluded_items: List[str] = []

        # Initialize DataFrame with infinity (no quote)
        self.data = pd.DataFrame(
            data=NOT_AVAILABLE,
            index=self.item_ids,
            columns=self.store_names,
            dtype=float
        )

    @classmethod
    def from_items(
        cls,
        items: Iterable[GroceryItem],
        store_names: Iterable[str],
    ) -> "PriceMatrix":
        """
        Build a matrix from item snapshots, restricted to the given stores.

        Only priced items (linked product, at least one usable quote) are
        considered. Priced items without a single quote from one of the
        given stores are left out of the matrix and listed in
        `excluded_items`.

        Args:
            items: Grocery items with store quotes
            store_names: Stores to keep (raw or canonical names)

        Returns:
            Populated PriceMatrix
        """
        stores = StoreNameNormalizer.canonical_set(store_names)
        allowed = set(stores)

        rows = {}
        excluded = []
        seen = set()
        for item in items:
            if not item.is_priced:
                continue
            if item.id in seen:
                raise ValueError(f"Duplicate item id '{item.id}' in grocery list")
            seen.add(item.id)

            quotes = [
                (quote.canonical_store, quote.price)
                for quote in item.priced_quotes
                if quote.canonical_store in allowed
            ]
            if not quotes:
                excluded.append(item.id)
                continue

            rows[item.id] = quotes

        matrix = cls(list(rows), stores)
        for item_id, quotes in rows.items():
            for store_name, price in quotes:
                matrix.add_quote(item_id, store_name, price)

        matrix.excluded_items = excluded
        if matrix.excluded_items:
            logger.debug(f"No enabled store quotes for items: {matrix.excluded_items}")

        return matrix

    def set_price(self, item_id: str, store_name: str, price: float) -> None:
        """Set the price of an item at a store."""
        if item_id not in self.data.index:
            raise ValueError(f"Item '{item_id}' not in price matrix")
        if store_name not in self.data.columns:
            raise ValueError(f"Store '{store_name}' not in price matrix")

        self.data.loc[item_id, store_name] = price

    def add_quote(self, item_id: str, store_name: str, price: float) -> None:
        """Record a quote, keeping the lowest price when a store quotes twice."""
        if price < self.get_price(item_id, store_name):
            self.set_price(item_id, store_name, price)

    def get_price(self, item_id: str, store_name: str) -> float:
        """Get the price of an item at a store (returns inf if not quoted)."""
        return float(self.data.loc[item_id, store_name])

    def best_prices(self, store_names: Sequence[str]) -> pd.Series:
        """Lowest price per item among the given stores (inf if none quotes it)."""
        if not store_names:
            return pd.Series(NOT_AVAILABLE, index=self.data.index, dtype=float)
        return self.data[list(store_names)].min(axis=1)

    def is_empty(self) -> bool:
        return self.data.empty

