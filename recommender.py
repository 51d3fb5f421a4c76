"""
Recommendation orchestrator.

The list screen calls `refresh()` whenever the grocery items or the household
settings may have changed. The optimizer only runs again when the snapshot
actually differs from the previous call.
"""

import json
import logging
from typing import Dict, Iterable, List, Optional, Union

from attribution import Attribution
from grocery_models import GroceryItem, HouseholdSettings
from price_catalog import PriceCatalog, attach_quotes
from solver import Recommendation, recommend_with_attribution

logger = logging.getLogger(__name__)


class BasketRecommender:
    """Memoizes the last recommendation per input snapshot."""

    def __init__(self, catalog: Optional[PriceCatalog] = None):
        """
        Args:
            catalog: Optional catalog used to fill in quotes for linked
                items that arrive without any
        """
        self.catalog = catalog
        self.recommendation: Optional[Recommendation] = None
        self.attribution: Optional[Attribution] = None
        self.computations = 0
        self._snapshot_key: Optional[str] = None

    @staticmethod
    def snapshot_key(items: List[GroceryItem], settings: HouseholdSettings) -> str:
        """Structural key of an input snapshot."""
        return json.dumps(
            {
                "items": [item.model_dump(mode="json") for item in items],
                "settings": settings.model_dump(mode="json"),
            },
            sort_keys=True,
        )

    def refresh(
        self,
        items: Iterable[Union[GroceryItem, Dict]],
        settings: Union[HouseholdSettings, Dict, None],
    ) -> Optional[Recommendation]:
        """
        Recompute the recommendation if the inputs changed.

        Any failure (bad snapshot, catalog error) is logged and results in
        no recommendation; the list screen keeps working without one.

        Returns:
            Current Recommendation or None
        """
        try:
            if settings is None:
                self._store(None, None)
                return None

            items = [
                item if isinstance(item, GroceryItem) else GroceryItem.model_validate(item)
                for item in items or []
            ]
            if not isinstance(settings, HouseholdSettings):
                settings = HouseholdSettings.model_validate(settings)

            key = self.snapshot_key(items, settings)
            if key == self._snapshot_key:
                return self.recommendation

            if self.catalog is not None:
                items = attach_quotes(items, self.catalog)

            result = recommend_with_attribution(items, settings)
            self.computations += 1

        except Exception as e:
            logger.error(f"Error calculating optimal stores: {e}")
            self._store(None, None)
            return None

        if result is None:
            self._store(None, None, key)
        else:
            self._store(result[0], result[1], key)
        return self.recommendation

    def invalidate(self) -> None:
        """Forget the memoized snapshot (e.g. after catalog prices changed)."""
        self._snapshot_key = None

    def _store(
        self,
        recommendation: Optional[Recommendation],
        attribution: Optional[Attribution],
        key: Optional[str] = None,
    ) -> None:
        self.recommendation = recommendation
        self.attribution = attribution
        self._snapshot_key = key
