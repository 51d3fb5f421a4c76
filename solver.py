"""
Basket Solver - Cheapest Store Combination

This module implements the "Brain" that picks which supermarkets to visit.

Rules:
- Candidates: every subset of the household's enabled stores, size 1..max_stores
- Coverage: a subset only qualifies if it can price every priced item
- Basket cost: for each item, the lowest price among the subset's stores
- Winner: cheapest covering subset (ties: fewer stores, then store names)
- Fallback: if nothing covers, the first max_stores enabled stores, flagged
  as covers_all=False with the items they can't price
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from attribution import Attribution, attribute_matrix
from combinations import candidate_subsets
from grocery_models import GroceryItem, HouseholdSettings
from price_matrix import PriceMatrix
from store_names import StoreNameNormalizer

logger = logging.getLogger(__name__)


@dataclass
class SubsetEvaluation:
    """Basket cost of one candidate store subset."""
    stores: Tuple[str, ...]
    total_price: float  # Sum over the items the subset can price
    covers_all: bool
    uncovered_items: List[str] = field(default_factory=list)


@dataclass
class Recommendation:
    """Final result from the solver."""
    stores: List[str]  # Canonical store names
    total_price: float
    covers_all: bool = True
    display_names: Dict[str, str] = field(default_factory=dict)
    uncovered_items: List[str] = field(default_factory=list)
    excluded_items: List[str] = field(default_factory=list)
    candidates_evaluated: int = 0

    @property
    def is_fallback(self) -> bool:
        """True when the store list carries no price guarantee."""
        return not self.covers_all

    def store_labels(self) -> List[str]:
        """Configured display names of the chosen stores."""
        return [self.display_names.get(store, store) for store in self.stores]

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "stores": self.stores,
            "store_labels": self.store_labels(),
            "total_price": round(self.total_price, 2),
            "covers_all": self.covers_all,
            "uncovered_items": self.uncovered_items,
            "excluded_items": self.excluded_items,
            "candidates_evaluated": self.candidates_evaluated,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to formatted JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


def evaluate_subset(matrix: PriceMatrix, subset: Sequence[str]) -> SubsetEvaluation:
    """
    Price the basket for one store subset.

    For each item, pick the cheapest store among those in the subset. An item
    none of them quotes makes the subset non-covering; the total then only
    sums the items it can price.

    Args:
        matrix: PriceMatrix of priced items × enabled stores
        subset: Canonical store names

    Returns:
        SubsetEvaluation for the subset
    """
    best = matrix.best_prices(list(subset))
    available = best < float('inf')

    uncovered = [str(item_id) for item_id in best.index[~available.to_numpy()]]
    total = float(best[available].sum())

    return SubsetEvaluation(
        stores=tuple(subset),
        total_price=total,
        covers_all=not uncovered,
        uncovered_items=uncovered,
    )


def _selection_key(evaluation: SubsetEvaluation):
    # Cheapest first, then fewer stores, then alphabetical
    return (evaluation.total_price, len(evaluation.stores), evaluation.stores)


def select_optimal(
    evaluated: List[SubsetEvaluation],
    fallback: Optional[SubsetEvaluation] = None,
) -> Optional[SubsetEvaluation]:
    """
    Pick the cheapest subset that covers every priced item.

    Args:
        evaluated: All evaluated candidate subsets
        fallback: Store list to show when no candidate covers everything

    Returns:
        Winning SubsetEvaluation, the fallback, or None if nothing was evaluated
    """
    if not evaluated:
        return None

    covering = [evaluation for evaluation in evaluated if evaluation.covers_all]
    if covering:
        return min(covering, key=_selection_key)

    if fallback is not None:
        logger.warning(
            f"No store combination covers all items, falling back to "
            f"{list(fallback.stores)} ({len(fallback.uncovered_items)} items unpriced)"
        )
    return fallback


def _coerce_items(items: Optional[Iterable[Union[GroceryItem, Dict]]]) -> List[GroceryItem]:
    return [
        item if isinstance(item, GroceryItem) else GroceryItem.model_validate(item)
        for item in items or []
    ]


def _coerce_settings(settings: Union[HouseholdSettings, Dict]) -> HouseholdSettings:
    if isinstance(settings, HouseholdSettings):
        return settings
    return HouseholdSettings.model_validate(settings)


def _solve(
    items: Optional[Iterable[Union[GroceryItem, Dict]]],
    settings: Union[HouseholdSettings, Dict, None],
) -> Optional[Tuple[Recommendation, PriceMatrix]]:
    if settings is None or items is None:
        return None

    items = _coerce_items(items)
    settings = _coerce_settings(settings)

    if not settings.show_price_features:
        logger.debug("Price features disabled for household")
        return None

    enabled = settings.enabled_stores()
    if not items or not enabled:
        return None

    store_names = [StoreNameNormalizer.normalize(store.name) for store in enabled]
    matrix = PriceMatrix.from_items(items, store_names)
    if matrix.is_empty():
        logger.debug("No priced items at enabled stores")
        return None

    candidates = candidate_subsets(matrix.store_names, settings.max_stores)
    evaluated = [evaluate_subset(matrix, subset) for subset in candidates]
    for evaluation in evaluated:
        logger.debug(
            f"  {evaluation.stores}: €{evaluation.total_price:.2f} "
            f"covers_all={evaluation.covers_all}"
        )

    # Configuration order, not alphabetical
    fallback = evaluate_subset(matrix, store_names[:settings.max_stores])
    winner = select_optimal(evaluated, fallback=fallback)
    if winner is None:
        return None

    display_names = settings.display_names()
    recommendation = Recommendation(
        stores=sorted(winner.stores),
        total_price=winner.total_price,
        covers_all=winner.covers_all,
        display_names={store: display_names.get(store, store) for store in winner.stores},
        uncovered_items=winner.uncovered_items,
        excluded_items=matrix.excluded_items,
        candidates_evaluated=len(evaluated),
    )

    logger.info(
        f"Recommended {recommendation.store_labels()} for "
        f"€{recommendation.total_price:.2f} ({len(evaluated)} combinations analyzed)"
    )
    return recommendation, matrix


def recommend(
    items: Optional[Iterable[Union[GroceryItem, Dict]]],
    settings: Union[HouseholdSettings, Dict, None],
) -> Optional[Recommendation]:
    """
    Find the cheapest store combination for a grocery list.

    Returns None when there is nothing to recommend: no items (or None),
    no enabled stores, price features switched off, or no item priced at an
    enabled store. Raises ValueError if two priced items share an id.

    Args:
        items: Grocery item snapshots (models or camelCase dicts)
        settings: Household store settings (model or camelCase dict)

    Returns:
        Recommendation or None
    """
    solved = _solve(items, settings)
    if solved is None:
        return None
    return solved[0]


def recommend_with_attribution(
    items: Optional[Iterable[Union[GroceryItem, Dict]]],
    settings: Union[HouseholdSettings, Dict, None],
) -> Optional[Tuple[Recommendation, Attribution]]:
    """Recommendation plus per-item cheapest-store annotations."""
    solved = _solve(items, settings)
    if solved is None:
        return None

    recommendation, matrix = solved
    return recommendation, attribute_matrix(matrix, recommendation.stores)


# ============================================================================
# UTILITY FUNCTION: Display results in a human-readable format
# ============================================================================

def print_recommendation(
    recommendation: Optional[Recommendation],
    attribution: Optional[Attribution] = None,
) -> None:
    """Pretty-print a recommendation.

    Args:
        recommendation: Recommendation or None
        attribution: Optional per-store item counts to show as badges
    """
    print("\n" + "=" * 80)
    print("🛒 CHEAPEST STORE COMBINATION")
    print("=" * 80)

    if recommendation is None:
        print("\nNothing to recommend (no priced items or no enabled stores).")
        print("=" * 80)
        return

    for store, label in zip(recommendation.stores, recommendation.store_labels()):
        badge = ""
        if attribution is not None:
            count = attribution.per_store_item_counts.get(store, 0)
            if count > 0:
                badge = f"  ({count} items cheapest here)"
        print(f"  • {label}{badge}")

    print(f"\n💶 Total: €{recommendation.total_price:.2f}")

    if not recommendation.covers_all:
        print("⚠️  No combination covers every item; price is not guaranteed.")
        print(f"   Unpriced items: {', '.join(recommendation.uncovered_items)}")

    if recommendation.excluded_items:
        print(f"ℹ️  Not sold at your stores: {', '.join(recommendation.excluded_items)}")

    print(f"\nCombinations analyzed: {recommendation.candidates_evaluated}")
    print("=" * 80)
