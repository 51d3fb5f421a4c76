"""
Candidate store subsets for basket optimization.

Stores are indexed in sorted canonical order and every non-empty subset is a
bitmask over those indices. One pass over all masks yields the candidates
for every size 1..max_stores at once.
"""

import logging
from typing import Iterable, List, Tuple

from store_names import StoreNameNormalizer

logger = logging.getLogger(__name__)

# Beyond this the 2**n mask space gets slow; real catalogs have ~10 chains
LARGE_STORE_COUNT = 16


def _popcount(mask: int) -> int:
    return bin(mask).count('1')


def candidate_subsets(stores: Iterable[str], max_stores: int) -> List[Tuple[str, ...]]:
    """
    All store subsets of size 1..min(max_stores, n).

    Args:
        stores: Store names (raw or canonical); deduplicated after normalization
        max_stores: Household limit on stores to visit

    Returns:
        Subsets as tuples of canonical names, ordered by size then name
    """
    names = StoreNameNormalizer.canonical_set(stores)
    n = len(names)
    limit = min(max_stores, n)
    if limit < 1:
        return []

    if n > LARGE_STORE_COUNT:
        logger.warning(f"Enumerating subsets over {n} stores, this may be slow")

    subsets = []
    for mask in range(1, 1 << n):
        if _popcount(mask) > limit:
            continue
        subsets.append(tuple(names[i] for i in range(n) if mask & (1 << i)))

    subsets.sort(key=lambda subset: (len(subset), subset))
    return subsets


def generate(stores: Iterable[str], k: int) -> List[Tuple[str, ...]]:
    """
    All distinct subsets of exactly k stores.

    Returns an empty list when k < 1 or k exceeds the number of stores.
    """
    if k < 1:
        return []
    return [subset for subset in candidate_subsets(stores, k) if len(subset) == k]
