"""
Store Name Normalizer

Supermarket names arrive from several sources (scraped offers, product
catalog, household settings) with different spellings:
- "AH", "Albert Heijn", "albert heijn XL" → "albert heijn"
- "Deka", "DekaMarkt" → "dekamarkt"
- "Jumbo Foodmarkt" → "jumbo"

Every comparison between store names goes through this canonical key.
"""

from typing import Iterable, List, Tuple


class StoreNameNormalizer:
    """
    Maps free-text store names to a canonical lower-case key.

    The alias table is an immutable class constant; normalization is a pure
    function and never fails. Unknown names fall through lower-cased.
    """

    # Exact (lower-cased) names that map to a chain
    EXACT_ALIASES = (
        ('ah', 'albert heijn'),
    )

    # Substring match → canonical key, checked in order
    CONTAINS_ALIASES: Tuple[Tuple[str, str], ...] = (
        ('albert heijn', 'albert heijn'),
        ('jumbo', 'jumbo'),
        ('plus', 'plus'),
        ('aldi', 'aldi'),
        ('dirk', 'dirk'),
        ('coop', 'coop'),
        ('deka', 'dekamarkt'),
        ('vomar', 'vomar'),
        ('poiesz', 'poiesz'),
        ('hoogvliet', 'hoogvliet'),
    )

    @staticmethod
    def normalize(raw_name: str) -> str:
        """
        Canonicalize a store name.

        Examples:
        - "AH" → "albert heijn"
        - "Albert Heijn" → "albert heijn"
        - "DekaMarkt" → "dekamarkt"
        - "Spar City" → "spar city"

        Args:
            raw_name: Store name as written by the data source

        Returns:
            Canonical store key
        """
        name = (raw_name or '').strip().lower()

        for alias, canonical in StoreNameNormalizer.EXACT_ALIASES:
            if name == alias:
                return canonical

        for fragment, canonical in StoreNameNormalizer.CONTAINS_ALIASES:
            if fragment in name:
                return canonical

        return name

    @staticmethod
    def same_store(name_a: str, name_b: str) -> bool:
        """Check whether two raw names refer to the same store."""
        return StoreNameNormalizer.normalize(name_a) == StoreNameNormalizer.normalize(name_b)

    @staticmethod
    def canonical_set(names: Iterable[str]) -> List[str]:
        """Sorted, deduplicated canonical keys for a collection of raw names."""
        return sorted({StoreNameNormalizer.normalize(n) for n in names if n and n.strip()})


# Default household configuration (all stores enabled)
DEFAULT_STORES = [
    'Albert Heijn',
    'Jumbo',
    'Plus',
    'Aldi',
    'Dirk',
    'Coop',
    'DekaMarkt',
    'Vomar',
    'Poiesz',
    'Hoogvliet',
]


def normalize_store_name(raw_name: str) -> str:
    """Module-level shortcut for StoreNameNormalizer.normalize."""
    return StoreNameNormalizer.normalize(raw_name)
