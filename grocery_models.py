"""
Input snapshot models for the basket optimizer.

The surrounding app hands the engine an immutable snapshot of:
- grocery items, each with zero or more store price quotes
- household store settings (enabled stores, store limit)

Both camelCase keys (as stored by the list app) and snake_case names are
accepted. Prices are parsed leniently so a malformed quote is dropped
instead of breaking the whole optimization.
"""

import math
import re
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import DEFAULT_MAX_STORES
from store_names import StoreNameNormalizer

# Currency symbol or code around the number: "€ 1,29", "1.29 EUR"
_CURRENCY_RE = re.compile(r'^(?:€|eur)|(?:€|eur)$', re.IGNORECASE)
# Dutch whole-euro notation: "2,-" or "1.299,-"
_WHOLE_EURO_RE = re.compile(r'(\d{1,3}(?:\.\d{3})+|\d+)[,.]-')
# "2", "2.49" or "2,49"
_PLAIN_RE = re.compile(r'\d+(?:[.,]\d{1,2})?')
# "1.234,56" / "1,234.56"
_DUTCH_GROUPED_RE = re.compile(r'\d{1,3}(?:\.\d{3})+,\d{1,2}')
_ENGLISH_GROUPED_RE = re.compile(r'\d{1,3}(?:,\d{3})+\.\d{1,2}')


def _number_from_text(text: str) -> Optional[str]:
    """Turn a price string into float() syntax, or None if it isn't one price."""
    text = text.replace('\u00a0', '').replace(' ', '')
    text = _CURRENCY_RE.sub('', text)

    match = _WHOLE_EURO_RE.fullmatch(text)
    if match:
        return match.group(1).replace('.', '')
    if _PLAIN_RE.fullmatch(text):
        return text.replace(',', '.')
    if _DUTCH_GROUPED_RE.fullmatch(text):
        return text.replace('.', '').replace(',', '.')
    if _ENGLISH_GROUPED_RE.fullmatch(text):
        return text.replace(',', '')
    return None


def parse_price(value) -> Optional[float]:
    """
    Parse a price from a number or a free-text string.

    Examples:
    - 1.29 → 1.29
    - "€ 1,29" → 1.29
    - "2,-" → 2.0
    - "1.299,-" → 1299.0
    - "1.234,56" → 1234.56
    - "gratis", "", "1e3", "12,345", -1, NaN → None

    A separator followed by three digits is ambiguous ("12,345") and is
    only read as a thousands separator inside a full grouped number.

    Args:
        value: Raw price value from the data source

    Returns:
        Non-negative finite float, or None when the value can't be used
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float, Decimal)):
        price = float(value)
    elif isinstance(value, str):
        number = _number_from_text(value.strip())
        if number is None:
            return None
        price = float(number)
    else:
        return None

    if math.isnan(price) or math.isinf(price) or price < 0:
        return None

    return price


class StoreQuote(BaseModel):
    """A single store's price offer for a grocery item."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    price: Optional[float] = None
    original_price: Optional[float] = Field(default=None, alias="originalPrice")
    sale_type: Optional[str] = Field(default=None, alias="saleType")
    valid_until: Optional[str] = Field(default=None, alias="validUntil")

    @field_validator("price", "original_price", mode="before")
    @classmethod
    def _lenient_price(cls, value):
        return parse_price(value)

    @field_validator("valid_until", mode="before")
    @classmethod
    def _date_to_text(cls, value):
        if value is None or isinstance(value, str):
            return value
        if hasattr(value, "isoformat"):
            return value.isoformat()
        return str(value)

    @property
    def canonical_store(self) -> str:
        return StoreNameNormalizer.normalize(self.name)

    @property
    def is_on_sale(self) -> bool:
        return (
            self.original_price is not None
            and self.price is not None
            and self.price < self.original_price
        )


class GroceryItem(BaseModel):
    """Grocery list entry with its known store quotes."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    product_id: Optional[str] = Field(default=None, alias="productId")
    stores: List[StoreQuote] = Field(default_factory=list)

    @field_validator("id", "product_id", mode="before")
    @classmethod
    def _id_to_text(cls, value):
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("stores", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return [] if value is None else value

    @property
    def priced_quotes(self) -> List[StoreQuote]:
        """Quotes whose price parsed to a usable value."""
        return [quote for quote in self.stores if quote.price is not None]

    @property
    def is_priced(self) -> bool:
        """Only linked products with at least one usable quote take part in optimization."""
        return bool(self.product_id) and bool(self.priced_quotes)


class StoreConfig(BaseModel):
    """A store the household can opt in or out of visiting."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    is_selected: bool = Field(default=True, alias="isSelected")


class HouseholdSettings(BaseModel):
    """Household supermarket settings."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    max_stores: int = Field(default=DEFAULT_MAX_STORES, ge=1, alias="maxStores")
    selected_stores: List[StoreConfig] = Field(default_factory=list, alias="selectedStores")
    show_price_features: bool = Field(default=True, alias="showPriceFeatures")

    def enabled_stores(self) -> List[StoreConfig]:
        """
        Enabled stores in configuration order, one per canonical name.

        When the same chain is configured twice ("AH" and "Albert Heijn"),
        the first entry wins.
        """
        seen = set()
        enabled = []
        for store in self.selected_stores:
            if not store.is_selected or not store.name.strip():
                continue
            key = StoreNameNormalizer.normalize(store.name)
            if key in seen:
                continue
            seen.add(key)
            enabled.append(store)
        return enabled

    def display_names(self) -> dict:
        """Canonical name → configured display name for enabled stores."""
        return {
            StoreNameNormalizer.normalize(store.name): store.name
            for store in self.enabled_stores()
        }
