"""
Price Catalog - store quotes per catalog product.

The optimizer never fetches prices itself. Grocery items either arrive with
their quotes already attached, or the caller fills them in from a catalog:
- InMemoryPriceCatalog: dict-backed, for tests and scripts
- SQLPriceCatalog: reads the prices table (in-stock quotes only)
"""

import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Protocol

from sqlalchemy.orm import Session

from grocery_models import GroceryItem, StoreQuote, parse_price
from models import Price, Product, Store
from store_names import StoreNameNormalizer

logger = logging.getLogger(__name__)


class PriceCatalog(Protocol):
    """Anything that can list store quotes for a catalog product."""

    def quotes_for(self, product_id: str) -> List[StoreQuote]:
        ...


class InMemoryPriceCatalog:
    """Price catalog kept in a dict: {product_id: [StoreQuote, ...]}"""

    def __init__(self, quotes: Optional[Dict[str, List]] = None):
        self._quotes: Dict[str, List[StoreQuote]] = {}
        for product_id, product_quotes in (quotes or {}).items():
            for quote in product_quotes:
                self.add_quote(product_id, quote)

    def add_quote(self, product_id: str, quote) -> None:
        """Add a quote (StoreQuote or dict) for a product."""
        if not isinstance(quote, StoreQuote):
            quote = StoreQuote.model_validate(quote)
        self._quotes.setdefault(str(product_id), []).append(quote)

    def quotes_for(self, product_id: str) -> List[StoreQuote]:
        return list(self._quotes.get(str(product_id), []))


class SQLPriceCatalog:
    """Price catalog backed by the prices table."""

    def __init__(self, session: Session):
        """
        Args:
            session: SQLAlchemy database session
        """
        self.session = session

    @staticmethod
    def _to_quote(price: Price) -> StoreQuote:
        return StoreQuote(
            name=price.store.name,
            price=float(price.price),
            original_price=float(price.original_price) if price.original_price is not None else None,
            sale_type=price.sale_type,
            valid_until=price.valid_until.isoformat() if price.valid_until else None,
        )

    def quotes_for(self, product_id: str) -> List[StoreQuote]:
        """In-stock quotes for one product."""
        prices = (
            self.session.query(Price)
            .join(Product)
            .filter(
                Product.external_id == str(product_id),
                Price.in_stock == True  # noqa: E712
            )
            .all()
        )
        return [self._to_quote(p) for p in prices]

    def quotes_for_many(self, product_ids: Iterable[str]) -> Dict[str, List[StoreQuote]]:
        """In-stock quotes for several products in one query."""
        ids = sorted({str(pid) for pid in product_ids if pid})
        result: Dict[str, List[StoreQuote]] = {pid: [] for pid in ids}
        if not ids:
            return result

        prices = (
            self.session.query(Price)
            .join(Product)
            .filter(
                Product.external_id.in_(ids),
                Price.in_stock == True  # noqa: E712
            )
            .all()
        )
        for p in prices:
            result[p.product.external_id].append(self._to_quote(p))

        logger.debug(f"Catalog lookup: {len(prices)} quotes for {len(ids)} products")
        return result

    def record_quote(
        self,
        product_id: str,
        store_name: str,
        price,
        product_name: Optional[str] = None,
        original_price=None,
        sale_type: Optional[str] = None,
        valid_until: Optional[date] = None,
        in_stock: bool = True,
    ) -> Optional[Price]:
        """
        Insert or update the current quote of a product at a store.

        Store names are matched on their canonical form, so "AH" updates the
        "Albert Heijn" row. Unparseable prices are skipped.

        Returns:
            The Price row, or None if the price was unusable
        """
        value = parse_price(price)
        if value is None:
            logger.warning(f"Skipping unusable price {price!r} for {product_id} @ {store_name}")
            return None

        canonical = StoreNameNormalizer.normalize(store_name)
        store = self.session.query(Store).filter(Store.canonical_name == canonical).first()
        if store is None:
            store = Store(name=store_name, canonical_name=canonical)
            self.session.add(store)

        product = self.session.query(Product).filter(Product.external_id == str(product_id)).first()
        if product is None:
            product = Product(external_id=str(product_id), name=product_name or str(product_id))
            self.session.add(product)

        self.session.flush()

        row = self.session.query(Price).filter(
            Price.product_id == product.id,
            Price.store_id == store.id
        ).first()
        if row is None:
            row = Price(product=product, store=store)
            self.session.add(row)

        row.price = value
        row.original_price = parse_price(original_price)
        row.sale_type = sale_type
        row.valid_until = valid_until
        row.in_stock = in_stock
        row.last_verified = datetime.utcnow()

        self.session.flush()
        return row


def attach_quotes(items: Iterable[GroceryItem], catalog: PriceCatalog) -> List[GroceryItem]:
    """
    Fill in store quotes from a catalog.

    Items that already carry quotes, or have no product_id, are returned
    unchanged. Input items are never mutated; new snapshots are returned.
    """
    items = list(items)
    wanted = [item.product_id for item in items if item.product_id and not item.stores]

    if hasattr(catalog, "quotes_for_many"):
        lookup = catalog.quotes_for_many(wanted)
    else:
        lookup = {pid: catalog.quotes_for(pid) for pid in wanted}

    attached = []
    for item in items:
        if item.product_id and not item.stores:
            quotes = lookup.get(item.product_id, [])
            item = item.model_copy(update={"stores": quotes})
        attached.append(item)
    return attached
