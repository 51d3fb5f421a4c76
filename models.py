"""
SQLAlchemy ORM Models for the Price Catalog

Tables:
- stores: Supermarket chains with their canonical name
- products: Catalog products that grocery items link to (product_id)
- prices: Latest quote for each product at each store, with sale metadata
"""

from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Boolean, Date, DateTime, ForeignKey,
    Numeric, Index, UniqueConstraint
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class Store(Base):
    """Supermarket chain"""
    __tablename__ = 'stores'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False)  # Display name, e.g. "Albert Heijn"
    canonical_name = Column(String(255), nullable=False, index=True)  # e.g. "albert heijn"
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    prices = relationship("Price", back_populates="store", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Store {self.name}>"


class Product(Base):
    """Catalog product"""
    __tablename__ = 'products'

    id = Column(Integer, primary_key=True)
    external_id = Column(String(255), unique=True, nullable=False)  # product_id on grocery items
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    prices = relationship("Price", back_populates="product", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Product {self.external_id} {self.name}>"


class Price(Base):
    """Current price of a product at a store"""
    __tablename__ = 'prices'
    __table_args__ = (
        UniqueConstraint('product_id', 'store_id', name='unique_product_store'),
        Index('idx_prices_product_id', 'product_id'),
        Index('idx_prices_store_in_stock', 'store_id', 'in_stock'),
    )

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey('products.id'), nullable=False)
    store_id = Column(Integer, ForeignKey('stores.id'), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    original_price = Column(Numeric(10, 2), nullable=True)  # Set when on sale
    sale_type = Column(String(100), nullable=True)  # e.g. "1+1 gratis"
    valid_until = Column(Date, nullable=True)
    in_stock = Column(Boolean, default=True)
    last_verified = Column(DateTime, default=datetime.utcnow)

    # Relationships
    product = relationship("Product", back_populates="prices")
    store = relationship("Store", back_populates="prices")

    def __repr__(self):
        return f"<Price {self.product.external_id} @ {self.store.name}: €{self.price}>"
