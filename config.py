"""
Runtime configuration for the basket optimizer.

Values are read from the environment (optionally via a .env file):
- DATABASE_URL: price catalog database (SQLite or PostgreSQL)
- DEFAULT_MAX_STORES: store limit used when a household has no settings yet
- LOG_LEVEL: root logging level
"""

import logging
import os

from dotenv import load_dotenv

# Load variables from .env file
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///basket_optimizer.db")

# Households that never opened the settings screen get three stores
DEFAULT_MAX_STORES = int(os.getenv("DEFAULT_MAX_STORES", "3"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging once for scripts and the demo entry point."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
