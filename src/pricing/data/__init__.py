"""Price table persistence layer.

Provides SQLite database management, the typed price repository, and the
one-time seed loader.
"""

from pricing.data.database import PriceDatabase
from pricing.data.seed import seed_prices
from pricing.data.store import PriceRepository

__all__ = ["PriceDatabase", "PriceRepository", "seed_prices"]
