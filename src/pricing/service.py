"""Price lookups with a short-lived cache in front of the repository.

Only the stored records are cached. Sampling happens after the cache, once
per record per request, so cached rows still produce fresh prices.
"""

from pricing.cache import TTLCache
from pricing.data.store import PriceRepository
from pricing.logging import get_logger
from pricing.models import PriceRecord

logger = get_logger(__name__)

_ALL_PRICES_KEY = ("prices",)


class PriceService:
    """Read-side service for price records.

    Args:
        repository: Source of price records.
        cache_ttl_seconds: Expire-after-write lifetime for cached queries.
    """

    def __init__(self, repository: PriceRepository, cache_ttl_seconds: float = 1.0) -> None:
        self._repository = repository
        self._cache: TTLCache[list[PriceRecord]] = TTLCache(cache_ttl_seconds)

    async def get_all_prices(self) -> list[PriceRecord]:
        """All records in repository order."""
        return await self._cache.get_or_load(_ALL_PRICES_KEY, self._load_all)

    async def get_price_by_ticker(self, ticker: str) -> list[PriceRecord]:
        """Records for ticker; empty list when the ticker is unknown."""

        async def load() -> list[PriceRecord]:
            records = await self._repository.get_by_ticker(ticker)
            logger.debug("prices_loaded", ticker=ticker, count=len(records))
            return records

        return await self._cache.get_or_load(("pricesByTicker", ticker), load)

    async def invalidate(self) -> None:
        await self._cache.invalidate()

    async def _load_all(self) -> list[PriceRecord]:
        records = await self._repository.get_all()
        logger.debug("prices_loaded", count=len(records))
        return records
