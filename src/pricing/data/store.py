"""Typed SQLite read/write abstraction for the price table.

Provides PriceRepository with typed methods for reading price records and
bulk-inserting seed rows. All SQL is isolated behind this interface.

CRITICAL: price is stored as TEXT in SQLite and restored as Decimal on read.
"""

from datetime import date
from decimal import Decimal

from pricing.data.database import PriceDatabase
from pricing.logging import get_logger
from pricing.models import PriceRecord

logger = get_logger(__name__)

_SELECT_COLUMNS = "SELECT id, price_date, ticker, price, price_std, version FROM price"


class PriceRepository:
    """Async SQLite repository for price records.

    Records come back in natural (insertion id) order, which the HTTP layer
    preserves in its responses.

    Usage:
        async with PriceDatabase("data/pricing.db") as database:
            repository = PriceRepository(database)
            records = await repository.get_by_ticker("AAPL")
    """

    def __init__(self, database: PriceDatabase) -> None:
        self._database = database

    # ──────────────────────────────────────────────
    # Write methods
    # ──────────────────────────────────────────────

    async def insert_prices(
        self, rows: list[tuple[date, str, Decimal, float]]
    ) -> int:
        """Insert (price_date, ticker, price, price_std) rows.

        Returns the number of inserted rows.
        """
        if not rows:
            return 0

        data = [
            (price_date.isoformat(), ticker, str(price), float(price_std))
            for price_date, ticker, price, price_std in rows
        ]

        cursor = await self._database.db.executemany(
            "INSERT INTO price (price_date, ticker, price, price_std) "
            "VALUES (?, ?, ?, ?)",
            data,
        )
        await self._database.db.commit()

        inserted = cursor.rowcount
        logger.debug("inserted_prices", total=len(rows), inserted=inserted)
        return inserted

    # ──────────────────────────────────────────────
    # Read methods
    # ──────────────────────────────────────────────

    async def get_all(self) -> list[PriceRecord]:
        """Return every price record in id order."""
        cursor = await self._database.db.execute(f"{_SELECT_COLUMNS} ORDER BY id")
        rows = await cursor.fetchall()
        return [_row_to_record(row) for row in rows]

    async def get_by_ticker(self, ticker: str) -> list[PriceRecord]:
        """Return the records for a ticker in id order; empty if none match.

        Matching is exact and case-sensitive.
        """
        cursor = await self._database.db.execute(
            f"{_SELECT_COLUMNS} WHERE ticker = ? ORDER BY id",
            (ticker,),
        )
        rows = await cursor.fetchall()
        return [_row_to_record(row) for row in rows]

    async def count(self) -> int:
        """Return the number of rows in the price table."""
        cursor = await self._database.db.execute("SELECT COUNT(*) FROM price")
        row = await cursor.fetchone()
        return row[0] if row else 0


def _row_to_record(row: tuple) -> PriceRecord:
    return PriceRecord(
        id=row[0],
        price_date=date.fromisoformat(row[1]),
        ticker=row[2],
        price=Decimal(row[3]),
        price_std=float(row[4]),
        version=row[5],
    )
