"""One-time load of the price table from a CSV extract.

The extract has a header line followed by rows of
``price_date,ticker,price,price_std``; it may be gzip-compressed (``.gz``).
It spans several price dates, but the service serves a single date: either
the configured one or one picked at random from the dates in the file.

Seeding only runs against an empty table, so restarts never duplicate rows.
"""

import csv
import gzip
import io
import random
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

from pricing.config import SeedSettings
from pricing.data.store import PriceRepository
from pricing.exceptions import SeedDataError
from pricing.logging import get_logger

logger = get_logger(__name__)

SeedRow = tuple[date, str, Decimal, float]


def read_seed_rows(path: Path) -> list[SeedRow]:
    """Parse the extract, skipping the header and malformed lines."""
    if not path.exists():
        raise SeedDataError(f"Seed data file not found: {path}")

    if path.suffix == ".gz":
        stream = io.TextIOWrapper(gzip.open(path), encoding="utf-8", newline="")
    else:
        stream = open(path, encoding="utf-8", newline="")

    rows: list[SeedRow] = []
    skipped = 0
    with stream:
        reader = csv.reader(stream)
        next(reader, None)  # header
        for parts in reader:
            if len(parts) != 4:
                skipped += 1
                continue
            try:
                rows.append(
                    (
                        date.fromisoformat(parts[0].strip()),
                        parts[1].strip(),
                        Decimal(parts[2].strip()),
                        float(parts[3].strip()),
                    )
                )
            except (ValueError, InvalidOperation):
                skipped += 1

    if skipped:
        logger.warning("seed_rows_skipped", path=str(path), skipped=skipped)
    return rows


def select_price_date(
    rows: list[SeedRow],
    price_date: date | None = None,
    rng: random.Random | None = None,
) -> date:
    """Return the configured date, or a random date present in the rows."""
    if price_date is not None:
        return price_date
    dates = sorted({row[0] for row in rows})
    if not dates:
        raise SeedDataError("Seed data contains no price dates")
    return (rng or random.Random()).choice(dates)


async def seed_prices(
    repository: PriceRepository,
    settings: SeedSettings,
    rng: random.Random | None = None,
) -> int:
    """Load one price date into an empty price table.

    Returns the number of rows inserted (0 when the table was already
    populated or seeding is disabled).
    """
    if not settings.enabled:
        logger.info("seed_disabled")
        return 0

    existing = await repository.count()
    if existing:
        logger.info("seed_skipped_table_populated", rows=existing)
        return 0

    path = Path(settings.data_file)
    rows = read_seed_rows(path)
    configured = (
        date.fromisoformat(settings.price_date) if settings.price_date else None
    )
    selected = select_price_date(rows, configured, rng)

    selected_rows = [row for row in rows if row[0] == selected]
    if not selected_rows:
        raise SeedDataError(f"No seed rows for price date {selected.isoformat()}")

    inserted = await repository.insert_prices(selected_rows)
    logger.info(
        "price_table_seeded",
        path=str(path),
        price_date=selected.isoformat(),
        rows=inserted,
    )
    return inserted
