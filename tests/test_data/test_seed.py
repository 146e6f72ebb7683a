"""Tests for the one-time price table seed."""

import gzip
import random
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio

from pricing.config import SeedSettings
from pricing.data.database import PriceDatabase
from pricing.data.seed import read_seed_rows, seed_prices, select_price_date
from pricing.data.store import PriceRepository
from pricing.exceptions import SeedDataError

CSV_TEXT = """price_date,ticker,price,price_std
2024-01-02,AAPL,185.64000000,2.3205
2024-01-02,MSFT,370.87000000,4.635875
2024-01-03,AAPL,186.38000000,2.32975
2024-01-03,MSFT,372.35000000,4.654375
2024-01-03,BROKEN,1.0
2024-01-03,BAD,not-a-price,1.0
"""


@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    path = tmp_path / "prices.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    return path


@pytest_asyncio.fixture
async def repository(tmp_path: Path):
    async with PriceDatabase(str(tmp_path / "pricing.db")) as db:
        yield PriceRepository(db)


class TestReadSeedRows:
    def test_parses_rows_and_skips_malformed(self, csv_file: Path) -> None:
        rows = read_seed_rows(csv_file)
        assert len(rows) == 4
        assert rows[0] == (date(2024, 1, 2), "AAPL", Decimal("185.64000000"), 2.3205)

    def test_reads_gzip(self, tmp_path: Path) -> None:
        path = tmp_path / "prices.csv.gz"
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write(CSV_TEXT)
        assert len(read_seed_rows(path)) == 4

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SeedDataError, match="not found"):
            read_seed_rows(tmp_path / "missing.csv")


class TestSelectPriceDate:
    def test_configured_date_wins(self, csv_file: Path) -> None:
        rows = read_seed_rows(csv_file)
        assert select_price_date(rows, date(2024, 1, 2)) == date(2024, 1, 2)

    def test_random_date_comes_from_rows(self, csv_file: Path) -> None:
        rows = read_seed_rows(csv_file)
        picked = {select_price_date(rows, rng=random.Random(seed)) for seed in range(30)}
        assert picked == {date(2024, 1, 2), date(2024, 1, 3)}

    def test_no_rows(self) -> None:
        with pytest.raises(SeedDataError):
            select_price_date([])


class TestSeedPrices:
    @pytest.mark.asyncio
    async def test_loads_single_configured_date(
        self, repository: PriceRepository, csv_file: Path
    ) -> None:
        settings = SeedSettings(data_file=str(csv_file), price_date="2024-01-03")
        assert await seed_prices(repository, settings) == 2

        records = await repository.get_all()
        assert [r.ticker for r in records] == ["AAPL", "MSFT"]
        assert {r.price_date for r in records} == {date(2024, 1, 3)}

    @pytest.mark.asyncio
    async def test_skips_populated_table(
        self, repository: PriceRepository, csv_file: Path
    ) -> None:
        settings = SeedSettings(data_file=str(csv_file), price_date="2024-01-02")
        assert await seed_prices(repository, settings) == 2
        assert await seed_prices(repository, settings) == 0
        assert await repository.count() == 2

    @pytest.mark.asyncio
    async def test_disabled(self, repository: PriceRepository, csv_file: Path) -> None:
        settings = SeedSettings(enabled=False, data_file=str(csv_file))
        assert await seed_prices(repository, settings) == 0
        assert await repository.count() == 0

    @pytest.mark.asyncio
    async def test_unknown_configured_date(
        self, repository: PriceRepository, csv_file: Path
    ) -> None:
        settings = SeedSettings(data_file=str(csv_file), price_date="1999-12-31")
        with pytest.raises(SeedDataError, match="1999-12-31"):
            await seed_prices(repository, settings)

    @pytest.mark.asyncio
    async def test_bundled_extract_loads(self, repository: PriceRepository) -> None:
        bundled = Path(__file__).resolve().parents[2] / "data" / "prices.csv.gz"
        settings = SeedSettings(data_file=str(bundled), price_date="2024-01-02")
        inserted = await seed_prices(repository, settings)
        assert inserted == 500
        assert await repository.count() == 500
        (aapl,) = await repository.get_by_ticker("AAPL")
        assert aapl.price == Decimal("185.64000000")
