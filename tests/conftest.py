"""Shared test fixtures for the pricing service."""

from datetime import date
from decimal import Decimal

import pytest

from pricing.models import PriceRecord


class FakeRepository:
    """In-memory stand-in for PriceRepository, counting reads."""

    def __init__(self, records: list[PriceRecord]) -> None:
        self.records = records
        self.get_all_calls = 0
        self.get_by_ticker_calls = 0

    async def get_all(self) -> list[PriceRecord]:
        self.get_all_calls += 1
        return list(self.records)

    async def get_by_ticker(self, ticker: str) -> list[PriceRecord]:
        self.get_by_ticker_calls += 1
        return [r for r in self.records if r.ticker == ticker]


def make_record(
    ticker: str,
    price: str,
    price_std: float,
    record_id: int = 1,
    price_date: date = date(2024, 1, 2),
) -> PriceRecord:
    return PriceRecord(
        id=record_id,
        price_date=price_date,
        ticker=ticker,
        price=Decimal(price),
        price_std=price_std,
    )


@pytest.fixture
def sample_records() -> list[PriceRecord]:
    """Three records in a deliberately non-alphabetical repository order."""
    return [
        make_record("MSFT", "370.87000000", 4.63, record_id=1),
        make_record("AAPL", "185.64000000", 2.32, record_id=2),
        make_record("KO", "59.37000000", 0.0, record_id=3),
    ]


@pytest.fixture
def fake_repository(sample_records: list[PriceRecord]) -> FakeRepository:
    return FakeRepository(sample_records)


@pytest.fixture
def record_factory():
    """Build PriceRecords: record_factory("AAPL", "100.00", 0.0)."""
    return make_record


@pytest.fixture
def repository_factory():
    """Build a FakeRepository over the given records."""
    return FakeRepository
