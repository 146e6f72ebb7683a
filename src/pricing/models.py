"""Shared data models for the pricing service.

CRITICAL: Prices are Decimal end to end. Only price_std (a statistical
spread, not money) is a float.
"""

import math
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class PriceRecord:
    """One row of the price table.

    price keeps the 8 fractional digits it is stored with. Records are
    read-only once loaded.
    """

    id: int
    price_date: date
    ticker: str
    price: Decimal
    price_std: float
    version: int = 1


@dataclass(frozen=True)
class SampledPrice:
    """Response DTO for a single sampled price.

    Intraday movement is not modelled: open, close, high and low always carry
    the same sampled value.
    """

    id: int
    ticker: str
    date: date
    open: Decimal
    close: Decimal
    high: Decimal
    low: Decimal
    volume: int

    @classmethod
    def from_record(cls, record: PriceRecord, sampled: Decimal) -> "SampledPrice":
        return cls(
            id=record.id,
            ticker=record.ticker,
            date=record.price_date,
            open=sampled,
            close=sampled,
            high=sampled,
            low=sampled,
            # Truncated price_std; kept only because existing clients read it.
            volume=int(record.price_std) if math.isfinite(record.price_std) else 0,
        )

    def to_dict(self) -> dict[str, Any]:
        """Dict for DecimalJSONResponse; prices stay Decimal so 100.00 keeps both digits."""
        return {
            "id": self.id,
            "ticker": self.ticker,
            "date": self.date.isoformat(),
            "open": self.open,
            "close": self.close,
            "high": self.high,
            "low": self.low,
            "volume": self.volume,
        }
