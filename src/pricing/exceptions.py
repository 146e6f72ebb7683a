"""Custom exceptions for the pricing service.

Kept in one module so the data, service and API layers can share them
without importing each other.
"""


class PricingError(Exception):
    """Base exception for all pricing service errors."""


class PriceNotFoundError(PricingError):
    """Raised when no price record exists for a ticker."""

    def __init__(self, ticker: str) -> None:
        self.ticker = ticker
        super().__init__(f"Price not found for ticker: {ticker}")


class SamplingError(PricingError):
    """Raised inside the sampler for inputs it cannot draw from.

    Never escapes PriceSampler; it is converted into the mean-price fallback.
    """


class SeedDataError(PricingError):
    """Raised when the seed extract is missing or holds no usable rows."""
