"""Request-time price sampling.

Turns a stored (mean, std) pair into one cent-rounded price drawn from a
normal distribution around the mean. Prices are treated as normally
distributed for benchmark purposes only; this is not a market model.

Each thread owns a private random.Random, created on first use. Nothing is
shared between threads, so no locking is needed and concurrent requests never
serialize on the generator.

Sampling never raises. Any failure degrades to the mean price rounded to
cents and is logged as a warning.
"""

import math
import random
import threading
from collections.abc import Callable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from pricing.exceptions import SamplingError
from pricing.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")
PRICE_FLOOR = Decimal("0.01")


def round_to_cents(value: Decimal) -> Decimal:
    """Round half-up to exactly 2 fractional digits."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class SampleResult:
    """Outcome of one draw.

    degraded is True when the fallback (rounded mean) was returned instead of
    a sampled value; error then holds the reason.
    """

    price: Decimal
    degraded: bool = False
    error: str | None = None


class PriceSampler:
    """Samples prices from N(mean, std) with a per-thread generator.

    Args:
        generator_factory: Builds the generator for a thread. Called once per
            thread on its first draw. The result must provide gauss(mu, sigma).
            Defaults to random.Random seeded from OS entropy.
    """

    def __init__(
        self, generator_factory: Callable[[], random.Random] = random.Random
    ) -> None:
        self._generator_factory = generator_factory
        self._local = threading.local()

    def _generator(self) -> random.Random:
        """Return this thread's generator, creating it on first use."""
        generator = getattr(self._local, "generator", None)
        if generator is None:
            generator = self._generator_factory()
            self._local.generator = generator
        return generator

    def draw(
        self,
        mean_price: Decimal | float | int,
        price_std: float,
        ticker: str | None = None,
    ) -> SampleResult:
        """Draw one sampled price, reporting whether the fallback was used.

        Never raises.
        """
        try:
            mean = _to_decimal(mean_price)
            std = _validate_std(price_std)
            z = self._generator().gauss(0.0, 1.0)
            sampled = mean + Decimal(z) * Decimal(std)
            if sampled < PRICE_FLOOR:
                sampled = PRICE_FLOOR
            return SampleResult(price=round_to_cents(sampled))
        except Exception as e:
            fallback = _fallback_price(mean_price)
            logger.warning(
                "price_sampling_failed",
                ticker=ticker,
                mean=str(mean_price),
                std=str(price_std),
                error=str(e),
                fallback=str(fallback),
            )
            return SampleResult(price=fallback, degraded=True, error=str(e))

    def sample(
        self,
        mean_price: Decimal | float | int,
        price_std: float,
        ticker: str | None = None,
    ) -> Decimal:
        """Return a sampled price with exactly 2 fractional digits.

        Every call draws again; results are never cached. On failure the mean
        price rounded to cents is returned instead.
        """
        return self.draw(mean_price, price_std, ticker=ticker).price


def _to_decimal(value: Decimal | float | int) -> Decimal:
    if isinstance(value, Decimal):
        mean = value
    else:
        # str() keeps the float's shortest repr instead of its binary expansion
        mean = Decimal(str(value))
    if not mean.is_finite():
        raise SamplingError(f"mean price must be finite, got {value!r}")
    return mean


def _validate_std(price_std: float) -> float:
    std = float(price_std)
    if not math.isfinite(std):
        raise SamplingError(f"price_std must be finite, got {price_std!r}")
    if std < 0:
        raise SamplingError(f"price_std must be non-negative, got {price_std!r}")
    return std


def _fallback_price(mean_price: Decimal | float | int) -> Decimal:
    """Mean rounded to cents; the floor price when the mean is unusable."""
    try:
        return round_to_cents(_to_decimal(mean_price))
    except (SamplingError, ArithmeticError, ValueError, TypeError):
        return PRICE_FLOOR
