"""Request-time price sampling around stored mean prices."""

from pricing.sampling.sampler import PriceSampler, SampleResult, round_to_cents

__all__ = ["PriceSampler", "SampleResult", "round_to_cents"]
