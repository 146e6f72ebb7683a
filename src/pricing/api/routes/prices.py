"""Price endpoints: every stored ticker, or a single ticker, freshly sampled."""

from __future__ import annotations

from fastapi import APIRouter, Request

from pricing.api.responses import DecimalJSONResponse
from pricing.exceptions import PriceNotFoundError
from pricing.models import PriceRecord, SampledPrice
from pricing.sampling import PriceSampler


router = APIRouter(tags=["prices"])


def _to_sampled_dto(sampler: PriceSampler, record: PriceRecord) -> dict:
    sampled = sampler.sample(record.price, record.price_std, ticker=record.ticker)
    return SampledPrice.from_record(record, sampled).to_dict()


@router.get("/prices")
async def get_all_prices(request: Request) -> DecimalJSONResponse:
    """All prices in repository order, each sampled independently."""
    price_service = request.app.state.price_service
    sampler = request.app.state.sampler
    records = await price_service.get_all_prices()
    return DecimalJSONResponse(content=[_to_sampled_dto(sampler, r) for r in records])


@router.get("/price/{ticker}")
async def get_price_by_ticker(ticker: str, request: Request) -> DecimalJSONResponse:
    """Sampled price for the first record of ticker; 404 if unknown."""
    price_service = request.app.state.price_service
    sampler = request.app.state.sampler
    records = await price_service.get_price_by_ticker(ticker)
    if not records:
        raise PriceNotFoundError(ticker)
    return DecimalJSONResponse(content=_to_sampled_dto(sampler, records[0]))
