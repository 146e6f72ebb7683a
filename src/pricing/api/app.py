"""FastAPI application factory for the pricing API."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pricing import __version__
from pricing.api.metrics import HttpMetrics
from pricing.api.routes import health, prices
from pricing.exceptions import PriceNotFoundError


async def _price_not_found_handler(request: Request, exc: PriceNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


def create_app(lifespan: Any = None, metrics: HttpMetrics | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to connect the database and wire services.
        metrics: Request recorder; a fresh HttpMetrics when omitted.

    Returns:
        Configured FastAPI application. Route handlers expect
        app.state.price_service, app.state.sampler and app.state.database
        to be set by the lifespan (or by tests).
    """
    app = FastAPI(
        title="Pricing Service",
        version=__version__,
        description="Synthetic security prices sampled around stored means",
        lifespan=lifespan,
    )

    app.state.metrics = metrics if metrics is not None else HttpMetrics()
    app.middleware("http")(app.state.metrics)

    app.add_exception_handler(PriceNotFoundError, _price_not_found_handler)  # type: ignore[arg-type]

    # Register routers
    app.include_router(prices.router, prefix="/api/v1")
    app.include_router(health.router, prefix="/health")

    @app.get("/metrics", tags=["metrics"])
    async def get_metrics() -> JSONResponse:
        return JSONResponse(content=app.state.metrics.snapshot())

    return app
