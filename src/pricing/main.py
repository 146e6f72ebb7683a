"""Entry point for the pricing service.

Loads settings, configures logging, and serves the FastAPI app with uvicorn.
The lifespan owns the database connection: on startup it connects, seeds an
empty price table, and wires the repository, cached service and sampler onto
app.state; on shutdown it closes the connection.
"""

import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from pricing.config import AppSettings
from pricing.data.database import PriceDatabase
from pricing.data.seed import seed_prices
from pricing.data.store import PriceRepository
from pricing.logging import get_logger, setup_logging
from pricing.sampling import PriceSampler
from pricing.service import PriceService


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage database and service lifecycle within the FastAPI application."""
    logger = get_logger("pricing.main")
    settings: AppSettings = app.state.settings

    database = PriceDatabase(settings.database.path)
    await database.connect()

    repository = PriceRepository(database)
    await seed_prices(repository, settings.seed)

    app.state.database = database
    app.state.price_service = PriceService(repository, settings.cache.ttl_seconds)
    app.state.sampler = PriceSampler()

    logger.info(
        "lifespan_started",
        db_path=settings.database.path,
        cache_ttl_seconds=settings.cache.ttl_seconds,
        rows=await repository.count(),
    )

    try:
        yield
    finally:
        await database.close()
        logger.info("pricing_service_stopped")


def build_app(settings: AppSettings) -> FastAPI:
    from pricing.api.app import create_app

    app = create_app(lifespan=lifespan)
    app.state.settings = settings
    return app


async def run() -> None:
    """Run the pricing service until uvicorn is told to stop."""
    # 1. Load settings
    settings = AppSettings()

    # 2. Setup logging
    setup_logging(settings.log_level)
    logger = get_logger("pricing.main")

    app = build_app(settings)

    logger.info(
        "starting_pricing_service",
        host=settings.server.host,
        port=settings.server.port,
    )

    config = uvicorn.Config(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
