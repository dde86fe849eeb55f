"""Main module for the stock trading stream service."""
import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from stock_stream.config import configure_logging, get_settings
from stock_stream.container import Container, init_container
from stock_stream.routers import orders_router, stocks_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Build the streaming service at startup; release the stock store on shutdown."""
    container: Container = fastapi_app.state.container
    service = container.streaming_service()
    logger.info("Stock stream service started (settings=%s)", container.settings())

    yield

    service.close()


def create_app(container: Container | None = None) -> FastAPI:
    """Create the FastAPI app around a DI container (a default one if omitted)."""
    fastapi_app = FastAPI(
        title="Stock Trading Stream",
        description="Price subscriptions and bulk order uploads over WebSocket",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.container = container or init_container()

    fastapi_app.include_router(stocks_router)
    fastapi_app.include_router(orders_router)

    @fastapi_app.get("/")
    def health():
        """Return health check status."""
        return {"status": "ok"}

    return fastapi_app


app = create_app()


def run():
    """Run the server (uvicorn). Entry point of the `stock-stream` script."""
    configure_logging(get_settings().log_level)
    uvicorn.run(
        "stock_stream.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
