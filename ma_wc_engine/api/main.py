"""FastAPI application factory"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from ma_wc_engine.api.dependencies import load_configured_rate_table
from ma_wc_engine.api.middleware import RequestIDMiddleware, MetricsMiddleware
from ma_wc_engine.api.v1 import entitlements, ledger, rates, weeks
from ma_wc_engine.domain.exceptions import InvalidRateTableError, RateTableUnavailableError
from ma_wc_engine.infrastructure.observability.logging import setup_logging
from ma_wc_engine.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the rate table snapshot once per process"""
    try:
        app.state.rate_table = await load_configured_rate_table()
        logging.info("Rate table loaded", extra={"periods": len(app.state.rate_table.rates)})
    except (RateTableUnavailableError, InvalidRateTableError) as e:
        # Requests retry the load and answer 503 until it succeeds
        logging.error(f"Rate table not loaded at startup: {e}")
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Massachusetts Workers' Compensation Benefit Engine",
        description="Weekly indemnity rates and remaining statutory entitlement",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.rate_table = None
    app.state.rate_table_lock = asyncio.Lock()

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(rates.router, prefix="/v1", tags=["rates"])
    app.include_router(weeks.router, prefix="/v1", tags=["weeks"])
    app.include_router(ledger.router, prefix="/v1", tags=["ledger"])
    app.include_router(entitlements.router, prefix="/v1", tags=["entitlements"])

    return app


app = create_app()
