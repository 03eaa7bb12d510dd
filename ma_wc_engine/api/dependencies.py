"""Dependency injection for FastAPI endpoints"""

import logging

from fastapi import HTTPException, Request
from starlette.concurrency import run_in_threadpool

from ma_wc_engine.config import settings
from ma_wc_engine.domain.exceptions import InvalidRateTableError, RateTableUnavailableError
from ma_wc_engine.domain.models import RateTable
from ma_wc_engine.infrastructure.clients.rate_table import RateTableClient, load_rate_table


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


async def load_configured_rate_table() -> RateTable:
    """Fetch the published table when a URL is set, else read the configured file"""
    if settings.rate_table_url:
        return await RateTableClient().fetch()
    return await run_in_threadpool(load_rate_table)


async def get_rate_table(request: Request) -> RateTable:
    """
    Provide the application's rate table snapshot.

    The table is normally loaded once at startup. If that load failed,
    the first request to need it retries; a failed retry answers 503 and
    nothing is cached.
    """
    state = request.app.state
    if state.rate_table is not None:
        return state.rate_table

    async with state.rate_table_lock:
        if state.rate_table is None:
            try:
                state.rate_table = await load_configured_rate_table()
            except (RateTableUnavailableError, InvalidRateTableError) as e:
                logging.error(f"Rate table unavailable: {e}")
                raise HTTPException(status_code=503, detail="Rate table unavailable")
    return state.rate_table
