"""Rate table sources: bundled/local JSON file and published HTTP document"""

import asyncio
import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict

import httpx

from ma_wc_engine.config import settings
from ma_wc_engine.domain.exceptions import InvalidRateTableError, RateTableUnavailableError
from ma_wc_engine.domain.models import RateTable, RateTableRow
from ma_wc_engine.infrastructure.observability.metrics import rate_table_fetch_failures_counter

logger = logging.getLogger(__name__)


def _parse_row(raw: Dict[str, Any], index: int) -> RateTableRow:
    try:
        effective_from = date.fromisoformat(raw["effective_from"])
        effective_to = date.fromisoformat(raw["effective_to"])
        state_min = float(raw["state_min"])
        state_max = float(raw["state_max"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidRateTableError(f"Invalid rate row {index}: {e}") from e

    if effective_from.month != 10 or effective_from.day != 1:
        raise InvalidRateTableError(f"Rate row {index}: effective_from must be October 1, got {effective_from}")
    if effective_to < effective_from:
        raise InvalidRateTableError(f"Rate row {index}: effective_to precedes effective_from")
    if not 0 < state_min < state_max:
        raise InvalidRateTableError(f"Rate row {index}: expected 0 < state_min < state_max")

    return RateTableRow(
        effective_from=effective_from,
        effective_to=effective_to,
        state_min=state_min,
        state_max=state_max,
        source_url=raw.get("source_url"),
    )


def parse_rate_table_document(data: Any) -> RateTable:
    """
    Parse a published rate table document.

    Format: {"last_updated": ISO timestamp, "rates": [row, ...]}

    Raises:
        InvalidRateTableError: document or any row is malformed
    """
    if not isinstance(data, dict) or not isinstance(data.get("rates"), list):
        raise InvalidRateTableError("Rate table document must contain a 'rates' array")

    last_updated = None
    if data.get("last_updated"):
        try:
            last_updated = datetime.fromisoformat(str(data["last_updated"]).replace("Z", "+00:00"))
        except ValueError as e:
            raise InvalidRateTableError(f"Invalid last_updated: {data['last_updated']}") from e

    rows = [_parse_row(raw, i) for i, raw in enumerate(data["rates"])]
    return RateTable(rates=rows, last_updated=last_updated)


def load_rate_table(path: Path | str | None = None) -> RateTable:
    """
    Read a rate table JSON file (defaults to the configured path).

    Raises:
        RateTableUnavailableError: file missing or not JSON
        InvalidRateTableError: contents malformed
    """
    path = Path(path or settings.rate_table_path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise RateTableUnavailableError(f"Cannot read rate table at {path}: {e}") from e

    table = parse_rate_table_document(data)
    logger.info("Rate table loaded", extra={"path": str(path), "periods": len(table.rates)})
    return table


class RateTableClient:
    """Client for a published state_rates.json document"""

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url or settings.rate_table_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.rate_table_fetch_retries
        self.backoff_base = settings.rate_table_backoff_base
        self.transport = transport

    async def fetch(self) -> RateTable:
        """
        Fetch and parse the rate table.

        Retry strategy:
        - Exponential backoff: base * 2^(attempt-1)
        - Retries on timeouts, network failures and HTTP errors
        - A malformed body is not retried

        Raises:
            RateTableUnavailableError: no URL configured, or all attempts failed
            InvalidRateTableError: document is malformed
        """
        if not self.url:
            raise RateTableUnavailableError("No rate table URL configured")

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    response = await client.get(self.url)
                    response.raise_for_status()
                    data = response.json()
                    break

                except (httpx.TimeoutException, httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    rate_table_fetch_failures_counter.inc()
                    logger.warning(
                        "Rate table fetch failed",
                        extra={"url": self.url, "attempt": attempt, "error": str(e)},
                    )
                    if attempt >= self.max_retries:
                        raise RateTableUnavailableError(
                            f"Rate table unavailable after {attempt} attempts: {e}"
                        ) from e

                    await asyncio.sleep(self.backoff_base * (2 ** (attempt - 1)))

                except ValueError as e:
                    raise InvalidRateTableError(f"Rate table response is not JSON: {e}") from e

        return parse_rate_table_document(data)
