"""Unit tests for rate table parsing, loading and fetching"""

import json
import httpx
import pytest
from datetime import date
from ma_wc_engine.domain.exceptions import InvalidRateTableError, RateTableUnavailableError
from ma_wc_engine.domain.rates import get_state_min_max
from ma_wc_engine.infrastructure.clients.rate_table import (
    RateTableClient,
    load_rate_table,
    parse_rate_table_document,
)

RATES_URL = "http://rates.test/state_rates.json"


@pytest.fixture
def document() -> dict:
    return {
        "last_updated": "2024-10-02T12:00:00.000Z",
        "rates": [
            {
                "effective_from": "2024-10-01",
                "effective_to": "2025-09-30",
                "state_min": 365.83,
                "state_max": 1829.13,
                "source_url": "https://www.mass.gov/test",
            }
        ],
    }


def _client(handler, retries: int = 3) -> RateTableClient:
    client = RateTableClient(url=RATES_URL, transport=httpx.MockTransport(handler))
    client.max_retries = retries
    client.backoff_base = 0
    return client


def test_parse_document(document):
    table = parse_rate_table_document(document)

    assert len(table.rates) == 1
    assert table.rates[0].effective_from == date(2024, 10, 1)
    assert table.rates[0].state_max == 1829.13
    assert table.last_updated.year == 2024


@pytest.mark.parametrize(
    "mutation",
    [
        {"effective_from": "2024-09-01"},
        {"state_min": 2000},
        {"state_min": 0},
        {"effective_to": "not-a-date"},
    ],
)
def test_parse_rejects_bad_rows(document, mutation):
    document["rates"][0].update(mutation)
    with pytest.raises(InvalidRateTableError):
        parse_rate_table_document(document)


def test_parse_rejects_missing_rates():
    with pytest.raises(InvalidRateTableError):
        parse_rate_table_document({"last_updated": "2024-10-02T12:00:00Z"})


def test_load_bundled_table():
    """Test the bundled table covers consecutive October-September periods"""
    table = load_rate_table()

    assert table.rates
    for earlier, later in zip(table.rates, table.rates[1:]):
        assert (later.effective_from - earlier.effective_to).days == 1


def test_bundled_table_covers_2025_injuries():
    """Test an injury in the October 2025 period resolves against the bundled table"""
    limits = get_state_min_max(date(2025, 10, 15), load_rate_table().rates)

    assert limits.state_min == 379.76
    assert limits.state_max == 1898.79


def test_load_from_path(tmp_path, document):
    path = tmp_path / "state_rates.json"
    path.write_text(json.dumps(document))

    assert load_rate_table(path).rates[0].state_min == 365.83


def test_load_missing_file(tmp_path):
    with pytest.raises(RateTableUnavailableError):
        load_rate_table(tmp_path / "missing.json")


async def test_fetch_success(document):
    client = _client(lambda request: httpx.Response(200, json=document))

    table = await client.fetch()

    assert table.rates[0].state_max == 1829.13


async def test_fetch_retries_then_succeeds(document):
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json=document)

    table = await _client(handler).fetch()

    assert len(calls) == 3
    assert len(table.rates) == 1


async def test_fetch_gives_up_after_retries():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RateTableUnavailableError):
        await _client(handler, retries=2).fetch()

    assert len(calls) == 2


async def test_fetch_malformed_body_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, content=b"<html>not json</html>")

    with pytest.raises(InvalidRateTableError):
        await _client(handler).fetch()

    assert len(calls) == 1


async def test_fetch_without_url():
    client = RateTableClient()
    client.url = None

    with pytest.raises(RateTableUnavailableError):
        await client.fetch()
