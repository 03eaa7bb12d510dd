"""Pytest fixtures for testing"""

import pytest
from datetime import date
from fastapi.testclient import TestClient
from ma_wc_engine.api.main import create_app
from ma_wc_engine.api.dependencies import get_rate_table
from ma_wc_engine.domain.models import BenefitType, LedgerEntry, RateTable, RateTableRow


@pytest.fixture
def state_table() -> list[RateTableRow]:
    """Single 2024-25 period with a $1,500 max"""
    return [
        RateTableRow(
            effective_from=date(2024, 10, 1),
            effective_to=date(2025, 9, 30),
            state_min=365.83,
            state_max=1500.00,
            source_url="https://www.mass.gov/test",
        )
    ]


@pytest.fixture
def rate_table(state_table: list[RateTableRow]) -> RateTable:
    return RateTable(rates=state_table)


@pytest.fixture
def client(rate_table: RateTable) -> TestClient:
    """Create FastAPI test client with a fixed rate table"""
    app = create_app()
    app.dependency_overrides[get_rate_table] = lambda: rate_table
    return TestClient(app)


def _make_entry(entry_id: str, benefit_type: BenefitType, weeks: float, final_weekly: float, **kwargs) -> LedgerEntry:
    """Ledger entry with precomputed weeks and rate"""
    return LedgerEntry(
        id=entry_id,
        type=benefit_type,
        start=kwargs.pop("start", date(2024, 11, 1)),
        end=kwargs.pop("end", date(2025, 5, 2)),
        weeks=weeks,
        raw_weekly=kwargs.pop("raw_weekly", final_weekly),
        final_weekly=final_weekly,
        dollars_paid=final_weekly * weeks,
        **kwargs,
    )


@pytest.fixture
def make_entry():
    return _make_entry


@pytest.fixture
def current_rates() -> dict:
    """Final weekly rates for AWW $1,000 / EC $600 under the test table"""
    return {
        BenefitType.TTD: 600.00,
        BenefitType.TPD: 450.00,
        BenefitType.TPD_EC: 365.83,
        BenefitType.PERMANENT_TOTAL: 666.67,
        BenefitType.DEPENDENT: 666.67,
    }


@pytest.fixture
def mixed_ledger() -> list[LedgerEntry]:
    """26 weeks of Section 34 followed by 26 weeks of Section 35 EC"""
    return [
        _make_entry("ttd-1", BenefitType.TTD, 26, 600.00),
        _make_entry(
            "ec-1",
            BenefitType.TPD_EC,
            26,
            365.83,
            start=date(2025, 5, 2),
            end=date(2025, 10, 31),
            raw_weekly=240.00,
            ec_used=600.00,
        ),
    ]
