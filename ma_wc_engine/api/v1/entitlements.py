"""POST /v1/entitlements - remaining statutory entitlement for a ledger"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request

from ma_wc_engine.api.dependencies import get_rate_table, get_request_id
from ma_wc_engine.api.v1.schemas import (
    CombinedUsageSchema,
    EntitlementsRequest,
    EntitlementsResponse,
    RemainingEntitlementSchema,
)
from ma_wc_engine.domain.entitlements import aggregate_entitlements, rates_by_type, total_dollars_remaining
from ma_wc_engine.domain.exceptions import InvalidInputError, NoApplicableRateError
from ma_wc_engine.domain.models import LedgerEntry, RateTable
from ma_wc_engine.domain.rates import calculate_all_benefits
from ma_wc_engine.infrastructure.observability.logging import log_calculation
from ma_wc_engine.infrastructure.observability.metrics import (
    record_aggregation,
    record_calculation_error,
)

router = APIRouter()


@router.post("/entitlements", response_model=EntitlementsResponse)
def calculate_entitlements(
    request_body: EntitlementsRequest,
    request: Request,
    rate_table: RateTable = Depends(get_rate_table),
):
    """
    Aggregate a ledger against the statutory caps.

    Flow:
    1. Calculate current weekly rates for every benefit type
    2. Sum ledger weeks per type and per shared-cap group
    3. Price remaining weeks at the current rates
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    try:
        calculations = calculate_all_benefits(
            request_body.aww,
            request_body.date_of_injury,
            rate_table.rates,
            ec=request_body.earning_capacity,
        )
    except (InvalidInputError, NoApplicableRateError) as e:
        record_calculation_error(e)
        logging.warning(f"Entitlement calculation rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    ledger = [LedgerEntry(**entry.model_dump()) for entry in request_body.ledger]
    summary = aggregate_entitlements(ledger, rates_by_type(calculations))

    record_aggregation(len(ledger))
    log_calculation(
        request_id,
        "entitlements",
        (time.perf_counter() - start_time) * 1000,
        ledger_entries=len(ledger),
        combined_weeks_used=summary.combined_usage.weeks_used,
    )

    return EntitlementsResponse(
        per_type=[RemainingEntitlementSchema.model_validate(e) for e in summary.per_type],
        combined_usage=CombinedUsageSchema.model_validate(summary.combined_usage),
        combined_35_usage=CombinedUsageSchema.model_validate(summary.combined_35_usage),
        weeks_used_by_type={t.value: w for t, w in summary.weeks_used_by_type.items()},
        dollars_paid_by_type={t.value: d for t, d in summary.dollars_paid_by_type.items()},
        total_dollars_paid=summary.total_dollars_paid,
        total_dollars_remaining=total_dollars_remaining(summary.per_type),
    )
