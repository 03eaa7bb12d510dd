"""Weekly benefit rates and the rate table they are clamped against"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request

from ma_wc_engine.api.dependencies import get_rate_table, get_request_id
from ma_wc_engine.api.v1.schemas import (
    BenefitCalculationSchema,
    RatesRequest,
    RatesResponse,
    RateTableResponse,
)
from ma_wc_engine.domain.exceptions import InvalidInputError, NoApplicableRateError
from ma_wc_engine.domain.models import RateTable
from ma_wc_engine.domain.rates import calculate_all_benefits, get_state_min_max
from ma_wc_engine.domain.schedule import get_benefit_title
from ma_wc_engine.infrastructure.observability.logging import log_calculation
from ma_wc_engine.infrastructure.observability.metrics import (
    record_calculation_error,
    record_rate_calculations,
)

router = APIRouter()


@router.get("/rate-table", response_model=RateTableResponse)
def get_rate_table_endpoint(rate_table: RateTable = Depends(get_rate_table)):
    """Currently configured state min/max periods"""
    return RateTableResponse.model_validate(rate_table)


@router.post("/rates", response_model=RatesResponse)
def calculate_rates(
    request_body: RatesRequest,
    request: Request,
    rate_table: RateTable = Depends(get_rate_table),
):
    """
    Calculate every benefit type's weekly rate for an AWW and date of injury.

    Flow:
    1. Apply each statutory formula and the min/max rules in effect
       on the date of injury
    2. Return raw, final and yearly amounts per type, with the period used
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
        limits = get_state_min_max(request_body.date_of_injury, rate_table.rates)
    except (InvalidInputError, NoApplicableRateError) as e:
        record_calculation_error(e)
        logging.warning(f"Rate calculation rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    record_rate_calculations(calculations)
    log_calculation(
        request_id,
        "rates",
        (time.perf_counter() - start_time) * 1000,
        aww=request_body.aww,
        date_of_injury=request_body.date_of_injury.isoformat(),
    )

    return RatesResponse(
        state_min=limits.state_min,
        state_max=limits.state_max,
        effective_from=limits.effective_from,
        effective_to=limits.effective_to,
        benefits=[
            BenefitCalculationSchema(
                type=calc.type,
                title=get_benefit_title(calc.type),
                raw_weekly=calc.raw_weekly,
                final_weekly=calc.final_weekly,
                yearly_amount=calc.yearly_amount,
                statutory_max_weeks=calc.statutory_max_weeks,
                applied_rule=calc.applied_rule,
            )
            for calc in calculations
        ],
    )
