"""POST /v1/weeks - benefit weeks between two dates"""

import logging

from fastapi import APIRouter, HTTPException, Request

from ma_wc_engine.api.dependencies import get_request_id
from ma_wc_engine.api.v1.schemas import WeeksRequest, WeeksResponse
from ma_wc_engine.domain.exceptions import InvalidDateRangeError
from ma_wc_engine.infrastructure.observability.metrics import record_calculation_error
from ma_wc_engine.utils.date_utils import weeks_between

router = APIRouter()


@router.post("/weeks", response_model=WeeksResponse)
def calculate_weeks(request_body: WeeksRequest, request: Request):
    try:
        result = weeks_between(request_body.start, request_body.end, request_body.mode)
    except InvalidDateRangeError as e:
        record_calculation_error(e)
        logging.warning(f"Invalid date range: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return WeeksResponse.model_validate(result)
