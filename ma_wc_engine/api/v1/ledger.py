"""POST /v1/ledger/entries - compute a ledger entry for a payment period"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request

from ma_wc_engine.api.dependencies import get_rate_table, get_request_id
from ma_wc_engine.api.v1.schemas import LedgerEntryRequest, LedgerEntrySchema
from ma_wc_engine.config import settings
from ma_wc_engine.domain.exceptions import (
    InvalidDateRangeError,
    InvalidInputError,
    InvalidLedgerEntryError,
    NoApplicableRateError,
)
from ma_wc_engine.domain.ledger import build_ledger_entry
from ma_wc_engine.domain.models import RateTable
from ma_wc_engine.infrastructure.observability.metrics import record_calculation_error

router = APIRouter()


@router.post("/ledger/entries", response_model=LedgerEntrySchema)
def create_ledger_entry(
    request_body: LedgerEntryRequest,
    request: Request,
    rate_table: RateTable = Depends(get_rate_table),
):
    """
    Compute weeks, rates and dollars paid for one payment period.

    Nothing is stored; the caller owns the ledger.
    """
    request_id = get_request_id(request)

    try:
        entry = build_ledger_entry(
            request_body.type,
            request_body.start,
            request_body.end,
            aww_used=request_body.aww_used,
            date_of_injury=request_body.date_of_injury,
            state_table=rate_table.rates,
            today=date.today(),
            ec_used=request_body.ec_used,
            proration=request_body.proration or settings.default_proration,
            notes=request_body.notes,
        )
    except InvalidLedgerEntryError as e:
        record_calculation_error(e)
        logging.warning(f"Ledger entry rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(
            status_code=422,
            detail=[{"field": err.field, "message": err.message} for err in e.errors],
        )
    except (InvalidInputError, InvalidDateRangeError, NoApplicableRateError) as e:
        record_calculation_error(e)
        logging.warning(f"Ledger entry rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return LedgerEntrySchema.model_validate(entry)
