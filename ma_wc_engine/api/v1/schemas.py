"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ma_wc_engine.domain.models import AppliedRule, BenefitType, ProrationMode


class RateTableRowSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    effective_from: date
    effective_to: date
    state_min: float
    state_max: float
    source_url: Optional[str] = None


class RateTableResponse(BaseModel):
    """Response for GET /v1/rate-table"""

    model_config = ConfigDict(from_attributes=True)

    last_updated: Optional[datetime] = None
    rates: List[RateTableRowSchema]


class RatesRequest(BaseModel):
    """Request body for POST /v1/rates"""

    aww: float = Field(..., description="Average weekly wage in dollars")
    date_of_injury: date
    earning_capacity: float = Field(0.0, ge=0, description="Weekly earning capacity (Section 35 EC only)")


class BenefitCalculationSchema(BaseModel):
    """Weekly and yearly amounts for one benefit type"""

    model_config = ConfigDict(from_attributes=True)

    type: BenefitType
    title: str
    raw_weekly: float
    final_weekly: float
    yearly_amount: float
    statutory_max_weeks: Optional[int] = None
    applied_rule: AppliedRule


class RatesResponse(BaseModel):
    """Response for POST /v1/rates"""

    state_min: float
    state_max: float
    effective_from: date
    effective_to: date
    benefits: List[BenefitCalculationSchema]


class WeeksRequest(BaseModel):
    """Request body for POST /v1/weeks"""

    start: date
    end: date
    mode: ProrationMode = ProrationMode.DAYS


class WeeksResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    days: int
    weeks_decimal: float
    full_weeks: int
    fractional_weeks: float


class LedgerEntryRequest(BaseModel):
    """Request body for POST /v1/ledger/entries"""

    type: BenefitType
    start: date
    end: Optional[date] = Field(None, description="Omit for an ongoing period")
    aww_used: float
    ec_used: Optional[float] = None
    date_of_injury: date
    proration: Optional[ProrationMode] = None
    notes: Optional[str] = None


class LedgerEntrySchema(BaseModel):
    """Computed ledger entry"""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1)
    type: BenefitType
    start: date
    end: Optional[date] = None
    weeks: float = Field(..., ge=0)
    raw_weekly: float
    final_weekly: float
    dollars_paid: float
    aww_used: Optional[float] = None
    ec_used: Optional[float] = None
    notes: Optional[str] = None


class EntitlementsRequest(BaseModel):
    """Request body for POST /v1/entitlements"""

    aww: float
    date_of_injury: date
    earning_capacity: float = Field(0.0, ge=0)
    ledger: List[LedgerEntrySchema] = Field(default_factory=list)


class RemainingEntitlementSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: BenefitType
    statutory_max_weeks: Optional[int] = None
    weeks_used: float
    weeks_remaining: Optional[float] = None
    dollars_remaining: Optional[float] = None
    is_life_benefit: bool
    shares_limit_with: List[BenefitType] = Field(default_factory=list)


class CombinedUsageSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    weeks_used: float
    weeks_remaining: float
    max_weeks: int


class EntitlementsResponse(BaseModel):
    """Response for POST /v1/entitlements"""

    per_type: List[RemainingEntitlementSchema]
    combined_usage: CombinedUsageSchema
    combined_35_usage: CombinedUsageSchema
    weeks_used_by_type: Dict[str, float]
    dollars_paid_by_type: Dict[str, float]
    total_dollars_paid: float
    total_dollars_remaining: float
