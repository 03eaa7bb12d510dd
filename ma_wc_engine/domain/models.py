"""Domain models - pure Python dataclasses representing benefit calculations"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


class BenefitType(str, Enum):
    """M.G.L. c. 152 weekly indemnity benefit, valued by its section code"""

    TTD = "34"
    TPD = "35"
    TPD_EC = "35ec"
    PERMANENT_TOTAL = "34A"
    DEPENDENT = "31"


# Canonical evaluation/display order
BENEFIT_TYPES: List[BenefitType] = [
    BenefitType.TTD,
    BenefitType.TPD,
    BenefitType.TPD_EC,
    BenefitType.PERMANENT_TOTAL,
    BenefitType.DEPENDENT,
]


class AppliedRule(str, Enum):
    """Which state min/max adjustment produced the final weekly rate"""

    CAPPED_TO_MAX = "capped_to_max"
    RAISED_TO_MIN = "raised_to_min"
    AWW_BELOW_MIN_KEEP_AWW = "aww_below_min_keep_aww"
    UNCHANGED = "unchanged"


class ProrationMode(str, Enum):
    """How a date range is converted to benefit weeks"""

    DAYS = "days"
    CALENDAR = "calendar"


@dataclass(frozen=True)
class RateTableRow:
    """One state-mandated min/max period (Oct 1 - Sep 30)"""

    effective_from: date
    effective_to: date
    state_min: float
    state_max: float
    source_url: Optional[str] = None


@dataclass(frozen=True)
class RateTable:
    """Published rate table snapshot"""

    rates: List[RateTableRow]
    last_updated: Optional[datetime] = None


@dataclass
class StateMinMax:
    """Min/max applicable to one date of injury"""

    state_min: float
    state_max: float
    effective_from: date
    effective_to: date


@dataclass
class WeeklyRateResult:
    """Output of one weekly rate calculation"""

    raw_weekly: float
    final_weekly: float
    applied_rule: AppliedRule
    state_min: float
    state_max: float


@dataclass
class WeekCalculation:
    days: int
    weeks_decimal: float
    full_weeks: int
    fractional_weeks: float


@dataclass
class BenefitCalculation:
    """Weekly and yearly amounts for one benefit type"""

    type: BenefitType
    raw_weekly: float
    final_weekly: float
    yearly_amount: float
    statutory_max_weeks: Optional[int]
    applied_rule: AppliedRule


@dataclass
class LedgerEntry:
    """Historical payment period for one claim.

    ``end`` of None means the period is ongoing and runs to the current date.
    """

    id: str
    type: BenefitType
    start: date
    end: Optional[date]
    weeks: float
    raw_weekly: float
    final_weekly: float
    dollars_paid: float
    aww_used: Optional[float] = None
    ec_used: Optional[float] = None
    notes: Optional[str] = None

    @property
    def is_ongoing(self) -> bool:
        return self.end is None


@dataclass
class RemainingEntitlement:
    """Remaining statutory entitlement for one benefit type"""

    type: BenefitType
    statutory_max_weeks: Optional[int]
    weeks_used: float
    weeks_remaining: Optional[float]
    dollars_remaining: Optional[float]
    is_life_benefit: bool
    shares_limit_with: List[BenefitType] = field(default_factory=list)


@dataclass
class CombinedUsage:
    """Usage snapshot of one shared-cap group"""

    weeks_used: float
    weeks_remaining: float
    max_weeks: int


@dataclass
class EntitlementSummary:
    """Aggregated ledger usage across every benefit type"""

    per_type: List[RemainingEntitlement]
    combined_usage: CombinedUsage
    combined_35_usage: CombinedUsage
    weeks_used_by_type: dict
    dollars_paid_by_type: dict
    total_dollars_paid: float

    def for_type(self, benefit_type: BenefitType) -> RemainingEntitlement:
        for entitlement in self.per_type:
            if entitlement.type == benefit_type:
                return entitlement
        raise KeyError(benefit_type)


@dataclass
class ValidationError:
    field: str
    message: str


@dataclass
class ValidationResult:
    errors: List[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass
class EntryOverlap:
    """Two ledger entries whose date ranges intersect"""

    entry1: LedgerEntry
    entry2: LedgerEntry
    overlap_days: int
