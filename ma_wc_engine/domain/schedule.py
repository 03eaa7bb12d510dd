"""
Statutory schedule for Massachusetts weekly indemnity benefits.

Rate multipliers, duration limits and shared-cap groups defined by
M.G.L. c. 152, sections 31, 34, 34A and 35. Pure lookups, no I/O.
"""

from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, List, Optional

from ma_wc_engine.domain.exceptions import InvalidInputError
from ma_wc_engine.domain.models import BenefitType

# Rate multipliers
SECTION_34_RATE = 0.60
SECTION_35_RATE = 0.75  # applied to the clamped Section 34 rate, not to AWW
SECTION_35_EC_RATE = 0.60
SECTION_34A_RATE = Fraction(2, 3)
SECTION_31_RATE = Fraction(2, 3)

# Duration limits in weeks
SECTION_34_MAX_WEEKS = 156  # 3 years
SECTION_35_MAX_WEEKS = 208  # 4 years
SECTION_35_EC_MAX_WEEKS = 208
COMBINED_35_MAX_WEEKS = 208
COMBINED_34_35_MAX_WEEKS = 364  # 7 years

WEEKS_PER_YEAR = 52
DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class CapGroup:
    """Benefit types drawing on one combined pool of weeks"""

    group_id: str
    members: tuple
    max_weeks: int


SECTION_35_GROUP = CapGroup(
    group_id="section_35",
    members=(BenefitType.TPD, BenefitType.TPD_EC),
    max_weeks=COMBINED_35_MAX_WEEKS,
)

# Ceiling over the sum of all three; independent of the inner 208-week pool
SECTION_34_35_GROUP = CapGroup(
    group_id="section_34_35",
    members=(BenefitType.TTD, BenefitType.TPD, BenefitType.TPD_EC),
    max_weeks=COMBINED_34_35_MAX_WEEKS,
)

CAP_GROUPS: List[CapGroup] = [SECTION_35_GROUP, SECTION_34_35_GROUP]


@dataclass(frozen=True)
class BenefitSchedule:
    """Static statutory attributes of one benefit type"""

    multiplier: float
    max_weeks: Optional[int]
    shared_group: Optional[CapGroup]
    title: str
    short_label: str
    description: str


SCHEDULE: Dict[BenefitType, BenefitSchedule] = {
    BenefitType.TTD: BenefitSchedule(
        multiplier=SECTION_34_RATE,
        max_weeks=SECTION_34_MAX_WEEKS,
        shared_group=None,
        title="Section 34 (TTD)",
        short_label="S34",
        description="Temporary Total Disability",
    ),
    BenefitType.TPD: BenefitSchedule(
        multiplier=SECTION_35_RATE,
        max_weeks=SECTION_35_MAX_WEEKS,
        shared_group=SECTION_35_GROUP,
        title="Section 35 (TPD)",
        short_label="S35",
        description="Temporary Partial Disability",
    ),
    BenefitType.TPD_EC: BenefitSchedule(
        multiplier=SECTION_35_EC_RATE,
        max_weeks=SECTION_35_EC_MAX_WEEKS,
        shared_group=SECTION_35_GROUP,
        title="Section 35 EC",
        short_label="S35 EC",
        description="Temporary Partial Disability with Earning Capacity",
    ),
    BenefitType.PERMANENT_TOTAL: BenefitSchedule(
        multiplier=SECTION_34A_RATE,
        max_weeks=None,
        shared_group=None,
        title="Section 34A (P&T)",
        short_label="S34A",
        description="Permanent and Total Disability",
    ),
    BenefitType.DEPENDENT: BenefitSchedule(
        multiplier=SECTION_31_RATE,
        max_weeks=None,
        shared_group=None,
        title="Section 31 (Dependent)",
        short_label="S31",
        description="Widow/Dependent Benefits",
    ),
}


def to_benefit_type(value) -> BenefitType:
    """Coerce a section code ("34", "35ec", ...) into a BenefitType"""
    try:
        return BenefitType(value)
    except ValueError as e:
        raise InvalidInputError(f"Unknown benefit type: {value}") from e


def get_schedule(benefit_type) -> BenefitSchedule:
    return SCHEDULE[to_benefit_type(benefit_type)]


def get_statutory_max_weeks(benefit_type) -> Optional[int]:
    """Max weeks for a benefit type; None for life benefits (34A, 31)"""
    return get_schedule(benefit_type).max_weeks


def get_combined_max_weeks() -> int:
    """Combined Section 34 + 35 ceiling (7 years)"""
    return COMBINED_34_35_MAX_WEEKS


def get_combined_35_max_weeks() -> int:
    """Pool shared by Section 35 and Section 35 EC (4 years)"""
    return COMBINED_35_MAX_WEEKS


def get_benefit_rate_multiplier(benefit_type) -> float:
    """Note: the Section 35 multiplier applies to the clamped Section 34 rate"""
    return get_schedule(benefit_type).multiplier


def is_life_benefit(benefit_type) -> bool:
    return get_statutory_max_weeks(benefit_type) is None


def is_finite_benefit(benefit_type) -> bool:
    return not is_life_benefit(benefit_type)


def get_shared_group(benefit_type) -> Optional[CapGroup]:
    return get_schedule(benefit_type).shared_group


def shares_limit_with(benefit_type) -> List[BenefitType]:
    """Other benefit types drawing on the same per-type pool"""
    benefit_type = to_benefit_type(benefit_type)
    group = get_shared_group(benefit_type)
    if group is None:
        return []
    return [member for member in group.members if member != benefit_type]


def get_benefit_title(benefit_type) -> str:
    return get_schedule(benefit_type).title


def get_benefit_short_label(benefit_type) -> str:
    return get_schedule(benefit_type).short_label


def get_benefit_description(benefit_type) -> str:
    return get_schedule(benefit_type).description
