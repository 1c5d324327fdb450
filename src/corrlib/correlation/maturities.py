"""
Tranche maturity generation.

Turns (start date, tenor, optional date generation rule) into adjusted
maturities and drops the ones that are no longer alive at the reference
date. Expired tenors can only be dropped from the front, so the surviving
maturities line up with the tail of the input tenor list.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence
import logging

from ..conventions import BusinessDayConvention, DateGenerationRule
from ..dates import Calendar, Period, add_period, cds_maturity, make_schedule
from ..errors import InvalidInputError

logger = logging.getLogger(__name__)

QUARTERLY = 4


def tranche_maturity(
    start: date,
    tenor: Period,
    calendar: Calendar,
    convention: BusinessDayConvention,
    rule: Optional[DateGenerationRule] = None,
) -> date:
    """
    Maturity of a single tranche tenor.
    
    Without a rule the start date is advanced on the calendar. With a rule,
    a quarterly schedule is laid out from start to the naive end date (the
    standard CDS maturity for CDS rules) and its last date is adjusted.
    """
    if rule is None:
        return calendar.advance(start, tenor, convention)
    
    if rule.is_cds:
        end = cds_maturity(start, tenor, rule)
    else:
        end = add_period(start, tenor)
    schedule = make_schedule(
        start,
        end,
        frequency=QUARTERLY,
        calendar=calendar,
        convention=convention,
        termination_convention=BusinessDayConvention.UNADJUSTED,
        rule=rule,
    )
    return calendar.adjust(schedule.end_date, convention)


def tail_alignment_offset(total_columns: int, surviving_columns: int) -> int:
    """
    Index of the first input tenor column still alive.
    
    Snapshot column j maps to quote column offset + j.
    """
    if surviving_columns < 0 or surviving_columns > total_columns:
        raise InvalidInputError(
            f"cannot align {surviving_columns} surviving columns with a table of {total_columns} columns"
        )
    return total_columns - surviving_columns


@dataclass(frozen=True)
class MaturityGrid:
    """
    Surviving tranche maturities.
    
    Attributes:
        tenors: Surviving tenors, a suffix of the input list
        dates: Adjusted maturity per surviving tenor
        offset: Number of expired tenors dropped from the front
        total_tenors: Length of the input tenor list
    """
    tenors: List[Period]
    dates: List[date]
    offset: int
    total_tenors: int
    
    def __len__(self) -> int:
        return len(self.dates)
    
    @property
    def max_date(self) -> date:
        return self.dates[-1]


def build_maturity_grid(
    start: date,
    tenors: Sequence[Period],
    reference_date: date,
    calendar: Calendar,
    convention: BusinessDayConvention,
    rule: Optional[DateGenerationRule] = None,
) -> MaturityGrid:
    """
    Generate maturities and keep the ones strictly after the reference date.
    
    Raises:
        InvalidInputError: If nothing survives, or if an expired maturity
            follows a live one (the survivors would not be a suffix)
    """
    kept_tenors: List[Period] = []
    kept_dates: List[date] = []
    offset = 0
    for tenor in tenors:
        maturity = tranche_maturity(start, tenor, calendar, convention, rule)
        # only keep future dates
        if maturity > reference_date:
            if kept_dates and maturity <= kept_dates[-1]:
                raise InvalidInputError(
                    f"tranche tenor {tenor} matures on {maturity}, not after "
                    f"{kept_tenors[-1]} maturity {kept_dates[-1]}"
                )
            kept_tenors.append(tenor)
            kept_dates.append(maturity)
        elif kept_dates:
            raise InvalidInputError(
                f"tranche tenor {tenor} expired after later-dated tenor {kept_tenors[-1]} survived"
            )
        else:
            offset += 1
    
    if not kept_dates:
        raise InvalidInputError("no tranche dates left after removing expired tenors")
    
    if offset:
        logger.debug("dropped %d expired tranche tenor(s) before %s", offset, reference_date)
    
    return MaturityGrid(
        tenors=kept_tenors,
        dates=kept_dates,
        offset=offset,
        total_tenors=len(tenors),
    )


__all__ = [
    "tranche_maturity",
    "tail_alignment_offset",
    "MaturityGrid",
    "build_maturity_grid",
]
