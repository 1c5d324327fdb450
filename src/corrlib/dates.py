"""
Date utilities for credit term structures.

Provides:
- Tenor parsing and period arithmetic
- A weekend/holiday calendar with business day adjustment and advance
- Standard CDS roll dates (twentieth of IMM months) and CDS maturities
- Rule-driven schedule generation
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import ClassVar, FrozenSet, Iterable, List, Optional, Tuple, Union
import re

from .conventions import (
    BusinessDayConvention,
    DateGenerationRule,
    adjust_business_day,
    is_business_day,
)


class TimeUnit(Enum):
    """Unit of a period."""
    DAYS = "D"
    WEEKS = "W"
    MONTHS = "M"
    YEARS = "Y"


# Day bounds of one unit, used for comparisons across unit families
_DAY_BOUNDS = {
    TimeUnit.DAYS: (1, 1),
    TimeUnit.WEEKS: (7, 7),
    TimeUnit.MONTHS: (28, 31),
    TimeUnit.YEARS: (365, 366),
}


@dataclass(frozen=True, eq=False)
class Period:
    """
    A tenor such as 3M or 5Y.
    
    Periods in the same unit family (days/weeks or months/years) compare
    exactly. Comparisons across families go through the day bounds of each
    unit and fail when the answer is ambiguous (e.g. 1M against 30D).
    """
    length: int
    unit: TimeUnit
    
    # Tenor regex pattern: number + unit (D/W/M/Y)
    TENOR_PATTERN: ClassVar = re.compile(r'^(-?\d+)([DWMY])$', re.IGNORECASE)
    
    @classmethod
    def parse(cls, tenor: str) -> "Period":
        """
        Parse a tenor string.
        
        Args:
            tenor: Tenor string like "1D", "3M", "2Y"
            
        Raises:
            ValueError: If tenor format is invalid
        """
        match = cls.TENOR_PATTERN.match(str(tenor).upper().strip())
        if not match:
            raise ValueError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y'")
        return cls(int(match.group(1)), TimeUnit(match.group(2).upper()))
    
    @classmethod
    def coerce(cls, value: Union["Period", str]) -> "Period":
        """Return value as a Period, parsing tenor strings."""
        if isinstance(value, Period):
            return value
        return cls.parse(value)
    
    def _normalized(self) -> Tuple[int, str]:
        if self.unit == TimeUnit.YEARS:
            return self.length * 12, "M"
        if self.unit == TimeUnit.WEEKS:
            return self.length * 7, "D"
        if self.unit == TimeUnit.MONTHS:
            return self.length, "M"
        return self.length, "D"
    
    def _day_range(self) -> Tuple[int, int]:
        lo, hi = _DAY_BOUNDS[self.unit]
        bounds = (self.length * lo, self.length * hi)
        return min(bounds), max(bounds)
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        if self.length == 0 and other.length == 0:
            return True
        return self._normalized() == other._normalized()
    
    def __hash__(self) -> int:
        return hash(self._normalized()) if self.length else 0
    
    def __lt__(self, other: "Period") -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        if self.length == 0:
            return other.length > 0
        if other.length == 0:
            return self.length < 0
        n1, family1 = self._normalized()
        n2, family2 = other._normalized()
        if family1 == family2:
            return n1 < n2
        lo1, hi1 = self._day_range()
        lo2, hi2 = other._day_range()
        if hi1 < lo2:
            return True
        if lo1 > hi2:
            return False
        raise ValueError(f"undecidable comparison between {self} and {other}")
    
    def __gt__(self, other: "Period") -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        return other < self
    
    def __le__(self, other: "Period") -> bool:
        return self == other or self < other
    
    def __ge__(self, other: "Period") -> bool:
        return self == other or other < self
    
    def __mul__(self, n: int) -> "Period":
        return Period(self.length * n, self.unit)
    
    __rmul__ = __mul__
    
    def __neg__(self) -> "Period":
        return Period(-self.length, self.unit)
    
    def __str__(self) -> str:
        return f"{self.length}{self.unit.value}"
    
    def __repr__(self) -> str:
        return f"Period('{self}')"


def _days_in_month(year: int, month: int) -> int:
    """Return number of days in a month."""
    if month in (1, 3, 5, 7, 8, 10, 12):
        return 31
    elif month in (4, 6, 9, 11):
        return 30
    elif month == 2:
        if (year % 4 == 0 and year % 100 != 0) or (year % 400 == 0):
            return 29
        return 28
    raise ValueError(f"Invalid month: {month}")


def _is_end_of_month(d: date) -> bool:
    return d.day == _days_in_month(d.year, d.month)


def add_months(start: date, months: int, end_of_month: bool = False) -> date:
    """Add calendar months, clamping the day to the target month's length."""
    year = start.year + (start.month + months - 1) // 12
    month = (start.month + months - 1) % 12 + 1
    last = _days_in_month(year, month)
    if end_of_month and _is_end_of_month(start):
        return date(year, month, last)
    return date(year, month, min(start.day, last))


def add_period(start: date, period: Union[Period, str], end_of_month: bool = False) -> date:
    """
    Add a period to a date without any business day adjustment.
    
    Days and weeks are calendar days here; see Calendar.advance for
    business day stepping.
    """
    period = Period.coerce(period)
    if period.unit == TimeUnit.DAYS:
        return start + timedelta(days=period.length)
    if period.unit == TimeUnit.WEEKS:
        return start + timedelta(weeks=period.length)
    if period.unit == TimeUnit.MONTHS:
        return add_months(start, period.length, end_of_month)
    return add_months(start, 12 * period.length, end_of_month)


class Calendar:
    """
    Weekend calendar with an optional set of holidays.
    
    Attributes:
        holidays: Extra non-business dates on top of Saturdays and Sundays
        name: Label used in reprs and diagnostics
    """
    
    def __init__(self, holidays: Optional[Iterable[date]] = None, name: str = "WeekendsOnly"):
        self.holidays: FrozenSet[date] = frozenset(holidays or ())
        self.name = name
    
    def is_business_day(self, d: date) -> bool:
        return is_business_day(d, self.holidays)
    
    def is_holiday(self, d: date) -> bool:
        return not self.is_business_day(d)
    
    def adjust(
        self,
        d: date,
        convention: BusinessDayConvention = BusinessDayConvention.FOLLOWING
    ) -> date:
        """Adjust a date to a business day under the given convention."""
        return adjust_business_day(d, convention, self.holidays)
    
    def advance(
        self,
        d: date,
        period: Union[Period, str, int],
        convention: BusinessDayConvention = BusinessDayConvention.FOLLOWING,
        end_of_month: bool = False
    ) -> date:
        """
        Advance a date by a period.
        
        Day periods (or a bare integer) move by business days; week, month and
        year periods add the calendar period and then adjust the result.
        
        Args:
            d: Starting date
            period: Period, tenor string or number of business days
            convention: Business day adjustment for the result
            end_of_month: Keep month-end dates on month end for month/year periods
        """
        if isinstance(period, int):
            period = Period(period, TimeUnit.DAYS)
        period = Period.coerce(period)
        
        if period.length == 0:
            return self.adjust(d, convention)
        
        if period.unit == TimeUnit.DAYS:
            step = 1 if period.length > 0 else -1
            result = d
            remaining = abs(period.length)
            while remaining > 0:
                result += timedelta(days=step)
                if self.is_business_day(result):
                    remaining -= 1
            return result
        
        return self.adjust(add_period(d, period, end_of_month), convention)
    
    def __repr__(self) -> str:
        return f"Calendar({self.name!r}, holidays={len(self.holidays)})"


# =============================================================================
# CDS ROLL DATES
# =============================================================================

def next_twentieth(d: date, rule: DateGenerationRule) -> date:
    """First 20th on or after d; IMM-month only for the IMM and CDS rules."""
    result = date(d.year, d.month, 20)
    if result < d:
        result = add_months(result, 1)
    if rule != DateGenerationRule.TWENTIETH and rule.rolls_on_twentieth:
        skip = result.month % 3
        if skip != 0:
            result = add_months(result, 3 - skip)
    return result


def previous_twentieth(d: date, rule: DateGenerationRule) -> date:
    """Last 20th on or before d; IMM-month only for the IMM and CDS rules."""
    result = date(d.year, d.month, 20)
    if result > d:
        result = add_months(result, -1)
    if rule != DateGenerationRule.TWENTIETH and rule.rolls_on_twentieth:
        skip = result.month % 3
        if skip != 0:
            result = add_months(result, -skip)
    return result


def cds_maturity(
    trade_date: date,
    tenor: Union[Period, str],
    rule: DateGenerationRule
) -> Optional[date]:
    """
    Standard CDS maturity for a trade date and tenor.
    
    The tenor is applied to the most recent IMM twentieth and rolled three
    more months. Under CDS2015 the roll only happens on 20 Jun and 20 Dec,
    so anchors on those dates step back one quarter.
    
    Returns:
        The unadjusted maturity, or None for a 0M tenor on a CDS2015 roll date
        
    Raises:
        ValueError: For non-CDS rules or tenors that are not whole quarters
    """
    if not rule.is_cds:
        raise ValueError(f"cds_maturity should only be used with CDS date generation rules, got {rule.value}")
    tenor = Period.coerce(tenor)
    if not (tenor.unit == TimeUnit.YEARS or (tenor.unit == TimeUnit.MONTHS and tenor.length % 3 == 0)):
        raise ValueError(f"cds_maturity expects a tenor that is a multiple of 3 months, got {tenor}")
    if rule == DateGenerationRule.OLD_CDS and tenor.length == 0:
        raise ValueError("a tenor of 0M is not supported for OldCDS")
    
    anchor = previous_twentieth(trade_date, rule)
    if rule == DateGenerationRule.CDS2015 and anchor.month in (6, 12):
        if tenor.length == 0:
            return None
        anchor = add_months(anchor, -3)
    
    maturity = add_months(add_period(anchor, tenor), 3)
    if maturity <= trade_date:
        raise ValueError(f"CDS maturity {maturity} must be after trade date {trade_date}")
    return maturity


# =============================================================================
# SCHEDULES
# =============================================================================

@dataclass
class Schedule:
    """Container for a generated date schedule."""
    dates: List[date]
    rule: DateGenerationRule
    frequency: int
    convention: BusinessDayConvention
    termination_convention: BusinessDayConvention
    is_regular: List[bool] = field(default_factory=list)
    
    @property
    def start_date(self) -> date:
        return self.dates[0]
    
    @property
    def end_date(self) -> date:
        return self.dates[-1]
    
    def __len__(self) -> int:
        return len(self.dates)
    
    def __iter__(self):
        return iter(self.dates)


def make_schedule(
    start: date,
    end: date,
    frequency: int = 4,
    calendar: Optional[Calendar] = None,
    convention: BusinessDayConvention = BusinessDayConvention.FOLLOWING,
    termination_convention: BusinessDayConvention = BusinessDayConvention.UNADJUSTED,
    rule: DateGenerationRule = DateGenerationRule.BACKWARD,
) -> Schedule:
    """
    Generate a schedule between two dates.
    
    Args:
        start: Effective date
        end: Termination date
        frequency: Periods per year (1=annual, 2=semi, 4=quarterly, 12=monthly)
        calendar: Calendar used for adjustments (weekends only if omitted)
        convention: Adjustment of all dates but the termination date
        termination_convention: Adjustment of the termination date
        rule: Date generation rule
        
    Returns:
        Schedule whose dates are adjusted per the conventions
    """
    if frequency <= 0 or 12 % frequency != 0:
        raise ValueError(f"Unsupported frequency: {frequency}")
    if end <= start:
        raise ValueError(f"termination date ({end}) must be later than effective date ({start})")
    
    calendar = calendar or Calendar()
    tenor = Period(12 // frequency, TimeUnit.MONTHS)
    
    if rule == DateGenerationRule.ZERO:
        dates, regular = [start, end], [True]
    
    elif rule == DateGenerationRule.BACKWARD:
        # Roll backward from maturity
        dates, regular = [end], []
        periods = 1
        while True:
            candidate = add_period(end, tenor * -periods)
            if candidate < start:
                break
            if calendar.adjust(dates[-1], convention) != calendar.adjust(candidate, convention):
                dates.append(candidate)
                regular.append(True)
            periods += 1
        if calendar.adjust(dates[-1], convention) != calendar.adjust(start, convention):
            dates.append(start)
            regular.append(False)
        dates.reverse()
        regular.reverse()
    
    else:
        dates, regular = _forward_dates(start, end, tenor, calendar, convention, termination_convention, rule)
    
    # Adjust everything but the termination date
    if rule != DateGenerationRule.OLD_CDS:
        dates[0] = calendar.adjust(dates[0], convention)
    for i in range(1, len(dates) - 1):
        dates[i] = calendar.adjust(dates[i], convention)
    if rule not in (DateGenerationRule.CDS, DateGenerationRule.CDS2015):
        dates[-1] = calendar.adjust(dates[-1], termination_convention)
    
    return Schedule(
        dates=dates,
        rule=rule,
        frequency=frequency,
        convention=convention,
        termination_convention=termination_convention,
        is_regular=regular,
    )


def _forward_dates(
    start: date,
    end: date,
    tenor: Period,
    calendar: Calendar,
    convention: BusinessDayConvention,
    termination_convention: BusinessDayConvention,
    rule: DateGenerationRule,
) -> Tuple[List[date], List[bool]]:
    """Forward generation used by the Forward and twentieth-based rules."""
    dates: List[date] = []
    regular: List[bool] = []
    
    if rule in (DateGenerationRule.CDS, DateGenerationRule.CDS2015):
        prev20th = previous_twentieth(start, rule)
        if calendar.adjust(prev20th, convention) > start:
            dates.append(add_months(prev20th, -3))
            regular.append(True)
        dates.append(prev20th)
    else:
        dates.append(start)
    seed = dates[-1]
    
    if rule.rolls_on_twentieth:
        next20th = next_twentieth(start, rule)
        if rule == DateGenerationRule.OLD_CDS and (next20th - start).days < 30:
            # stub shorter than 30 natural days rolls to the following twentieth
            next20th = next_twentieth(next20th + timedelta(days=1), rule)
        if next20th != start and next20th != dates[-1]:
            dates.append(next20th)
            regular.append(rule in (DateGenerationRule.CDS, DateGenerationRule.CDS2015))
            seed = next20th
    
    periods = 1
    while True:
        candidate = add_period(seed, tenor * periods)
        if candidate > end:
            break
        if calendar.adjust(dates[-1], convention) != calendar.adjust(candidate, convention):
            dates.append(candidate)
            regular.append(True)
        periods += 1
    
    if calendar.adjust(dates[-1], termination_convention) != calendar.adjust(end, termination_convention):
        if rule.rolls_on_twentieth:
            dates.append(next_twentieth(end, rule))
            regular.append(True)
        else:
            dates.append(end)
            regular.append(False)
    
    return dates, regular


__all__ = [
    "TimeUnit",
    "Period",
    "Calendar",
    "add_months",
    "add_period",
    "next_twentieth",
    "previous_twentieth",
    "cds_maturity",
    "Schedule",
    "make_schedule",
]
