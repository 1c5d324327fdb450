"""
Day count, business day and date generation conventions.

Supported Day Counts:
- ACT/360: Actual days / 360
- ACT/365: Actual days / 365 (default for correlation term structures)
- ACT/ACT: Actual days / actual days in year (ISDA)
- 30/360: 30 days per month / 360

Business Day Conventions:
- Following: Move to next business day
- Modified Following: Move to next business day, unless it falls in next month (then previous)
- Preceding: Move to previous business day
- Modified Preceding: Move to previous business day, unless it falls in previous month (then next)
- Unadjusted: Leave the date alone

Date Generation Rules:
- Backward / Forward / Zero: plain schedules anchored on termination / effective date
- Twentieth / TwentiethIMM: roll on the 20th (of IMM months)
- OldCDS / CDS / CDS2015: standard credit default swap rolls
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import FrozenSet, Optional
import calendar


class DayCount(Enum):
    """Day count convention enumeration."""
    ACT_360 = "ACT/360"
    ACT_365 = "ACT/365"
    ACT_ACT = "ACT/ACT"
    THIRTY_360 = "30/360"
    
    @classmethod
    def from_string(cls, s: str) -> "DayCount":
        """Parse day count from string representation."""
        key = s.upper().replace(" ", "").replace("/", "")
        for member in cls:
            if member.value.replace("/", "") == key:
                return member
        if key == "ACT365F":
            return cls.ACT_365
        raise ValueError(f"Unknown day count convention: {s}")


class BusinessDayConvention(Enum):
    """Business day adjustment convention."""
    FOLLOWING = "Following"
    MODIFIED_FOLLOWING = "ModifiedFollowing"
    PRECEDING = "Preceding"
    MODIFIED_PRECEDING = "ModifiedPreceding"
    UNADJUSTED = "Unadjusted"


class DateGenerationRule(Enum):
    """Rule used to lay out the dates of a schedule."""
    BACKWARD = "Backward"
    FORWARD = "Forward"
    ZERO = "Zero"
    TWENTIETH = "Twentieth"
    TWENTIETH_IMM = "TwentiethIMM"
    OLD_CDS = "OldCDS"
    CDS = "CDS"
    CDS2015 = "CDS2015"

    @property
    def is_cds(self) -> bool:
        """True for the three credit default swap roll conventions."""
        return self in (DateGenerationRule.OLD_CDS, DateGenerationRule.CDS, DateGenerationRule.CDS2015)

    @property
    def rolls_on_twentieth(self) -> bool:
        return self.is_cds or self in (DateGenerationRule.TWENTIETH, DateGenerationRule.TWENTIETH_IMM)


@dataclass(frozen=True)
class CorrelationConventions:
    """
    Market conventions for a base correlation term structure.
    
    Attributes:
        settlement_days: Business days from evaluation date to reference date
        business_day: Business day adjustment rule for maturities
        day_count: Day count used to turn maturities into times
        rule: Date generation rule (None means plain calendar advance)
        interpolation: Name of the two-dimensional interpolation method
        holidays: Holidays on top of weekends
    """
    settlement_days: int = 1
    business_day: BusinessDayConvention = BusinessDayConvention.FOLLOWING
    day_count: DayCount = DayCount.ACT_365
    rule: Optional[DateGenerationRule] = None
    interpolation: str = "bilinear"
    holidays: FrozenSet[date] = frozenset()
    
    @classmethod
    def cdx_tranche(cls) -> "CorrelationConventions":
        """CDX index tranche conventions (CDS2015 quarterly roll)."""
        return cls(
            settlement_days=1,
            business_day=BusinessDayConvention.FOLLOWING,
            day_count=DayCount.ACT_365,
            rule=DateGenerationRule.CDS2015,
            interpolation="bilinear",
        )
    
    @classmethod
    def itraxx_tranche(cls) -> "CorrelationConventions":
        """iTraxx index tranche conventions."""
        return cls(
            settlement_days=1,
            business_day=BusinessDayConvention.FOLLOWING,
            day_count=DayCount.ACT_365,
            rule=DateGenerationRule.CDS2015,
            interpolation="bilinear",
        )


def year_fraction(start: date, end: date, day_count: DayCount) -> float:
    """
    Calculate year fraction between two dates using specified day count convention.
    
    The result is signed: it is negative when end precedes start.
    
    Args:
        start: Start date
        end: End date
        day_count: Day count convention
        
    Returns:
        Year fraction as float
    """
    if start == end:
        return 0.0
    if end < start:
        return -year_fraction(end, start, day_count)
    
    actual_days = (end - start).days
    
    if day_count == DayCount.ACT_360:
        return actual_days / 360.0
    
    elif day_count == DayCount.ACT_365:
        return actual_days / 365.0
    
    elif day_count == DayCount.ACT_ACT:
        # ISDA ACT/ACT: split by year boundaries
        if start.year == end.year:
            return actual_days / (366 if calendar.isleap(start.year) else 365)
        total = (date(start.year + 1, 1, 1) - start).days / (366 if calendar.isleap(start.year) else 365)
        total += end.year - start.year - 1
        total += (end - date(end.year, 1, 1)).days / (366 if calendar.isleap(end.year) else 365)
        return total
    
    elif day_count == DayCount.THIRTY_360:
        # 30/360 US convention
        d1 = min(start.day, 30)
        d2 = end.day
        if d2 == 31 and d1 == 30:
            d2 = 30
        return (360 * (end.year - start.year) + 30 * (end.month - start.month) + (d2 - d1)) / 360.0
    
    else:
        raise ValueError(f"Unknown day count: {day_count}")


def is_business_day(d: date, holidays: Optional[FrozenSet[date]] = None) -> bool:
    """
    Check if a date is a business day.
    
    Saturday and Sunday are never business days; holidays are optional.
    """
    if d.weekday() >= 5:
        return False
    if holidays and d in holidays:
        return False
    return True


def _roll(d: date, step: int, holidays: Optional[FrozenSet[date]]) -> date:
    while not is_business_day(d, holidays):
        d += timedelta(days=step)
    return d


def adjust_business_day(
    d: date, 
    convention: BusinessDayConvention,
    holidays: Optional[FrozenSet[date]] = None
) -> date:
    """
    Adjust a date according to business day convention.
    
    Args:
        d: Date to adjust
        convention: Business day adjustment rule
        holidays: Optional set of holiday dates
        
    Returns:
        Adjusted date
    """
    if convention == BusinessDayConvention.UNADJUSTED or is_business_day(d, holidays):
        return d
    
    if convention == BusinessDayConvention.FOLLOWING:
        return _roll(d, 1, holidays)
    
    if convention == BusinessDayConvention.PRECEDING:
        return _roll(d, -1, holidays)
    
    if convention == BusinessDayConvention.MODIFIED_FOLLOWING:
        adjusted = _roll(d, 1, holidays)
        # If we crossed into next month, go preceding instead
        if adjusted.month != d.month:
            adjusted = _roll(d, -1, holidays)
        return adjusted
    
    if convention == BusinessDayConvention.MODIFIED_PRECEDING:
        adjusted = _roll(d, -1, holidays)
        if adjusted.month != d.month:
            adjusted = _roll(d, 1, holidays)
        return adjusted
    
    raise ValueError(f"Unknown business day convention: {convention}")


__all__ = [
    "DayCount",
    "BusinessDayConvention",
    "DateGenerationRule",
    "CorrelationConventions",
    "year_fraction",
    "is_business_day",
    "adjust_business_day",
]
