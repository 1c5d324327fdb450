"""
Term structure base class.

A term structure has a reference date (time 0) and converts dates into
times with its day count. The reference date is either fixed at
construction or floats with an evaluation date, in which case it is the
evaluation date advanced by the settlement lag on the calendar.
"""

from abc import abstractmethod
from datetime import date
from typing import Optional, Union
import logging

from .conventions import BusinessDayConvention, DayCount, year_fraction
from .dates import Calendar, Period, TimeUnit
from .observer import Observable, Observer

logger = logging.getLogger(__name__)


class EvaluationDate(Observable):
    """
    Observable holder for the date the market is evaluated on.
    
    Term structures with a floating reference date subscribe to it and
    recompute their reference date when it moves.
    """
    
    def __init__(self, value: Optional[date] = None):
        super().__init__()
        self._value = value or date.today()
    
    @property
    def value(self) -> date:
        return self._value
    
    def set(self, value: date) -> None:
        if value != self._value:
            self._value = value
            self.notify_observers()
    
    def __repr__(self) -> str:
        return f"EvaluationDate({self._value.isoformat()})"


class TermStructure(Observable, Observer):
    """
    Base class for date-dependent market structures.
    
    Attributes:
        settlement_days: Business days between evaluation and reference date
        calendar: Calendar for the settlement lag and maturity adjustment
        business_day_convention: Adjustment rule for generated dates
        day_count: Day count for time calculations
    
    Subclasses call _register_with_evaluation_date() once they are fully
    built so a failed construction never receives notifications.
    """
    
    def __init__(
        self,
        settlement_days: int = 0,
        calendar: Optional[Calendar] = None,
        business_day_convention: BusinessDayConvention = BusinessDayConvention.FOLLOWING,
        day_count: DayCount = DayCount.ACT_365,
        evaluation_date: Optional[Union[EvaluationDate, date]] = None,
        reference_date: Optional[date] = None,
    ):
        Observable.__init__(self)
        if settlement_days < 0:
            raise ValueError(f"settlement days must be non-negative, got {settlement_days}")
        self.settlement_days = settlement_days
        self.calendar = calendar or Calendar()
        self.business_day_convention = business_day_convention
        self.day_count = day_count
        
        self._moving = reference_date is None
        self._evaluation_date: Optional[EvaluationDate] = None
        if self._moving:
            if not isinstance(evaluation_date, EvaluationDate):
                evaluation_date = EvaluationDate(evaluation_date)
            self._evaluation_date = evaluation_date
            self._reference_date = self._settlement_date()
        else:
            self._reference_date = reference_date
    
    def _settlement_date(self) -> date:
        return self.calendar.advance(
            self._evaluation_date.value,
            Period(self.settlement_days, TimeUnit.DAYS),
        )
    
    @property
    def moving(self) -> bool:
        """True when the reference date follows the evaluation date."""
        return self._moving
    
    @property
    def evaluation_date(self) -> Optional[EvaluationDate]:
        return self._evaluation_date
    
    def reference_date(self) -> date:
        """The date at which time is zero."""
        return self._reference_date
    
    def time_from_reference(self, d: date) -> float:
        """Signed year fraction from the reference date to d."""
        return year_fraction(self._reference_date, d, self.day_count)
    
    @abstractmethod
    def max_date(self) -> date:
        """Latest date the structure can be queried at."""
        pass
    
    def max_time(self) -> float:
        return self.time_from_reference(self.max_date())
    
    def _update_reference_date(self) -> None:
        if self._moving:
            new_reference = self._settlement_date()
            if new_reference != self._reference_date:
                logger.debug("reference date moved from %s to %s", self._reference_date, new_reference)
            self._reference_date = new_reference
    
    def update(self) -> None:
        """Refresh the reference date and notify observers."""
        self._update_reference_date()
        self.notify_observers()
    
    def _register_with_evaluation_date(self) -> None:
        """Start following the evaluation date; call once construction succeeded."""
        if self._evaluation_date is not None:
            self._evaluation_date.subscribe(self)
    
    def detach(self) -> None:
        """Stop listening to the evaluation date."""
        if self._evaluation_date is not None:
            self._evaluation_date.unsubscribe(self)


__all__ = ["EvaluationDate", "TermStructure"]
