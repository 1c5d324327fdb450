"""
Base correlation term structure.

Loss level versus time surface of scalar copula correlations, read from a
table of live market quotes. The surface:
1. Turns the tenors into tranche maturities, dropping expired ones
2. Copies the live quotes of the surviving tenors into a snapshot matrix
3. Fits a two-dimensional interpolator over (time, loss level, correlation)
4. Rebuilds the snapshot and the interpolator whenever a quote or the
   evaluation date moves

Rebuilds happen eagerly inside the notification. If market data is bad
the surface is left stale and queries retry the rebuild, so they never
see an outdated snapshot. Access is single-threaded; the snapshot reads
quotes one by one and is not atomic with respect to the market data source.
"""

import copy
from datetime import date
from typing import List, Optional, Sequence, Type, Union
import logging

import numpy as np
import pandas as pd

from ..conventions import BusinessDayConvention, CorrelationConventions, DateGenerationRule, DayCount
from ..dates import Calendar, Period
from ..errors import InvalidInputError
from ..termstructure import EvaluationDate, TermStructure
from .interpolation import Interpolator2D, create_interpolator_2d
from .maturities import build_maturity_grid, tail_alignment_offset
from .quotes import CorrelationQuoteMatrix, QuoteLike
from .validation import check_loss_levels, check_matrix_dimensions, check_tenors

logger = logging.getLogger(__name__)

InterpolationSpec = Union[str, Interpolator2D, Type[Interpolator2D]]


def _make_interpolator(interpolation: InterpolationSpec) -> Interpolator2D:
    # each surface fits its own copy
    if isinstance(interpolation, Interpolator2D):
        return copy.deepcopy(interpolation)
    if isinstance(interpolation, str):
        return create_interpolator_2d(interpolation)
    if isinstance(interpolation, type) and issubclass(interpolation, Interpolator2D):
        return interpolation()
    raise ValueError(f"Unsupported interpolation: {interpolation!r}")


class CorrelationTermStructure(TermStructure):
    """Term structure of copula correlations."""
    
    @property
    def correlation_size(self) -> int:
        """Dimension of the correlation returned at each point."""
        return 1


class BaseCorrelationTermStructure(CorrelationTermStructure):
    """
    Matrix based base correlation term structure.
    
    Args:
        settlement_days: Business days from evaluation date to reference date
        calendar: Calendar for settlement and maturity adjustment
        business_day_convention: Adjustment rule for maturities
        tenors: Sorted tranche tenors (Period or strings like "5Y")
        loss_levels: Sorted loss levels (detachment points) in (0, 1]
        quotes: Correlations indexed [loss level][tenor], as Quote objects
            or plain floats; sized to the full tenor list
        day_count: Day count for maturity times
        start_date: Date the tenors apply to (default: reference date). For
            index tranches this is usually the index start date, used
            together with a CDS date generation rule.
        rule: Date generation rule; None advances the start date directly
        interpolation: Interpolation method name, class or instance (an
            instance is copied, never shared between surfaces)
        evaluation_date: Evaluation date (or observable holder) the
            reference date floats with
        reference_date: Fixed reference date; disables floating
    
    Note:
        Non-local interpolators (bicubic spline) let the columns that are
        still alive change the correlation implied at dates of tenors that
        have already expired and been dropped from the grid.
    """
    
    def __init__(
        self,
        settlement_days: int,
        calendar: Calendar,
        business_day_convention: BusinessDayConvention,
        tenors: Sequence[Union[Period, str]],
        loss_levels: Sequence[float],
        quotes: Union[CorrelationQuoteMatrix, Sequence[Sequence[QuoteLike]]],
        day_count: DayCount = DayCount.ACT_365,
        start_date: Optional[date] = None,
        rule: Optional[DateGenerationRule] = None,
        interpolation: InterpolationSpec = "bilinear",
        evaluation_date: Optional[Union[EvaluationDate, date]] = None,
        reference_date: Optional[date] = None,
    ):
        super().__init__(
            settlement_days=settlement_days,
            calendar=calendar,
            business_day_convention=business_day_convention,
            day_count=day_count,
            evaluation_date=evaluation_date,
            reference_date=reference_date,
        )
        self._tenors: List[Period] = [Period.coerce(t) for t in tenors]
        self._loss_levels = np.array(loss_levels, dtype=np.float64)
        check_tenors(self._tenors)
        check_loss_levels(self._loss_levels)
        
        if not isinstance(quotes, CorrelationQuoteMatrix):
            quotes = CorrelationQuoteMatrix(quotes)
        self._quotes = quotes
        if quotes.rows != len(self._loss_levels):
            raise InvalidInputError(
                f"mismatch between number of loss levels ({len(self._loss_levels)}) and "
                f"number of rows ({quotes.rows}) in the quote table"
            )
        if quotes.columns != len(self._tenors):
            raise InvalidInputError(
                f"mismatch between number of tranche tenors ({len(self._tenors)}) and "
                f"number of columns ({quotes.columns}) in the quote table"
            )
        
        self.rule = rule
        self._start_date = start_date or self.reference_date()
        self._grid = build_maturity_grid(
            self._start_date,
            self._tenors,
            self.reference_date(),
            self.calendar,
            self.business_day_convention,
            rule,
        )
        # survivors are a suffix of the tenors, so both offsets must agree
        self._offset = tail_alignment_offset(quotes.columns, len(self._grid))
        if self._offset != self._grid.offset:
            raise InvalidInputError(
                f"tenor offset {self._grid.offset} from maturity generation does not match "
                f"table alignment offset {self._offset}"
            )
        
        self._interpolator = _make_interpolator(interpolation)
        if not self._interpolator.is_local and self._offset > 0:
            logger.warning(
                "%s is not local: dropping %d expired tenor(s) changes correlations implied for past dates",
                type(self._interpolator).__name__,
                self._offset,
            )
        
        self._times = np.zeros(len(self._grid))
        self._correlations = np.zeros((len(self._loss_levels), len(self._grid)))
        self._stale = True
        self._rebuild()
        self._register_with_market_data()
    
    def _register_with_market_data(self) -> None:
        self._quotes.subscribe_all(self)
        self._register_with_evaluation_date()
    
    @classmethod
    def from_conventions(
        cls,
        conventions: CorrelationConventions,
        tenors: Sequence[Union[Period, str]],
        loss_levels: Sequence[float],
        quotes: Union[CorrelationQuoteMatrix, Sequence[Sequence[QuoteLike]]],
        start_date: Optional[date] = None,
        evaluation_date: Optional[Union[EvaluationDate, date]] = None,
        reference_date: Optional[date] = None,
    ) -> "BaseCorrelationTermStructure":
        """Build a surface from a conventions preset."""
        return cls(
            settlement_days=conventions.settlement_days,
            calendar=Calendar(conventions.holidays),
            business_day_convention=conventions.business_day,
            tenors=tenors,
            loss_levels=loss_levels,
            quotes=quotes,
            day_count=conventions.day_count,
            start_date=start_date,
            rule=conventions.rule,
            interpolation=conventions.interpolation,
            evaluation_date=evaluation_date,
            reference_date=reference_date,
        )
    
    # ------------------------------------------------------------------
    # Snapshot maintenance
    # ------------------------------------------------------------------
    
    def _rebuild(self) -> None:
        """Recompute times, copy live quotes and refit the interpolator."""
        n_columns = len(self._grid)
        times = np.array([self.time_from_reference(d) for d in self._grid.dates])
        correlations = self._quotes.values(self._offset, n_columns)
        check_matrix_dimensions(
            correlations.shape[0], correlations.shape[1], len(self._loss_levels), n_columns
        )
        self._interpolator.fit(times, self._loss_levels, correlations)
        self._times = times
        self._correlations = correlations
        self._stale = False
        logger.debug("rebuilt %dx%d correlation snapshot", *correlations.shape)
    
    def _ensure_fresh(self) -> None:
        if self._stale:
            self._rebuild()
    
    def update(self) -> None:
        """
        React to a quote or evaluation date change.
        
        The reference date is refreshed first, then the snapshot is rebuilt
        and observers of the surface are notified. A rebuild that fails on
        bad market data (an unset quote, say) is not raised into the
        notifying quote: the surface stays stale and the next query
        retries the rebuild and raises.
        """
        self._update_reference_date()
        self._stale = True
        try:
            self._rebuild()
        except ValueError as e:
            logger.warning("correlation snapshot left stale: %s", e)
        self.notify_observers()
    
    def detach(self) -> None:
        """Stop listening to quotes and the evaluation date."""
        self._quotes.unsubscribe_all(self)
        super().detach()
    
    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    
    def correlation(
        self,
        t: Union[float, date],
        loss_level: float,
        extrapolate: bool = False
    ) -> float:
        """
        Base correlation at a time (or date) and loss level.
        
        Args:
            t: Year fraction from the reference date, or a date
            loss_level: Detachment point
            extrapolate: Allow points outside the grid
            
        Raises:
            ExtrapolationNotAllowedError: Off-grid point without extrapolate
        """
        if isinstance(t, date):
            t = self.time_from_reference(t)
        self._ensure_fresh()
        return self._interpolator(t, loss_level, extrapolate)
    
    def max_date(self) -> date:
        """Latest tranche maturity."""
        return self._grid.max_date
    
    @property
    def tenors(self) -> List[Period]:
        """All input tenors, expired ones included."""
        return list(self._tenors)
    
    @property
    def surviving_tenors(self) -> List[Period]:
        return list(self._grid.tenors)
    
    @property
    def loss_levels(self) -> np.ndarray:
        return self._loss_levels.copy()
    
    @property
    def start_date(self) -> date:
        return self._start_date
    
    @property
    def maturity_dates(self) -> List[date]:
        return list(self._grid.dates)
    
    @property
    def maturity_times(self) -> np.ndarray:
        self._ensure_fresh()
        return self._times.copy()
    
    @property
    def correlation_matrix(self) -> np.ndarray:
        """Copy of the current snapshot, shape (loss levels, surviving tenors)."""
        self._ensure_fresh()
        return self._correlations.copy()
    
    @property
    def tenor_offset(self) -> int:
        """Number of expired tenors dropped from the front of the quote table."""
        return self._offset
    
    @property
    def is_stale(self) -> bool:
        return self._stale
    
    @property
    def interpolator(self) -> Interpolator2D:
        return self._interpolator
    
    def to_frame(self) -> pd.DataFrame:
        """Snapshot as a DataFrame indexed by loss level with maturity columns."""
        return pd.DataFrame(
            self.correlation_matrix,
            index=pd.Index(self._loss_levels, name="loss_level"),
            columns=pd.Index(self._grid.dates, name="maturity"),
        )
    
    def __repr__(self) -> str:
        return (
            f"BaseCorrelationTermStructure(reference_date={self.reference_date()}, "
            f"tenors={[str(t) for t in self._grid.tenors]}, "
            f"loss_levels={self._loss_levels.tolist()}, "
            f"interpolation={type(self._interpolator).__name__})"
        )


__all__ = ["CorrelationTermStructure", "BaseCorrelationTermStructure"]
