"""
CorrLib: Base Correlation Term Structures for Credit Tranches

A modular library for:
- Generating tranche maturities from tenors under calendar and CDS roll conventions
- Holding base correlation quotes by loss level and tenor as live market data
- Interpolating correlation over (time, loss level) with pluggable schemes
- Keeping the surface in sync with quote and evaluation date changes

Scope: correlation surfaces only; no calibration, copulas or tranche pricing.
"""

__version__ = "0.1.0"

# Core modules
from .conventions import (
    DayCount,
    BusinessDayConvention,
    DateGenerationRule,
    CorrelationConventions,
    year_fraction,
)
from .dates import Period, TimeUnit, Calendar, Schedule, make_schedule, cds_maturity
from .errors import InvalidInputError, ExtrapolationNotAllowedError

# Market data
from .observer import Observable, Observer
from .quotes import Quote, SimpleQuote
from .termstructure import EvaluationDate, TermStructure

# Correlation
from .correlation import (
    BaseCorrelationTermStructure,
    CorrelationTermStructure,
    CorrelationQuoteMatrix,
    load_correlation_quotes,
    Interpolator2D,
    BilinearInterpolator,
    BicubicSplineInterpolator,
    create_interpolator_2d,
)

__all__ = [
    # Version
    "__version__",
    # Conventions
    "DayCount",
    "BusinessDayConvention",
    "DateGenerationRule",
    "CorrelationConventions",
    "year_fraction",
    # Dates
    "Period",
    "TimeUnit",
    "Calendar",
    "Schedule",
    "make_schedule",
    "cds_maturity",
    # Errors
    "InvalidInputError",
    "ExtrapolationNotAllowedError",
    # Market data
    "Observable",
    "Observer",
    "Quote",
    "SimpleQuote",
    "EvaluationDate",
    "TermStructure",
    # Correlation
    "BaseCorrelationTermStructure",
    "CorrelationTermStructure",
    "CorrelationQuoteMatrix",
    "load_correlation_quotes",
    "Interpolator2D",
    "BilinearInterpolator",
    "BicubicSplineInterpolator",
    "create_interpolator_2d",
]
