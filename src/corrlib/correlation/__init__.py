"""
Correlation package - base correlation surfaces for tranche pricing.

Provides:
- BaseCorrelationTermStructure: loss level x time surface over live quotes
- CorrelationQuoteMatrix: live [loss level][tenor] quote table
- Interpolators: bilinear and bicubic spline surface interpolation
- Grid checks and tranche maturity generation
"""

from .base_correlation import BaseCorrelationTermStructure, CorrelationTermStructure
from .quotes import CorrelationQuoteMatrix, load_correlation_quotes
from .interpolation import (
    Interpolator2D,
    BilinearInterpolator,
    BicubicSplineInterpolator,
    create_interpolator_2d,
)
from .maturities import (
    MaturityGrid,
    build_maturity_grid,
    tail_alignment_offset,
    tranche_maturity,
)
from .validation import check_loss_levels, check_matrix_dimensions, check_tenors

__all__ = [
    "BaseCorrelationTermStructure",
    "CorrelationTermStructure",
    "CorrelationQuoteMatrix",
    "load_correlation_quotes",
    "Interpolator2D",
    "BilinearInterpolator",
    "BicubicSplineInterpolator",
    "create_interpolator_2d",
    "MaturityGrid",
    "build_maturity_grid",
    "tail_alignment_offset",
    "tranche_maturity",
    "check_tenors",
    "check_loss_levels",
    "check_matrix_dimensions",
]
