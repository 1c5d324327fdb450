"""
Two-dimensional interpolation for correlation surfaces.

Provides:
- BilinearInterpolator: piecewise bilinear, local, linear extrapolation off the edge cells
- BicubicSplineInterpolator: natural cubic splines along both axes

All interpolators are fitted on a rectangular grid with x (time) and
y (loss level) strictly increasing and z indexed z[y][x].

The bicubic spline is not local: every knot influences the whole surface.
When a term structure drops expired tenors from the front of its grid, the
spline through the remaining columns changes, so the correlation implied
for dates that were already priced off the old grid moves too. Use the
bilinear interpolator when past coupons must stay put.
"""

from abc import ABC, abstractmethod
from typing import Callable, ClassVar, List, Optional, Tuple
import logging

import numpy as np
from scipy.interpolate import CubicSpline

from ..errors import ExtrapolationNotAllowedError, InvalidInputError

logger = logging.getLogger(__name__)

# Relative tolerance when deciding whether a point sits on a grid edge
_EDGE_TOLERANCE = 1e-12


def _close(a: float, b: float) -> bool:
    return abs(a - b) <= _EDGE_TOLERANCE * max(1.0, abs(a), abs(b))


def _check_axis(values: np.ndarray, name: str) -> None:
    if values.ndim != 1 or len(values) == 0:
        raise InvalidInputError(f"{name} must be a non-empty one-dimensional array")
    if not np.all(np.isfinite(values)):
        raise InvalidInputError(f"{name} contains non-finite values")
    diffs = np.diff(values)
    if np.any(diffs <= 0):
        i = int(np.argmax(diffs <= 0))
        raise InvalidInputError(
            f"{name} must be strictly increasing: element {i} is {values[i]}, element {i + 1} is {values[i + 1]}"
        )


class Interpolator2D(ABC):
    """
    Abstract base class for surface interpolation.
    
    Attributes:
        is_local: Whether a knot only affects its neighbouring cells
    """
    
    is_local: ClassVar[bool] = True
    
    def __init__(self):
        self.x: Optional[np.ndarray] = None
        self.y: Optional[np.ndarray] = None
        self.z: Optional[np.ndarray] = None
    
    def fit(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> None:
        """
        Fit the interpolator to a grid.
        
        Args:
            x: Strictly increasing x coordinates (times)
            y: Strictly increasing y coordinates (loss levels)
            z: Values with shape (len(y), len(x))
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        z = np.asarray(z, dtype=np.float64)
        _check_axis(x, "x")
        _check_axis(y, "y")
        if z.shape != (len(y), len(x)):
            raise InvalidInputError(
                f"z has shape {z.shape}, expected ({len(y)}, {len(x)})"
            )
        self.x, self.y, self.z = x, y, z
        self._fit()
        logger.debug("%s fitted on %dx%d grid", type(self).__name__, len(y), len(x))
    
    @abstractmethod
    def _fit(self) -> None:
        pass
    
    @abstractmethod
    def _evaluate(self, x: float, y: float) -> float:
        pass
    
    @property
    def is_fitted(self) -> bool:
        return self.z is not None
    
    def x_range(self) -> Tuple[float, float]:
        return float(self.x[0]), float(self.x[-1])
    
    def y_range(self) -> Tuple[float, float]:
        return float(self.y[0]), float(self.y[-1])
    
    def is_in_range(self, x: float, y: float) -> bool:
        x1, x2 = self.x_range()
        y1, y2 = self.y_range()
        x_in = (x1 <= x <= x2) or _close(x, x1) or _close(x, x2)
        y_in = (y1 <= y <= y2) or _close(y, y1) or _close(y, y2)
        return x_in and y_in
    
    def interpolate(self, x: float, y: float, allow_extrapolation: bool = False) -> float:
        """
        Interpolate at (x, y).
        
        Raises:
            ExtrapolationNotAllowedError: If the point is off the grid and
                extrapolation was not allowed
        """
        if not self.is_fitted:
            raise RuntimeError("Interpolator not fitted")
        if not allow_extrapolation and not self.is_in_range(x, y):
            raise ExtrapolationNotAllowedError(x, y, self.x_range(), self.y_range())
        return float(self._evaluate(float(x), float(y)))
    
    def __call__(self, x: float, y: float, allow_extrapolation: bool = False) -> float:
        """Convenience method to call interpolate."""
        return self.interpolate(x, y, allow_extrapolation)


def _locate(grid: np.ndarray, value: float) -> int:
    """Index i of the cell [grid[i], grid[i+1]] used for value, clamped to the edges."""
    if len(grid) < 2:
        return 0
    idx = int(np.searchsorted(grid, value, side='right')) - 1
    return max(0, min(idx, len(grid) - 2))


def _weight(grid: np.ndarray, i: int, value: float) -> float:
    if len(grid) < 2:
        return 0.0
    return (value - grid[i]) / (grid[i + 1] - grid[i])


class BilinearInterpolator(Interpolator2D):
    """
    Piecewise bilinear interpolation.
    
    Off the grid the formula of the nearest edge cell is extended, which
    gives linear extrapolation. An axis with a single knot is flat.
    """
    
    is_local = True
    
    def _fit(self) -> None:
        pass
    
    def _evaluate(self, x: float, y: float) -> float:
        i = _locate(self.x, x)
        j = _locate(self.y, y)
        t = _weight(self.x, i, x)
        u = _weight(self.y, j, y)
        i1 = min(i + 1, len(self.x) - 1)
        j1 = min(j + 1, len(self.y) - 1)
        
        z1 = self.z[j, i]
        z2 = self.z[j, i1]
        z3 = self.z[j1, i]
        z4 = self.z[j1, i1]
        
        return (1 - t) * (1 - u) * z1 + t * (1 - u) * z2 + (1 - t) * u * z3 + t * u * z4


def _natural_spline(knots: np.ndarray, values: np.ndarray) -> Callable[[float], float]:
    if len(knots) == 1:
        constant = float(values[0])
        return lambda v: constant
    return CubicSpline(knots, values, bc_type="natural", extrapolate=True)


class BicubicSplineInterpolator(Interpolator2D):
    """
    Bicubic spline interpolation.
    
    One natural cubic spline along x per loss level row, then a natural
    cubic spline along y through the row values at the query x. Off the
    grid the end polynomials are extended.
    """
    
    is_local = False
    
    def __init__(self):
        super().__init__()
        self._row_splines: List[Callable[[float], float]] = []
    
    def _fit(self) -> None:
        self._row_splines = [_natural_spline(self.x, row) for row in self.z]
    
    def _evaluate(self, x: float, y: float) -> float:
        column = np.array([float(spline(x)) for spline in self._row_splines])
        return float(_natural_spline(self.y, column)(y))


_INTERPOLATORS = {
    "bilinear": BilinearInterpolator,
    "linear": BilinearInterpolator,
    "bicubic": BicubicSplineInterpolator,
    "bicubic_spline": BicubicSplineInterpolator,
    "cubic_spline": BicubicSplineInterpolator,
    "spline": BicubicSplineInterpolator,
}


def create_interpolator_2d(method: str) -> Interpolator2D:
    """
    Factory function to create a surface interpolator by name.
    
    Args:
        method: One of "bilinear", "bicubic_spline" (or their aliases)
        
    Returns:
        Unfitted Interpolator2D instance
    """
    key = method.lower().replace("-", "_").replace(" ", "_")
    if key not in _INTERPOLATORS:
        raise ValueError(f"Unknown interpolation method: {method}")
    return _INTERPOLATORS[key]()


__all__ = [
    "Interpolator2D",
    "BilinearInterpolator",
    "BicubicSplineInterpolator",
    "create_interpolator_2d",
]
