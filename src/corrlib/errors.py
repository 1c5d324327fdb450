"""
Exceptions raised by the correlation term structure.

Both subclass ValueError so callers that already guard against bad market
inputs keep working.
"""


class InvalidInputError(ValueError):
    """Inconsistent or out-of-domain construction input."""


class ExtrapolationNotAllowedError(ValueError):
    """Query point lies outside the interpolation grid."""

    def __init__(self, x: float, y: float, x_range, y_range):
        self.x = x
        self.y = y
        super().__init__(
            f"interpolation range is [{x_range[0]}, {x_range[1]}] x "
            f"[{y_range[0]}, {y_range[1]}]: extrapolation at ({x}, {y}) not allowed"
        )


__all__ = ["InvalidInputError", "ExtrapolationNotAllowedError"]
