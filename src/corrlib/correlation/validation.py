"""
Grid checks for base correlation inputs.

Pure functions: each raises InvalidInputError naming the offending ordinal
position and values, or returns None.
"""

from typing import Sequence

from ..dates import Period
from ..errors import InvalidInputError


def ordinal(n: int) -> str:
    """English ordinal for a 1-based position: 1st, 2nd, 3rd, 4th, 11th..."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def check_tenors(tenors: Sequence[Period]) -> None:
    """
    Tenors must be non-empty, start strictly positive and strictly increase.
    
    Raises:
        InvalidInputError: On the first violation found
    """
    if len(tenors) == 0:
        raise InvalidInputError("no tranche tenors given")
    if not tenors[0].length > 0:
        raise InvalidInputError(f"first tranche tenor is not positive ({tenors[0]})")
    for i in range(1, len(tenors)):
        try:
            increasing = tenors[i] > tenors[i - 1]
        except ValueError as e:
            raise InvalidInputError(
                f"cannot order tranche tenors: {ordinal(i)} is {tenors[i - 1]}, "
                f"{ordinal(i + 1)} is {tenors[i]}"
            ) from e
        if not increasing:
            raise InvalidInputError(
                f"non increasing tranche tenor: {ordinal(i)} is {tenors[i - 1]}, "
                f"{ordinal(i + 1)} is {tenors[i]}"
            )


def check_loss_levels(loss_levels: Sequence[float]) -> None:
    """
    Loss levels must lie in (0, 1] and strictly increase.
    
    Raises:
        InvalidInputError: On the first violation found
    """
    if len(loss_levels) == 0:
        raise InvalidInputError("no loss levels given")
    if not loss_levels[0] > 0.0:
        raise InvalidInputError(f"first loss level is not positive ({loss_levels[0]})")
    if loss_levels[0] > 1.0:
        raise InvalidInputError(f"first loss level larger than 100% ({loss_levels[0]})")
    for i in range(1, len(loss_levels)):
        if not loss_levels[i] > loss_levels[i - 1]:
            raise InvalidInputError(
                f"non increasing losses: {ordinal(i)} is {loss_levels[i - 1]}, "
                f"{ordinal(i + 1)} is {loss_levels[i]}"
            )
        if loss_levels[i] > 1.0:
            raise InvalidInputError(
                f"{ordinal(i + 1)} loss level larger than 100% ({loss_levels[i]})"
            )


def check_matrix_dimensions(rows: int, columns: int, n_losses: int, n_tenors: int) -> None:
    """
    Rows must match the loss levels and columns the surviving tenors.
    
    Raises:
        InvalidInputError: If either dimension disagrees
    """
    if rows != n_losses:
        raise InvalidInputError(
            f"mismatch between number of loss levels ({n_losses}) and "
            f"number of rows ({rows}) in the correlation matrix"
        )
    if columns != n_tenors:
        raise InvalidInputError(
            f"mismatch between number of tranche tenors ({n_tenors}) and "
            f"number of columns ({columns}) in the correlation matrix"
        )


__all__ = ["ordinal", "check_tenors", "check_loss_levels", "check_matrix_dimensions"]
