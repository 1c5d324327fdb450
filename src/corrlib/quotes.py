"""
Market quotes.

A quote is a live, externally owned number. Structures built on quotes
subscribe to them and are told when the value moves.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .observer import Observable


class Quote(Observable, ABC):
    """Abstract market quote."""

    @abstractmethod
    def value(self) -> float:
        """Current value of the quote."""
        pass

    @property
    @abstractmethod
    def is_valid(self) -> bool:
        pass


class SimpleQuote(Quote):
    """
    Quote whose value is set directly by its owner.

    Observers are notified only when the value actually changes.
    """

    def __init__(self, value: Optional[float] = None):
        super().__init__()
        self._value = None if value is None else float(value)

    def value(self) -> float:
        if self._value is None:
            raise ValueError("invalid SimpleQuote: no value set")
        return self._value

    @property
    def is_valid(self) -> bool:
        return self._value is not None

    def set_value(self, value: Optional[float]) -> float:
        """
        Set a new value and notify observers if it differs.

        Returns:
            The difference between new and old value (0.0 when either is unset)
        """
        new = None if value is None else float(value)
        old = self._value
        if new == old:
            return 0.0
        self._value = new
        self.notify_observers()
        if new is None or old is None:
            return 0.0
        return new - old

    def reset(self) -> None:
        """Invalidate the quote."""
        self.set_value(None)

    def __repr__(self) -> str:
        return f"SimpleQuote({self._value!r})"


__all__ = ["Quote", "SimpleQuote"]
