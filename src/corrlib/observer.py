"""
Publish-subscribe primitives.

Observables keep an explicit list of observers; there is no global
registry. Notification is synchronous and single-threaded.
"""

from abc import ABC, abstractmethod
from typing import List


class Observer(ABC):
    """Anything that wants to hear about changes in an Observable."""

    @abstractmethod
    def update(self) -> None:
        """Called by an observable after its state changed."""
        pass


class Observable:
    """Holds observers and notifies them on change."""

    def __init__(self):
        self._observers: List[Observer] = []

    def subscribe(self, observer: Observer) -> None:
        """Register an observer. Registering twice is a no-op."""
        if not any(o is observer for o in self._observers):
            self._observers.append(observer)

    def unsubscribe(self, observer: Observer) -> None:
        self._observers = [o for o in self._observers if o is not observer]

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def notify_observers(self) -> None:
        # copy: observers may unsubscribe while being notified
        for observer in list(self._observers):
            observer.update()


__all__ = ["Observer", "Observable"]
