"""
Last-value-wins observable.

Subscribers are keyed by an owner object so a component can replace or drop
its own subscription. New subscribers receive the current value immediately.
Delivery is synchronous, on the thread that sets the value.
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, List, Tuple, TypeVar

T = TypeVar("T")


class Observable(Generic[T]):
    def __init__(self, value: T) -> None:
        self._value = value
        self._observers: List[Tuple[object, Callable[[T], None]]] = []
        self._lock = threading.RLock()

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, value: T) -> None:
        with self._lock:
            self._value = value
            observers = list(self._observers)
        for _, callback in observers:
            callback(value)

    def observe(self, owner: object, callback: Callable[[T], None]) -> None:
        """Subscribe `callback` on behalf of `owner` and replay the current value."""
        with self._lock:
            self._observers = [(o, cb) for o, cb in self._observers if o is not owner]
            self._observers.append((owner, callback))
            value = self._value
        callback(value)

    def remove(self, owner: object) -> None:
        with self._lock:
            self._observers = [(o, cb) for o, cb in self._observers if o is not owner]

    def __len__(self) -> int:
        return len(self._observers)
