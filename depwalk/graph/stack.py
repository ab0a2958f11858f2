"""LIFO container of package records awaiting expansion."""

from __future__ import annotations

import threading

from depwalk.models.package import Package


class EmptyStackError(IndexError):
    """Raised by WorkStack.pop() when no work remains."""


class WorkStack:
    """Thread-safe LIFO stack of pending Package records.

    Concurrent lookups push onto the stack while the builder waits for them,
    so every mutation takes the internal lock.
    """

    def __init__(self) -> None:
        self._items: list[Package] = []
        self._lock = threading.Lock()

    def push(self, package: Package) -> None:
        with self._lock:
            self._items.append(package)

    def pop(self) -> Package:
        with self._lock:
            if not self._items:
                raise EmptyStackError("pop from empty work stack")
            return self._items.pop()

    def is_empty(self) -> bool:
        with self._lock:
            return not self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
