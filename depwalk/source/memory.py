"""Mapping-backed metadata source."""

from __future__ import annotations

import asyncio
import random
import threading
from collections import Counter
from collections.abc import Iterable, Mapping

from depwalk.models.package import Package
from depwalk.source.base import MetadataSource, NotFoundError


class InMemorySource(MetadataSource):
    """Serves package records from memory.

    Args:
        packages:  Records to serve, keyed by their own name.
        delay:     Seconds to sleep before answering; a ``(low, high)`` tuple
                   picks a uniformly random delay per lookup.
        failures:  Names that raise a given error instead of answering.

    Every lookup is counted in ``calls`` so callers can assert how often a
    name was requested.
    """

    def __init__(
        self,
        packages: Iterable[Package] | Mapping[str, Iterable[str]] = (),
        delay: float | tuple[float, float] = 0.0,
        failures: Mapping[str, Exception] | None = None,
    ) -> None:
        if isinstance(packages, Mapping):
            records = [Package.from_names(name, deps) for name, deps in packages.items()]
        else:
            records = list(packages)
        self._packages = {pkg.name: pkg for pkg in records}
        self._delay = delay
        self._failures = dict(failures or {})
        self._lock = threading.Lock()
        self.calls: Counter[str] = Counter()

    @property
    def source_name(self) -> str:
        return "memory"

    def add(self, package: Package) -> None:
        self._packages[package.name] = package

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    async def fetch(self, name: str) -> Package:
        with self._lock:
            self.calls[name] += 1

        delay = self._delay
        if isinstance(delay, tuple):
            delay = random.uniform(*delay)
        if delay > 0:
            await asyncio.sleep(delay)

        if name in self._failures:
            raise self._failures[name]
        try:
            return self._packages[name]
        except KeyError:
            raise NotFoundError(name) from None
