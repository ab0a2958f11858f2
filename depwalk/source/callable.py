"""Adapter turning a plain lookup function into a MetadataSource."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable

from depwalk.models.package import Package
from depwalk.source.base import MetadataSource

FetchFn = Callable[[str], Package] | Callable[[str], Awaitable[Package]]


def _is_async(fn: FetchFn) -> bool:
    if inspect.iscoroutinefunction(fn):
        return True
    return inspect.iscoroutinefunction(getattr(fn, "__call__", None))


class CallableSource(MetadataSource):
    """Wraps ``fn(name) -> Package``.

    Coroutine functions and objects with an ``async def __call__`` are
    awaited on the event loop. Other callables run in a worker thread so
    concurrent lookups do not stall the loop; if one of them still hands
    back an awaitable, it is awaited too.
    """

    def __init__(self, fn: FetchFn, name: str = "callable") -> None:
        self._fn = fn
        self._name = name
        self._is_async = _is_async(fn)

    @property
    def source_name(self) -> str:
        return self._name

    async def fetch(self, name: str) -> Package:
        if self._is_async:
            result = self._fn(name)
        else:
            result = await asyncio.to_thread(self._fn, name)
        if inspect.isawaitable(result):
            result = await result
        return result  # type: ignore[return-value]
