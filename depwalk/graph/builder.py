"""Concurrent dependency graph builder.

Walks runtime dependencies depth-first from a root package:

1. Pop the top record from the work stack.
2. If its name has no node yet, add the node and one edge per declared
   dependency (targets may not exist yet).
3. For every declared dependency whose name has not been claimed, claim it
   and start a metadata lookup. Successful lookups push their record onto
   the stack; failed ones are recorded and push nothing.
4. Wait for all lookups started in this iteration, then pop again.

A name is claimed at most once per build, so each package is looked up at
most once no matter how many packages depend on it. Claims are made by the
builder loop itself before any lookup task exists.
"""

from __future__ import annotations

import asyncio
import contextlib
import threading
import time
from dataclasses import dataclass, field

from depwalk.graph.dependency_graph import DependencyGraph
from depwalk.graph.stack import WorkStack
from depwalk.models.package import Package
from depwalk.observability.logging import get_logger
from depwalk.source.base import LookupFailure, MetadataSource, MetadataSourceError

_log = get_logger("graph.builder")

_DEFAULT_MAX_CONCURRENCY = 16


class _SeenSet:
    """Names whose expansion has started. ``claim`` is an atomic test-and-set."""

    def __init__(self) -> None:
        self._names: set[str] = set()
        self._lock = threading.Lock()

    def claim(self, name: str) -> bool:
        """Mark *name* as seen. Returns False if it already was."""
        with self._lock:
            if name in self._names:
                return False
            self._names.add(name)
            return True

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._names


class _ErrorSlot:
    """Collects lookup errors; the first one recorded wins ``first``."""

    def __init__(self) -> None:
        self._errors: list[MetadataSourceError] = []
        self._lock = threading.Lock()

    def record(self, error: MetadataSourceError) -> None:
        with self._lock:
            self._errors.append(error)

    @property
    def first(self) -> MetadataSourceError | None:
        with self._lock:
            return self._errors[0] if self._errors else None

    @property
    def all(self) -> list[MetadataSourceError]:
        with self._lock:
            return list(self._errors)


@dataclass
class BuildResult:
    """Outcome of one graph build.

    ``graph`` is always populated with whatever was built. ``error`` is the
    first lookup failure recorded (which one is unspecified when several
    lookups fail concurrently); ``errors`` holds all of them.
    """

    graph: DependencyGraph
    error: MetadataSourceError | None = None
    errors: list[MetadataSourceError] = field(default_factory=list)
    lookups: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        """Raise the first recorded lookup error, if any."""
        if self.error is not None:
            raise self.error


class GraphBuilder:
    """Builds a DependencyGraph by querying a MetadataSource.

    Args:
        source:          Where package metadata comes from.
        max_concurrency: Upper bound on lookups running at once within one
                         stack level. ``None`` removes the bound.

    A builder holds no per-build state and may run several builds, but each
    ``build`` call starts from an empty graph.
    """

    def __init__(self, source: MetadataSource, max_concurrency: int | None = _DEFAULT_MAX_CONCURRENCY) -> None:
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self._source = source
        self._max_concurrency = max_concurrency

    async def build(self, root: Package) -> BuildResult:
        """Expand *root* into its full transitive runtime-dependency graph."""
        t_start = time.monotonic()
        graph = DependencyGraph()
        stack = WorkStack()
        seen = _SeenSet()
        errors = _ErrorSlot()
        limiter = asyncio.Semaphore(self._max_concurrency) if self._max_concurrency else None
        lookups = 0

        _log.info("graph_build_started", root=root.name, source=self._source.source_name)

        seen.claim(root.name)
        stack.push(root)
        while not stack.is_empty():
            current = stack.pop()

            if not graph.has_node(current.name):
                # A source may answer under a different name than requested.
                seen.claim(current.name)
                graph.add_node(current)
                for dep in current.dependencies:
                    graph.add_edge(current.name, dep.name)

            pending = [dep.name for dep in current.dependencies if seen.claim(dep.name)]
            if not pending:
                continue

            lookups += len(pending)
            _log.debug("lookups_dispatched", parent=current.name, packages=pending)
            await asyncio.gather(*(self._lookup(name, stack, errors, limiter) for name in pending))

        result = BuildResult(graph=graph, error=errors.first, errors=errors.all, lookups=lookups)
        _log.info(
            "graph_build_finished",
            root=root.name,
            nodes=graph.node_count,
            edges=graph.edge_count,
            lookups=lookups,
            failed=len(result.errors),
            duration_ms=round((time.monotonic() - t_start) * 1000.0, 1),
        )
        return result

    async def _lookup(
        self,
        name: str,
        stack: WorkStack,
        errors: _ErrorSlot,
        limiter: asyncio.Semaphore | None,
    ) -> None:
        """Fetch *name* and push the result. Never raises for lookup failures."""
        try:
            async with limiter if limiter is not None else contextlib.nullcontext():
                package = await self._source.fetch(name)
        except MetadataSourceError as exc:
            _log.warning("lookup_failed", package=name, error=str(exc), kind=type(exc).__name__)
            errors.record(exc)
            return
        except Exception as exc:  # noqa: BLE001
            _log.error("lookup_unexpected_error", package=name, error=str(exc))
            failure = LookupFailure(name, f"{type(exc).__name__}: {exc}")
            failure.__cause__ = exc
            errors.record(failure)
            return

        if not isinstance(package, Package):
            _log.error("lookup_bad_result", package=name, result_type=type(package).__name__)
            errors.record(LookupFailure(name, f"source returned {type(package).__name__}, not a Package"))
            return

        stack.push(package)


async def build_graph(
    root: Package,
    source: MetadataSource,
    max_concurrency: int | None = _DEFAULT_MAX_CONCURRENCY,
) -> BuildResult:
    """Build the dependency graph of an already-fetched *root* record."""
    return await GraphBuilder(source, max_concurrency=max_concurrency).build(root)


async def resolve(
    name: str,
    source: MetadataSource,
    max_concurrency: int | None = _DEFAULT_MAX_CONCURRENCY,
) -> BuildResult:
    """Fetch *name* from *source* and build its dependency graph.

    Failure to fetch the root itself is raised; failures further down the
    graph are returned on the BuildResult.
    """
    root = await source.fetch(name)
    return await build_graph(root, source, max_concurrency=max_concurrency)
