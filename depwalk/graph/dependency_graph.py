"""In-memory directed graph of package runtime dependencies.

Nodes are keyed by package name and hold the Package record that was
committed first. Edges are name pairs and may point at names that have no
node (a dependency whose lookup failed, or one not visited yet). Consumers
must tolerate such dangling edges; ``dangling_edges()`` lists them.

The graph is append-only. It is not locked: the builder commits one record
at a time from its own loop.
"""

from __future__ import annotations

import heapq
from collections import deque
from collections.abc import Iterator

from depwalk.graph.models import GraphEdge, TraversalResult
from depwalk.models.package import Package


class CycleError(Exception):
    """Raised when an install order is requested for a cyclic graph."""

    def __init__(self, cycle: list[str]) -> None:
        super().__init__(f"Dependency cycle detected: {' -> '.join(cycle)}")
        self.cycle = cycle


class DependencyGraph:
    """Directed dependency graph keyed by package name."""

    def __init__(self) -> None:
        self._nodes: dict[str, Package] = {}
        # Dicts used as insertion-ordered sets.
        self._out: dict[str, dict[str, None]] = {}
        self._in: dict[str, dict[str, None]] = {}

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_node(self, package: Package) -> None:
        """Insert a node for *package*; a second insert of the same name is a no-op."""
        if package.name in self._nodes:
            return
        self._nodes[package.name] = package
        self._out.setdefault(package.name, {})

    def add_edge(self, source: str, target: str) -> None:
        """Record ``source -> target``. *target* need not be a node yet."""
        self._out.setdefault(source, {})[target] = None
        self._in.setdefault(target, {})[source] = None

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def has_node(self, name: str) -> bool:
        return name in self._nodes

    def get(self, name: str) -> Package | None:
        return self._nodes.get(name)

    def nodes(self) -> list[str]:
        """Node names in insertion order."""
        return list(self._nodes)

    def edges(self) -> list[GraphEdge]:
        return [GraphEdge(source, target) for source, targets in self._out.items() for target in targets]

    def successors(self, name: str) -> list[str]:
        """Names *name* depends on directly."""
        return list(self._out.get(name, ()))

    def predecessors(self, name: str) -> list[str]:
        """Names that depend directly on *name*."""
        return list(self._in.get(name, ()))

    def dangling_edges(self) -> list[GraphEdge]:
        """Edges whose target has no node."""
        return [edge for edge in self.edges() if edge.target not in self._nodes]

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self._out.values())

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._nodes))

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def topological_order(self) -> list[str]:
        """Return node names with every dependency before its dependents.

        Dangling targets and self-loops are ignored. Ties are broken by name
        so the order does not depend on discovery order.

        Raises CycleError if two or more packages depend on each other.
        """
        remaining: dict[str, int] = {}
        for name in self._nodes:
            remaining[name] = sum(1 for dep in self._out.get(name, ()) if dep in self._nodes and dep != name)

        ready = [name for name, count in remaining.items() if count == 0]
        heapq.heapify(ready)
        order: list[str] = []
        while ready:
            name = heapq.heappop(ready)
            order.append(name)
            for dependent in self._in.get(name, ()):
                if dependent == name or dependent not in remaining:
                    continue
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    heapq.heappush(ready, dependent)

        if len(order) < len(self._nodes):
            cycles = [cycle for cycle in self.find_cycles() if len(cycle) > 1]
            raise CycleError(cycles[0] if cycles else sorted(set(self._nodes) - set(order)))
        return order

    def find_cycles(self) -> list[list[str]]:
        """Return every dependency cycle as a sorted list of package names.

        A cycle is a strongly connected component with more than one member,
        or a single package that lists itself. Uses an iterative Tarjan walk
        so deep chains do not hit the recursion limit.
        """
        index: dict[str, int] = {}
        low: dict[str, int] = {}
        on_stack: set[str] = set()
        stack: list[str] = []
        cycles: list[list[str]] = []
        counter = 0

        def visit(name: str) -> Iterator[str]:
            nonlocal counter
            index[name] = low[name] = counter
            counter += 1
            stack.append(name)
            on_stack.add(name)
            return iter(sorted(self._out.get(name, ())))

        for start in sorted(self._out):
            if start in index:
                continue
            work = [(start, visit(start))]
            while work:
                name, children = work[-1]
                for child in children:
                    if child not in index:
                        work.append((child, visit(child)))
                        break
                    if child in on_stack:
                        low[name] = min(low[name], index[child])
                else:
                    work.pop()
                    if work:
                        parent = work[-1][0]
                        low[parent] = min(low[parent], low[name])
                    if low[name] != index[name]:
                        continue
                    component: list[str] = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component.append(member)
                        if member == name:
                            break
                    if len(component) > 1 or name in self._out.get(name, ()):
                        cycles.append(sorted(component))

        return sorted(cycles)

    def reverse_dependencies(self, name: str, transitive: bool = True) -> set[str]:
        """Return the packages that depend on *name*.

        With ``transitive`` set this is the full impact set: everything that
        would be affected if *name* broke. *name* itself is only included
        when it sits on a cycle.
        """
        if not transitive:
            return set(self._in.get(name, ()))

        seen: set[str] = set()
        queue = deque(self._in.get(name, ()))
        while queue:
            current = queue.popleft()
            if current in seen:
                continue
            seen.add(current)
            queue.extend(dep for dep in self._in.get(current, ()) if dep not in seen)
        return seen

    def traverse(self, name: str, max_depth: int | None = None) -> TraversalResult:
        """Breadth-first forward walk from *name* along dependency edges."""
        result = TraversalResult()
        if name not in self._nodes and name not in self._out:
            return result

        seen = {name}
        result.packages.append(name)
        frontier = [name]
        depth = 0
        while frontier:
            if max_depth is not None and depth >= max_depth:
                result.truncated = any(self._out.get(n) for n in frontier)
                break
            next_frontier: list[str] = []
            for current in frontier:
                for target in self._out.get(current, ()):
                    result.edges.append(GraphEdge(current, target))
                    if target not in seen:
                        seen.add(target)
                        result.packages.append(target)
                        next_frontier.append(target)
            if not next_frontier:
                break
            depth += 1
            frontier = next_frontier

        result.depth_reached = depth
        return result
