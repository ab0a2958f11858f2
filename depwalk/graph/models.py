"""Data structures for the package dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, order=True)
class GraphEdge:
    """A directed "source depends on target" edge, by package name."""

    source: str
    target: str

    def __str__(self) -> str:
        return f"{self.source} -> {self.target}"


@dataclass
class TraversalResult:
    """Result of a forward reachability query."""

    packages: list[str] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    depth_reached: int = 0
    truncated: bool = False  # True if max_depth hit before exhausting graph
