"""Package dependency graph and the concurrent builder that populates it.

The builder walks runtime dependencies depth-first from a root package,
fanning out metadata lookups one stack level at a time.
"""

from depwalk.graph.builder import BuildResult, GraphBuilder, build_graph, resolve
from depwalk.graph.dependency_graph import CycleError, DependencyGraph
from depwalk.graph.models import GraphEdge, TraversalResult
from depwalk.graph.stack import EmptyStackError, WorkStack

__all__ = [
    "BuildResult",
    "CycleError",
    "DependencyGraph",
    "EmptyStackError",
    "GraphBuilder",
    "GraphEdge",
    "TraversalResult",
    "WorkStack",
    "build_graph",
    "resolve",
]
