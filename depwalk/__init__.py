"""depwalk -- transitive runtime-dependency graph resolver."""

__version__ = "0.1.0"
