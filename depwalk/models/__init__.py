"""Core data structures for depwalk."""

from depwalk.models.config import DepwalkConfig
from depwalk.models.package import Dependency, Package

__all__ = [
    "Dependency",
    "DepwalkConfig",
    "Package",
]
