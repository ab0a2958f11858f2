"""Package metadata records returned by a metadata source."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Dependency:
    """A reference to another package, by name only."""

    name: str


@dataclass(frozen=True)
class Package:
    """A package name plus its declared immediate runtime dependencies.

    ``dependencies`` keeps the order and duplicates reported by the source.
    Two records with the same ``name`` describe the same graph node.
    """

    name: str
    dependencies: tuple[Dependency, ...] = ()
    component: str = ""

    @classmethod
    def from_names(cls, name: str, dependencies: Iterable[str] = (), component: str = "") -> Package:
        """Build a record from plain dependency names."""
        return cls(
            name=name,
            dependencies=tuple(Dependency(dep) for dep in dependencies),
            component=component,
        )

    @property
    def dependency_names(self) -> list[str]:
        return [dep.name for dep in self.dependencies]
