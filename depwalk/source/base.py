"""Metadata source contract and lookup errors."""

from __future__ import annotations

from abc import ABC, abstractmethod

from depwalk.models.package import Package


class MetadataSourceError(Exception):
    """Base class for failures of a single metadata lookup."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class NotFoundError(MetadataSourceError):
    """The source does not know a package with this name."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Package {name} does not exist")


class LookupFailure(MetadataSourceError):
    """The source could not produce usable metadata (transport, timeout, bad data)."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(name, f"Lookup of package {name} failed: {reason}")
        self.reason = reason


class MetadataSource(ABC):
    """Abstract base class for package metadata sources.

    ``fetch`` may be awaited many times concurrently during one graph build,
    so implementations must not keep per-call state on the instance without
    protecting it.
    """

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Human-readable identifier used in logs."""

    @abstractmethod
    async def fetch(self, name: str) -> Package:
        """Return the metadata record for *name*.

        Raises:
            NotFoundError -- the package is unknown to the source.
            LookupFailure -- any other failure to obtain usable metadata.
        """
