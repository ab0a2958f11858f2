"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class SourceConfig:
    """eopkg metadata source configuration."""

    eopkg_binary: str = "eopkg"
    lookup_timeout: int = 30


@dataclass
class BuilderConfig:
    """Graph builder configuration."""

    max_concurrency: int = 16


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    fmt: str = "json"


@dataclass
class DepwalkConfig:
    """Top-level depwalk configuration."""

    source: SourceConfig = field(default_factory=SourceConfig)
    builder: BuilderConfig = field(default_factory=BuilderConfig)
    log: LogConfig = field(default_factory=LogConfig)
