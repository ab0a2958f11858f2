"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from depwalk.models.config import BuilderConfig, DepwalkConfig, LogConfig, SourceConfig


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"DEPWALK_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_log_format(value: str) -> str:
    valid = {"json", "console"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log format: {value}. Must be one of {valid}")
    return value.lower()


def _validate_binary(value: str) -> str:
    if not value.strip():
        raise ValueError("eopkg binary must not be empty")
    return value.strip()


def load_config() -> DepwalkConfig:
    """Load configuration from DEPWALK_* environment variables."""
    return DepwalkConfig(
        source=SourceConfig(
            eopkg_binary=_validate_binary(_env("EOPKG_BINARY", "eopkg")),
            lookup_timeout=_env_int("LOOKUP_TIMEOUT", 30, min_val=1, max_val=300),
        ),
        builder=BuilderConfig(
            max_concurrency=_env_int("MAX_CONCURRENCY", 16, min_val=1, max_val=256),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
            fmt=_validate_log_format(_env("LOG_FORMAT", "json")),
        ),
    )
