"""Entry point for `python -m depwalk`.

Usage:
    python -m depwalk deps nano
    python -m depwalk order nano
"""

from __future__ import annotations

from depwalk.cli import cli

cli()
