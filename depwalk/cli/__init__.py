"""depwalk command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``depwalk`` script).
"""

from depwalk.cli.main import cli

__all__ = ["cli"]
