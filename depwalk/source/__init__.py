"""Package metadata sources.

MetadataSource   -- ABC every source must implement.
CallableSource   -- Adapts a plain sync or async ``fetch(name)`` function.
InMemorySource   -- Mapping-backed source for offline use and tests.
EopkgSource      -- Queries ``eopkg info --xml`` in a subprocess.
"""

from depwalk.source.base import LookupFailure, MetadataSource, MetadataSourceError, NotFoundError
from depwalk.source.callable import CallableSource
from depwalk.source.eopkg import EopkgSource, parse_package_xml
from depwalk.source.memory import InMemorySource

__all__ = [
    "CallableSource",
    "EopkgSource",
    "InMemorySource",
    "LookupFailure",
    "MetadataSource",
    "MetadataSourceError",
    "NotFoundError",
    "parse_package_xml",
]
