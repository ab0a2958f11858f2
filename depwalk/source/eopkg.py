"""eopkg-backed metadata source.

Runs ``eopkg info --xml <name>`` and decodes the PISI document it prints:

    <PISI>
      <Package>
        <Name>nano</Name>
        <Component>system.utils</Component>
        <RuntimeDependencies>
          <Dependency releaseFrom="12">ncurses</Dependency>
          ...
        </RuntimeDependencies>
      </Package>
    </PISI>

Only the name, component and runtime dependency names are kept; version
attributes on ``<Dependency>`` are ignored.
"""

from __future__ import annotations

import asyncio
import contextlib
import xml.etree.ElementTree as ET

from depwalk.models.package import Dependency, Package
from depwalk.observability.logging import get_logger
from depwalk.source.base import LookupFailure, MetadataSource, NotFoundError

_log = get_logger("source.eopkg")

# eopkg exits with status 1 when the package name is unknown.
_EXIT_NOT_FOUND = 1


def parse_package_xml(payload: str | bytes, requested: str) -> Package:
    """Decode an ``eopkg info --xml`` document into a Package.

    Text before ``<PISI>`` or after ``</PISI>`` (eopkg sometimes prints
    status lines around the document) is discarded.

    Raises LookupFailure if the document is malformed or has no package name.
    """
    text = payload.decode("utf-8", errors="replace") if isinstance(payload, bytes) else payload
    start = text.find("<PISI")
    end = text.rfind("</PISI>")
    if start == -1 or end == -1:
        raise LookupFailure(requested, "no PISI document in eopkg output")

    try:
        root = ET.fromstring(text[start : end + len("</PISI>")])
    except ET.ParseError as exc:
        raise LookupFailure(requested, f"malformed PISI document: {exc}") from exc

    package = root.find("Package")
    if package is None:
        raise LookupFailure(requested, "PISI document has no <Package> element")

    name = (package.findtext("Name") or "").strip()
    if not name:
        raise LookupFailure(requested, "package metadata has no name")

    dependencies = tuple(
        Dependency(dep.text.strip())
        for dep in package.iterfind("RuntimeDependencies/Dependency")
        if dep.text and dep.text.strip()
    )
    return Package(
        name=name,
        dependencies=dependencies,
        component=(package.findtext("Component") or "").strip(),
    )


class EopkgSource(MetadataSource):
    """Queries the local eopkg database through its command-line interface.

    Args:
        binary:  eopkg executable name or path.
        timeout: Seconds a single ``eopkg info`` call may take before it is
                 killed and reported as a LookupFailure.
    """

    def __init__(self, binary: str = "eopkg", timeout: float = 30.0) -> None:
        if not binary:
            raise ValueError("eopkg binary must not be empty")
        self._binary = binary
        self._timeout = timeout

    @property
    def source_name(self) -> str:
        return "eopkg"

    def command(self, name: str) -> list[str]:
        return [self._binary, "info", "--xml", name]

    async def fetch(self, name: str) -> Package:
        cmd = self.command(name)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise LookupFailure(name, f"cannot run {self._binary}: {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._timeout)
        except TimeoutError:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            _log.warning("eopkg_lookup_timeout", package=name, timeout=self._timeout)
            raise LookupFailure(name, f"timed out after {self._timeout}s") from None

        if proc.returncode == _EXIT_NOT_FOUND:
            raise NotFoundError(name)
        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise LookupFailure(name, f"eopkg exited with status {proc.returncode}: {detail}")

        return parse_package_xml(stdout, name)
