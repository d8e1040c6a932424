"""WiX extension identities and the installed extension package cache.

Extensions are declared in a .wxs file as XML namespaces on the root
``<Wix/>`` element. The set of extensions published by the WiX toolset is
closed, so a namespace either maps to a WellKnownExtension or is carried
verbatim as an UnknownExtension which can never be installed.

Source of the well-known set: https://wixtoolset.org/docs/tools/wixext/
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional, Set, Union

import semantic_version

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from .command import Toolset, ToolsetAction

logger = logging.getLogger(__name__)

_NS_BASE = "http://wixtoolset.org/schemas/v4/wxs/"


class WellKnownExtension(Enum):
    """Extensions documented by the WiX toolset org.

    Each member carries (package name, xmlns prefix, xmlns uri).
    """

    BOOTSTRAPPER_APPLICATIONS = (
        "WixToolset.BootstrapperApplications.wixext", "bal", _NS_BASE + "bal")
    COM_PLUS = ("WixToolset.ComPlus.wixext", "complus", _NS_BASE + "complus")
    # prefix per WixToolsetTest.Converters/DependencyFixture.cs
    DEPENDENCY = ("WixToolset.Dependency.wixext", "dep", _NS_BASE + "dependency")
    DIRECTX = ("WixToolset.DirectX.wixext", "directx", _NS_BASE + "directx")
    # prefix per WixToolsetTest.Converters/FirewallExtensionFixture.cs
    FIREWALL = ("WixToolset.Firewall.wixext", "fw", _NS_BASE + "firewall")
    HTTP = ("WixToolset.Http.wixext", "http", _NS_BASE + "http")
    IIS = ("WixToolset.Iis.wixext", "iis", _NS_BASE + "iis")
    MSMQ = ("WixToolset.Msmq.wixext", "msmq", _NS_BASE + "msmq")
    NETFX = ("WixToolset.Netfx.wixext", "netfx", _NS_BASE + "netfx")
    POWERSHELL = ("WixToolset.PowerShell.wixext", "powershell", _NS_BASE + "powershell")
    SQL = ("WixToolset.Sql.wixext", "sql", _NS_BASE + "sql")
    UI = ("WixToolset.UI.wixext", "ui", _NS_BASE + "ui")
    UTIL = ("WixToolset.Util.wixext", "util", _NS_BASE + "util")
    VISUAL_STUDIO = ("WixToolset.VisualStudio.wixext", "vs", _NS_BASE + "vs")

    def __init__(self, package_name: str, namespace_prefix: str, namespace_uri: str):
        self.package_name = package_name
        self.namespace_prefix = namespace_prefix
        self.namespace_uri = namespace_uri


@dataclass(frozen=True)
class UnknownExtension:
    """An xmlns declaration on the root element that is not a known extension."""

    namespace_prefix: str
    namespace_uri: str

    @property
    def package_name(self) -> str:
        return ""


ExtensionIdentity = Union[WellKnownExtension, UnknownExtension]

_BY_NAMESPACE = {
    (ext.namespace_prefix, ext.namespace_uri): ext for ext in WellKnownExtension
}


def extension_from_namespace(prefix: str, uri: str) -> ExtensionIdentity:
    """Map an observed (prefix, uri) pair to an extension identity."""
    known = _BY_NAMESPACE.get((prefix, uri))
    if known is not None:
        return known
    return UnknownExtension(namespace_prefix=prefix, namespace_uri=uri)


def format_pinned(version: semantic_version.Version) -> str:
    """Return ``major.minor.patch`` without prerelease/build parts."""
    return f"{version.major}.{version.minor}.{version.patch}"


class PackageCache:
    """Locally/globally installed extension packages plus the missing set.

    A package name is never both installed and missing.
    """

    def __init__(self, toolset: Toolset):
        self._toolset = toolset
        self._installed: Dict[str, semantic_version.Version] = {}
        self._missing: Set[str] = set()

    @property
    def installed(self) -> Dict[str, semantic_version.Version]:
        return dict(self._installed)

    def record_installed(self, name: str, version: semantic_version.Version) -> None:
        self._installed[name] = version
        self._missing.discard(name)

    def is_installed(self, ext: ExtensionIdentity) -> bool:
        return ext.package_name in self._installed

    def mark_missing(self, name: str) -> None:
        if name and name not in self._installed:
            self._missing.add(name)

    def iter_missing(self) -> Iterator[str]:
        return iter(sorted(self._missing))

    def load_listing(self, text: str) -> int:
        """Record every healthy ``<package> <version>`` line of a listing.

        Lines flagged ``(damaged)`` (installed for another wix version) and
        lines whose version does not parse are skipped.

        Returns:
            Number of packages recorded.
        """
        count = 0
        for line in text.splitlines():
            line = line.strip()
            if not line or line.endswith(Constants.DAMAGED_MARKER):
                continue
            name, sep, version = line.partition(" ")
            if not sep:
                continue
            try:
                parsed = semantic_version.Version(version.strip())
            except ValueError:
                logger.debug("Skipping unrecognized extension listing line: %s", line)
                continue
            self.record_installed(name, parsed)
            count += 1
        return count

    def install_missing(
        self,
        global_cache: bool,
        version: semantic_version.Version,
        work_dir: Optional[str] = None,
    ) -> None:
        """Install every missing package in one `wix extension add` call.

        Each package is pinned to ``version``. Nothing is run when no package
        is missing.

        Raises:
            InstallFailedError: If the toolset reports a failure.
        """
        missing = sorted(self._missing)
        if not missing:
            logger.info("No missing extension packages to restore.")
            return

        action = ToolsetAction.ADD_GLOBAL_EXTENSION if global_cache else ToolsetAction.ADD_EXTENSION
        pin = format_pinned(version)
        wix = self._toolset.wix(action).current_dir(work_dir)
        wix.args(f"{name}/{pin}" for name in missing)

        if is_debug_enabled(logger):
            logger.debug(
                "Installing missing extensions",
                extra=extra_context(
                    event="decision",
                    component="package_cache",
                    action="install_missing",
                    count=len(missing),
                    global_cache=global_cache,
                    work_dir=work_dir,
                ),
            )
        logger.info(
            "Installing %d extension package(s) to the %s cache: %s",
            len(missing),
            "global" if global_cache else "local",
            ", ".join(missing),
        )
        wix.output()

        for name in missing:
            self.record_installed(name, version)

    def __repr__(self) -> str:
        return (
            f"PackageCache(installed={sorted(self._installed)}, "
            f"missing={sorted(self._missing)})"
        )
