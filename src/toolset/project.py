"""WiX project state: toolset version, tracked sources and the extension cache.

Project is the entrypoint for the upgrade (convert legacy sources) and restore
(install missing extensions) phases.
"""
from __future__ import annotations

import logging
import os
from typing import Dict, Mapping, Optional

import semantic_version

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from .command import Toolset, ToolsetAction
from .errors import ConversionFailedError, MalformedVersionError, ToolsetNotFoundError
from .ext import PackageCache
from .source import WixSource, open_wxs_source

logger = logging.getLogger(__name__)


class Project:
    """Current `wix` version, *.wxs sources and installed extension packages."""

    def __init__(self, toolset: Toolset, version: semantic_version.Version):
        self._toolset = toolset
        self._version = version
        self._sources: Dict[str, WixSource] = {}
        self._package_cache = PackageCache(toolset)

    @classmethod
    def try_new(cls, toolset: Toolset) -> "Project":
        """Create a project for the installed modern toolset.

        Raises:
            ToolsetNotFoundError: If `wix --version` fails or prints nothing.
            MalformedVersionError: If the version is not a semantic version.
            ListFailedError: If the installed extensions cannot be listed.
        """
        output = toolset.wix(ToolsetAction.VERSION).output()
        text = (output.stdout or "").strip()
        if not text:
            raise ToolsetNotFoundError(
                "wix could not be found from PATH. Ensure that WiX4+ is installed."
            )
        try:
            version = semantic_version.Version(text)
        except ValueError as e:
            raise MalformedVersionError(f"Unrecognized wix version {text!r}: {e}") from e

        logger.info("Using WiX toolset %s", version)
        project = cls(toolset, version)
        project._load_ext_cache()
        return project

    @property
    def version(self) -> semantic_version.Version:
        return self._version

    @property
    def sources(self) -> Mapping[str, WixSource]:
        return dict(self._sources)

    @property
    def package_cache(self) -> PackageCache:
        return self._package_cache

    def sxs_folder_name(self) -> str:
        """Name of the side-by-side folder, e.g. ``wix5``."""
        return f"{Constants.SXS_FOLDER_PREFIX}{self._version.major}"

    def add_wxs(self, path: str) -> None:
        """Open, classify and track a *.wxs source. Re-adding a path is a no-op.

        Paths are normalised, so ``./wix/main.wxs`` and ``wix/main.wxs`` are
        the same source.
        """
        path = os.path.normpath(path)
        if path in self._sources:
            return
        source = open_wxs_source(path)
        logger.debug("Tracking %r", source)
        self._sources[path] = source

    def upgrade(self, work_dir: Optional[str] = None) -> None:
        """Convert legacy sources and collect missing extension dependencies.

        With a ``work_dir`` the original files are left untouched and the
        converted copies are tracked in their place.

        Raises:
            ConversionFailedError: If two legacy sources would be copied to the
                same file in ``work_dir``, or the toolset reports a failure.
        """
        if work_dir is not None:
            self._check_work_dir_clashes(work_dir)

        upgraded: Dict[str, WixSource] = {}
        for path in sorted(self._sources):
            src = self._sources[path]
            if src.can_upgrade():
                logger.debug("Upgrading %s", path)
                converted = src.upgrade(self._toolset, work_dir)
                converted.check_deps(self._package_cache)
                upgraded[converted.path] = converted
            elif src.is_modern():
                logger.debug("Skipping upgrade for %s", path)
                src.check_deps(self._package_cache)
                upgraded[path] = src
            else:
                logger.warning("Skipping unsupported wxs source %s", path)

        if is_debug_enabled(logger):
            logger.debug(
                "Upgrade finished",
                extra=extra_context(
                    event="function_exit",
                    component="project",
                    action="upgrade",
                    count=len(upgraded),
                    missing=len(list(self._package_cache.iter_missing())),
                ),
            )
        self._sources = upgraded

    def restore(self, use_global: bool, work_dir: Optional[str] = None) -> None:
        """Install missing extensions pinned to the installed toolset version."""
        self._package_cache.install_missing(use_global, self._version, work_dir)

    def _check_work_dir_clashes(self, work_dir: str) -> None:
        targets: Dict[str, str] = {}
        for path in sorted(self._sources):
            if not self._sources[path].can_upgrade():
                continue
            target = os.path.normpath(os.path.join(work_dir, os.path.basename(path)))
            if target in targets:
                raise ConversionFailedError(
                    f"Cannot upgrade {targets[target]!r} and {path!r} side by side: "
                    f"both would be written to {target!r}"
                )
            targets[target] = path

    def _load_ext_cache(self) -> None:
        for action in (ToolsetAction.LIST_EXTENSION, ToolsetAction.LIST_GLOBAL_EXTENSION):
            output = self._toolset.wix(action).output()
            count = self._package_cache.load_listing(output.stdout or "")
            logger.debug("%s: %d installed package(s)", action.value, count)

    def __repr__(self) -> str:
        return (
            f"Project(version={self._version}, sources={sorted(self._sources)}, "
            f"package_cache={self._package_cache!r})"
        )
