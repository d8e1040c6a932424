"""WiX project setup patterns.

Setup consists of two operations:

- **upgrade**: convert Wix3 *.wxs files to the modern format. Only needed once,
  but applied on an as-needed basis.
- **restore**: detect and install the extensions required by *.wxs files.
  Requires all sources to already be in the modern format.
"""
from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Optional

from .project import Project

logger = logging.getLogger(__name__)


class SetupMode(Enum):
    """Setup pattern applied to a Project. Values are the CLI names."""

    # Do not apply any setup logic
    NONE = "none"
    # Upgrade in place, install extensions to the global cache
    PROJECT = "project"
    # Upgrade in place, install extensions relative to the current directory
    VENDOR = "vendor"
    # Copy and upgrade into a `wix{major}` folder, install extensions there
    SIDE_BY_SIDE = "sxs"
    # Only restore missing extensions to the global cache
    RESTORE_ONLY = "restore"
    # Only restore missing extensions relative to the current directory
    RESTORE_VENDOR_ONLY = "restore-vendor"
    # Only upgrade, in place
    UPGRADE_ONLY = "upgrade"
    # Only upgrade, into a `wix{major}` folder
    UPGRADE_SIDE_BY_SIDE_ONLY = "upgrade-sxs"

    @classmethod
    def from_flags(
        cls,
        restore_only: bool = False,
        upgrade_only: bool = False,
        sxs: bool = False,
        vendor: bool = False,
    ) -> "SetupMode":
        """Resolve the mode from `setup` command flags.

        restore-only takes precedence over upgrade-only; sxs is ignored with
        restore-only and vendor is ignored with upgrade-only.
        """
        if restore_only:
            return cls.RESTORE_VENDOR_ONLY if vendor else cls.RESTORE_ONLY
        if upgrade_only:
            return cls.UPGRADE_SIDE_BY_SIDE_ONLY if sxs else cls.UPGRADE_ONLY
        if sxs:
            return cls.SIDE_BY_SIDE
        if vendor:
            return cls.VENDOR
        return cls.PROJECT

    @property
    def is_enabled(self) -> bool:
        return self is not SetupMode.NONE

    @property
    def can_upgrade(self) -> bool:
        return self in (
            SetupMode.UPGRADE_ONLY,
            SetupMode.UPGRADE_SIDE_BY_SIDE_ONLY,
            SetupMode.PROJECT,
            SetupMode.VENDOR,
            SetupMode.SIDE_BY_SIDE,
        )

    @property
    def can_restore(self) -> bool:
        return self in (
            SetupMode.RESTORE_ONLY,
            SetupMode.PROJECT,
            SetupMode.VENDOR,
            SetupMode.SIDE_BY_SIDE,
        )

    @property
    def use_global_cache(self) -> bool:
        return self in (SetupMode.PROJECT, SetupMode.RESTORE_ONLY)

    @property
    def use_side_by_side(self) -> bool:
        return self in (SetupMode.UPGRADE_SIDE_BY_SIDE_ONLY, SetupMode.SIDE_BY_SIDE)

    def work_dir(self, project: Project, base_dir: Optional[str] = None) -> Optional[str]:
        """Create and return the side-by-side folder, or None when not in sxs mode."""
        if not self.use_side_by_side:
            return None
        sxs_folder = os.path.join(base_dir or os.getcwd(), project.sxs_folder_name())
        logger.debug("Using SxS folder as work_dir: %s", sxs_folder)
        os.makedirs(sxs_folder, exist_ok=True)
        return sxs_folder

    def apply(self, project: Project, base_dir: Optional[str] = None) -> None:
        """Run the upgrade then restore phases this mode enables."""
        if not self.is_enabled:
            logger.debug("Setup mode is none, nothing to do")
            return

        logger.debug("Starting toolset setup in %s mode", self.value)
        work_dir = self.work_dir(project, base_dir)

        if self.can_upgrade:
            logger.debug("Starting project upgrade")
            project.upgrade(work_dir)

        if self.can_restore:
            logger.debug("Restoring any missing extension packages")
            project.restore(self.use_global_cache, work_dir)
