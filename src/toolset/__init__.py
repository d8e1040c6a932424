"""WiX toolset migration engine.

This package provides project setup utilities for the modern WiX toolset:
- ext.py: extension identities and the installed extension package cache
- source.py: opening and classifying *.wxs sources
- project.py: project state and the upgrade/restore phases
- setup_mode.py: the setup patterns applied to a project
- includes.py: discovery of a project's *.wxs sources
- command.py: the `wix` subprocess wrapper
"""

from .command import Toolset, ToolsetAction, ToolsetCommand  # noqa: F401
from .errors import ToolsetError  # noqa: F401
from .ext import (  # noqa: F401
    PackageCache,
    UnknownExtension,
    WellKnownExtension,
    extension_from_namespace,
)
from .includes import create_project, find_wxs_sources  # noqa: F401
from .project import Project  # noqa: F401
from .setup_mode import SetupMode  # noqa: F401
from .source import SchemaGeneration, WixSource, open_wxs_source  # noqa: F401

__all__ = [
    "Toolset",
    "ToolsetAction",
    "ToolsetCommand",
    "ToolsetError",
    "PackageCache",
    "UnknownExtension",
    "WellKnownExtension",
    "extension_from_namespace",
    "create_project",
    "find_wxs_sources",
    "Project",
    "SetupMode",
    "SchemaGeneration",
    "WixSource",
    "open_wxs_source",
]
