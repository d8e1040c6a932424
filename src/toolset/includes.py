"""Discovery of the *.wxs sources that make up a project."""
from __future__ import annotations

import logging
import os
from glob import glob
from typing import List, Optional, Sequence

from constants import Constants
from .command import Toolset
from .errors import IncludeError
from .project import Project

logger = logging.getLogger(__name__)


def find_wxs_sources(project_dir: str, includes: Optional[Sequence[str]] = None) -> List[str]:
    """Return the *.wxs files of a project.

    Every *.wxs file directly inside ``<project_dir>/wix`` is used, followed by
    each explicitly included file. Paths are normalised and each file is listed
    once.

    Raises:
        IncludeError: If an include is missing or a directory, or nothing is found.
    """
    wix_dir = os.path.join(project_dir, Constants.WIX_FOLDER)
    sources = sorted(
        os.path.normpath(p)
        for p in glob(os.path.join(wix_dir, "*" + Constants.WXS_EXTENSION))
        if os.path.isfile(p)
    )

    for path in includes or []:
        if not os.path.exists(path):
            raise IncludeError(f"The '{path}' file does not exist.")
        if os.path.isdir(path):
            raise IncludeError(
                f"The '{path}' path is not a file. Please check the path and ensure "
                "it is to a WiX Source (wxs) file."
            )
        logger.debug("Using the '%s' WiX source file", path)
        path = os.path.normpath(path)
        if path not in sources:
            sources.append(path)

    if not sources:
        raise IncludeError("There are no WXS files to create an installer")
    return sources


def create_project(
    project_dir: str,
    includes: Optional[Sequence[str]] = None,
    toolset: Optional[Toolset] = None,
) -> Project:
    """Create a Project for the installed toolset and add every discovered source."""
    sources = find_wxs_sources(project_dir, includes)
    logger.debug("wxs sources: %s", sources)

    project = Project.try_new(toolset or Toolset())
    for src in sources:
        logger.debug("Adding %s to project", src)
        project.add_wxs(src)
    return project
