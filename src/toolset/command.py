"""Thin wrapper over the `wix` executable.

Every interaction with the toolset goes through ToolsetCommand so that
arguments, working directory, failure messages and debug logging are handled
in one place.
"""
from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Type

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, Timer
from .errors import (
    ConversionFailedError,
    InstallFailedError,
    ListFailedError,
    ToolsetError,
    ToolsetNotFoundError,
)

logger = logging.getLogger(__name__)


class ToolsetAction(Enum):
    """Toolset actions used by the migration engine."""

    VERSION = "--version"
    CONVERT = "convert"
    LIST_EXTENSION = "extension list"
    LIST_GLOBAL_EXTENSION = "extension list --global"
    ADD_EXTENSION = "extension add"
    ADD_GLOBAL_EXTENSION = "extension add --global"

    @property
    def args(self) -> List[str]:
        """Base arguments passed to the executable for this action."""
        return self.value.split(" ")

    @property
    def failure(self) -> str:
        return _FAILURE_MESSAGES[self]

    @property
    def error_type(self) -> Type[ToolsetError]:
        return _FAILURE_ERRORS[self]


_FAILURE_MESSAGES = {
    ToolsetAction.VERSION: (
        "(wix) command was not found from PATH env, ensure a WiX4+ toolset is installed"
    ),
    ToolsetAction.CONVERT: "(wix) Could not convert wxs file",
    ToolsetAction.LIST_EXTENSION: "(wix) Could not list installed extensions from local cache",
    ToolsetAction.LIST_GLOBAL_EXTENSION: (
        "(wix) Could not list installed extensions from global cache"
    ),
    ToolsetAction.ADD_EXTENSION: "(wix) Could not add extension package to local cache",
    ToolsetAction.ADD_GLOBAL_EXTENSION: "(wix) Could not add extension package to global cache",
}

_FAILURE_ERRORS = {
    ToolsetAction.VERSION: ToolsetNotFoundError,
    ToolsetAction.CONVERT: ConversionFailedError,
    ToolsetAction.LIST_EXTENSION: ListFailedError,
    ToolsetAction.LIST_GLOBAL_EXTENSION: ListFailedError,
    ToolsetAction.ADD_EXTENSION: InstallFailedError,
    ToolsetAction.ADD_GLOBAL_EXTENSION: InstallFailedError,
}


@dataclass
class ToolsetCommand:
    """A single pending invocation of the toolset executable."""

    binary: str
    action: ToolsetAction
    extra_args: List[str] = field(default_factory=list)
    cwd: Optional[str] = None

    @property
    def argv(self) -> List[str]:
        return [self.binary] + self.action.args + self.extra_args

    def arg(self, value: str) -> "ToolsetCommand":
        self.extra_args.append(str(value))
        return self

    def args(self, values: Iterable[str]) -> "ToolsetCommand":
        self.extra_args.extend(str(v) for v in values)
        return self

    def current_dir(self, path: Optional[str]) -> "ToolsetCommand":
        self.cwd = path
        return self

    def output(self) -> subprocess.CompletedProcess:
        """Run the command and return the completed process.

        Raises:
            ToolsetNotFoundError: If the executable cannot be started.
            ToolsetError: The action-specific subclass on a non-zero exit.
        """
        argv = self.argv
        with Timer() as t:
            try:
                result = subprocess.run(  # noqa: S603
                    argv,
                    cwd=self.cwd,
                    capture_output=True,
                    text=True,
                    check=False,
                )
            except FileNotFoundError as exc:
                raise ToolsetNotFoundError(
                    f"{_FAILURE_MESSAGES[ToolsetAction.VERSION]} ({exc})"
                ) from exc

        if is_debug_enabled(logger):
            logger.debug(
                "Toolset command finished",
                extra=extra_context(
                    event="subprocess",
                    component="toolset",
                    action=self.action.name.lower(),
                    outcome="success" if result.returncode == 0 else "failure",
                    returncode=result.returncode,
                    duration_ms=t.duration_ms(),
                    argv=" ".join(argv),
                    cwd=self.cwd,
                ),
            )

        if result.returncode == 0:
            if is_debug_enabled(logger) and result.stderr:
                for line in result.stderr.splitlines():
                    logger.debug("%s", line)
            return result

        for line in (result.stderr or "").splitlines():
            logger.warning("%s", line)
        raise self.action.error_type(self.action.failure)


class Toolset:
    """Factory for commands against a modern (v4+) `wix` executable."""

    def __init__(self, binary: Optional[str] = None):
        self.binary = binary or Constants.WIX_BINARY

    def wix(self, action: ToolsetAction) -> ToolsetCommand:
        return ToolsetCommand(binary=self.binary, action=action)

    def __repr__(self) -> str:
        return f"Toolset(binary={self.binary!r})"
