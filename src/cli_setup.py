"""CLI entry point for the setup command.

Resolves the setup mode, discovers the project's *.wxs sources, probes the
installed toolset and applies the upgrade/restore phases.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Optional

from cli_config import SetupConfig, find_config_path, load_config, resolve_setup_config
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from toolset import SetupMode, Toolset, ToolsetError, create_project
from toolset.errors import (
    CorruptedSourceError,
    IncludeError,
    InvalidSourceError,
    PoisonedEncodingError,
    SourceParseError,
)

logger = logging.getLogger(__name__)

_SOURCE_ERRORS = (
    CorruptedSourceError,
    IncludeError,
    InvalidSourceError,
    PoisonedEncodingError,
    SourceParseError,
)


def _setup_logging(args: Any) -> None:
    """Configure logging based on CLI arguments."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()

    configure_logging()

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def resolve_mode(args: Any, config: Optional[SetupConfig] = None) -> SetupMode:
    """Pick the setup mode: --mode, then flags, then config, then 'project'."""
    explicit = getattr(args, "MODE", None)
    if explicit:
        return SetupMode(explicit)

    flags = {
        "restore_only": bool(getattr(args, "RESTORE_ONLY", False)),
        "upgrade_only": bool(getattr(args, "UPGRADE_ONLY", False)),
        "sxs": bool(getattr(args, "SXS", False)),
        "vendor": bool(getattr(args, "VENDOR", False)),
    }
    if any(flags.values()):
        return SetupMode.from_flags(**flags)

    if config is not None and config.mode:
        try:
            return SetupMode(config.mode)
        except ValueError:
            logger.warning("Ignoring unknown setup mode in config: %s", config.mode)

    return SetupMode.from_flags()


def run_setup(args: Any) -> int:
    """Run the setup command and return the process exit code.

    Args:
        args: Parsed CLI arguments namespace.
    """
    project_dir = getattr(args, "INPUT", None) or "."
    config_path = find_config_path(getattr(args, "CONFIG", None), project_dir)
    if config_path:
        config = resolve_setup_config(
            args, load_config(config_path), config_dir=os.path.dirname(config_path)
        )
    else:
        config = resolve_setup_config(args)
    mode = resolve_mode(args, config)

    if is_debug_enabled(logger):
        logger.debug(
            "Setup resolved",
            extra=extra_context(
                event="decision",
                component="cli",
                action="setup",
                mode=mode.value,
                toolset=config.toolset,
                includes=len(config.includes),
            ),
        )

    if not mode.is_enabled:
        logger.info("Setup mode is 'none'; nothing to do.")
        return ExitCodes.SUCCESS.value

    try:
        project = create_project(project_dir, config.includes, Toolset(config.toolset))
        mode.apply(project, base_dir=os.getcwd())
    except _SOURCE_ERRORS as e:
        logger.error("%s", e)
        return ExitCodes.FILE_ERROR.value
    except ToolsetError as e:
        logger.error("%s", e)
        return ExitCodes.TOOLSET_ERROR.value
    except OSError as e:
        logger.error("Couldn't read or write project files: %s", e)
        return ExitCodes.FILE_ERROR.value

    logger.info("Setup finished in '%s' mode.", mode.value)
    return ExitCodes.SUCCESS.value


def setup_command(args: Any) -> None:
    """Entry point for the setup command; exits the process."""
    _setup_logging(args)
    sys.exit(run_setup(args))
