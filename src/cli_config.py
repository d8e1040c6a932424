"""Configuration file loading and precedence for the setup command.

Precedence, highest first: CLI flags, environment, config file, built-in
defaults. A config file that cannot be read or parsed is logged and ignored.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


@dataclass
class SetupConfig:
    """Resolved settings for one setup run."""

    toolset: str = Constants.WIX_BINARY
    includes: List[str] = field(default_factory=list)
    mode: Optional[str] = None


def find_config_path(path: Optional[str] = None, base_dir: Optional[str] = None) -> Optional[str]:
    """Return the explicit config path, or the first default file in ``base_dir``."""
    if path:
        return path
    for name in Constants.CONFIG_FILES:
        candidate = os.path.join(base_dir or os.getcwd(), name)
        if os.path.isfile(candidate):
            return candidate
    return None


def load_config(path: Optional[str] = None, base_dir: Optional[str] = None) -> Dict[str, Any]:
    """Load a YAML or JSON config file.

    Args:
        path: Explicit config path. When omitted the default file names are
            looked up in ``base_dir`` (current directory by default).

    Returns:
        The parsed mapping, empty when nothing usable was found.
    """
    path = find_config_path(path, base_dir)
    if not path:
        return {}

    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.lower().endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        logger.error("Failed to load config %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level must be a mapping", path)
        return {}
    logger.debug("Loaded config from %s", path)
    return data


def resolve_setup_config(
    args: Any,
    config: Optional[Dict[str, Any]] = None,
    config_dir: Optional[str] = None,
) -> SetupConfig:
    """Merge CLI arguments, environment and config file into a SetupConfig.

    Relative ``includes`` from the config file are taken relative to
    ``config_dir``, the directory the file was found in.
    """
    config = config or {}
    resolved = SetupConfig()

    cfg_toolset = config.get("toolset")
    if isinstance(cfg_toolset, str) and cfg_toolset.strip():
        resolved.toolset = cfg_toolset.strip()
    env_toolset = os.environ.get(Constants.ENV_TOOLSET)
    if env_toolset and env_toolset.strip():
        resolved.toolset = env_toolset.strip()
    cli_toolset = getattr(args, "TOOLSET", None)
    if cli_toolset:
        resolved.toolset = cli_toolset

    cli_includes = getattr(args, "INCLUDES", None) or []
    if cli_includes:
        resolved.includes = list(cli_includes)
    else:
        cfg_includes = config.get("includes")
        if isinstance(cfg_includes, list):
            resolved.includes = [os.path.join(config_dir or "", str(p)) for p in cfg_includes]
        elif cfg_includes is not None:
            logger.warning("Ignoring config 'includes': expected a list")

    cli_mode = getattr(args, "MODE", None)
    cfg_mode = config.get("mode")
    if cli_mode:
        resolved.mode = cli_mode
    elif isinstance(cfg_mode, str) and cfg_mode.strip():
        resolved.mode = cfg_mode.strip().lower()

    return resolved
