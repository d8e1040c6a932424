"""Argument parsing functionality for wixsetup."""

import argparse
from typing import List, Optional

from constants import Constants


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS,
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)


def _add_setup_parser(subparsers) -> None:
    setup = subparsers.add_parser(
        "setup",
        help="Upgrade *.wxs sources and restore missing WiX extensions",
        description=(
            "Upgrade legacy (Wix3) *.wxs sources to the modern format and install "
            "the extension packages they depend on. Defaults to 'project' mode: "
            "upgrade in place and restore to the global extension cache."
        ),
    )
    setup.add_argument("-i", "--input",
                       dest="INPUT",
                       help="Project directory containing the 'wix' folder (default: current directory)",
                       action="store",
                       type=str,
                       default=".")
    setup.add_argument("--include",
                       dest="INCLUDES",
                       help="Additional *.wxs file to include (can be used multiple times)",
                       action="append",
                       type=str,
                       default=[])
    setup.add_argument("--restore-only",
                       dest="RESTORE_ONLY",
                       help="Only restore missing extensions, do not convert any source files",
                       action="store_true")
    setup.add_argument("--upgrade-only",
                       dest="UPGRADE_ONLY",
                       help="Only upgrade legacy source files, do not restore extensions",
                       action="store_true")
    setup.add_argument("--sxs",
                       dest="SXS",
                       help="Upgrade side by side into a 'wix{major}' folder (ignored with --restore-only)",
                       action="store_true")
    setup.add_argument("--vendor",
                       dest="VENDOR",
                       help="Restore extensions to a local cache instead of the global one (ignored with --upgrade-only)",
                       action="store_true")
    setup.add_argument("--mode",
                       dest="MODE",
                       help="Explicit setup mode; overrides the flags above",
                       action="store",
                       type=str.lower,
                       choices=["none", "project", "vendor", "sxs", "restore",
                                "restore-vendor", "upgrade", "upgrade-sxs"])
    setup.add_argument("--toolset",
                       dest="TOOLSET",
                       help=f"Path to the wix executable (default: '{Constants.WIX_BINARY}' from PATH)",
                       action="store",
                       type=str)
    _add_common_args(setup)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="wixsetup",
        description="wixsetup - WiX toolset project upgrade and extension restore",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", metavar="ACTION")
    subparsers.required = True
    _add_setup_parser(subparsers)

    return parser.parse_args(argv)
