"""wixsetup - WiX toolset project upgrade and extension restore.

    Returns:
        int: Exit code
"""
import logging

from args import parse_args
from cli_setup import setup_command
from constants import ExitCodes


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)

    if args.action == "setup":
        setup_command(args)

    logging.error("Unknown action: %s", args.action)
    raise SystemExit(ExitCodes.USAGE_ERROR.value)


if __name__ == "__main__":
    main()
