"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    USAGE_ERROR = 2
    TOOLSET_ERROR = 4


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Toolset executable
    WIX_BINARY = "wix"
    ENV_TOOLSET = "WIXSETUP_TOOLSET"
    ENV_LOG_LEVEL = "WIXSETUP_LOG_LEVEL"

    # WiX source files
    WIX_FOLDER = "wix"
    WXS_EXTENSION = ".wxs"
    LEGACY_NAMESPACE_URI = "http://schemas.microsoft.com/wix/2006/wi"
    V4_NAMESPACE_URI = "http://wixtoolset.org/schemas/v4/wxs"
    WIX_ROOT_ELEMENT_XPATH = "/*[local-name()='Wix']"
    XML_PREFIX = "xml"
    # wix convert silently no-ops on these headers, matched case-insensitively
    POISONED_XML_DECLARATION = r"""<\?xml\s[^>]*encoding\s*=\s*(['"])windows-1252\1[^>]*\?>"""

    # Extension listings
    DAMAGED_MARKER = "(damaged)"
    SXS_FOLDER_PREFIX = "wix"

    # Configuration
    CONFIG_FILES = ["wixsetup.yml", "wixsetup.yaml", ".wixsetup.yml"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
