"""Errors raised by the toolset migration engine."""


class ToolsetError(Exception):
    """Base class for all toolset setup failures."""


class ToolsetNotFoundError(ToolsetError):
    """The modern `wix` executable is missing or did not report a version."""


class MalformedVersionError(ToolsetError):
    """`wix --version` printed something that is not a semantic version."""


class PoisonedEncodingError(ToolsetError):
    """Source declares the windows-1252 encoding which `wix convert` mishandles."""


class SourceParseError(ToolsetError):
    """Source is not well-formed XML."""


class CorruptedSourceError(ToolsetError):
    """Source has no root `<Wix/>` element."""


class InvalidSourceError(ToolsetError):
    """Root element query did not yield an element."""


class ConversionFailedError(ToolsetError):
    """`wix convert` exited with a non-zero status."""


class InstallFailedError(ToolsetError):
    """`wix extension add` exited with a non-zero status."""


class ListFailedError(ToolsetError):
    """`wix extension list` exited with a non-zero status."""


class IncludeError(ToolsetError):
    """A requested source path is missing, is not a file, or nothing was found."""
