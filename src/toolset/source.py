"""Opening and classifying WiX source (*.wxs) files."""
from __future__ import annotations

import logging
import os
import re
import shutil
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from lxml import etree

from constants import Constants
from .command import Toolset, ToolsetAction
from .errors import (
    CorruptedSourceError,
    InvalidSourceError,
    PoisonedEncodingError,
    SourceParseError,
)
from .ext import ExtensionIdentity, PackageCache, extension_from_namespace

logger = logging.getLogger(__name__)


class SchemaGeneration(Enum):
    """Schema generation of a .wxs file, taken from the root default namespace."""

    # Wix3, not compatible with Wix4 and must always be upgraded
    LEGACY = "2006"
    # Wix4 and later share this namespace, no upgrade required
    MODERN = "v4"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_namespace(cls, uri: Optional[str]) -> "SchemaGeneration":
        if uri == Constants.LEGACY_NAMESPACE_URI:
            return cls.LEGACY
        if uri == Constants.V4_NAMESPACE_URI:
            return cls.MODERN
        return cls.UNSUPPORTED


@dataclass(frozen=True)
class WixSource:
    """A classified .wxs file. Conversion produces a new instance."""

    path: str
    generation: SchemaGeneration
    exts: Tuple[ExtensionIdentity, ...] = ()

    def can_upgrade(self) -> bool:
        return self.generation is SchemaGeneration.LEGACY

    def is_modern(self) -> bool:
        """True when extensions can be derived from the declared namespaces."""
        return self.generation is SchemaGeneration.MODERN

    def check_deps(self, package_cache: PackageCache) -> None:
        """Mark every declared extension that is not installed as missing."""
        for ext in self.exts:
            if package_cache.is_installed(ext):
                continue
            # An empty package name means the namespace is not a known extension
            if ext.package_name:
                logger.debug(
                    "Missing extension, xmlns:%s='%s'", ext.namespace_prefix, ext.namespace_uri
                )
                package_cache.mark_missing(ext.package_name)
            else:
                logger.warning(
                    "Unknown extension, xmlns:%s='%s'", ext.namespace_prefix, ext.namespace_uri
                )

    def upgrade(self, toolset: Toolset, work_dir: Optional[str] = None) -> "WixSource":
        """Convert this source with `wix convert` and re-open the result.

        With a ``work_dir`` the file is first copied there and only the copy is
        converted, leaving the original untouched.

        Raises:
            ConversionFailedError: If the toolset reports a failure.
        """
        if work_dir is not None:
            target = os.path.normpath(os.path.join(work_dir, os.path.basename(self.path)))
            if os.path.abspath(target) != os.path.abspath(self.path):
                shutil.copyfile(self.path, target)
        else:
            target = self.path

        logger.info("Converting %s", target)
        toolset.wix(ToolsetAction.CONVERT).arg(target).output()
        return open_wxs_source(target)


_POISONED_DECLARATION = re.compile(Constants.POISONED_XML_DECLARATION, re.IGNORECASE)


def _check_encoding(path: str, text: str) -> None:
    if _POISONED_DECLARATION.search(text):
        raise PoisonedEncodingError(
            f"Source file {path!r} has an xml header with encoding `windows-1252`. "
            "This must be changed to `utf-8` otherwise subsequent tooling will silently fail."
        )


def open_wxs_source(path: str) -> WixSource:
    """Open a .wxs file and identify its schema and extension namespaces.

    Raises:
        OSError: If the file cannot be read.
        PoisonedEncodingError: If the file declares the windows-1252 encoding.
        SourceParseError: If the file is not well-formed XML.
        CorruptedSourceError: If there is no root ``<Wix/>`` element.
        InvalidSourceError: If the root query does not yield an element.
    """
    with open(path, "rb") as f:
        raw = f.read()
    _check_encoding(path, raw.decode("utf-8", errors="replace"))

    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        document = etree.fromstring(raw, parser).getroottree()
    except etree.XMLSyntaxError as e:
        raise SourceParseError(f"Source file {path!r} is not valid XML: {e}") from e

    found = document.xpath(Constants.WIX_ROOT_ELEMENT_XPATH)
    if not isinstance(found, list):
        raise InvalidSourceError(f"Invalid .wxs file {path!r}")
    if not found:
        raise CorruptedSourceError(f"Corrupted .wxs file {path!r}")
    root = found[0]
    if not isinstance(root, etree._Element):  # pylint: disable=protected-access
        raise InvalidSourceError(f"Invalid .wxs file {path!r}")

    generation = SchemaGeneration.from_namespace(root.nsmap.get(None))
    exts = tuple(
        extension_from_namespace(prefix, uri)
        for prefix, uri in root.nsmap.items()
        if prefix is not None and prefix != Constants.XML_PREFIX
    )
    source = WixSource(path=path, generation=generation, exts=exts)
    logger.debug("Opened %s as %s with %d namespace(s)", path, generation.name, len(exts))
    return source
