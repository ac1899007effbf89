"""
Host-level tool cache.

Installed releases are stored by (tool, version, architecture):

    <root>/<tool>/<version>/<arch>/          extracted release
    <root>/<tool>/<version>/<arch>.complete  marker written after the copy

An entry without its marker is a leftover of an interrupted put and is
ignored by find(). Entries are never re-validated once complete.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from lekkosetup.core.filesystem import copy_tree, safe_rmtree

logger = logging.getLogger(__name__)

COMPLETE_SUFFIX = ".complete"
MOVING_VERSION = "latest"


def clean_version(version: str) -> str:
    """
    Normalize a version for use as a cache key.

    Example:
        >>> clean_version("v0.2.15")
        '0.2.15'
    """
    version = version.strip()
    if version.startswith("v"):
        return version[1:]
    return version


def is_explicit_version(version: str) -> bool:
    """
    Check whether a version names exactly one release.

    Every version except 'latest' is a fixed release tag and may be served
    from the cache, including partial ("0.2") and build-tagged ("1.0.0+build.1")
    versions.
    """
    version = clean_version(version)
    return bool(version) and version != MOVING_VERSION


class ToolCache:
    """
    Tool cache rooted at a directory.

    Example:
        >>> cache = ToolCache(Path("/opt/hostedtoolcache"))
        >>> cache.find("lekko", "0.2.15", "x64")
        PosixPath('/opt/hostedtoolcache/lekko/0.2.15/x64')
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def entry_dir(self, tool: str, version: str, arch: str) -> Path:
        return self.root / tool / clean_version(version) / arch

    def _marker(self, entry: Path) -> Path:
        return entry.parent / f"{entry.name}{COMPLETE_SUFFIX}"

    def find(self, tool: str, version: str, arch: str) -> Optional[Path]:
        """
        Look up a complete cache entry.

        Returns:
            Entry directory, or None if the version is not explicit or no
            complete entry exists
        """
        if not is_explicit_version(version):
            logger.debug(f"Version {version!r} is not explicit, skipping cache lookup")
            return None

        entry = self.entry_dir(tool, version, arch)
        if entry.is_dir() and self._marker(entry).is_file():
            return entry

        logger.debug(f"Not found in cache: {tool} {version} {arch}")
        return None

    def cache_dir(self, source: Path, tool: str, version: str, arch: str) -> Path:
        """
        Copy an extracted tree into the cache.

        Any existing entry for the key is replaced. Writing the same
        content to the same key twice is harmless.

        Returns:
            Entry directory
        """
        entry = self.entry_dir(tool, version, arch)
        marker = self._marker(entry)

        logger.debug(f"Caching {source} as {tool}@{clean_version(version)} ({arch})")

        marker.unlink(missing_ok=True)
        if entry.exists():
            safe_rmtree(entry, require_prefix=self.root)
        entry.parent.mkdir(parents=True, exist_ok=True)

        copy_tree(source, entry)
        marker.write_text(datetime.now().isoformat())

        return entry


__all__ = ["ToolCache", "clean_version", "is_explicit_version"]
