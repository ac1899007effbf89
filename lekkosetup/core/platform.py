"""
Platform detection and release naming for lekkosetup.

This module maps the host's architecture and operating system to the
tokens used in published Lekko release asset names.

Host values use the runner's conventions:
- Architecture: 'x64', 'arm64', 'x86', 'arm', ... (normalized from
  platform.machine())
- Operating system: 'linux', 'darwin', 'win32', ... (normalized from
  platform.system())

Usage:
    from lekkosetup.core.platform import detect_host, resolve_platform

    host = detect_host()
    release = resolve_platform(host.arch, host.os)
    print(release.asset_suffix())  # 'Linux_x86_64'
"""

import functools
import platform
from dataclasses import dataclass

from lekkosetup.core.exceptions import (
    UnsupportedArchitectureError,
    UnsupportedPlatformError,
)

# Host architecture -> release asset architecture token
ARCH_TOKENS = {
    "x64": "x86_64",
    "arm64": "arm64",
}

# Host operating system -> release asset platform token
OS_TOKENS = {
    "linux": "Linux",
    "darwin": "Darwin",
}


@dataclass(frozen=True)
class HostInfo:
    """
    Raw host identifiers.

    Attributes:
        arch: Normalized CPU architecture ('x64', 'arm64', ...)
        os: Normalized operating system ('linux', 'darwin', 'win32', ...)
    """

    arch: str
    os: str

    def __str__(self) -> str:
        return f"{self.os}-{self.arch}"


@dataclass(frozen=True)
class ReleasePlatform:
    """Publisher tokens for a supported host."""

    arch: str
    os: str

    def asset_suffix(self) -> str:
        """
        Get the platform part of a release asset name.

        Example:
            >>> ReleasePlatform("x86_64", "Linux").asset_suffix()
            'Linux_x86_64'
        """
        return f"{self.os}_{self.arch}"


def resolve_platform(arch: str, os_name: str) -> ReleasePlatform:
    """
    Map host identifiers to release asset tokens.

    Architecture is checked before the operating system, so a host where
    both are unsupported reports the architecture.

    Args:
        arch: Host architecture ('x64' or 'arm64' are supported)
        os_name: Host operating system ('linux' or 'darwin' are supported)

    Returns:
        ReleasePlatform with the publisher's tokens

    Raises:
        UnsupportedArchitectureError: If arch has no published release
        UnsupportedPlatformError: If os_name has no published release

    Example:
        >>> resolve_platform("x64", "darwin")
        ReleasePlatform(arch='x86_64', os='Darwin')
    """
    if arch not in ARCH_TOKENS:
        raise UnsupportedArchitectureError(arch)
    if os_name not in OS_TOKENS:
        raise UnsupportedPlatformError(os_name)
    return ReleasePlatform(arch=ARCH_TOKENS[arch], os=OS_TOKENS[os_name])


@functools.lru_cache(maxsize=1)
def detect_host() -> HostInfo:
    """
    Detect the current host.

    This function is cached - it only runs detection once per process.
    """
    return HostInfo(arch=_detect_architecture(), os=_detect_os())


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        'linux', 'darwin', 'win32', or the lowercased platform.system()
        value for anything else
    """
    system = platform.system().lower()

    if system == "windows":
        return "win32"
    return system


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm', or the
        lowercased machine name for unknown architectures
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


def clear_host_cache():
    """
    Clear the host detection cache.

    Forces the next call to detect_host() to re-detect.
    """
    detect_host.cache_clear()


__all__ = [
    "ARCH_TOKENS",
    "OS_TOKENS",
    "HostInfo",
    "ReleasePlatform",
    "resolve_platform",
    "detect_host",
    "clear_host_cache",
]
