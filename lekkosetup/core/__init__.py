"""
Core functionality for setup-lekko.

This package contains the platform, credential, release, cache and PATH
handling used by the CLI.
"""

from .exceptions import (
    SetupError,
    ConfigurationError,
    PlatformError,
    UnsupportedArchitectureError,
    UnsupportedPlatformError,
    TokenExchangeError,
    ReleaseLookupError,
    AssetNotFoundError,
    DownloadError,
    BinaryNotFoundError,
)

from .platform import (
    HostInfo,
    ReleasePlatform,
    detect_host,
    resolve_platform,
)

from .credentials import (
    Credential,
    CredentialKind,
    resolve_token,
)

from .releases import (
    ReleaseLocator,
    asset_name,
    release_tag_for_version,
)

from .tool_cache import ToolCache

from .installer import LekkoInstaller

from .search_path import install

__all__ = [
    "SetupError",
    "ConfigurationError",
    "PlatformError",
    "UnsupportedArchitectureError",
    "UnsupportedPlatformError",
    "TokenExchangeError",
    "ReleaseLookupError",
    "AssetNotFoundError",
    "DownloadError",
    "BinaryNotFoundError",
    "HostInfo",
    "ReleasePlatform",
    "detect_host",
    "resolve_platform",
    "Credential",
    "CredentialKind",
    "resolve_token",
    "ReleaseLocator",
    "asset_name",
    "release_tag_for_version",
    "ToolCache",
    "LekkoInstaller",
    "install",
]
