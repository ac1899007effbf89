"""
Centralized exception hierarchy for lekkosetup.

Every failure in the setup chain is a SetupError carrying a human-readable
message. The subclasses only record where the failure originated; callers
never need to distinguish them to decide what to do next, because any
failure aborts the run.
"""


# ============================================================================
# Base Exception
# ============================================================================


class SetupError(Exception):
    """Base exception for all lekkosetup errors."""

    @property
    def message(self) -> str:
        return str(self)


# ============================================================================
# Configuration
# ============================================================================


class ConfigurationError(SetupError):
    """Missing or invalid input configuration."""

    pass


# ============================================================================
# Platform
# ============================================================================


class PlatformError(SetupError):
    """Base exception for unsupported host platforms."""

    def __init__(self, value: str, message: str):
        self.value = value
        super().__init__(message)


class UnsupportedArchitectureError(PlatformError):
    """Raised when the host architecture has no published release."""

    def __init__(self, value: str):
        super().__init__(
            value,
            f'The "{value}" architecture is not supported with a Lekko release.',
        )


class UnsupportedPlatformError(PlatformError):
    """Raised when the host operating system has no published release."""

    def __init__(self, value: str):
        super().__init__(
            value,
            f'The "{value}" platform is not supported with a Lekko release.',
        )


# ============================================================================
# Authentication
# ============================================================================


class TokenExchangeError(SetupError):
    """Raised when an API key cannot be exchanged for an access token."""

    pass


# ============================================================================
# Resolution
# ============================================================================


class ReleaseLookupError(SetupError):
    """Raised when the release registry request itself fails."""

    pass


class AssetNotFoundError(SetupError):
    """Raised when no release asset matches the host platform."""

    def __init__(self, version: str, platform: str, arch: str):
        self.version = version
        self.platform = platform
        self.arch = arch
        super().__init__(
            f'Unable to find Lekko version "{version}" for platform '
            f'"{platform}" and architecture "{arch}".'
        )


# ============================================================================
# Transport
# ============================================================================


class DownloadError(SetupError):
    """Raised when the archive download fails."""

    pass


# ============================================================================
# Post-install verification
# ============================================================================


class BinaryNotFoundError(SetupError):
    """Raised when the installed binary cannot be resolved on PATH."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} was not found on PATH")


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
]
