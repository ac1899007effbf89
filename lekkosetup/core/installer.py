"""
Lekko CLI installer.

Ensures a Lekko release is present in the tool cache, downloading it on a
cache miss:

    find in cache -> resolve platform -> resolve token -> locate asset
                  -> download -> extract -> cache

A cache hit returns immediately without any network activity. Failures
from any step propagate unchanged; nothing is retried.
"""

import logging
from pathlib import Path
from typing import Optional

from lekkosetup.core.credentials import (
    DEFAULT_TOKEN_EXCHANGE_URL,
    Credential,
    resolve_token,
)
from lekkosetup.core.download import download_file
from lekkosetup.core.filesystem import extract_archive, temporary_directory
from lekkosetup.core.platform import HostInfo, detect_host, resolve_platform
from lekkosetup.core.releases import (
    DEFAULT_API_URL,
    DEFAULT_OWNER,
    DEFAULT_REPO,
    TOOL_NAME,
    ReleaseLocator,
    asset_name,
)
from lekkosetup.core.session import NetworkSettings, create_session
from lekkosetup.core.tool_cache import ToolCache

logger = logging.getLogger(__name__)


class LekkoInstaller:
    """
    Download and cache the Lekko CLI.

    Example:
        >>> installer = LekkoInstaller(ToolCache(Path("/opt/hostedtoolcache")))
        >>> installer.ensure_installed("0.2.15", Credential.choose("", "ghp_abc"))
        PosixPath('/opt/hostedtoolcache/lekko/0.2.15/x64')
    """

    def __init__(
        self,
        cache: ToolCache,
        host: Optional[HostInfo] = None,
        temp_dir: Optional[Path] = None,
        network: Optional[NetworkSettings] = None,
        api_url: str = DEFAULT_API_URL,
        owner: str = DEFAULT_OWNER,
        repo: str = DEFAULT_REPO,
        token_exchange_url: str = DEFAULT_TOKEN_EXCHANGE_URL,
    ):
        """
        Initialize installer.

        Args:
            cache: Tool cache to look up and store releases in
            host: Host identifiers (auto-detected if None)
            temp_dir: Directory for download scratch space (system temp if None)
            network: Proxy and TLS settings for all requests
            api_url: Base URL of the releases API
            owner: Repository owner publishing the releases
            repo: Repository name publishing the releases
            token_exchange_url: Endpoint exchanging API keys for tokens
        """
        self.cache = cache
        self.host = host or detect_host()
        self.temp_dir = temp_dir
        self.network = network
        self.api_url = api_url
        self.owner = owner
        self.repo = repo
        self.token_exchange_url = token_exchange_url

    def ensure_installed(self, version: str, credential: Credential) -> Path:
        """
        Return the cached install directory for a version, installing it if needed.

        Args:
            version: 'latest' or a version with optional 'v' prefix
            credential: Token or API key used for the registry and download

        Returns:
            Cache entry directory holding the extracted release

        Raises:
            SetupError: If any step fails
        """
        cached = self.cache.find(TOOL_NAME, version, self.host.arch)
        if cached is not None:
            logger.info(f"Found in cache @ {cached}")
            return cached

        release_platform = resolve_platform(self.host.arch, self.host.os)

        with create_session(network=self.network) as exchange_session:
            token = resolve_token(credential, exchange_session, self.token_exchange_url)

        with create_session(token, self.network) as session:
            logger.info("Resolving the download URL for the current platform...")
            locator = ReleaseLocator(session, self.api_url, self.owner, self.repo)
            download_url = locator.locate(version, release_platform)

            with temporary_directory(parent=self.temp_dir) as scratch:
                logger.info(
                    f'Downloading lekko version "{version}" from {download_url} '
                    f"using token of length {len(token)}"
                )
                archive = download_file(
                    session, download_url, scratch / asset_name(release_platform)
                )
                logger.info(
                    f'Successfully downloaded lekko version "{version}" from {download_url}'
                )

                logger.info("Extracting lekko...")
                extract_path = extract_archive(archive, scratch / "extract")
                logger.info(f"Successfully extracted lekko to {extract_path}")

                logger.info("Adding lekko to the cache...")
                install_dir = self.cache.cache_dir(
                    _release_root(extract_path), TOOL_NAME, version, self.host.arch
                )
                logger.info(f"Successfully cached lekko to {install_dir}")

        return install_dir


def _release_root(extract_path: Path) -> Path:
    """Release archives wrap their contents in a 'lekko' directory when present."""
    nested = extract_path / TOOL_NAME
    if nested.is_dir():
        return nested
    return extract_path


__all__ = ["LekkoInstaller"]
