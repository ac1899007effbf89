"""
Release lookup against the GitHub releases API.

Resolves the download URL of the Lekko CLI archive built for a given
platform. Two queries are supported:

- "latest": list releases with a page size of 1 and use the newest one
- anything else: fetch the release by tag (the version with a 'v' prefix)

Asset names follow the publisher's convention:

    lekko_<OS>_<Arch>.tar.gz      e.g. lekko_Linux_x86_64.tar.gz

Only the single page is inspected; registry failures are not retried.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import requests

from lekkosetup.core.exceptions import AssetNotFoundError, ReleaseLookupError
from lekkosetup.core.platform import ReleasePlatform

logger = logging.getLogger(__name__)

TOOL_NAME = "lekko"
ARCHIVE_SUFFIX = ".tar.gz"
LATEST = "latest"

# Github release tags carry this prefix; the user-supplied version may not.
VERSION_PREFIX = "v"

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_OWNER = "lekkodev"
DEFAULT_REPO = "cli"


@dataclass(frozen=True)
class AssetDescriptor:
    """A downloadable file attached to a release."""

    name: str
    url: str


def asset_name(release_platform: ReleasePlatform, tool: str = TOOL_NAME) -> str:
    """
    Build the expected archive name for a platform.

    Example:
        >>> asset_name(ReleasePlatform("x86_64", "Linux"))
        'lekko_Linux_x86_64.tar.gz'
    """
    return f"{tool}_{release_platform.asset_suffix()}{ARCHIVE_SUFFIX}"


def release_tag_for_version(version: str) -> str:
    """
    Get the release tag for a version.

    Both 'v0.38.0' and '0.38.0' resolve to 'v0.38.0'.
    """
    if version.startswith(VERSION_PREFIX):
        return version
    return VERSION_PREFIX + version


def find_asset(assets: Iterable[dict], name: str) -> Optional[AssetDescriptor]:
    """
    Return the first asset whose name matches exactly, or None.

    Raises:
        ReleaseLookupError: If the matching asset has no download URL
    """
    for asset in assets:
        if not isinstance(asset, dict) or asset.get("name") != name:
            continue
        url = asset.get("url")
        if not isinstance(url, str) or not url:
            raise ReleaseLookupError(f"Asset {name} has no download URL")
        return AssetDescriptor(name=name, url=url)
    return None


class ReleaseLocator:
    """
    Find release assets in a GitHub repository.

    Example:
        >>> locator = ReleaseLocator(session)
        >>> locator.locate("0.2.15", ReleasePlatform("x86_64", "Linux"))
        'https://api.github.com/repos/lekkodev/cli/releases/assets/1234'
    """

    def __init__(
        self,
        session: requests.Session,
        api_url: str = DEFAULT_API_URL,
        owner: str = DEFAULT_OWNER,
        repo: str = DEFAULT_REPO,
        timeout: int = 30,
    ):
        """
        Initialize release locator.

        Args:
            session: Authenticated HTTP session
            api_url: Base URL of the releases API
            owner: Repository owner
            repo: Repository name
            timeout: Request timeout in seconds
        """
        self.session = session
        self.api_url = api_url.rstrip("/")
        self.owner = owner
        self.repo = repo
        self.timeout = timeout

    @property
    def releases_url(self) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/releases"

    def locate(self, version: str, release_platform: ReleasePlatform) -> str:
        """
        Resolve the download URL of the archive for a version and platform.

        Args:
            version: 'latest' or a version with optional 'v' prefix
            release_platform: Publisher tokens for the host

        Returns:
            API URL of the matching asset

        Raises:
            ReleaseLookupError: If the registry request fails
            AssetNotFoundError: If no asset of the release matches
        """
        name = asset_name(release_platform)
        logger.debug(f"Looking for asset {name} in release {version!r}")

        if version == LATEST:
            url = self.releases_url
            releases = self._get_json(url, params={"per_page": 1})
            if not isinstance(releases, list):
                raise ReleaseLookupError(f"Unexpected response from {url}")
            if not releases:
                raise AssetNotFoundError(
                    version, release_platform.os, release_platform.arch
                )
            release = releases[0]
        else:
            tag = release_tag_for_version(version)
            url = f"{self.releases_url}/tags/{tag}"
            release = self._get_json(url)

        assets = release.get("assets", []) if isinstance(release, dict) else None
        if not isinstance(assets, list):
            raise ReleaseLookupError(f"Unexpected response from {url}")

        asset = find_asset(assets, name)
        if asset is None:
            raise AssetNotFoundError(version, release_platform.os, release_platform.arch)

        logger.debug(f"Found {asset.name} in release {release.get('tag_name', version)}")
        return asset.url

    def _get_json(self, url: str, params: Optional[dict] = None):
        try:
            response = self.session.get(
                url,
                params=params,
                headers={"Accept": "application/vnd.github+json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            raise ReleaseLookupError(
                f"Release lookup failed: {e.response.status_code} "
                f"{e.response.reason} ({url})"
            ) from e
        except (requests.RequestException, ValueError) as e:
            raise ReleaseLookupError(f"Release lookup failed: {e}") from e


__all__ = [
    "TOOL_NAME",
    "LATEST",
    "AssetDescriptor",
    "asset_name",
    "release_tag_for_version",
    "find_asset",
    "ReleaseLocator",
]
