"""
HTTP session factory.

Builds the requests.Session shared by the release locator and the
downloader. Network settings (proxy, proxy exclusions, CA bundle) are read
from the process environment once, at the CLI boundary, and passed in
explicitly; the session itself never consults the environment.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import urlparse

import requests
from requests.utils import should_bypass_proxies

logger = logging.getLogger(__name__)

USER_AGENT = "setup-lekko"


@dataclass(frozen=True)
class NetworkSettings:
    """
    Network configuration inherited from the process environment.

    Attributes:
        proxy: Proxy URL used for both http and https traffic
        no_proxy: Comma-separated hosts reached without the proxy
        ca_bundle: CA bundle file used to verify TLS certificates
    """

    proxy: Optional[str] = None
    no_proxy: Optional[str] = None
    ca_bundle: Optional[str] = None

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> "NetworkSettings":
        """
        Read network settings from an environment mapping.

        Example:
            >>> NetworkSettings.from_environ({"NO_PROXY": "ghe.internal"})
            NetworkSettings(proxy=None, no_proxy='ghe.internal', ca_bundle=None)
        """
        return cls(
            proxy=proxy_from_environ(environ),
            no_proxy=_first_set(environ, ("no_proxy", "NO_PROXY")),
            ca_bundle=_first_set(environ, ("REQUESTS_CA_BUNDLE", "CURL_CA_BUNDLE")),
        )


class SetupSession(requests.Session):
    """Session that skips its proxy for hosts listed in no_proxy."""

    def __init__(self, no_proxy: Optional[str] = None):
        super().__init__()
        self.no_proxy = no_proxy

    def merge_environment_settings(self, url, proxies, stream, verify, cert):
        settings = super().merge_environment_settings(url, proxies, stream, verify, cert)
        if self.no_proxy and should_bypass_proxies(url, no_proxy=self.no_proxy):
            settings["proxies"] = {}
        return settings

    def rebuild_proxies(self, prepared_request, proxies):
        # Redirect hops go through here rather than merge_environment_settings
        if self.no_proxy and should_bypass_proxies(
            prepared_request.url, no_proxy=self.no_proxy
        ):
            prepared_request.headers.pop("Proxy-Authorization", None)
            return {}
        return super().rebuild_proxies(prepared_request, proxies)


def create_session(
    token: str = "", network: Optional[NetworkSettings] = None
) -> requests.Session:
    """
    Create an HTTP session.

    Args:
        token: Access token sent as a bearer credential (omitted if empty)
        network: Proxy and TLS settings (direct connection, default CAs if None)

    Returns:
        Configured requests.Session

    Example:
        >>> session = create_session("ghp_abc", NetworkSettings(proxy="http://proxy:3128"))
        >>> session.headers["Authorization"]
        'Bearer ghp_abc'
    """
    network = network or NetworkSettings()

    session = SetupSession(no_proxy=network.no_proxy)
    # .netrc and ambient proxy variables must not override the explicit settings
    session.trust_env = False
    session.headers["User-Agent"] = USER_AGENT

    if token:
        session.headers["Authorization"] = f"Bearer {token}"

    if network.proxy:
        logger.debug(f"Routing requests through proxy {_proxy_host(network.proxy)}")
        session.proxies = {"http": network.proxy, "https": network.proxy}

    if network.ca_bundle:
        logger.debug(f"Verifying TLS certificates with {network.ca_bundle}")
        session.verify = network.ca_bundle

    return session


def proxy_from_environ(environ: Mapping[str, str]) -> Optional[str]:
    """
    Pick the proxy URL from an environment mapping.

    Lowercase names win over uppercase ones, https over http.
    """
    return _first_set(environ, ("https_proxy", "HTTPS_PROXY", "http_proxy", "HTTP_PROXY"))


def _first_set(environ: Mapping[str, str], names) -> Optional[str]:
    for name in names:
        value = environ.get(name, "").strip()
        if value:
            return value
    return None


def _proxy_host(proxy: str) -> str:
    """Proxy location without credentials."""
    parsed = urlparse(proxy)
    if not parsed.hostname:
        return "<unparsable proxy URL>"
    if parsed.port:
        return f"{parsed.hostname}:{parsed.port}"
    return parsed.hostname


__all__ = [
    "NetworkSettings",
    "SetupSession",
    "create_session",
    "proxy_from_environ",
]
