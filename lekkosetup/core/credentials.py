"""
Credential resolution.

Two ways to authenticate are supported:
- a Lekko API key, exchanged once at runtime for a short-lived access token
- a pre-existing access token, used as is

The choice is made once, at entry, by building a Credential. The API key
wins when both are supplied.
"""

import enum
import logging
from dataclasses import dataclass

import requests

from lekkosetup.core.exceptions import TokenExchangeError

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_EXCHANGE_URL = (
    "https://prod.api.lekko.dev/lekko.bff.v1beta1.BFFService/GetDeveloperAccessToken"
)


class CredentialKind(enum.Enum):
    """How the access token is obtained."""

    API_KEY = "apikey"
    TOKEN = "token"


@dataclass(frozen=True)
class Credential:
    """A credential as supplied by the user."""

    kind: CredentialKind
    secret: str

    @classmethod
    def choose(cls, apikey: str, github_token: str) -> "Credential":
        """
        Pick the credential to use for this run.

        Example:
            >>> Credential.choose("lekko_key", "ghp_token").kind
            <CredentialKind.API_KEY: 'apikey'>
        """
        if apikey:
            return cls(CredentialKind.API_KEY, apikey)
        return cls(CredentialKind.TOKEN, github_token)

    def __repr__(self) -> str:
        return f"Credential(kind={self.kind.value}, secret=<{len(self.secret)} chars>)"


def exchange_api_key(
    session: requests.Session,
    apikey: str,
    url: str = DEFAULT_TOKEN_EXCHANGE_URL,
    timeout: int = 30,
) -> str:
    """
    Exchange a Lekko API key for an access token.

    Sends a single POST with the key in the 'apikey' header and an empty
    JSON body.

    Raises:
        TokenExchangeError: If the request fails, the status is not 2xx,
            or the response carries no non-empty 'token' field
    """
    logger.info("Exchanging API key for an access token...")

    try:
        response = session.post(
            url, headers={"apikey": apikey}, json={}, timeout=timeout
        )
    except requests.RequestException as e:
        raise TokenExchangeError(f"Failed to exchange API key: {e}") from e

    if not response.ok:
        raise TokenExchangeError(
            f"Failed to exchange API key: {response.status_code} {response.reason}"
        )

    try:
        body = response.json()
    except ValueError as e:
        raise TokenExchangeError(
            f"Failed to exchange API key: invalid response body: {e}"
        ) from e

    token = body.get("token") if isinstance(body, dict) else None
    if not isinstance(token, str) or not token:
        raise TokenExchangeError("Failed to exchange API key: no token in response")

    logger.info(f"Received access token of length {len(token)}")
    return token


def resolve_token(
    credential: Credential,
    session: requests.Session,
    exchange_url: str = DEFAULT_TOKEN_EXCHANGE_URL,
) -> str:
    """
    Turn a credential into an access token.

    A plain token is returned unchanged, even when empty; the first
    authenticated request then fails instead.
    """
    if credential.kind is CredentialKind.API_KEY:
        return exchange_api_key(session, credential.secret, exchange_url)
    return credential.secret


__all__ = [
    "DEFAULT_TOKEN_EXCHANGE_URL",
    "CredentialKind",
    "Credential",
    "exchange_api_key",
    "resolve_token",
]
