"""
Authenticated archive download.

A single streamed GET per archive. There is no retry, resume or checksum
step: integrity relies on the transport.
"""

import logging
from pathlib import Path

import requests

from lekkosetup.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def download_file(
    session: requests.Session,
    url: str,
    destination: Path,
    timeout: int = 60,
) -> Path:
    """
    Download a release asset to destination.

    The session carries the bearer credential. Release asset API URLs
    answer with the file itself only when octet-stream is requested.

    Args:
        session: Authenticated HTTP session
        url: Asset URL
        destination: Local path to save the file
        timeout: Request timeout in seconds

    Returns:
        Path to the downloaded file

    Raises:
        DownloadError: If the request fails or returns a non-2xx status
        ValueError: If URL is empty
    """
    if not url:
        raise ValueError("URL cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.debug(f"Downloading {url} to {destination}")

    try:
        with session.get(
            url,
            headers={"Accept": "application/octet-stream"},
            stream=True,
            timeout=timeout,
            allow_redirects=True,
        ) as response:
            if not response.ok:
                raise DownloadError(
                    f"Unexpected HTTP response from {url}: "
                    f"{response.status_code} {response.reason}"
                )

            downloaded = 0
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        downloaded += len(chunk)

    except requests.RequestException as e:
        destination.unlink(missing_ok=True)
        raise DownloadError(f"Download of {url} failed: {e}") from e
    except DownloadError:
        destination.unlink(missing_ok=True)
        raise

    logger.debug(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


__all__ = ["download_file"]
