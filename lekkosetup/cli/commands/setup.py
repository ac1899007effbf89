"""
Setup command implementation.

Installs the requested Lekko CLI release and puts it on PATH.
"""

import logging
from pathlib import Path
from typing import MutableMapping, Optional

from lekkosetup.cli.config import SetupSettings
from lekkosetup.core.installer import LekkoInstaller
from lekkosetup.core.platform import HostInfo, detect_host
from lekkosetup.core.search_path import install, report_version
from lekkosetup.core.tool_cache import ToolCache

logger = logging.getLogger(__name__)


def run(
    settings: SetupSettings,
    environ: MutableMapping[str, str],
    host: Optional[HostInfo] = None,
) -> Path:
    """
    Run the setup command.

    Args:
        settings: Resolved settings
        environ: Environment whose PATH is extended
        host: Host identifiers (auto-detected if None)

    Returns:
        Path to the installed lekko executable

    Raises:
        SetupError: If any step fails
    """
    settings.validate()
    host = host or detect_host()

    logger.info(f'Setting up Lekko version "{settings.version}"')

    installer = LekkoInstaller(
        ToolCache(settings.cache_dir),
        host=host,
        temp_dir=settings.temp_dir,
        network=settings.network(),
        api_url=settings.api_url,
        owner=settings.owner,
        repo=settings.repo,
        token_exchange_url=settings.token_exchange_url,
    )
    install_dir = installer.ensure_installed(settings.version, settings.credential())

    binary = install(install_dir, host.os, environ)

    logger.info(f"Successfully setup lekko version {settings.version}")
    if settings.verify_version:
        report_version(binary)

    return binary
