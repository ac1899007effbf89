"""
Expose an installed release on the executable search path.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import MutableMapping, Optional

from lekkosetup.core.exceptions import BinaryNotFoundError
from lekkosetup.core.filesystem import find_executable
from lekkosetup.core.releases import TOOL_NAME
from lekkosetup.core.workflow import add_path

logger = logging.getLogger(__name__)


def binary_dir(install_dir: Path, host_os: str) -> Path:
    """
    Get the directory holding the executable.

    Windows releases keep it at the install root; others under 'bin'.
    """
    if host_os == "win32":
        return Path(install_dir)
    return Path(install_dir) / "bin"


def install(
    install_dir: Path,
    host_os: str,
    environ: MutableMapping[str, str],
    name: str = TOOL_NAME,
) -> Path:
    """
    Put an installed release on PATH and resolve its executable.

    Args:
        install_dir: Cache entry directory of the release
        host_os: Host operating system ('linux', 'darwin', 'win32', ...)
        environ: Environment whose PATH is updated
        name: Executable name

    Returns:
        Path to the resolved executable

    Raises:
        BinaryNotFoundError: If the executable is not on the updated PATH
    """
    directory = binary_dir(install_dir, host_os)
    logger.info(f"Adding {name} binary to PATH. This is the install directory: {install_dir}")
    add_path(directory, environ)

    search_paths = [p for p in environ["PATH"].split(os.pathsep) if p]
    binary = find_executable(name, search_paths)
    if binary is None:
        raise BinaryNotFoundError(name)

    logger.debug(f"Resolved {name} to {binary}")
    return binary


def report_version(binary: Path, timeout: int = 30) -> Optional[str]:
    """
    Run '<binary> --version' and log the output.

    Failures are logged and never raised.
    """
    try:
        result = subprocess.run(
            [str(binary), "--version"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning(f"Could not run {binary} --version: {e}")
        return None

    if result.returncode != 0:
        logger.warning(
            f"{binary} --version exited with {result.returncode}: {result.stderr.strip()}"
        )
        return None

    output = result.stdout.strip()
    logger.info(output)
    return output


__all__ = ["binary_dir", "install", "report_version"]
