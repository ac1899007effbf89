"""
Directory resolution for lekkosetup.

Determines where installed releases are cached and where scratch files go.
Both honor the runner's environment when present:

    RUNNER_TOOL_CACHE   host-level tool cache shared across runs
    RUNNER_TEMP         per-job scratch directory

Otherwise the tool cache lives under ~/.lekkosetup/toolcache (or
%USERPROFILE%\\.lekkosetup\\toolcache) and scratch files go to the system
temp directory.

The environment mapping is always passed in so callers (and tests) decide
what the process environment looks like.
"""

import os
import tempfile
from pathlib import Path
from typing import Mapping

from lekkosetup.core.exceptions import ConfigurationError


def get_home_dir(environ: Mapping[str, str]) -> Path:
    """
    Get the lekkosetup home directory.

    Raises:
        ConfigurationError: If the user profile directory cannot be determined
    """
    if os.name == "nt":
        user_profile = environ.get("USERPROFILE")
        if not user_profile:
            raise ConfigurationError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine tool cache directory."
            )
        return Path(user_profile) / ".lekkosetup"
    home = environ.get("HOME")
    return (Path(home) if home else Path.home()) / ".lekkosetup"


def get_tool_cache_dir(environ: Mapping[str, str]) -> Path:
    """
    Get the tool cache root.

    Example:
        >>> get_tool_cache_dir({"RUNNER_TOOL_CACHE": "/opt/hostedtoolcache"})
        PosixPath('/opt/hostedtoolcache')
    """
    runner_cache = environ.get("RUNNER_TOOL_CACHE", "").strip()
    if runner_cache:
        return Path(runner_cache)
    return get_home_dir(environ) / "toolcache"


def get_temp_dir(environ: Mapping[str, str]) -> Path:
    """Get the directory scratch files are created in."""
    runner_temp = environ.get("RUNNER_TEMP", "").strip()
    if runner_temp:
        return Path(runner_temp)
    return Path(tempfile.gettempdir())


__all__ = ["get_home_dir", "get_tool_cache_dir", "get_temp_dir"]
