"""
Workflow runner integration.

Implements the small part of the runner's command protocol this tool
needs: reading step inputs, extending PATH for the current and later
steps, and reporting failure.

    INPUT_<NAME>   step input values
    GITHUB_PATH    file whose lines are prepended to PATH for later steps
    ::error::msg   failure annotation printed to stdout
"""

import logging
import os
import sys
from pathlib import Path
from typing import MutableMapping, Mapping, TextIO, Optional, Union

logger = logging.getLogger(__name__)


def input_env_name(name: str) -> str:
    """
    Get the environment variable holding a step input.

    Example:
        >>> input_env_name("github_token")
        'INPUT_GITHUB_TOKEN'
    """
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str, environ: Mapping[str, str]) -> str:
    """Read a step input; missing inputs are empty strings."""
    return environ.get(input_env_name(name), "").strip()


def add_path(directory: Union[str, Path], environ: MutableMapping[str, str]) -> None:
    """
    Prepend a directory to PATH.

    The change applies to environ immediately and, when GITHUB_PATH names
    a file, to every later step of the job.
    """
    directory = str(directory)

    path_file = environ.get("GITHUB_PATH", "").strip()
    if path_file:
        with open(path_file, "a", encoding="utf-8") as f:
            f.write(f"{directory}\n")
        logger.debug(f"Recorded {directory} in {path_file}")

    current = environ.get("PATH", "")
    environ["PATH"] = f"{directory}{os.pathsep}{current}" if current else directory


def escape_data(message: str) -> str:
    """Escape a message for use in a workflow command."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_failed(message: str, stream: Optional[TextIO] = None) -> None:
    """Report a failure annotation to the runner."""
    stream = stream or sys.stdout
    print(f"::error::{escape_data(message)}", file=stream)
    stream.flush()


__all__ = ["input_env_name", "get_input", "add_path", "escape_data", "set_failed"]
