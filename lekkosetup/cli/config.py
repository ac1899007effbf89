"""
Settings for a setup run.

Settings are layered, lowest precedence first:

1. Built-in defaults
2. YAML configuration file (--config)
3. Step inputs from the environment (INPUT_VERSION, INPUT_GITHUB_TOKEN,
   INPUT_APIKEY)
4. Command-line flags

The result is a SetupSettings instance handed to the core explicitly.
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from lekkosetup.core.credentials import DEFAULT_TOKEN_EXCHANGE_URL, Credential
from lekkosetup.core.directory import get_temp_dir, get_tool_cache_dir
from lekkosetup.core.exceptions import ConfigurationError
from lekkosetup.core.releases import (
    DEFAULT_API_URL,
    DEFAULT_OWNER,
    DEFAULT_REPO,
    LATEST,
)
from lekkosetup.core.session import NetworkSettings
from lekkosetup.core.workflow import get_input

logger = logging.getLogger(__name__)

DEFAULT_VERSION = LATEST

# Step inputs read from INPUT_<NAME>
INPUT_NAMES = ("version", "github_token", "apikey")


@dataclass
class SetupSettings:
    """Resolved settings for one run."""

    version: str = DEFAULT_VERSION
    github_token: str = ""
    apikey: str = ""
    cache_dir: Optional[Path] = None
    temp_dir: Optional[Path] = None
    proxy: Optional[str] = None
    no_proxy: Optional[str] = None
    ca_bundle: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    owner: str = DEFAULT_OWNER
    repo: str = DEFAULT_REPO
    token_exchange_url: str = DEFAULT_TOKEN_EXCHANGE_URL
    verify_version: bool = True

    def credential(self) -> Credential:
        """
        Pick the credential for this run.

        Raises:
            ConfigurationError: If neither an API key nor a token is set
        """
        if not self.apikey and not self.github_token:
            raise ConfigurationError(
                "No github_token supplied, won't be able to download lekko"
            )
        return Credential.choose(self.apikey, self.github_token)

    def network(self) -> NetworkSettings:
        return NetworkSettings(self.proxy, self.no_proxy, self.ca_bundle)

    def validate(self):
        """
        Check required settings.

        Raises:
            ConfigurationError: If a required setting is missing
        """
        if not self.version:
            raise ConfigurationError("a version was not provided")
        self.credential()


def load_yaml_config(config_file: Path) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Raises:
        ConfigurationError: If the file is missing or is not a YAML mapping
    """
    if not config_file.exists():
        raise ConfigurationError(f"Configuration file not found: {config_file}")

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Expected a mapping in {config_file}")
    return config


def _apply(settings: SetupSettings, values: Mapping[str, Any], source: str):
    known = {f.name for f in fields(SetupSettings)}
    for key, value in values.items():
        if key not in known:
            logger.debug(f"Ignoring unknown setting {key!r} from {source}")
            continue
        if value is None:
            continue
        if key in ("cache_dir", "temp_dir"):
            value = Path(value).expanduser()
        elif key == "version":
            value = str(value).strip()
        setattr(settings, key, value)


def load_settings(
    environ: Mapping[str, str],
    config_file: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> SetupSettings:
    """
    Resolve settings from all sources.

    Args:
        environ: Process environment
        config_file: Optional YAML configuration file
        overrides: Values from command-line flags (None values are skipped)

    Returns:
        SetupSettings with cache, temp and network settings filled in
    """
    settings = SetupSettings()

    if config_file is not None:
        _apply(settings, load_yaml_config(config_file), str(config_file))

    inputs = {name: get_input(name, environ) for name in INPUT_NAMES}
    _apply(settings, {k: v for k, v in inputs.items() if v}, "step inputs")

    if overrides:
        _apply(settings, overrides, "command line")

    if settings.cache_dir is None:
        settings.cache_dir = get_tool_cache_dir(environ)
    if settings.temp_dir is None:
        settings.temp_dir = get_temp_dir(environ)
    inherited = NetworkSettings.from_environ(environ)
    for name in ("proxy", "no_proxy", "ca_bundle"):
        if getattr(settings, name) is None:
            setattr(settings, name, getattr(inherited, name))

    return settings


__all__ = ["DEFAULT_VERSION", "SetupSettings", "load_yaml_config", "load_settings"]
