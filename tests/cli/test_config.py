"""
Tests for settings resolution.
"""

from pathlib import Path

import pytest

from lekkosetup.cli.config import SetupSettings, load_settings, load_yaml_config
from lekkosetup.core.credentials import CredentialKind
from lekkosetup.core.exceptions import ConfigurationError
from lekkosetup.core.session import NetworkSettings


class TestLoadSettings:
    """Test precedence of settings sources."""

    def test_defaults(self, environ):
        settings = load_settings(environ)

        assert settings.version == "latest"
        assert settings.cache_dir == Path(environ["RUNNER_TOOL_CACHE"])
        assert settings.temp_dir == Path(environ["RUNNER_TEMP"])
        assert settings.proxy is None
        assert settings.no_proxy is None
        assert settings.ca_bundle is None

    def test_step_inputs(self, environ):
        environ.update(
            {
                "INPUT_VERSION": "0.2.15",
                "INPUT_GITHUB_TOKEN": "T",
                "INPUT_APIKEY": "",
            }
        )

        settings = load_settings(environ)

        assert settings.version == "0.2.15"
        assert settings.github_token == "T"
        assert settings.apikey == ""

    def test_yaml_then_inputs_then_flags(self, environ, tmp_path):
        config = tmp_path / "lekko.yaml"
        config.write_text(
            "version: 0.1.0\n"
            "github_token: from-yaml\n"
            "repo: cli-fork\n"
            "unknown_key: ignored\n"
        )
        environ["INPUT_GITHUB_TOKEN"] = "from-input"

        settings = load_settings(environ, config, {"version": "0.2.15", "apikey": None})

        assert settings.version == "0.2.15"
        assert settings.github_token == "from-input"
        assert settings.repo == "cli-fork"
        assert not hasattr(settings, "unknown_key")

    def test_numeric_yaml_version_is_string(self, environ, tmp_path):
        config = tmp_path / "lekko.yaml"
        config.write_text("version: 1.0\n")

        assert load_settings(environ, config).version == "1.0"

    def test_proxy_from_environment(self, environ):
        environ["http_proxy"] = "http://proxy:3128"
        assert load_settings(environ).proxy == "http://proxy:3128"

    def test_network_settings_from_environment(self, environ):
        environ.update(
            {
                "https_proxy": "http://proxy:3128",
                "NO_PROXY": "ghe.internal",
                "REQUESTS_CA_BUNDLE": "/etc/ssl/corp.pem",
            }
        )

        network = load_settings(environ).network()

        assert network == NetworkSettings(
            proxy="http://proxy:3128",
            no_proxy="ghe.internal",
            ca_bundle="/etc/ssl/corp.pem",
        )

    def test_yaml_network_settings_win(self, environ, tmp_path):
        config = tmp_path / "lekko.yaml"
        config.write_text("ca_bundle: /opt/ca.pem\n")
        environ["CURL_CA_BUNDLE"] = "/etc/curl.pem"

        assert load_settings(environ, config).ca_bundle == "/opt/ca.pem"

    def test_cache_dir_flag(self, environ, tmp_path):
        settings = load_settings(environ, overrides={"cache_dir": tmp_path / "c"})
        assert settings.cache_dir == tmp_path / "c"


class TestLoadYamlConfig:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_yaml_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("version: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_yaml_config(config)

    def test_not_a_mapping(self, tmp_path):
        config = tmp_path / "list.yaml"
        config.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_yaml_config(config)

    def test_empty_file(self, tmp_path):
        config = tmp_path / "empty.yaml"
        config.write_text("")
        assert load_yaml_config(config) == {}


class TestValidate:
    def test_empty_version(self):
        with pytest.raises(ConfigurationError, match="a version was not provided"):
            SetupSettings(version="", github_token="T").validate()

    def test_no_credential(self):
        with pytest.raises(ConfigurationError, match="No github_token supplied"):
            SetupSettings(version="latest").validate()

    def test_api_key_alone_is_enough(self):
        settings = SetupSettings(apikey="key")
        settings.validate()
        assert settings.credential().kind is CredentialKind.API_KEY
