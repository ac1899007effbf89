"""
Tests for the setup-lekko CLI, end to end against a mocked registry.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
import responses

from conftest import ASSET_URL, RELEASES_URL, release_json
from lekkosetup.cli.parser import CLI
from lekkosetup.core.platform import HostInfo

pytestmark = pytest.mark.skipif(os.name == "nt", reason="Unix executables")


@pytest.fixture(autouse=True)
def linux_host():
    with patch(
        "lekkosetup.cli.commands.setup.detect_host",
        return_value=HostInfo(arch="x64", os="linux"),
    ):
        yield


class TestSetup:
    """Test a full setup run."""

    @responses.activate
    def test_install_from_inputs(self, environ, lekko_archive, capsys):
        environ.update({"INPUT_VERSION": "0.2.15", "INPUT_GITHUB_TOKEN": "T"})
        responses.add(
            responses.GET,
            f"{RELEASES_URL}/tags/v0.2.15",
            json=release_json("v0.2.15", ["lekko_Linux_x86_64.tar.gz"]),
        )
        responses.add(responses.GET, ASSET_URL, body=lekko_archive, status=200)

        exit_code = CLI(environ).run(["--no-verify-version"])

        assert exit_code == 0
        entry = Path(environ["RUNNER_TOOL_CACHE"]) / "lekko" / "0.2.15" / "x64"
        bin_dir = entry / "bin"
        assert environ["PATH"].split(os.pathsep)[0] == str(bin_dir)
        assert (bin_dir / "lekko").is_file()
        with open(environ["GITHUB_PATH"], encoding="utf-8") as f:
            assert f.read().splitlines() == [str(bin_dir)]
        assert "::error::" not in capsys.readouterr().out

    @responses.activate
    def test_reports_version(self, environ, lekko_archive):
        responses.add(
            responses.GET,
            RELEASES_URL,
            json=[release_json("v0.2.15", ["lekko_Linux_x86_64.tar.gz"])],
        )
        responses.add(responses.GET, ASSET_URL, body=lekko_archive, status=200)

        with patch("lekkosetup.cli.commands.setup.report_version") as report:
            exit_code = CLI(environ).run(["--github-token", "T"])

        assert exit_code == 0
        assert report.call_count == 1
        assert report.call_args[0][0].name == "lekko"


class TestFailures:
    """Every failure ends with a ::error:: line and exit status 1."""

    def test_missing_token(self, environ, capsys):
        exit_code = CLI(environ).run([])

        assert exit_code == 1
        out = capsys.readouterr().out
        assert "::error::No github_token supplied, won't be able to download lekko" in out

    def test_empty_version(self, environ, capsys):
        exit_code = CLI(environ).run(["--lekko-version", "", "--github-token", "T"])

        assert exit_code == 1
        assert "::error::a version was not provided" in capsys.readouterr().out

    @responses.activate
    def test_asset_not_found(self, environ, capsys):
        responses.add(
            responses.GET,
            f"{RELEASES_URL}/tags/v0.2.15",
            json=release_json("v0.2.15", ["lekko_Darwin_arm64.tar.gz"]),
        )

        exit_code = CLI(environ).run(["--lekko-version", "0.2.15", "--github-token", "T"])

        assert exit_code == 1
        out = capsys.readouterr().out
        assert '::error::Unable to find Lekko version "0.2.15"' in out

    def test_unexpected_error_is_internal(self, environ, capsys):
        with patch(
            "lekkosetup.cli.commands.setup.LekkoInstaller",
            side_effect=RuntimeError("boom"),
        ):
            exit_code = CLI(environ).run(["--github-token", "T"])

        assert exit_code == 1
        assert "::error::Internal error" in capsys.readouterr().out

    def test_keyboard_interrupt(self, environ):
        with patch(
            "lekkosetup.cli.commands.setup.LekkoInstaller",
            side_effect=KeyboardInterrupt,
        ):
            assert CLI(environ).run(["--github-token", "T"]) == 130
