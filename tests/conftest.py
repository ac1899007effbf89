"""
Pytest configuration and shared fixtures for setup-lekko tests.
"""

import io
import os
import stat
import tarfile
from pathlib import Path

import pytest

from lekkosetup.cli.config import SetupSettings
from lekkosetup.core.platform import HostInfo
from lekkosetup.core.tool_cache import ToolCache

API_URL = "https://api.github.com"
RELEASES_URL = f"{API_URL}/repos/lekkodev/cli/releases"
ASSET_URL = f"{RELEASES_URL}/assets/1001"


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Helpers
# ============================================================================


def build_lekko_archive(path: Path, nested: bool = True, script: str = None) -> Path:
    """
    Write a release archive shaped like the published ones.

    With nested=True the archive holds lekko/bin/lekko, otherwise bin/lekko.
    """
    script = script or "#!/bin/sh\necho 'lekko version v0.2.15'\n"
    data = script.encode()
    prefix = "lekko/" if nested else ""

    with tarfile.open(path, "w:gz") as tar:
        for directory in (prefix.rstrip("/"), f"{prefix}bin"):
            if not directory:
                continue
            info = tarfile.TarInfo(directory)
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            tar.addfile(info)

        info = tarfile.TarInfo(f"{prefix}bin/lekko")
        info.size = len(data)
        info.mode = 0o755
        tar.addfile(info, io.BytesIO(data))

    return path


def release_json(tag: str, assets: list) -> dict:
    """Build a GitHub release body with the given asset names."""
    return {
        "tag_name": tag,
        "assets": [
            {"name": name, "url": f"{RELEASES_URL}/assets/{1000 + i}"}
            for i, name in enumerate(assets, start=1)
        ],
    }


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def linux_x64() -> HostInfo:
    return HostInfo(arch="x64", os="linux")


@pytest.fixture
def tool_cache(tmp_path) -> ToolCache:
    root = tmp_path / "toolcache"
    root.mkdir()
    return ToolCache(root)


@pytest.fixture
def lekko_archive(tmp_path) -> bytes:
    """Bytes of a lekko_Linux_x86_64.tar.gz release archive."""
    archive = build_lekko_archive(tmp_path / "lekko_Linux_x86_64.tar.gz")
    return archive.read_bytes()


@pytest.fixture
def cached_lekko(tool_cache) -> Path:
    """A complete cache entry for lekko 0.2.15 on x64."""
    entry = tool_cache.root / "lekko" / "0.2.15" / "x64"
    binary = entry / "bin" / "lekko"
    binary.parent.mkdir(parents=True)
    binary.write_text("#!/bin/sh\necho cached\n")
    binary.chmod(binary.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    (entry.parent / "x64.complete").write_text("")
    return entry


@pytest.fixture
def environ(tmp_path) -> dict:
    """An isolated environment mapping."""
    github_path = tmp_path / "github_path"
    github_path.write_text("")
    return {
        "PATH": os.pathsep.join(["/usr/bin", "/bin"]),
        "HOME": str(tmp_path / "home"),
        "GITHUB_PATH": str(github_path),
        "RUNNER_TOOL_CACHE": str(tmp_path / "toolcache"),
        "RUNNER_TEMP": str(tmp_path / "runner_temp"),
    }


@pytest.fixture
def settings(tmp_path) -> SetupSettings:
    return SetupSettings(
        version="0.2.15",
        github_token="T",
        cache_dir=tmp_path / "toolcache",
        temp_dir=tmp_path / "runner_temp",
        verify_version=False,
    )
