"""
Unit tests for directory resolution.
"""

import os
from pathlib import Path

import pytest

from lekkosetup.core.directory import get_temp_dir, get_tool_cache_dir


class TestToolCacheDir:
    def test_runner_tool_cache(self):
        assert get_tool_cache_dir({"RUNNER_TOOL_CACHE": "/opt/hostedtoolcache"}) == Path(
            "/opt/hostedtoolcache"
        )

    @pytest.mark.skipif(os.name == "nt", reason="Unix home layout")
    def test_home_fallback(self, tmp_path):
        assert get_tool_cache_dir({"HOME": str(tmp_path)}) == (
            tmp_path / ".lekkosetup" / "toolcache"
        )


class TestTempDir:
    def test_runner_temp(self, tmp_path):
        assert get_temp_dir({"RUNNER_TEMP": str(tmp_path)}) == tmp_path

    def test_system_temp_fallback(self):
        assert get_temp_dir({}).is_absolute()
