"""
Tests for the dev-mode runner helpers
"""
import pytest

pytest.importorskip("watchdog")

from watchdog.events import DirModifiedEvent, FileModifiedEvent, FileMovedEvent  # noqa: E402

import dev  # noqa: E402


class TestServerEnv:
    """Test server_env()."""

    def test_options_override_env(self, monkeypatch):
        monkeypatch.setenv("PORT", "5002")
        monkeypatch.setenv("SERAPHIM_CACHE_DIR", "/from/env")

        env = dev.server_env(5010, "/tmp/dev-cache")

        assert env["PORT"] == "5010"
        assert env["SERAPHIM_CACHE_DIR"] == "/tmp/dev-cache"
        assert env["PYTHONUNBUFFERED"] == "1"

    def test_env_kept_without_options(self, monkeypatch):
        monkeypatch.setenv("PORT", "6000")
        env = dev.server_env(None, None)
        assert env["PORT"] == "6000"


class TestSourceChange:
    """Test which watchdog events trigger a restart."""

    def test_python_file(self):
        assert dev.is_source_change(FileModifiedEvent("mcp_seraphim/core/cache.py"))

    def test_ignored(self):
        assert not dev.is_source_change(FileModifiedEvent("mcp_seraphim/core/notes.md"))
        assert not dev.is_source_change(FileModifiedEvent("mcp_seraphim/__pycache__/cache.cpython-312.py"))
        assert not dev.is_source_change(DirModifiedEvent("mcp_seraphim/core"))

    def test_editor_rename_into_place(self):
        event = FileMovedEvent("mcp_seraphim/core/.cache.py.swp", "mcp_seraphim/core/cache.py")
        assert dev.is_source_change(event)
