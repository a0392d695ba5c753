"""Tests for environment module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from tool_updater import environment


class TestPlatformRules:
    """Tests for platform detection."""

    @pytest.mark.parametrize(
        ("platform", "expected"),
        [("win32", True), ("darwin", True), ("linux", False), ("freebsd14", False)],
    )
    def test_case_insensitive_platform(
        self, monkeypatch: pytest.MonkeyPatch, platform: str, expected: bool
    ) -> None:
        """Test Windows and macOS are case-insensitive."""
        monkeypatch.setattr(sys, "platform", platform)
        assert environment.is_case_insensitive_platform() is expected

    def test_is_windows(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test Windows path flavor detection."""
        monkeypatch.setattr(sys, "platform", "win32")
        assert environment.is_windows() is True
        monkeypatch.setattr(sys, "platform", "darwin")
        assert environment.is_windows() is False


class TestLocations:
    """Tests for well-known locations."""

    def test_default_global_tool_path(self, temp_home: Path) -> None:
        """Test the default global tool path is under the home directory."""
        assert environment.default_global_tool_path() == temp_home / ".dotnet" / "tools"

    def test_default_global_tool_path_cli_home(
        self, temp_home: Path, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """Test DOTNET_CLI_HOME relocates the global tool path."""
        monkeypatch.setenv("DOTNET_CLI_HOME", str(tmp_path / "cli"))
        assert environment.default_global_tool_path() == tmp_path / "cli" / ".dotnet" / "tools"

    def test_global_package_cache_root(self, temp_home: Path) -> None:
        """Test the cache defaults to ~/.nuget/packages."""
        assert environment.global_package_cache_root() == temp_home / ".nuget" / "packages"

    def test_global_package_cache_root_env(
        self, temp_home: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test NUGET_PACKAGES overrides the cache root."""
        monkeypatch.setenv("NUGET_PACKAGES", "/data/packages")
        assert environment.global_package_cache_root() == Path("/data/packages")

    def test_package_manager_executable(
        self, temp_home: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test DOTNET_HOST_PATH takes precedence over dotnet on PATH."""
        assert environment.package_manager_executable() == "dotnet"
        monkeypatch.setenv("DOTNET_HOST_PATH", "/usr/lib/dotnet/dotnet")
        assert environment.package_manager_executable() == "/usr/lib/dotnet/dotnet"


class TestCurrentExecutable:
    """Tests for locating the running tool."""

    def test_uses_argv(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test the entry script path is resolved."""
        script = tmp_path / "tool.py"
        script.write_text("")
        monkeypatch.setattr(sys, "argv", [str(script)])
        assert environment.current_executable_path() == script.resolve()

    def test_frozen_uses_executable(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """Test frozen apps report their executable."""
        binary = tmp_path / "tool"
        monkeypatch.setattr(sys, "frozen", True, raising=False)
        monkeypatch.setattr(sys, "executable", str(binary))
        assert environment.current_executable_path() == binary.resolve()


class TestCanonicalPath:
    """Tests for canonical detection paths."""

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need elevated rights")
    def test_follows_symlinks(self, tmp_path: Path) -> None:
        """Test a symlinked directory and its target canonicalize the same."""
        real = tmp_path / "real"
        real.mkdir()
        (tmp_path / "link").symlink_to(real, target_is_directory=True)
        assert environment.canonical_path(tmp_path / "link" / "packages") == (
            real.resolve() / "packages"
        )

    def test_accepts_strings(self, tmp_path: Path) -> None:
        """Test string input gives an absolute path."""
        assert environment.canonical_path(str(tmp_path)).is_absolute()
