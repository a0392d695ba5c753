"""Shared test fixtures."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from tool_updater.settings import UpdaterSettings


@pytest.fixture
def temp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Override home directory and clear package manager variables."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    for name in ("DOTNET_CLI_HOME", "NUGET_PACKAGES", "DOTNET_HOST_PATH"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def temp_config_path(tmp_path: Path) -> Path:
    """Configuration file path inside a temporary directory."""
    return tmp_path / ".dotnet-tool-updater" / "config.json"


@pytest.fixture
def posix_settings() -> UpdaterSettings:
    """Settings with fixed POSIX paths so tests don't depend on the host."""
    return UpdaterSettings(
        package_manager="dotnet",
        global_package_cache="/home/dev/.nuget/packages",
        default_tool_path="/home/dev/.dotnet/tools",
        case_insensitive=False,
    )


# ============================================================================
# Child Process Doubles
# ============================================================================


class FakeProcess:
    """Stands in for subprocess.Popen.

    A blocking process only exits once it is killed (or `finish()` is called),
    which lets tests cancel an update mid-flight.
    """

    def __init__(
        self,
        exit_code: int = 0,
        block: bool = False,
        kill_error: Exception | None = None,
    ) -> None:
        self.exit_code = exit_code
        self.kill_error = kill_error
        self.returncode: int | None = None
        self.kill_count = 0
        self._exited = threading.Event()
        if not block:
            self._exited.set()

    @property
    def killed(self) -> bool:
        return self.kill_count > 0

    def finish(self) -> None:
        self._exited.set()

    def wait(self, timeout: float | None = None) -> int:
        self._exited.wait(timeout if timeout is not None else 10)
        self.returncode = -9 if self.killed else self.exit_code
        return self.returncode

    def kill(self) -> None:
        self.kill_count += 1
        self._exited.set()
        if self.kill_error is not None:
            raise self.kill_error


class FakeLauncher:
    """Records launches and hands out a prepared FakeProcess."""

    def __init__(self, process: FakeProcess | None = None, error: Exception | None = None) -> None:
        self.process = process or FakeProcess()
        self.error = error
        self.calls: list[tuple[list[str], dict[str, Any]]] = []
        self.started = threading.Event()

    @property
    def spawn_count(self) -> int:
        return len(self.calls)

    def __call__(self, args: list[str], **kwargs: Any) -> FakeProcess:
        self.calls.append((list(args), kwargs))
        if self.error is not None:
            raise self.error
        self.started.set()
        return self.process


@pytest.fixture
def fake_launcher() -> FakeLauncher:
    """Launcher whose process exits with code 0."""
    return FakeLauncher()


@pytest.fixture
def failing_launcher() -> FakeLauncher:
    """Launcher whose process exits with code 1."""
    return FakeLauncher(FakeProcess(exit_code=1))


@pytest.fixture
def blocking_launcher() -> FakeLauncher:
    """Launcher whose process runs until killed."""
    return FakeLauncher(FakeProcess(block=True))


# ============================================================================
# App Context Fixtures
# ============================================================================


@pytest.fixture
def mock_app_context(posix_settings: UpdaterSettings, temp_config_path: Path) -> MagicMock:
    """Create a mock AppContext for CLI testing."""
    from tool_updater.context import AppContext

    ctx = MagicMock(spec=AppContext)
    ctx.settings = posix_settings
    ctx.config_path = temp_config_path
    ctx.detector = MagicMock()
    ctx.invoker = MagicMock()
    ctx.updater = MagicMock()
    return ctx
