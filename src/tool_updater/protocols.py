"""Protocol definitions for core abstractions.

Concrete implementations satisfy these protocols structurally, so tests can
substitute simple doubles for the detector, the invoker and the process
launcher.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from tool_updater.types import InstallContext, UpdateResult

if TYPE_CHECKING:
    from tool_updater.cancellation import CancellationToken


@runtime_checkable
class ContextDetection(Protocol):
    """Protocol for install context detection."""

    def detect(
        self,
        executable_path: str | os.PathLike[str],
        global_package_cache_root: str | os.PathLike[str],
    ) -> InstallContext:
        """Detect how the tool at `executable_path` was installed.

        Args:
            executable_path: Absolute path of the running tool.
            global_package_cache_root: Root of the global package cache.

        Returns:
            InstallContext for the tool.
        """
        ...


@runtime_checkable
class UpdateInvocation(Protocol):
    """Protocol for running one package manager update."""

    def invoke(
        self,
        context: InstallContext,
        extra_source: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> UpdateResult:
        """Run the update and report the outcome. Never raises."""
        ...


class ChildProcess(Protocol):
    """The subset of `subprocess.Popen` the invoker relies on."""

    returncode: int | None

    def wait(self, timeout: float | None = None) -> int:
        """Wait for the process to exit and return its exit code."""
        ...

    def kill(self) -> None:
        """Forcibly terminate the process."""
        ...


class ProcessLauncher(Protocol):
    """Callable that starts a child process, like `subprocess.Popen`."""

    def __call__(self, args: list[str], **kwargs: Any) -> ChildProcess:
        """Start `args` as a child process."""
        ...
