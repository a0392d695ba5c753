"""Platform facts used to locate tools and the package manager.

Every function reads the environment at call time so tests can patch
`os.environ`, `sys.platform` and `Path.home()`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

# https://learn.microsoft.com/dotnet/core/tools/dotnet-environment-variables
PACKAGE_MANAGER = "dotnet"
HOST_PATH_VAR = "DOTNET_HOST_PATH"
CLI_HOME_VAR = "DOTNET_CLI_HOME"
PACKAGES_VAR = "NUGET_PACKAGES"

CASE_INSENSITIVE_PLATFORMS = ("win32", "cygwin", "darwin")


def is_windows() -> bool:
    """Check whether paths use the Windows flavor."""
    return sys.platform in ("win32", "cygwin")


def is_case_insensitive_platform() -> bool:
    """Check whether the host filesystem is case-insensitive by default.

    Returns:
        True on Windows and macOS.
    """
    return sys.platform in CASE_INSENSITIVE_PLATFORMS


def _cli_home() -> Path:
    value = os.environ.get(CLI_HOME_VAR)
    return Path(value) if value else Path.home()


def default_global_tool_path() -> Path:
    """Get the directory global tools are installed to by default.

    Returns:
        Path to ~/.dotnet/tools, rooted at DOTNET_CLI_HOME when set.
    """
    return _cli_home() / ".dotnet" / "tools"


def global_package_cache_root() -> Path:
    """Get the root of the global package cache.

    Returns:
        NUGET_PACKAGES when set, otherwise ~/.nuget/packages.
    """
    value = os.environ.get(PACKAGES_VAR)
    if value:
        return Path(value)
    return Path.home() / ".nuget" / "packages"


def package_manager_executable() -> str:
    """Get the package manager executable.

    The host sets DOTNET_HOST_PATH for processes it launches; prefer it so the
    same installation performs the update.
    """
    value = os.environ.get(HOST_PATH_VAR)
    return value or PACKAGE_MANAGER


def canonical_path(path: str | os.PathLike[str]) -> Path:
    """Get an absolute path with symlinks resolved.

    Used for every path that takes part in install detection, so they all
    share one canonical form.
    """
    return Path(path).expanduser().resolve()


def current_executable_path() -> Path:
    """Get the absolute path of the running tool's entry point."""
    if getattr(sys, "frozen", False):
        return canonical_path(sys.executable)
    entry = sys.argv[0] if sys.argv and sys.argv[0] else sys.executable
    return canonical_path(entry)
