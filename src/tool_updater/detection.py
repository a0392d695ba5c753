"""Install context detection from the running tool's path.

Two layouts are recognized:

- local tools run straight out of the global package cache:
  ``<cache root>/<package>/<version>/tools/...``
- global tools run out of the ``.store`` folder of an install root:
  ``<tool path>/.store/<package>/<version>/<package>/<version>/tools/...``

Paths are compared as sequences of segments rather than strings, so trailing
separators and repeated separators never affect the result.
"""

from __future__ import annotations

import logging
import os
from pathlib import PurePath, PurePosixPath, PureWindowsPath

from tool_updater import environment
from tool_updater.types import InstallContext

logger = logging.getLogger(__name__)

STORE_DIR = ".store"

# Segments that must follow the package root: package name, version, and
# at least one entry below the version directory.
_MIN_TRAILING_SEGMENTS = 3


class ContextDetectionError(Exception):
    """The running tool's path matches no known install layout."""

    pass


class ContextDetector:
    """Classifies a tool install as local or global from its path."""

    def __init__(
        self,
        default_tool_path: str | os.PathLike[str] | None = None,
        case_insensitive: bool | None = None,
        windows_paths: bool | None = None,
    ) -> None:
        """Initialize the detector.

        Args:
            default_tool_path: Default install root for global tools.
                Defaults to ~/.dotnet/tools.
            case_insensitive: Compare segments ignoring case. Defaults to the
                host platform's filesystem behavior.
            windows_paths: Parse paths with Windows rules. Defaults to the
                host platform.
        """
        if windows_paths is None:
            windows_paths = environment.is_windows()
        if case_insensitive is None:
            case_insensitive = environment.is_case_insensitive_platform()
        if default_tool_path is None:
            default_tool_path = environment.default_global_tool_path()

        self._flavor: type[PurePath] = PureWindowsPath if windows_paths else PurePosixPath
        self.case_insensitive = case_insensitive
        self.default_tool_path = str(default_tool_path)

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

        Raises:
            ContextDetectionError: If the path matches neither layout.
        """
        exe_text = os.fspath(executable_path)
        root_text = os.fspath(global_package_cache_root)
        if not exe_text:
            raise ContextDetectionError("Executable path is empty")
        if not root_text:
            raise ContextDetectionError("Global package cache root is empty")

        segments = self._split(exe_text)

        context = self._match_local(segments, self._split(root_text))
        if context is None:
            context = self._match_global(segments)
        if context is None:
            raise ContextDetectionError(
                f"Could not determine how the tool at '{exe_text}' was installed"
            )

        logger.debug(
            "Detected %s tool %s %s", context.scope, context.package_name, context.package_version
        )
        return context

    def _split(self, path: str) -> tuple[str, ...]:
        return self._flavor(path).parts

    def _key(self, segment: str) -> str:
        return segment.casefold() if self.case_insensitive else segment

    def _same(self, left: tuple[str, ...], right: tuple[str, ...]) -> bool:
        if len(left) != len(right):
            return False
        return all(self._key(a) == self._key(b) for a, b in zip(left, right))

    def _match_local(
        self, segments: tuple[str, ...], root: tuple[str, ...]
    ) -> InstallContext | None:
        """Match ``<root>/<name>/<version>/...``."""
        if not root or len(segments) < len(root) + _MIN_TRAILING_SEGMENTS:
            return None
        if not self._same(segments[: len(root)], root):
            return None

        name, version = segments[len(root)], segments[len(root) + 1]
        return InstallContext.local(name, version)

    def _match_global(self, segments: tuple[str, ...]) -> InstallContext | None:
        """Match ``<tool path>/.store/<name>/<version>/...``.

        The last qualifying ``.store`` segment wins.
        """
        store_key = self._key(STORE_DIR)
        for index in range(len(segments) - _MIN_TRAILING_SEGMENTS - 1, 0, -1):
            if self._key(segments[index]) != store_key:
                continue
            prefix = segments[:index]
            name, version = segments[index + 1], segments[index + 2]
            return InstallContext.global_tool(name, self._custom_tool_path(prefix), version)
        return None

    def _custom_tool_path(self, prefix: tuple[str, ...]) -> str | None:
        """Return the install root, or None if it is the default location."""
        if self._same(prefix, self._split(self.default_tool_path)):
            return None
        return str(self._flavor(*prefix))
