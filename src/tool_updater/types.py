"""Shared data types for the tool updater."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["InstallContext", "UpdateResult"]


@dataclass(frozen=True)
class InstallContext:
    """How a tool package is installed.

    Attributes:
        is_local_tool: True for a tool restored from the package cache via a
            project manifest, False for a global tool.
        tool_path: Custom install root of a global tool. None means the
            default global location (and is always None for local tools).
        package_name: Package ID that contains the tool.
        package_version: Installed version, if known.
    """

    is_local_tool: bool
    package_name: str
    tool_path: str | None = None
    package_version: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.package_name:
            raise ValueError("package_name cannot be empty")
        if self.is_local_tool and self.tool_path is not None:
            raise ValueError("tool_path is only valid for global tools")

    @classmethod
    def local(cls, package_name: str, version: str | None = None) -> InstallContext:
        """Create a context for a local tool."""
        return cls(is_local_tool=True, package_name=package_name, package_version=version)

    @classmethod
    def global_tool(
        cls,
        package_name: str,
        tool_path: str | None = None,
        version: str | None = None,
    ) -> InstallContext:
        """Create a context for a global tool.

        Args:
            package_name: Package ID that contains the tool.
            tool_path: Custom install root, or None for the default location.
            version: Installed version, if known.
        """
        return cls(
            is_local_tool=False,
            package_name=package_name,
            tool_path=tool_path or None,
            package_version=version,
        )

    @property
    def scope(self) -> str:
        """Human-readable install scope."""
        if self.is_local_tool:
            return "local"
        return "global (custom path)" if self.tool_path else "global"


@dataclass(frozen=True)
class UpdateResult:
    """Result of an update attempt.

    Attributes:
        is_successful: True if the package manager exited with code 0.
        current_version: Version known before the update was attempted.
    """

    is_successful: bool
    current_version: str | None = None
