"""Updater configuration persisted as JSON."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tool_updater import environment

# Default configuration location
CONFIG_DIR = Path.home() / ".dotnet-tool-updater"
CONFIG_FILE = "config.json"

# Keys accepted by `config set`, mapped to field names
SETTABLE_KEYS = {
    "package-manager": "package_manager",
    "global-package-cache": "global_package_cache",
    "default-tool-path": "default_tool_path",
    "case-insensitive": "case_insensitive",
}


class SettingsError(Exception):
    """Configuration could not be loaded or changed."""

    pass


class UpdaterSettings(BaseModel):
    """User-tunable updater settings.

    Unset fields fall back to the environment at resolution time.
    """

    model_config = ConfigDict(populate_by_name=True)

    version: str = "1.0"
    package_manager: str | None = Field(default=None, alias="packageManager")
    global_package_cache: str | None = Field(default=None, alias="globalPackageCache")
    default_tool_path: str | None = Field(default=None, alias="defaultToolPath")
    case_insensitive: bool | None = Field(default=None, alias="caseInsensitive")
    child_environment: dict[str, str] = Field(default_factory=dict, alias="childEnvironment")

    @classmethod
    def default_path(cls) -> Path:
        """Get the default configuration file path."""
        return CONFIG_DIR / CONFIG_FILE

    @classmethod
    def load(cls, path: Path | None = None) -> UpdaterSettings:
        """Load settings from a JSON file.

        Args:
            path: Configuration file. Defaults to ~/.dotnet-tool-updater/config.json.

        Returns:
            Parsed settings, or defaults if the file doesn't exist.

        Raises:
            SettingsError: If the file is not valid JSON or fails validation.
        """
        path = path or cls.default_path()
        if not path.exists():
            return cls()

        try:
            data = json.loads(path.read_text())
            return cls.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise SettingsError(f"Invalid configuration in {path}: {e}") from e

    def save(self, path: Path | None = None) -> Path:
        """Write settings to a JSON file.

        Args:
            path: Configuration file. Defaults to ~/.dotnet-tool-updater/config.json.

        Returns:
            Path written.
        """
        path = path or self.default_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(by_alias=True, indent=2))
        return path

    def with_value(self, key: str, value: str) -> UpdaterSettings:
        """Return a copy with one setting changed.

        Args:
            key: Dashed key name, e.g. "package-manager".
            value: New value as entered on the command line. An empty string
                clears the setting.

        Raises:
            SettingsError: If the key is unknown or the value is invalid.
        """
        if key not in SETTABLE_KEYS:
            raise SettingsError(
                f"Unknown configuration key: {key}. Supported: {list(SETTABLE_KEYS)}"
            )

        data = self.model_dump()
        data[SETTABLE_KEYS[key]] = value if value != "" else None
        try:
            return UpdaterSettings.model_validate(data)
        except ValidationError as e:
            raise SettingsError(f"Invalid value for {key}: {value}") from e

    def resolve_package_manager(self) -> str:
        """Get the package manager executable to run."""
        return self.package_manager or environment.package_manager_executable()

    def resolve_global_package_cache(self) -> str:
        """Get the global package cache root."""
        if self.global_package_cache:
            return self.global_package_cache
        return str(environment.global_package_cache_root())

    def resolve_default_tool_path(self) -> str:
        """Get the default install root for global tools."""
        if self.default_tool_path:
            return self.default_tool_path
        return str(environment.default_global_tool_path())

    def resolve_case_insensitive(self) -> bool:
        """Whether install paths are compared case-insensitively."""
        if self.case_insensitive is not None:
            return self.case_insensitive
        return environment.is_case_insensitive_platform()
