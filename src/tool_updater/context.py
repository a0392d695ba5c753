"""Application context for dependency injection.

Separates object creation from object use so CLI commands can be tested
with doubles instead of a real package manager.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from tool_updater.protocols import ContextDetection, UpdateInvocation
from tool_updater.settings import UpdaterSettings
from tool_updater.updater import Updater


@dataclass
class AppContext:
    """Container for application dependencies."""

    settings: UpdaterSettings
    config_path: Path
    detector: ContextDetection
    invoker: UpdateInvocation
    updater: Updater


def create_context(config_path: Path | None = None) -> AppContext:
    """Factory for application dependencies.

    Use this in production code. For tests, construct AppContext directly
    with test doubles.

    Args:
        config_path: Override configuration file (for testing).

    Returns:
        Configured AppContext with all dependencies.

    Raises:
        SettingsError: If the configuration file is invalid.
    """
    config_path = config_path or UpdaterSettings.default_path()
    settings = UpdaterSettings.load(config_path)
    updater = Updater.create(settings)

    return AppContext(
        settings=settings,
        config_path=config_path,
        detector=updater.detector,
        invoker=updater.invoker,
        updater=updater,
    )
