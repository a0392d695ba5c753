"""Console output for the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from tool_updater.settings import UpdaterSettings
    from tool_updater.types import InstallContext, UpdateResult


class ConsoleOutput:
    """Formats updater information with rich."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def show_context(self, context: InstallContext, executable: str | None = None) -> None:
        """Display an install context table.

        Args:
            context: Detected or explicit install context.
            executable: Path the context was detected from, if any.
        """
        table = Table(title="Install Context")
        table.add_column("Property", style="cyan")
        table.add_column("Value")

        if executable:
            table.add_row("Executable", executable)
        table.add_row("Package", context.package_name)
        table.add_row("Version", context.package_version or "unknown")
        table.add_row("Scope", context.scope)
        table.add_row("Tool path", context.tool_path or "default")

        self.console.print(table)

    def show_result(self, package_name: str, result: UpdateResult) -> None:
        """Display the outcome of an update."""
        version = f" (was {result.current_version})" if result.current_version else ""
        if result.is_successful:
            self.show_success(f"Updated {package_name}{version}")
        else:
            self.show_error(f"Failed to update {package_name}{version}")

    def show_settings(self, settings: UpdaterSettings, config_path: str) -> None:
        """Display effective configuration."""
        self.console.print("\n[bold]Configuration[/bold]")
        self.console.print(f"  Config file: {config_path}")
        self.console.print(f"  Package manager: {settings.resolve_package_manager()}")
        self.console.print(f"  Global package cache: {settings.resolve_global_package_cache()}")
        self.console.print(f"  Default tool path: {settings.resolve_default_tool_path()}")
        self.console.print(f"  Case-insensitive paths: {settings.resolve_case_insensitive()}")
        for key, value in sorted(settings.child_environment.items()):
            self.console.print(f"  Child env {key}={value}")

    def show_success(self, message: str) -> None:
        """Show success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def show_error(self, message: str) -> None:
        """Show error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def show_warning(self, message: str) -> None:
        """Show warning message."""
        self.console.print(f"[yellow]![/yellow] {message}")

    def show_info(self, message: str) -> None:
        """Show info message."""
        self.console.print(f"[blue]i[/blue] {message}")
