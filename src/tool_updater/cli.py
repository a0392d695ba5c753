"""CLI commands using Typer."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from tool_updater import __version__
from tool_updater.cancellation import CancellationToken, UpdateCancelledError
from tool_updater.console import ConsoleOutput
from tool_updater.context import create_context
from tool_updater.detection import ContextDetectionError
from tool_updater.environment import canonical_path, current_executable_path
from tool_updater.settings import SettingsError

if TYPE_CHECKING:
    from tool_updater.context import AppContext
    from tool_updater.types import UpdateResult

app = typer.Typer(
    name="dotnet-tool-updater",
    help="Background self-update for .NET tools",
    no_args_is_help=True,
)

config_app = typer.Typer(help="Configuration commands")
app.add_typer(config_app, name="config")

console = Console()
output = ConsoleOutput(console)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"dotnet-tool-updater v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show diagnostic logging")
    ] = False,
) -> None:
    """Background self-update for .NET tools."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _load_context(context: AppContext | None) -> AppContext:
    """Return the injected context or build the production one."""
    if context is not None:
        return context
    try:
        return create_context()
    except SettingsError as e:
        output.show_error(str(e))
        raise typer.Exit(1) from e


# ============================================================================
# Detection
# ============================================================================


@app.command()
def detect(
    executable: Annotated[
        str | None, typer.Argument(help="Tool executable path (running tool if omitted)")
    ] = None,
    cache: Annotated[
        str | None, typer.Option("--cache", "-c", help="Global package cache root")
    ] = None,
    _context=None,
) -> None:
    """Show how a tool was installed."""
    ctx = _load_context(_context)
    root = cache or ctx.settings.resolve_global_package_cache()
    if executable:
        exe = executable
    else:
        # The running tool's path is canonical, so the cache root must be too
        exe = str(current_executable_path())
        root = str(canonical_path(root))

    try:
        install_context = ctx.detector.detect(exe, root)
    except ContextDetectionError as e:
        output.show_error(str(e))
        raise typer.Exit(1) from e

    output.show_context(install_context, exe)


# ============================================================================
# Update
# ============================================================================


def _start_update(
    ctx: AppContext,
    package: str | None,
    local: bool,
    tool_path: str | None,
    add_source: str | None,
    cancel: CancellationToken,
) -> Future[UpdateResult]:
    """Schedule the update matching the command-line options."""
    if package is None:
        return ctx.updater.update_current(extra_source=add_source, cancel=cancel)
    if local:
        return ctx.updater.update_local(package, extra_source=add_source, cancel=cancel)
    return ctx.updater.update_global(
        package, tool_path=tool_path, extra_source=add_source, cancel=cancel
    )


def _wait_for(future: Future[UpdateResult], cancel: CancellationToken) -> UpdateResult:
    """Wait for an update; Ctrl+C cancels it and waits for the child to exit."""
    try:
        return future.result()
    except KeyboardInterrupt:
        output.show_warning("Cancelling update...")
        cancel.cancel()
        return future.result()


@app.command()
def update(
    package: Annotated[
        str | None, typer.Argument(help="Package to update (running tool if omitted)")
    ] = None,
    local: Annotated[
        bool, typer.Option("--local", "-l", help="Update a local tool instead of a global one")
    ] = False,
    tool_path: Annotated[
        str | None, typer.Option("--tool-path", "-t", help="Custom install root of a global tool")
    ] = None,
    add_source: Annotated[
        str | None, typer.Option("--add-source", "-s", help="Additional package source")
    ] = None,
    _context=None,
) -> None:
    """Update a .NET tool with the package manager."""
    ctx = _load_context(_context)
    if local and tool_path:
        output.show_error("--tool-path cannot be used with --local")
        raise typer.Exit(1)

    cancel = CancellationToken()
    try:
        future = _start_update(ctx, package, local, tool_path, add_source, cancel)
    except (ContextDetectionError, ValueError, UpdateCancelledError) as e:
        output.show_error(str(e))
        raise typer.Exit(1) from e

    try:
        with console.status("Updating..."):
            result = _wait_for(future, cancel)
    finally:
        ctx.updater.shutdown()

    output.show_result(package or "current tool", result)
    if not result.is_successful:
        raise typer.Exit(1)


# ============================================================================
# Config Commands
# ============================================================================


@config_app.command("show")
def config_show(
    _context=None,
) -> None:
    """Show current configuration."""
    ctx = _load_context(_context)
    output.show_settings(ctx.settings, str(ctx.config_path))


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Configuration key")],
    value: Annotated[str, typer.Argument(help="Configuration value (empty to reset)")],
    _context=None,
) -> None:
    """Set a configuration value."""
    ctx = _load_context(_context)
    try:
        settings = ctx.settings.with_value(key, value)
    except SettingsError as e:
        output.show_error(str(e))
        raise typer.Exit(1) from e

    settings.save(ctx.config_path)
    output.show_success(f"Set {key} to {value}")


if __name__ == "__main__":
    app()
