"""Package manager invocation for a single tool update."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping

from tool_updater import environment
from tool_updater.cancellation import CancellationToken
from tool_updater.protocols import ChildProcess, ProcessLauncher
from tool_updater.types import InstallContext, UpdateResult

logger = logging.getLogger(__name__)

# https://learn.microsoft.com/dotnet/core/tools/dotnet-environment-variables
CHILD_ENVIRONMENT = {
    "DOTNET_CLI_TELEMETRY_OPTOUT": "1",
    "DOTNET_CLI_UI_LANGUAGE": "en-US",
    "DOTNET_MULTILEVEL_LOOKUP": "0",
    "DOTNET_NOLOGO": "1",
}

# Errors raised by Popen when the child cannot be started
SPAWN_ERRORS = (OSError, ValueError, subprocess.SubprocessError)


class UpdateInvoker:
    """Runs `<package manager> tool update` for an install context.

    Every failure after validation (spawn errors, kill errors, non-zero
    exit codes, cancellation) is reported as an unsuccessful result.
    """

    def __init__(
        self,
        package_manager: str | None = None,
        environment_overrides: Mapping[str, str] | None = None,
        launcher: ProcessLauncher | None = None,
    ) -> None:
        """Initialize the invoker.

        Args:
            package_manager: Executable to run. Defaults to DOTNET_HOST_PATH
                or "dotnet".
            environment_overrides: Extra variables for the child process.
            launcher: Process factory. Defaults to subprocess.Popen.
        """
        self.package_manager = package_manager or environment.package_manager_executable()
        self.environment_overrides = dict(environment_overrides or {})
        self._launch: ProcessLauncher = launcher or subprocess.Popen

    def build_command(self, context: InstallContext, extra_source: str | None = None) -> list[str]:
        """Compose the update command line.

        Args:
            context: Install context of the tool to update.
            extra_source: Additional package source, if any.

        Returns:
            Argument list starting with the package manager executable.
        """
        command = [self.package_manager, "tool", "update", context.package_name]
        if not context.is_local_tool:
            if context.tool_path:
                command.extend(["--tool-path", context.tool_path])
            else:
                command.append("--global")
        if extra_source:
            command.extend(["--add-source", extra_source])
        return command

    def build_environment(self) -> dict[str, str]:
        """Get the environment for the child process.

        The parent's environment is copied and never modified.
        """
        env = dict(os.environ)
        env.update(CHILD_ENVIRONMENT)
        env.update(self.environment_overrides)
        return env

    def invoke(
        self,
        context: InstallContext,
        extra_source: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> UpdateResult:
        """Run the update and wait for it to finish.

        Blocks the calling thread until the child exits, so run it on a
        worker thread.

        Args:
            context: Install context of the tool to update.
            extra_source: Additional package source, if any.
            cancel: Token that kills the child process when cancelled.

        Returns:
            UpdateResult; successful only when the child exits with code 0.
            Errors while waiting on the child are reported as unsuccessful.
        """
        failed = UpdateResult(is_successful=False, current_version=context.package_version)
        cancel = cancel or CancellationToken.none()
        if cancel.is_cancelled:
            logger.debug("Update of %s cancelled before start", context.package_name)
            return failed

        command = self.build_command(context, extra_source)
        logger.debug("Running %s", " ".join(command))
        try:
            process = self._launch(
                command,
                env=self.build_environment(),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except SPAWN_ERRORS as e:
            logger.warning("Could not start %s: %s", command[0], e)
            return failed

        try:
            with cancel.register(lambda: self._kill(process)):
                exit_code = process.wait()
        except Exception as e:
            logger.warning("Lost track of update process for %s: %s", context.package_name, e)
            self._kill(process)
            return failed

        if exit_code != 0:
            if cancel.is_cancelled:
                logger.debug("Update of %s cancelled", context.package_name)
            else:
                logger.warning(
                    "Update of %s failed with exit code %s", context.package_name, exit_code
                )
            return failed

        logger.debug("Updated %s", context.package_name)
        return UpdateResult(is_successful=True, current_version=context.package_version)

    def _kill(self, process: ChildProcess) -> None:
        """Terminate the child. Best effort; an exited process is left alone."""
        if process.returncode is not None:
            return
        try:
            process.kill()
        except OSError as e:
            logger.debug("Failed to kill update process: %s", e)
