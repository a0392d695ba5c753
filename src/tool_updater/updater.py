"""Background updates for the running tool or an explicit package."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future

from tool_updater import environment
from tool_updater.cancellation import CancellationToken
from tool_updater.detection import ContextDetector
from tool_updater.invoker import UpdateInvoker
from tool_updater.protocols import ContextDetection, UpdateInvocation
from tool_updater.settings import UpdaterSettings
from tool_updater.types import InstallContext, UpdateResult

logger = logging.getLogger(__name__)


class Updater:
    """Starts each tool update on its own worker thread and hands back a Future.

    Follows Separate Use from Creation: the constructor takes every
    dependency. Use `create()` or `create_default()` in production code.
    """

    def __init__(
        self,
        detector: ContextDetection,
        invoker: UpdateInvocation,
        settings: UpdaterSettings,
    ) -> None:
        """Initialize the updater with required dependencies.

        Args:
            detector: Install context detector.
            invoker: Package manager invoker.
            settings: Updater settings.
        """
        self.detector = detector
        self.invoker = invoker
        self.settings = settings
        self._lock = threading.Lock()
        self._workers: set[threading.Thread] = set()
        self._closed = False

    @classmethod
    def create(cls, settings: UpdaterSettings) -> Updater:
        """Create an updater wired from settings.

        Args:
            settings: Updater settings.

        Returns:
            Configured Updater instance.
        """
        detector = ContextDetector(
            default_tool_path=environment.canonical_path(settings.resolve_default_tool_path()),
            case_insensitive=settings.resolve_case_insensitive(),
        )
        invoker = UpdateInvoker(
            package_manager=settings.resolve_package_manager(),
            environment_overrides=settings.child_environment,
        )
        return cls(detector=detector, invoker=invoker, settings=settings)

    @classmethod
    def create_default(cls) -> Updater:
        """Create an updater from the default configuration file."""
        return cls.create(UpdaterSettings.load())

    def __enter__(self) -> Updater:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    @property
    def running(self) -> int:
        """Number of updates still in progress."""
        with self._lock:
            return len(self._workers)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting updates; optionally wait for running ones."""
        with self._lock:
            self._closed = True
            workers = list(self._workers)
        if wait:
            for worker in workers:
                worker.join()

    def detect_current(self) -> InstallContext:
        """Detect the install context of the running tool.

        Both paths are canonicalized the same way, so a symlinked home
        directory or package cache still matches.

        Raises:
            ContextDetectionError: If the install layout is not recognized.
        """
        return self.detector.detect(
            environment.current_executable_path(),
            environment.canonical_path(self.settings.resolve_global_package_cache()),
        )

    def update_current(
        self,
        extra_source: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> Future[UpdateResult]:
        """Update the currently running tool.

        Args:
            extra_source: Additional package source to use.
            cancel: Token to cancel the update.

        Returns:
            Future resolving to the UpdateResult.

        Raises:
            ContextDetectionError: If the install layout is not recognized.
        """
        context = self.detect_current()
        cancel = cancel or CancellationToken.none()
        if cancel.is_cancelled:
            done: Future[UpdateResult] = Future()
            done.set_result(
                UpdateResult(is_successful=False, current_version=context.package_version)
            )
            return done
        return self._submit(context, extra_source, cancel)

    def update_global(
        self,
        package_name: str,
        tool_path: str | None = None,
        extra_source: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> Future[UpdateResult]:
        """Update a global tool.

        Args:
            package_name: Package that contains the tool.
            tool_path: Custom install root, or None for the default location.
            extra_source: Additional package source to use.
            cancel: Token to cancel the update.

        Returns:
            Future resolving to the UpdateResult.

        Raises:
            ValueError: If package_name is empty.
            UpdateCancelledError: If `cancel` is already cancelled.
        """
        _require_package_name(package_name)
        return self.update(InstallContext.global_tool(package_name, tool_path), extra_source, cancel)

    def update_local(
        self,
        package_name: str,
        extra_source: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> Future[UpdateResult]:
        """Update a local tool.

        Raises:
            ValueError: If package_name is empty.
            UpdateCancelledError: If `cancel` is already cancelled.
        """
        _require_package_name(package_name)
        return self.update(InstallContext.local(package_name), extra_source, cancel)

    def update(
        self,
        context: InstallContext,
        extra_source: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> Future[UpdateResult]:
        """Update a tool whose install context is already known.

        Args:
            context: Install context of the tool.
            extra_source: Additional package source to use.
            cancel: Token to cancel the update.

        Returns:
            Future resolving to the UpdateResult.

        Raises:
            UpdateCancelledError: If `cancel` is already cancelled.
        """
        cancel = cancel or CancellationToken.none()
        cancel.raise_if_cancelled()
        return self._submit(context, extra_source, cancel)

    def _submit(
        self,
        context: InstallContext,
        extra_source: str | None,
        cancel: CancellationToken,
    ) -> Future[UpdateResult]:
        """Start a dedicated worker so no update ever queues behind another."""
        future: Future[UpdateResult] = Future()
        worker = threading.Thread(
            target=self._work,
            args=(future, context, extra_source, cancel),
            name=f"tool-updater-{context.package_name}",
        )
        with self._lock:
            if self._closed:
                raise RuntimeError("cannot schedule new updates after shutdown")
            self._workers.add(worker)

        logger.debug("Scheduling update of %s", context.package_name)
        future.set_running_or_notify_cancel()
        worker.start()
        return future

    def _work(
        self,
        future: Future[UpdateResult],
        context: InstallContext,
        extra_source: str | None,
        cancel: CancellationToken,
    ) -> None:
        try:
            future.set_result(self._run(context, extra_source, cancel))
        finally:
            with self._lock:
                self._workers.discard(threading.current_thread())

    def _run(
        self,
        context: InstallContext,
        extra_source: str | None,
        cancel: CancellationToken,
    ) -> UpdateResult:
        try:
            return self.invoker.invoke(context, extra_source, cancel)
        except Exception:
            logger.exception("Update of %s failed unexpectedly", context.package_name)
            return UpdateResult(is_successful=False, current_version=context.package_version)


def _require_package_name(package_name: str) -> None:
    if not package_name or not package_name.strip():
        raise ValueError("package_name cannot be empty")
