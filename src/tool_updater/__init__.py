"""Background self-update for .NET tools."""

__version__ = "0.1.0"

from tool_updater.cancellation import CancellationToken, UpdateCancelledError
from tool_updater.detection import ContextDetectionError, ContextDetector
from tool_updater.invoker import UpdateInvoker
from tool_updater.types import InstallContext, UpdateResult
from tool_updater.updater import Updater

__all__ = [
    "__version__",
    "CancellationToken",
    "ContextDetectionError",
    "ContextDetector",
    "InstallContext",
    "UpdateCancelledError",
    "UpdateInvoker",
    "UpdateResult",
    "Updater",
]
