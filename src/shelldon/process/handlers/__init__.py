"""Directory handlers - overrides for working directories that are not local.

A handler claims a working directory (for example "/ssh:host:/srv") and runs
commands there itself, synchronously, instead of the supervisor starting a
local process.

PUBLIC API:
  - DirectoryHandler: Base abstract class for all directory handlers
  - get_handler: Get the handler claiming a directory, if any
  - register_handler: Add a handler ahead of the built-in ones
  - unregister_handler: Remove a previously registered handler
"""

import logging
from abc import ABC, abstractmethod

from ...sink import Sink
from ..handle import ProcessHandle

logger = logging.getLogger(__name__)


class DirectoryHandler(ABC):
    """Base abstract class for all directory handlers.

    Override can_handle() to claim directories and run() to execute a command
    in them. run() must either return a finished ProcessHandle or raise;
    whatever it raises reaches the caller unchanged.
    """

    @abstractmethod
    def can_handle(self, directory: str) -> bool:
        """Check if this handler owns this directory.

        Args:
            directory: Working directory as the user entered it.

        Returns:
            True if commands in this directory must go through this handler.
        """
        pass

    @abstractmethod
    def run(self, command: str, directory: str, sink: Sink, environment: dict[str, str]) -> ProcessHandle:
        """Run command in directory and return its finished handle.

        Args:
            command: Command text, verbatim.
            directory: Working directory claimed by can_handle().
            sink: Sink that receives the command's output.
            environment: Environment the supervisor would have used.

        Returns:
            Finished ProcessHandle for the command.

        Raises:
            RemoteDelegationError: If the command could not be run.
        """
        pass

    def is_directory(self, directory: str) -> bool:
        """Whether a directory change to this directory should be accepted.

        Default accepts every claimed directory without checking.
        """
        return True


_handlers: list[DirectoryHandler] = []
_builtins_loaded = False


def _ensure_builtins() -> None:
    global _builtins_loaded

    if not _builtins_loaded:
        from .ssh import _SSHHandler

        _handlers.append(_SSHHandler())
        _builtins_loaded = True


def get_handler(directory: str) -> DirectoryHandler | None:
    """Get the handler that claims directory.

    Searches registered handlers in priority order, newest registration first,
    built-in handlers last.

    Args:
        directory: Working directory to check.

    Returns:
        The claiming handler, or None for ordinary local directories.
    """
    _ensure_builtins()

    for handler in _handlers:
        if handler.can_handle(directory):
            logger.debug(f"{type(handler).__name__} handles {directory}")
            return handler
    return None


def register_handler(handler: DirectoryHandler) -> None:
    """Register handler ahead of all existing ones."""
    _ensure_builtins()
    _handlers.insert(0, handler)


def unregister_handler(handler: DirectoryHandler) -> None:
    if handler in _handlers:
        _handlers.remove(handler)


__all__ = [
    "DirectoryHandler",
    "get_handler",
    "register_handler",
    "unregister_handler",
]
