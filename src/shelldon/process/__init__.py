"""Process module - one external process per command.

PUBLIC API:
  - ProcessHandle: A dispatched command and its output routing
  - ProcessSupervisor: Spawns commands and streams output into sinks
  - build_environment: Environment passed to spawned commands
  - DirectoryHandler: Override for non-local working directories
  - get_handler: Find the handler claiming a directory
  - register_handler: Register a directory handler
  - unregister_handler: Remove a directory handler
"""

from .handle import ProcessHandle
from .handlers import DirectoryHandler, get_handler, register_handler, unregister_handler
from .supervisor import ProcessSupervisor, build_environment

__all__ = [
    "ProcessHandle",
    "ProcessSupervisor",
    "build_environment",
    "DirectoryHandler",
    "get_handler",
    "register_handler",
    "unregister_handler",
]
