"""Asynchronous shell command runner with navigable output history.

Every command runs as its own background process and writes into its own
sink. Sinks are recorded in a history index under "<sequence>:<command>"
labels, and the working directory can change mid-session without touching
commands that are still running.

PUBLIC API:
  - SessionContext: Shared state for one session
  - SessionLoop: Read-dispatch loop
  - create_session: Build a session loop from configuration
  - ConfigManager: shelldon.toml configuration
"""

__version__ = "0.1.0"

from .app import create_session  # noqa: E402
from .config import ConfigManager  # noqa: E402
from .session import SessionContext, SessionLoop  # noqa: E402

__all__ = ["SessionContext", "SessionLoop", "create_session", "ConfigManager"]
