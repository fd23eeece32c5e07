"""Reveal policy - when a command's sink becomes visible.

PUBLIC API:
  - RevealPolicy: Attaches immediate or deferred reveal to process handles
"""

import logging
import threading
from collections.abc import Callable

from .process import ProcessHandle
from .sink import Sink, SinkRegistry
from .types import RevealMode

__all__ = ["RevealPolicy"]

logger = logging.getLogger(__name__)


class _OneShot:
    """Fires its callback at most once, even under concurrent triggers."""

    def __init__(self, callback: Callable[[], None]):
        self._callback = callback
        self._lock = threading.Lock()
        self.fired = False

    def __call__(self) -> bool:
        with self._lock:
            if self.fired:
                return False
            self.fired = True
        self._callback()
        return True


class RevealPolicy:
    """Reveals sinks immediately at spawn or on first output.

    Deferred mode never reveals a command that exits without output; its sink
    stays reachable through the history index only.

    Args:
        mode: "immediate" or "deferred".
        registry: Registry that owns sink visibility.
        show: Host callback that displays a revealed sink.
    """

    def __init__(self, mode: RevealMode, registry: SinkRegistry, show: Callable[[Sink], None] | None = None):
        self.mode = mode
        self.registry = registry
        self.show = show

    def attach(self, handle: ProcessHandle) -> None:
        """Arm the reveal for a freshly spawned command."""
        reveal = _OneShot(lambda: self._reveal(handle.sink))

        if self.mode == "immediate" or handle.first_output_seen:
            reveal()
            return

        self.registry.hide(handle.sink)
        if handle.done:
            return

        def on_output(handle: ProcessHandle, text: str) -> None:
            handle.remove_output_listener(on_output)
            reveal()

        handle.add_output_listener(on_output)

    def _reveal(self, sink: Sink) -> None:
        logger.debug(f"Revealing {sink.name} ({self.mode})")
        self.registry.reveal(sink)
        if self.show is not None:
            self.show(sink)
