"""Process handles - the short-lived half of a command.

PUBLIC API:
  - ProcessHandle: Tracks one running command and routes its output to a sink
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Optional, TypeAlias

from ..errors import diagnostic
from ..sink import Sink
from ..types import ProcessStatus

__all__ = ["ProcessHandle"]

logger = logging.getLogger(__name__)

OutputListener: TypeAlias = Callable[["ProcessHandle", str], None]
ExitListener: TypeAlias = Callable[["ProcessHandle"], None]


@dataclass(eq=False)
class ProcessHandle:
    """One dispatched command.

    The sink outlives the handle: once finish() or fail() runs, the sink is
    closed and the supervisor releases the handle.
    """

    command: str
    sink: Sink
    working_directory: str
    pid: Optional[int] = None
    exit_status: Optional[int] = None
    first_output_seen: bool = False
    status: ProcessStatus = "running"
    error: Optional[str] = None

    _process: Any = field(default=None, init=False, repr=False)
    _done: asyncio.Event = field(default_factory=asyncio.Event, init=False, repr=False)
    _output_listeners: list[OutputListener] = field(default_factory=list, init=False, repr=False)
    _exit_listeners: list[ExitListener] = field(default_factory=list, init=False, repr=False)

    @property
    def done(self) -> bool:
        return self.status != "running"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    def add_output_listener(self, listener: OutputListener) -> None:
        self._output_listeners.append(listener)

    def remove_output_listener(self, listener: OutputListener) -> None:
        if listener in self._output_listeners:
            self._output_listeners.remove(listener)

    def add_exit_listener(self, listener: ExitListener) -> None:
        """Call listener when the process finishes, or now if it already has."""
        if self.done:
            listener(self)
        else:
            self._exit_listeners.append(listener)

    def deliver(self, text: str) -> None:
        """Write decoded output to the sink and notify output listeners.

        Args:
            text: Output in the order the process emitted it. Empty text is ignored.
        """
        if not text:
            return
        self.sink.write(text)
        self.first_output_seen = True
        for listener in list(self._output_listeners):
            try:
                listener(self, text)
            except Exception:
                # Output must keep draining or the process blocks on a full pipe
                logger.exception(f"Output listener failed for {self.command}")

    def finish(self, exit_status: Optional[int]) -> None:
        """Record exit status and freeze the sink."""
        self.exit_status = exit_status
        self.status = "exited"
        logger.info(f"Command finished with status {exit_status}: {self.command}")
        self._complete()

    def fail(self, error: BaseException) -> None:
        """Mark the command as never started; the error text becomes sink content."""
        self.error = str(error)
        self.deliver(diagnostic(self.command, error))
        self.status = "failed"
        logger.warning(f"Command failed to start: {self.command}: {error}")
        self._complete()

    async def wait(self) -> Optional[int]:
        """Wait until output is flushed and the process has exited."""
        await self._done.wait()
        return self.exit_status

    def _complete(self) -> None:
        self.sink.close()
        self._done.set()
        self._output_listeners.clear()
        listeners, self._exit_listeners = self._exit_listeners, []
        for listener in listeners:
            try:
                listener(self)
            except Exception:
                logger.exception(f"Exit listener failed for {self.command}")
