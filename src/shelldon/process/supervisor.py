"""Asynchronous command execution.

PUBLIC API:
  - ProcessSupervisor: Spawns commands and streams their output into sinks
  - build_environment: Environment for spawned commands
"""

import asyncio
import codecs
import logging
import os
import signal
import subprocess
from typing import Optional, TYPE_CHECKING

from ..errors import SpawnError
from ..sink import Sink
from .handle import ProcessHandle
from .handlers import get_handler

if TYPE_CHECKING:
    from ..config import ConfigManager

__all__ = ["ProcessSupervisor", "build_environment"]

logger = logging.getLogger(__name__)

CHUNK_SIZE = 4096

# Seconds a signalled command gets to exit before escalating
TERMINATE_GRACE = 2.0


def build_environment(term: str, terminfo: str, base: Optional[dict[str, str]] = None) -> dict[str, str]:
    """Inherit the caller's environment and add shelldon's terminal variables.

    Args:
        term: TERM value.
        terminfo: TERMINFO value.
        base: Environment to inherit. Defaults to os.environ.

    Returns:
        New environment dict.
    """
    from .. import __version__

    env = dict(os.environ if base is None else base)
    env["TERM"] = term
    env["TERMINFO"] = terminfo
    env["SHELLDON"] = f"{__version__},shelldon"
    return env


class ProcessSupervisor:
    """Starts one process per command and pumps its output into a sink.

    Never waits for a process to finish: spawn() returns as soon as the process
    exists and a background task streams its output.

    Args:
        shell: Shell that interprets commands (`<shell> -c <command>`).
        environment: Environment for every spawned command.
    """

    def __init__(self, shell: str, environment: dict[str, str]):
        self.shell = shell
        self.environment = environment
        self.running: dict[int, ProcessHandle] = {}
        self._tasks: set[asyncio.Task] = set()

    @classmethod
    def from_config(cls, config: "ConfigManager") -> "ProcessSupervisor":
        return cls(config.shell, build_environment(config.term, config.terminfo))

    async def spawn(self, command_text: str, working_directory: str, sink: Sink) -> Optional[ProcessHandle]:
        """Run command_text in working_directory, streaming into sink.

        Args:
            command_text: Command as submitted; interpreted by the shell.
            working_directory: Directory the command runs in.
            sink: Freshly allocated sink for this command.

        Returns:
            ProcessHandle, already finished when a directory handler ran the
            command or the spawn failed. None for an empty command.

        Raises:
            RemoteDelegationError: Propagated unchanged from a directory handler,
                after resetting the sink.
        """
        if not command_text.strip():
            return None

        handler = get_handler(working_directory)
        if handler is not None:
            try:
                return handler.run(command_text, working_directory, sink, self.environment)
            except Exception:
                sink.reset()
                raise

        handle = ProcessHandle(command=command_text, sink=sink, working_directory=working_directory)
        try:
            process = await asyncio.create_subprocess_exec(
                self.shell,
                "-c",
                command_text,
                cwd=working_directory,
                env=self.environment,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                start_new_session=True,
            )
        except OSError as e:
            handle.fail(SpawnError.from_os_error(e))
            return handle

        handle.pid = process.pid
        handle._process = process
        self.running[process.pid] = handle
        logger.info(f"Spawned pid {process.pid} in {working_directory}: {command_text}")

        task = asyncio.create_task(self._pump(handle, process))
        self._tasks.add(task)
        task.add_done_callback(self._pump_done)
        return handle

    async def _pump(self, handle: ProcessHandle, process: asyncio.subprocess.Process) -> None:
        """Stream output until EOF, then record the exit status."""
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        try:
            while chunk := await process.stdout.read(CHUNK_SIZE):
                handle.deliver(decoder.decode(chunk))
            handle.deliver(decoder.decode(b"", final=True))
        finally:
            exit_status = await process.wait()
            self.running.pop(process.pid, None)
            handle.finish(exit_status)

    def _pump_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Output pump failed: {task.exception()!r}")

    async def wait_all(self) -> None:
        """Wait for every running command to finish."""
        handles = list(self.running.values())
        if handles:
            await asyncio.gather(*(handle.wait() for handle in handles))

    async def terminate_all(self, grace: float = TERMINATE_GRACE) -> None:
        """Stop every running command at end of session.

        Each command leads its own session, so its whole process group is
        signalled: SIGTERM first, SIGKILL for groups still running after the
        grace period. Output pumps still blocked after that (a child that left
        the group keeps the pipe open) are cancelled.

        Args:
            grace: Seconds to wait after each signal.
        """
        for sig in (signal.SIGTERM, signal.SIGKILL):
            if not self.running:
                return
            self._signal_all(sig)
            try:
                await asyncio.wait_for(self.wait_all(), grace)
                return
            except TimeoutError:
                logger.warning(f"{len(self.running)} command(s) still running after {sig.name}")

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _signal_all(self, sig: signal.Signals) -> None:
        for handle in list(self.running.values()):
            try:
                os.killpg(handle.pid, sig)
                logger.info(f"Sent {sig.name} to pid {handle.pid}: {handle.command}")
            except ProcessLookupError:
                pass
