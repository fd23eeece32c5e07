"""Session context and the read-dispatch loop.

PUBLIC API:
  - SessionContext: Shared state threaded through one session
  - SessionLoop: Collects submissions and dispatches them
  - LoopState: RUNNING, RESTARTING, FINISHED
  - abbreviate_directory: Shorten a directory for the prompt
"""

import enum
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional

from .errors import DirectoryChangeError, EmptyCommandError, ShelldonError
from .history import CommandRecord, HistoryIndex
from .process import ProcessSupervisor, get_handler
from .reveal import RevealPolicy
from .sink import SinkRegistry
from .types import (
    Collector,
    CommandSubmitted,
    DirectoryChangeRequested,
    Display,
    EndOfSession,
    HistoryRequested,
    Selector,
    make_label,
)

__all__ = ["SessionContext", "SessionLoop", "LoopState", "abbreviate_directory"]

logger = logging.getLogger(__name__)


def abbreviate_directory(directory: str, home: Optional[str] = None) -> str:
    """Replace the home directory prefix with ~."""
    home = home if home is not None else os.path.expanduser("~")
    if home and home != "/":
        if directory == home:
            return "~"
        if directory.startswith(home.rstrip("/") + "/"):
            return "~" + directory[len(home.rstrip("/")) :]
    return directory


@dataclass
class SessionContext:
    """Everything one session shares, created once at session start.

    All mutation happens on the event loop thread, so the registry and history
    need no locking.

    Attributes:
        working_directory: Directory new commands are spawned in.
        listing_directory: Host-visible directory display; always updated
            together with working_directory.
    """

    working_directory: str
    supervisor: ProcessSupervisor
    reveal: RevealPolicy
    registry: SinkRegistry = field(default_factory=SinkRegistry)
    history: HistoryIndex = field(default_factory=HistoryIndex)
    display: Optional[Display] = None
    listing_directory: str = ""

    def __post_init__(self):
        if not self.listing_directory:
            self.listing_directory = self.working_directory

    @property
    def prompt(self) -> str:
        return f"{abbreviate_directory(self.working_directory)} $ "

    async def dispatch(self, raw_text: str) -> CommandRecord:
        """Spawn a command, arm its reveal policy and record it in history.

        Args:
            raw_text: Command line exactly as submitted.

        Returns:
            The new history record.

        Raises:
            EmptyCommandError: Nothing to run; no sink or history entry is created.
            RemoteDelegationError: A directory handler failed; its sink is discarded.
        """
        if not raw_text.strip():
            raise EmptyCommandError("Empty command")

        sequence = self.history.next_sequence
        sink = self.registry.allocate(sequence, raw_text)
        try:
            handle = await self.supervisor.spawn(raw_text, self.working_directory, sink)
        except Exception:
            self.registry.discard(sink)
            raise

        self.reveal.attach(handle)
        return self.history.append(make_label(sequence, raw_text), sink)

    def change_directory(self, directory: str) -> str:
        """Switch the working directory for commands spawned from now on.

        Relative paths resolve against the current working directory. Running
        commands are unaffected.

        Returns:
            The new working directory.

        Raises:
            DirectoryChangeError: If a local directory does not exist.
        """
        handler = get_handler(directory)
        if handler is not None:
            if not handler.is_directory(directory):
                raise DirectoryChangeError(f"Not a directory: {directory}")
            resolved = directory
        else:
            expanded = os.path.expanduser(directory)
            if get_handler(self.working_directory) is not None and not os.path.isabs(expanded):
                raise DirectoryChangeError(f"Relative path {directory!r} from remote directory")
            resolved = os.path.normpath(os.path.join(self.working_directory, expanded))
            if not os.path.isdir(resolved):
                raise DirectoryChangeError(f"Not a directory: {resolved}")

        self.working_directory = resolved
        self.listing_directory = resolved
        if self.display is not None:
            self.display.directory_changed(resolved)
        logger.info(f"Working directory is now {resolved}")
        return resolved


class LoopState(enum.Enum):
    RUNNING = "running"
    RESTARTING = "restarting"
    FINISHED = "finished"


class SessionLoop:
    """Read submissions and act on them until the session ends.

    A directory change aborts the current collection step: the collector
    returns DirectoryChangeRequested, the loop moves to RESTARTING, applies the
    directory, and collects again from scratch.

    Args:
        context: Session state shared with dispatch.
        collector: Line-editing front-end.
        selector: History selection UI. History requests are ignored without one.
        suggest: Host callback giving the default suggestion for the next command.
    """

    def __init__(
        self,
        context: SessionContext,
        collector: Collector,
        selector: Optional[Selector] = None,
        suggest: Optional[Callable[[], Optional[str]]] = None,
    ):
        self.context = context
        self.collector = collector
        self.selector = selector
        self.suggest = suggest
        self.state = LoopState.RUNNING
        self._pending_directory: Optional[str] = None

    async def run(self) -> None:
        """Run until the collector reports end of session."""
        while self.state is not LoopState.FINISHED:
            if self.state is LoopState.RESTARTING:
                self._restart()
                continue

            default = self.suggest() if self.suggest is not None else None
            submission = await self.collector.collect(self.context.prompt, default)

            try:
                if isinstance(submission, EndOfSession):
                    self.state = LoopState.FINISHED
                elif isinstance(submission, DirectoryChangeRequested):
                    self._pending_directory = submission.directory
                    self.state = LoopState.RESTARTING
                elif isinstance(submission, HistoryRequested):
                    await self.select_history()
                elif isinstance(submission, CommandSubmitted):
                    await self.context.dispatch(submission.text)
                else:
                    logger.error(f"Unknown submission {submission!r}")
            except EmptyCommandError:
                logger.debug("Ignoring empty command")
            except ShelldonError as e:
                logger.warning(f"{type(e).__name__}: {e}")
            except Exception:
                logger.exception(f"Unexpected error handling {submission!r}")

        logger.info("Session finished")

    def _restart(self) -> None:
        directory, self._pending_directory = self._pending_directory, None
        try:
            if directory is not None:
                self.context.change_directory(directory)
        except ShelldonError as e:
            logger.warning(f"{type(e).__name__}: {e}")
        self.state = LoopState.RUNNING

    async def select_history(self) -> None:
        """Let the user pick a history label and focus its sink.

        Raises:
            HistoryNotFoundError: If the selector returns an unknown label.
        """
        if self.selector is None:
            logger.warning("No history selector available")
            return

        label = await self.selector.choose(self.context.history)
        if label is None:
            return

        sink = self.context.history.lookup(label)
        if self.context.display is not None:
            self.context.display.focus(sink)

    async def shutdown(self) -> None:
        """Terminate commands still running at end of session."""
        await self.context.supervisor.terminate_all()
