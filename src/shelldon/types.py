"""Type definitions for shelldon.

Submissions are tagged results: command collection never unwinds the stack to
signal a directory change, it returns a DirectoryChangeRequested instead and
the session loop branches on the type.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Protocol, TypeAlias

if TYPE_CHECKING:
    from .history import HistoryIndex
    from .sink import Sink


Label: TypeAlias = str  # e.g. "0:ls", "12:make test"
SinkName: TypeAlias = str  # e.g. "shelldon:0:ls"

RevealMode: TypeAlias = Literal["immediate", "deferred"]
ProcessStatus: TypeAlias = Literal["running", "exited", "failed"]

REVEAL_MODES = frozenset(["immediate", "deferred"])

SINK_PREFIX = "shelldon"


def make_label(sequence: int, raw_text: str) -> Label:
    """Build the history label for a command."""
    return f"{sequence}:{raw_text}"


def make_sink_name(sequence: int, raw_text: str) -> SinkName:
    """Build the display name of a command's sink."""
    return f"{SINK_PREFIX}:{sequence}:{raw_text}"


# Submission results returned by a Collector
@dataclass(frozen=True)
class CommandSubmitted:
    """User submitted a command line, verbatim."""

    text: str


@dataclass(frozen=True)
class DirectoryChangeRequested:
    """User invoked the directory-change escape and picked a directory."""

    directory: str


@dataclass(frozen=True)
class HistoryRequested:
    """User asked to browse command history."""

    pass


@dataclass(frozen=True)
class EndOfSession:
    """No further input - the session loop should finish."""

    pass


Submission: TypeAlias = CommandSubmitted | DirectoryChangeRequested | HistoryRequested | EndOfSession


class Collector(Protocol):
    """Line-editing front-end that obtains the next submission."""

    async def collect(self, prompt: str, default: str | None = None) -> Submission: ...


class Display(Protocol):
    """Host windowing policy for sinks."""

    def show(self, sink: "Sink") -> None:
        """Make a newly revealed sink visible to the user."""
        ...

    def focus(self, sink: "Sink") -> None:
        """Bring a sink chosen from history to the foreground."""
        ...

    def directory_changed(self, directory: str) -> None:
        """Reflect a new working directory in the host UI."""
        ...


class Selector(Protocol):
    """History selection UI."""

    async def choose(self, history: "HistoryIndex") -> Label | None: ...
