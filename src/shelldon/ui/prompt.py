"""Command line collection with prompt_toolkit.

Key bindings:
  Enter           submit the command line
  Ctrl-X Ctrl-F   drop the current line and change directory
  Ctrl-X h        browse command history
  Ctrl-C          clear the current line
  Ctrl-D          end the session (on an empty line)

PUBLIC API:
  - PromptCollector: Collector reading submissions from the terminal
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import PathCompleter
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings

from ..types import CommandSubmitted, DirectoryChangeRequested, EndOfSession, HistoryRequested, Submission

__all__ = ["PromptCollector"]

logger = logging.getLogger(__name__)


class _ChangeDirectory:
    """Marker returned by the prompt when the directory escape is pressed."""


_CHANGE_DIRECTORY = _ChangeDirectory()


class PromptCollector:
    """Reads submissions from the terminal.

    Args:
        current_directory: Returns the session's working directory, used as the
            starting point of the directory prompt.
        history_file: Persist typed lines here. In-memory when None.
    """

    def __init__(self, current_directory: Callable[[], str] = os.getcwd, history_file: Path | None = None):
        self.current_directory = current_directory
        history = FileHistory(str(history_file)) if history_file else InMemoryHistory()
        self.session: PromptSession = PromptSession(
            history=history,
            auto_suggest=AutoSuggestFromHistory(),
            key_bindings=self._key_bindings(),
        )
        self.directory_session: PromptSession = PromptSession(
            completer=PathCompleter(only_directories=True, expanduser=True),
            complete_while_typing=True,
        )

    def _key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("c-x", "c-f")
        def _change_directory(event) -> None:
            event.app.exit(result=_CHANGE_DIRECTORY)

        @kb.add("c-x", "h")
        def _history(event) -> None:
            event.app.exit(result=HistoryRequested())

        @kb.add("c-c")
        def _clear(event) -> None:
            event.current_buffer.reset()

        return kb

    async def collect(self, prompt: str, default: str | None = None) -> Submission:
        """Prompt until the user submits something.

        Args:
            prompt: Prompt text, including the working directory.
            default: Suggestion shown as a placeholder on an empty line.

        Returns:
            The tagged submission.
        """
        while True:
            try:
                result = await self.session.prompt_async(prompt, placeholder=default or "")
            except EOFError:
                return EndOfSession()

            if result is _CHANGE_DIRECTORY:
                directory = await self._collect_directory()
                if directory:
                    return DirectoryChangeRequested(directory)
                continue

            if isinstance(result, HistoryRequested):
                return result

            return CommandSubmitted(result)

    async def _collect_directory(self) -> str | None:
        current = self.current_directory().rstrip("/") + "/"
        try:
            text = await self.directory_session.prompt_async("Change directory: ", default=current)
        except (EOFError, KeyboardInterrupt):
            logger.debug("Directory change cancelled")
            return None
        return text.strip() or None
