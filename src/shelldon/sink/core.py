"""The Sink - accumulates one command's output as a terminal would show it."""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from ..errors import SinkClosedError

logger = logging.getLogger(__name__)

# Cursor motion characters; everything between them is printable text
_CONTROL = re.compile(r"([\r\n\b])")


@dataclass(eq=False)
class Sink:
    """Named output destination owned by the SinkRegistry.

    Content is kept as rendered lines plus a cursor, so carriage returns move
    the cursor back to column 0 and later text overwrites in place instead of
    being inserted literally.
    """

    name: str
    sequence: int
    raw_text: str
    hidden: bool = True

    live: bool = field(default=True, init=False)
    chars_written: int = field(default=0, init=False)
    _lines: list[str] = field(default_factory=lambda: [""], init=False, repr=False)
    _row: int = field(default=0, init=False, repr=False)
    _col: int = field(default=0, init=False, repr=False)
    _close_listeners: list[Callable[["Sink"], None]] = field(default_factory=list, init=False, repr=False)

    @property
    def content(self) -> str:
        """Visible content, lines joined with newlines."""
        return "\n".join(self._lines)

    @property
    def lines(self) -> list[str]:
        """Copy of the rendered lines."""
        return list(self._lines)

    @property
    def empty(self) -> bool:
        return self.chars_written == 0

    def write(self, text: str) -> None:
        """Apply text at the cursor.

        Args:
            text: Decoded output. May contain \\r, \\n and \\b cursor motion.

        Raises:
            SinkClosedError: If the sink's process already finished.
        """
        if not self.live:
            raise SinkClosedError(f"Sink {self.name} is read-only")
        if not text:
            return

        self.chars_written += len(text)
        for piece in _CONTROL.split(text):
            if not piece:
                continue
            if piece == "\r":
                self._col = 0
            elif piece == "\n":
                self._row += 1
                self._col = 0
                if self._row == len(self._lines):
                    self._lines.append("")
            elif piece == "\b":
                self._col = max(0, self._col - 1)
            else:
                line = self._lines[self._row]
                end = self._col + len(piece)
                self._lines[self._row] = line[: self._col] + piece + line[end:]
                self._col = end

    def close(self) -> None:
        """Freeze content. Close listeners fire once."""
        if not self.live:
            return
        self.live = False
        listeners, self._close_listeners = self._close_listeners, []
        for listener in listeners:
            try:
                listener(self)
            except Exception:
                logger.exception(f"Close listener failed for {self.name}")

    def add_close_listener(self, listener: Callable[["Sink"], None]) -> None:
        """Call listener when the sink closes, or now if it already has."""
        if self.live:
            self._close_listeners.append(listener)
        else:
            listener(self)

    def reset(self) -> None:
        """Clear content and move the cursor to the start, making the sink writable again."""
        logger.debug(f"Resetting sink {self.name}")
        self.live = True
        self.chars_written = 0
        self._lines = [""]
        self._row = 0
        self._col = 0
        self._close_listeners = []
