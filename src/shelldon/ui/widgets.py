"""Textual widgets for the history browser.

PUBLIC API:
  - PreviewPane: Scrollable preview of a sink's content
"""

from rich.text import Text
from textual.widgets import Static

from ..filters import for_display, tail_lines
from ..sink import Sink

__all__ = ["PreviewPane"]

PREVIEW_LINES = 200


class PreviewPane(Static):
    """Preview of the highlighted command's output."""

    def show_sink(self, sink: Sink | None) -> None:
        """Render the tail of a sink, or a placeholder."""
        if sink is None:
            self.update(Text("(preview unavailable)", style="dim"))
            return

        content = tail_lines(for_display(sink.content), PREVIEW_LINES)
        if not content:
            self.update(Text("(empty)", style="dim"))
        else:
            self.update(Text.from_ansi(content))
        self.border_title = Text(sink.name)
        self.border_subtitle = "running" if sink.live else ""
