"""History browser - pick a past command and bring its output forward.

PUBLIC API:
  - HistoryBrowser: Textual app listing history labels with a preview
  - TextualSelector: Selector that runs HistoryBrowser inside the session loop
"""

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, OptionList, Static
from textual.widgets.option_list import Option

from ..history import HistoryIndex
from ..types import Label
from .widgets import PreviewPane

__all__ = ["HistoryBrowser", "TextualSelector"]


def _option_prompt(label: Label) -> Text:
    """Render a label as plain text; command lines often contain [brackets]."""
    sequence, _, raw_text = label.partition(":")
    prompt = Text()
    prompt.append(f"{sequence}:", style="dim")
    prompt.append(raw_text)
    return prompt


class HistoryBrowser(App[Label | None]):
    """Select a history label.

    Labels are listed oldest first, as HistoryIndex.labels() returns them,
    with the newest one highlighted. Exits with the chosen label, or None
    when cancelled.

    Args:
        history: History to browse.
    """

    CSS = """
    #screen-title {
        padding: 0 1;
    }
    #history-list {
        width: 40%;
    }
    #preview {
        width: 60%;
        border: round $accent;
        padding: 0 1;
        overflow-y: auto;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("q", "cancel", "Cancel", show=False),
    ]

    def __init__(self, history: HistoryIndex):
        super().__init__()
        self.history = history
        self.labels = history.labels()

    def compose(self) -> ComposeResult:
        yield Static("[bold]Command History[/bold]", id="screen-title")
        with Horizontal():
            yield OptionList(*[Option(_option_prompt(label)) for label in self.labels], id="history-list")
            yield PreviewPane(id="preview")
        yield Footer()

    def on_mount(self) -> None:
        option_list = self.query_one("#history-list", OptionList)
        option_list.focus()
        if self.labels:
            option_list.highlighted = len(self.labels) - 1
        else:
            self.query_one("#preview", PreviewPane).update("(no commands yet)")

    def on_option_list_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        """Update preview when navigation changes."""
        preview = self.query_one("#preview", PreviewPane)
        label = self.labels[event.option_index]
        preview.show_sink(self.history.lookup(label))

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(self.labels[event.option_index])

    def action_cancel(self) -> None:
        self.exit(None)


class TextualSelector:
    """Selector backed by HistoryBrowser."""

    async def choose(self, history: HistoryIndex) -> Label | None:
        if not len(history):
            return None
        return await HistoryBrowser(history).run_async()
