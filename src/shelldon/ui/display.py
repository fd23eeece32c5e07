"""Terminal display for revealed and focused sinks.

PUBLIC API:
  - ConsoleDisplay: Prints sinks to the terminal with rich
"""

import logging

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from ..filters import for_display
from ..sink import Sink

__all__ = ["ConsoleDisplay"]

logger = logging.getLogger(__name__)


class ConsoleDisplay:
    """Rich console display.

    A revealed sink announces itself with a rule and is printed in full once
    its command finishes. Sinks focused from history print straight away.

    Args:
        console: Console to print to. Defaults to a console on stdout.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def show(self, sink: Sink) -> None:
        self.console.print(Rule(Text(sink.name), style="cyan"))
        sink.add_close_listener(self._print_sink)

    def focus(self, sink: Sink) -> None:
        self._print_sink(sink)

    def directory_changed(self, directory: str) -> None:
        self.console.print(Text(f"cd {directory}", style="dim"))

    def _print_sink(self, sink: Sink) -> None:
        content = for_display(sink.content)
        body = Text.from_ansi(content.rstrip("\n")) if content else Text("(no output)", style="dim")
        subtitle = "running" if sink.live else None
        self.console.print(Panel(body, title=Text(sink.name), title_align="left", subtitle=subtitle, border_style="cyan"))
