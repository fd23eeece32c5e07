"""Terminal front-end for shelldon.

PUBLIC API:
  - PromptCollector: prompt_toolkit line editing with the directory escape
  - ConsoleDisplay: rich display of revealed and focused sinks
  - HistoryBrowser: textual history picker with output preview
  - TextualSelector: Selector wrapping HistoryBrowser
"""

from .display import ConsoleDisplay
from .history_browser import HistoryBrowser, TextualSelector
from .prompt import PromptCollector

__all__ = [
    "PromptCollector",
    "ConsoleDisplay",
    "HistoryBrowser",
    "TextualSelector",
]
