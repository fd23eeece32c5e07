"""Sink allocation, naming and visibility.

PUBLIC API:
  - SinkRegistry: Owns every sink created during a session
"""

import logging

from ..types import SinkName, make_sink_name
from .core import Sink

__all__ = ["SinkRegistry"]

logger = logging.getLogger(__name__)


class SinkRegistry:
    """Allocates one sink per command and tracks which sinks are listed.

    Hidden sinks stay reachable by name (and through the history index) but are
    left out of listing(), the host's "switch to open destination" view.
    """

    def __init__(self):
        self.sinks: dict[SinkName, Sink] = {}

    def allocate(self, sequence: int, raw_text: str) -> Sink:
        """Create the sink for a command, or reuse one with the same name.

        A colliding sink from an earlier lifetime keeps its registry entry and
        visibility, but its content is reset so new output starts from the top.

        Args:
            sequence: Command sequence number.
            raw_text: Command text as submitted.

        Returns:
            Writable sink named "shelldon:<sequence>:<raw_text>".
        """
        name = make_sink_name(sequence, raw_text)
        existing = self.sinks.get(name)
        if existing is not None:
            logger.info(f"Sink {name} already exists, resetting content")
            existing.reset()
            return existing

        sink = Sink(name=name, sequence=sequence, raw_text=raw_text)
        self.sinks[name] = sink
        logger.debug(f"Allocated sink {name}")
        return sink

    def get(self, name: SinkName) -> Sink | None:
        return self.sinks.get(name)

    def hide(self, sink: Sink) -> None:
        """Drop sink from listing(). No-op if already hidden."""
        if sink.hidden:
            return
        sink.hidden = True
        logger.debug(f"Hid sink {sink.name}")

    def reveal(self, sink: Sink) -> None:
        """Include sink in listing(). No-op if already visible."""
        if not sink.hidden:
            return
        sink.hidden = False
        logger.debug(f"Revealed sink {sink.name}")

    def listing(self) -> list[Sink]:
        """Visible sinks in allocation order."""
        return [sink for sink in self.sinks.values() if not sink.hidden]

    def discard(self, sink: Sink) -> None:
        """Forget a sink whose command never reached the history index."""
        if self.sinks.get(sink.name) is sink:
            del self.sinks[sink.name]
            logger.debug(f"Discarded sink {sink.name}")

    def __contains__(self, name: object) -> bool:
        return name in self.sinks

    def __len__(self) -> int:
        return len(self.sinks)
