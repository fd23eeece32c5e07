"""Sink module - every command writes into its own sink.

PUBLIC API:
  - Sink: Rendered output of one command
  - SinkRegistry: Allocation, naming and visibility of sinks
"""

from .core import Sink
from .registry import SinkRegistry

__all__ = [
    "Sink",
    "SinkRegistry",
]
