"""Command history - label to sink mapping in submission order.

PUBLIC API:
  - CommandRecord: One submitted command and its sink
  - HistoryIndex: Append-only ordered index of CommandRecords
"""

from dataclasses import dataclass

from .errors import HistoryNotFoundError
from .sink import Sink
from .types import Label, make_label

__all__ = ["CommandRecord", "HistoryIndex"]


@dataclass(frozen=True)
class CommandRecord:
    """A submitted command. Immutable once recorded."""

    sequence: int
    raw_text: str
    sink: Sink

    @property
    def label(self) -> Label:
        return make_label(self.sequence, self.raw_text)


class HistoryIndex:
    """Append-only history. Record i always has sequence i.

    Entries are never evicted; history grows for the life of the session.
    """

    def __init__(self):
        self._records: list[CommandRecord] = []
        self._by_label: dict[Label, CommandRecord] = {}

    @property
    def next_sequence(self) -> int:
        """Sequence number the next recorded command will get."""
        return len(self._records)

    def append(self, label: Label, sink: Sink) -> CommandRecord:
        """Record a command's sink under its label.

        Args:
            label: "<sequence>:<raw_text>" for the next sequence number.
            sink: The command's sink.

        Returns:
            The new CommandRecord.

        Raises:
            ValueError: If the label is already recorded or its sequence is out of order.
        """
        if label in self._by_label:
            raise ValueError(f"Duplicate history label: {label}")

        sequence_text, sep, raw_text = label.partition(":")
        if not sep or not sequence_text.isdigit() or int(sequence_text) != self.next_sequence:
            raise ValueError(f"Label {label!r} does not carry sequence {self.next_sequence}")

        record = CommandRecord(sequence=int(sequence_text), raw_text=raw_text, sink=sink)
        self._records.append(record)
        self._by_label[label] = record
        return record

    def lookup(self, label: Label) -> Sink:
        """Resolve a label to its sink.

        Raises:
            HistoryNotFoundError: If label was never recorded.
        """
        record = self._by_label.get(label)
        if record is None:
            raise HistoryNotFoundError(label)
        return record.sink

    def labels(self) -> list[Label]:
        """All labels, oldest first."""
        return [record.label for record in self._records]

    def records(self) -> list[CommandRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, label: object) -> bool:
        return label in self._by_label
