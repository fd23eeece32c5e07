import dataclasses

import pytest

from shelldon.errors import HistoryNotFoundError, ShelldonError
from shelldon.history import HistoryIndex
from shelldon.sink import SinkRegistry
from shelldon.types import make_label


def record_commands(history, registry, *commands):
    sinks = []
    for command in commands:
        sequence = history.next_sequence
        sink = registry.allocate(sequence, command)
        history.append(make_label(sequence, command), sink)
        sinks.append(sink)
    return sinks


def test_same_command_gets_distinct_labels():
    history = HistoryIndex()
    sinks = record_commands(history, SinkRegistry(), "ls", "ls", "ls")

    assert history.labels() == ["0:ls", "1:ls", "2:ls"]
    assert [history.lookup(label) for label in history.labels()] == sinks
    assert len({id(sink) for sink in sinks}) == 3


def test_records_keep_sequence_order():
    history = HistoryIndex()
    record_commands(history, SinkRegistry(), "echo a", "make test", "ls -la")

    records = history.records()
    assert [record.sequence for record in records] == [0, 1, 2]
    assert [record.raw_text for record in records] == ["echo a", "make test", "ls -la"]
    assert records[1].label == "1:make test"
    assert history.next_sequence == 3
    assert len(history) == 3


def test_raw_text_with_colons_round_trips():
    history = HistoryIndex()
    record_commands(history, SinkRegistry(), "echo a:b:c")

    assert "0:echo a:b:c" in history
    assert history.records()[0].raw_text == "echo a:b:c"


def test_lookup_unknown_label():
    history = HistoryIndex()
    record_commands(history, SinkRegistry(), "ls")

    with pytest.raises(HistoryNotFoundError) as excinfo:
        history.lookup("7:ls")

    assert excinfo.value.label == "7:ls"
    assert isinstance(excinfo.value, ShelldonError)
    assert isinstance(excinfo.value, KeyError)


def test_duplicate_label_rejected():
    history = HistoryIndex()
    registry = SinkRegistry()
    record_commands(history, registry, "ls")

    with pytest.raises(ValueError):
        history.append("0:ls", registry.allocate(0, "ls"))
    assert len(history) == 1


def test_out_of_order_label_rejected():
    history = HistoryIndex()
    with pytest.raises(ValueError):
        history.append("5:ls", SinkRegistry().allocate(5, "ls"))
    assert len(history) == 0


def test_records_are_immutable():
    history = HistoryIndex()
    record_commands(history, SinkRegistry(), "ls")

    with pytest.raises(dataclasses.FrozenInstanceError):
        history.records()[0].raw_text = "rm -rf /"
