from shelldon.sink import SinkRegistry


def test_allocate_names_sink_after_command():
    registry = SinkRegistry()
    sink = registry.allocate(3, "make test")

    assert sink.name == "shelldon:3:make test"
    assert sink.sequence == 3
    assert sink.raw_text == "make test"
    assert registry.get("shelldon:3:make test") is sink
    assert "shelldon:3:make test" in registry


def test_new_sinks_start_hidden():
    registry = SinkRegistry()
    sink = registry.allocate(0, "ls")
    assert sink.hidden
    assert registry.listing() == []


def test_allocate_collision_resets_existing_sink():
    registry = SinkRegistry()
    first = registry.allocate(0, "ls")
    first.write("stale output")
    first.close()
    registry.reveal(first)

    second = registry.allocate(0, "ls")

    assert second is first
    assert second.content == ""
    assert second.live
    assert not second.hidden
    assert len(registry) == 1


def test_hide_and_reveal_are_idempotent():
    registry = SinkRegistry()
    sink = registry.allocate(0, "ls")

    registry.reveal(sink)
    registry.reveal(sink)
    assert registry.listing() == [sink]

    registry.hide(sink)
    registry.hide(sink)
    assert registry.listing() == []
    assert registry.get(sink.name) is sink


def test_listing_keeps_allocation_order():
    registry = SinkRegistry()
    sinks = [registry.allocate(i, "ls") for i in range(4)]
    for sink in reversed(sinks):
        registry.reveal(sink)
    registry.hide(sinks[1])

    assert registry.listing() == [sinks[0], sinks[2], sinks[3]]


def test_discard_forgets_sink():
    registry = SinkRegistry()
    sink = registry.allocate(0, "ls")

    registry.discard(sink)
    registry.discard(sink)

    assert registry.get(sink.name) is None
    assert len(registry) == 0
