import asyncio
import io

import pytest
from prompt_toolkit.application import create_app_session
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput
from rich.console import Console
from textual.widgets import OptionList

from shelldon.history import HistoryIndex
from shelldon.sink import SinkRegistry
from shelldon.types import CommandSubmitted, DirectoryChangeRequested, EndOfSession, HistoryRequested, make_label
from shelldon.ui import ConsoleDisplay, HistoryBrowser, PromptCollector, TextualSelector
from shelldon.ui.widgets import PreviewPane


def make_history(*commands):
    registry = SinkRegistry()
    history = HistoryIndex()
    for command in commands:
        sequence = history.next_sequence
        sink = registry.allocate(sequence, command)
        sink.write(f"output of {command}\n")
        sink.close()
        history.append(make_label(sequence, command), sink)
    return history


def make_display():
    buffer = io.StringIO()
    return ConsoleDisplay(Console(file=buffer, width=80, color_system=None)), buffer


def test_show_prints_content_when_sink_closes():
    display, buffer = make_display()
    sink = SinkRegistry().allocate(0, "echo hi")

    display.show(sink)
    assert "shelldon:0:echo hi" in buffer.getvalue()
    assert "hi there" not in buffer.getvalue()

    sink.write("hi there\n")
    sink.close()
    assert "hi there" in buffer.getvalue()


def test_focus_prints_immediately():
    display, buffer = make_display()
    sink = SinkRegistry().allocate(0, "true")

    display.focus(sink)

    output = buffer.getvalue()
    assert "(no output)" in output
    assert "running" in output


def test_directory_changed_notice():
    display, buffer = make_display()
    display.directory_changed("/var/log")
    assert "cd /var/log" in buffer.getvalue()


@pytest.fixture
def pipe_input():
    with create_pipe_input() as pipe:
        yield pipe


def terminal(pipe):
    return create_app_session(input=pipe, output=DummyOutput())


@pytest.mark.asyncio
async def test_prompt_submits_line(pipe_input):
    with terminal(pipe_input):
        collector = PromptCollector(lambda: "/srv")
        pipe_input.send_text("make test\r")
        assert await collector.collect("/srv $ ") == CommandSubmitted("make test")


@pytest.mark.asyncio
async def test_prompt_ctrl_d_ends_session(pipe_input):
    with terminal(pipe_input):
        collector = PromptCollector(lambda: "/srv")
        pipe_input.send_text("\x04")
        assert await collector.collect("/srv $ ") == EndOfSession()


@pytest.mark.asyncio
async def test_prompt_history_request(pipe_input):
    with terminal(pipe_input):
        collector = PromptCollector(lambda: "/srv")
        pipe_input.send_text("\x18h")
        assert await collector.collect("/srv $ ") == HistoryRequested()


@pytest.mark.asyncio
async def test_prompt_directory_escape_drops_line(pipe_input):
    with terminal(pipe_input):
        collector = PromptCollector(lambda: "/srv")
        task = asyncio.create_task(collector.collect("/srv $ "))
        pipe_input.send_text("half typed\x18\x06")
        await asyncio.sleep(0.2)
        pipe_input.send_text("app\r")
        assert await task == DirectoryChangeRequested("/srv/app")


def test_browser_lists_oldest_first():
    browser = HistoryBrowser(make_history("ls", "pwd", "ls"))
    assert browser.labels == ["0:ls", "1:pwd", "2:ls"]


@pytest.mark.asyncio
async def test_browser_highlights_newest():
    browser = HistoryBrowser(make_history("ls", "pwd"))
    async with browser.run_test() as pilot:
        await pilot.press("enter")
    assert browser.return_value == "1:pwd"


@pytest.mark.asyncio
async def test_browser_enter_selects_highlighted():
    browser = HistoryBrowser(make_history("ls", "pwd"))
    async with browser.run_test() as pilot:
        await pilot.press("up")
        await pilot.press("enter")
    assert browser.return_value == "0:ls"


@pytest.mark.asyncio
async def test_browser_shows_brackets_verbatim():
    commands = ["ls [abc]*", "grep '[red]' f", "echo [bold]hi[/bold]", "echo [/] done"]
    browser = HistoryBrowser(make_history(*commands))
    async with browser.run_test() as pilot:
        await pilot.pause()
        option_list = browser.query_one("#history-list", OptionList)
        prompts = [str(option_list.get_option_at_index(i).prompt) for i in range(option_list.option_count)]
        assert prompts == [f"{i}:{command}" for i, command in enumerate(commands)]
        assert str(browser.query_one("#preview", PreviewPane).border_title) == "shelldon:3:echo [/] done"
        await pilot.press("enter")
    assert browser.return_value == "3:echo [/] done"


@pytest.mark.asyncio
async def test_browser_escape_cancels():
    browser = HistoryBrowser(make_history("ls"))
    async with browser.run_test() as pilot:
        await pilot.press("escape")
    assert browser.return_value is None


@pytest.mark.asyncio
async def test_selector_skips_empty_history():
    assert await TextualSelector().choose(HistoryIndex()) is None
