import os
import shutil

import pytest

from shelldon.errors import RemoteDelegationError
from shelldon.history import HistoryIndex
from shelldon.process import (
    DirectoryHandler,
    ProcessHandle,
    ProcessSupervisor,
    build_environment,
    register_handler,
    unregister_handler,
)
from shelldon.reveal import RevealPolicy
from shelldon.session import SessionContext
from shelldon.sink import SinkRegistry
from shelldon.types import EndOfSession

SH = shutil.which("sh") or "/bin/sh"


class ScriptedCollector:
    """Collector that replays submissions, then ends the session.

    A script entry may be an async callable; it is awaited and its return
    value used as the submission, so tests can wait on running commands
    between steps.
    """

    def __init__(self, *script):
        self.script = list(script)
        self.prompts = []
        self.defaults = []

    async def collect(self, prompt, default=None):
        self.prompts.append(prompt)
        self.defaults.append(default)
        if not self.script:
            return EndOfSession()
        step = self.script.pop(0)
        if callable(step):
            return await step()
        return step


class RecordingDisplay:
    def __init__(self):
        self.shown = []
        self.focused = []
        self.directories = []

    def show(self, sink):
        self.shown.append(sink)

    def focus(self, sink):
        self.focused.append(sink)

    def directory_changed(self, directory):
        self.directories.append(directory)


class FixedSelector:
    def __init__(self, label):
        self.label = label
        self.offered = []

    async def choose(self, history):
        self.offered.append(history.labels())
        return self.label


class FakeRemoteHandler(DirectoryHandler):
    """Claims "/fake:..." directories and echoes the command back."""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def can_handle(self, directory):
        return directory.startswith("/fake:")

    def run(self, command, directory, sink, environment):
        self.calls.append((command, directory))
        if self.fail:
            sink.write("partial output")
            raise RemoteDelegationError(f"fake: cannot reach {directory}")
        handle = ProcessHandle(command=command, sink=sink, working_directory=directory)
        handle.deliver(f"remote:{command}\n")
        handle.finish(0)
        return handle


@pytest.fixture
def supervisor():
    return ProcessSupervisor(SH, build_environment("dumb", ""))


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def make_context(supervisor, display, tmp_path):
    def make(mode="deferred", working_directory=None, supervisor=supervisor):
        registry = SinkRegistry()
        return SessionContext(
            working_directory=str(working_directory or tmp_path),
            supervisor=supervisor,
            reveal=RevealPolicy(mode, registry, show=display.show),
            registry=registry,
            history=HistoryIndex(),
            display=display,
        )

    return make


@pytest.fixture
def remote_handler():
    handler = FakeRemoteHandler()
    register_handler(handler)
    yield handler
    unregister_handler(handler)


@pytest.fixture
def failing_remote_handler():
    handler = FakeRemoteHandler(fail=True)
    register_handler(handler)
    yield handler
    unregister_handler(handler)


def realpath(path):
    return os.path.realpath(str(path))
