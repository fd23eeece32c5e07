import os

import pytest

from conftest import ScriptedCollector
from shelldon.app import create_session, suggest_recent_entry
from shelldon.config import ConfigManager


def touch(path, mtime):
    path.write_text("")
    os.utime(path, (mtime, mtime))


def test_suggests_newest_entry(tmp_path):
    touch(tmp_path / "old.txt", 1_000_000)
    touch(tmp_path / "new notes.txt", 2_000_000)
    touch(tmp_path / ".hidden", 3_000_000)

    assert suggest_recent_entry(str(tmp_path)) == "'new notes.txt'"


def test_no_suggestion_for_empty_or_missing_directory(tmp_path):
    assert suggest_recent_entry(str(tmp_path)) is None
    assert suggest_recent_entry(str(tmp_path / "missing")) is None


def test_no_suggestion_for_remote_directory(remote_handler):
    assert suggest_recent_entry("/fake:box:/srv") is None


@pytest.mark.asyncio
async def test_session_passes_suggestion_to_collector(tmp_path):
    touch(tmp_path / "Makefile", 1_000_000)
    config = ConfigManager(path=tmp_path / "missing.toml")
    collector = ScriptedCollector()

    loop = create_session(config, collector, working_directory=str(tmp_path))
    await loop.run()

    assert collector.defaults == ["Makefile"]
    assert collector.prompts == [loop.context.prompt]
