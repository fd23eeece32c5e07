"""shelldon application wiring.

Builds one SessionContext from configuration and runs the session loop with
the terminal front-end.
"""

import logging
import os
import shlex
from pathlib import Path
from typing import Optional

from .config import ConfigManager
from .process import ProcessSupervisor, get_handler
from .reveal import RevealPolicy
from .session import SessionContext, SessionLoop
from .sink import SinkRegistry
from .types import Collector, Display, Selector

logger = logging.getLogger(__name__)


def suggest_recent_entry(directory: str) -> Optional[str]:
    """Default suggestion for the next command: the newest entry in directory.

    Stands in for the selected entry of a directory listing. Hidden entries
    are skipped.

    Returns:
        Shell-quoted entry name, or None for empty, unreadable or remote directories.
    """
    if get_handler(directory) is not None:
        return None
    try:
        with os.scandir(directory) as entries:
            visible = [entry for entry in entries if not entry.name.startswith(".")]
            newest = max(visible, key=lambda entry: entry.stat(follow_symlinks=False).st_mtime, default=None)
    except OSError as e:
        logger.debug(f"No suggestion for {directory}: {e}")
        return None
    return shlex.quote(newest.name) if newest is not None else None


def create_context(
    config: ConfigManager,
    working_directory: Optional[str] = None,
    display: Optional[Display] = None,
) -> SessionContext:
    """Create the shared state for one session.

    Args:
        config: Loaded configuration.
        working_directory: Starting directory. Defaults to the process cwd.
        display: Host display for revealed sinks.
    """
    registry = SinkRegistry()
    reveal = RevealPolicy(config.reveal_mode, registry, show=display.show if display else None)
    return SessionContext(
        working_directory=working_directory or os.getcwd(),
        supervisor=ProcessSupervisor.from_config(config),
        reveal=reveal,
        registry=registry,
        display=display,
    )


def create_session(
    config: ConfigManager,
    collector: Collector,
    display: Optional[Display] = None,
    selector: Optional[Selector] = None,
    working_directory: Optional[str] = None,
) -> SessionLoop:
    """Create a session loop around a fresh context.

    The loop suggests the newest entry of the working directory as the default
    for each command.
    """
    context = create_context(config, working_directory, display)
    return SessionLoop(context, collector, selector, suggest=lambda: suggest_recent_entry(context.working_directory))


async def run_interactive(config: ConfigManager, working_directory: Optional[str] = None) -> None:
    """Run a terminal session until the user ends it."""
    from prompt_toolkit.patch_stdout import patch_stdout

    from .ui import ConsoleDisplay, PromptCollector, TextualSelector

    history_file = Path(config.history_file).expanduser() if config.history_file else None
    display = ConsoleDisplay()
    collector = PromptCollector(history_file=history_file)
    loop = create_session(config, collector, display, TextualSelector(), working_directory)
    context = loop.context
    collector.current_directory = lambda: context.working_directory

    logger.info(f"Session started in {context.working_directory} (reveal={config.reveal_mode})")
    with patch_stdout():
        try:
            await loop.run()
        finally:
            await loop.shutdown()
