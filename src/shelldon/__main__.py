"""Entry point for shelldon.

Usage: shelldon [--immediate | --deferred] [--debug] [DIRECTORY]
"""

import asyncio
import logging
import sys

from .config import ConfigManager, set_config_manager
from .errors import ConfigError


def _parse_overrides(argv: list[str]) -> tuple[dict, str | None]:
    """Split command line flags into config overrides and a start directory."""
    overrides: dict = {}
    directory = None
    for arg in argv:
        if arg == "--immediate":
            overrides["reveal"] = "immediate"
        elif arg == "--deferred":
            overrides["reveal"] = "deferred"
        elif arg == "--debug":
            overrides["log_level"] = "DEBUG"
        elif not arg.startswith("-"):
            directory = arg
    return overrides, directory


def main():
    """Run an interactive shelldon session.

    Flags override the [default] table of shelldon.toml:
    - --immediate / --deferred: reveal mode
    - --debug: log at DEBUG level
    """
    overrides, directory = _parse_overrides(sys.argv[1:])
    try:
        config = ConfigManager(overrides=overrides)
    except ConfigError as e:
        print(f"shelldon: {e}", file=sys.stderr)
        sys.exit(2)
    set_config_manager(config)

    logging.basicConfig(
        level=config.log_level,
        filename=config.log_file,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    from .app import run_interactive

    try:
        asyncio.run(run_interactive(config, directory))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
