"""Configuration management for shelldon.

Handles default settings from shelldon.toml.
"""

import logging
import os
from pathlib import Path
from typing import Optional
import tomllib

from .errors import ConfigError
from .types import REVEAL_MODES, RevealMode

CONFIG_FILENAME = "shelldon.toml"


def _find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Find shelldon.toml in current or parent directories."""
    current = start or Path.cwd()

    for parent in [current] + list(current.parents):
        config_file = parent / CONFIG_FILENAME
        if config_file.exists():
            return config_file

    return None


def _load_config(path: Optional[Path] = None) -> dict:
    """Load raw configuration from file."""
    if path is None:
        path = _find_config_file()

    if path is None or not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid {path}: {e}") from e


class ConfigManager:
    """Manages configuration for shelldon.

    Args:
        path: Explicit config file. Defaults to searching upward from cwd.
        overrides: Values that take precedence over the file's [default] table.
    """

    def __init__(self, path: Optional[Path] = None, overrides: Optional[dict] = None):
        self._config_file = path or _find_config_file()
        self.data = _load_config(self._config_file)
        self._default_config = dict(self.data.get("default", {}))
        if overrides:
            self._default_config.update(overrides)

        # Bad values fail at startup, not on first command
        self._validate()

    def _validate(self) -> None:
        _ = self.reveal_mode
        _ = self.log_level

    @property
    def config_file(self) -> Optional[Path]:
        return self._config_file

    @property
    def reveal_mode(self) -> RevealMode:
        """When sinks become visible: "immediate" or "deferred"."""
        mode = self._default_config.get("reveal", "deferred")
        if mode not in REVEAL_MODES:
            raise ConfigError(f"reveal must be one of {sorted(REVEAL_MODES)}, got {mode!r}")
        return mode

    @property
    def shell(self) -> str:
        """Shell used to run commands as `<shell> -c <command>`."""
        return self._default_config.get("shell") or os.environ.get("SHELL") or "/bin/sh"

    @property
    def term(self) -> str:
        """TERM value passed to commands."""
        return self._default_config.get("term", "dumb")

    @property
    def terminfo(self) -> str:
        """TERMINFO value passed to commands."""
        return self._default_config.get("terminfo", "")

    @property
    def log_level(self) -> int:
        name = str(self._default_config.get("log_level", "WARNING")).upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ConfigError(f"Unknown log_level {name!r}")
        return level

    @property
    def log_file(self) -> Optional[str]:
        return self._default_config.get("log_file")

    @property
    def history_file(self) -> Optional[str]:
        """File that keeps typed command lines across sessions."""
        return self._default_config.get("history_file")


# Global instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get or create the global config manager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def set_config_manager(manager: Optional[ConfigManager]) -> None:
    """Replace the global config manager (None forces a reload on next access)."""
    global _config_manager
    _config_manager = manager
