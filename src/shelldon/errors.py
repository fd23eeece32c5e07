"""Shelldon exceptions and diagnostic formatting.

Every failure that can happen during a single command's lifecycle derives from
ShelldonError so the session loop can recover from it at one boundary.

PUBLIC API:
  - ShelldonError: Base exception for all shelldon operations
  - EmptyCommandError: Submitted text was empty or whitespace only
  - SpawnError: Local process creation failed
  - HistoryNotFoundError: History lookup for an unknown label
  - RemoteDelegationError: A directory handler failed to run a command
  - DirectoryChangeError: Requested working directory is unusable
  - SinkClosedError: Write to a sink whose process already finished
  - ConfigError: Invalid shelldon.toml value
  - diagnostic: Format an error for display inside a sink
"""


class ShelldonError(Exception):
    """Base exception for all shelldon operations."""

    pass


class EmptyCommandError(ShelldonError):
    """Raised when the submitted command is empty or whitespace only."""

    pass


class SpawnError(ShelldonError):
    """Raised when the underlying process layer cannot start a command."""

    @classmethod
    def from_os_error(cls, error: OSError) -> "SpawnError":
        """Wrap an OSError, keeping the message the OS reported."""
        detail = error.strerror or str(error)
        if error.filename:
            detail = f"{detail}: {error.filename}"
        return cls(detail)


class HistoryNotFoundError(ShelldonError, KeyError):
    """Raised when a history label does not exist."""

    def __init__(self, label: str):
        super().__init__(label)
        self.label = label

    def __str__(self) -> str:
        return f"No history entry for {self.label!r}"


class RemoteDelegationError(ShelldonError):
    """Raised when a directory handler fails to run a command."""

    pass


class DirectoryChangeError(ShelldonError):
    """Raised when a directory change targets an unusable directory."""

    pass


class SinkClosedError(ShelldonError):
    """Raised when writing to a sink that has become read-only history."""

    pass


class ConfigError(ShelldonError):
    """Raised for invalid configuration values."""

    pass


def diagnostic(command: str, error: BaseException) -> str:
    """Format an error as the text a failed command leaves in its sink.

    Args:
        command: The command that failed.
        error: The exception reported by the process layer.

    Returns:
        Single diagnostic line terminated by a newline.
    """
    return f"shelldon: {command}: {str(error) or type(error).__name__}\n"
