"""SSH directory handler - runs commands on a remote host.

Directories are written "/ssh:<host>:<path>", e.g. "/ssh:deploy@web1:/srv/app".
An empty path runs in the remote login directory.

PUBLIC API:
  - parse_ssh_directory: Split an ssh directory into (host, path)
"""

import logging
import re
import shlex
import subprocess

from ...errors import RemoteDelegationError
from ...sink import Sink
from ..handle import ProcessHandle
from . import DirectoryHandler

logger = logging.getLogger(__name__)

_SSH_DIRECTORY = re.compile(r"^/ssh:([^:/]+):(.*)$")

# ssh reserves exit status 255 for its own errors
SSH_ERROR_STATUS = 255


def parse_ssh_directory(directory: str) -> tuple[str, str] | None:
    """Split "/ssh:host:path" into (host, path).

    Returns:
        (host, path) tuple, or None if directory is not an ssh directory.
    """
    match = _SSH_DIRECTORY.match(directory)
    if not match:
        return None
    host, path = match.groups()
    return host, path


class _SSHHandler(DirectoryHandler):
    """Runs commands over ssh, blocking until the remote command exits.

    Attributes:
        timeout: Seconds to wait for the remote command.
    """

    timeout = 300.0

    def can_handle(self, directory: str) -> bool:
        return parse_ssh_directory(directory) is not None

    def build_argv(self, command: str, directory: str) -> list[str]:
        """Build the local ssh invocation for command."""
        parsed = parse_ssh_directory(directory)
        if parsed is None:
            raise RemoteDelegationError(f"Not an ssh directory: {directory}")
        host, path = parsed

        remote = f"cd {shlex.quote(path)} && {command}" if path else command
        return ["ssh", "-o", "BatchMode=yes", host, remote]

    def run(self, command: str, directory: str, sink: Sink, environment: dict[str, str]) -> ProcessHandle:
        argv = self.build_argv(command, directory)
        host = argv[-2]
        logger.info(f"Delegating to ssh {host}: {command}")

        try:
            result = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=environment,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise RemoteDelegationError(f"ssh {host}: timed out after {self.timeout:.0f}s") from e
        except OSError as e:
            raise RemoteDelegationError(f"ssh {host}: {e.strerror or e}") from e

        output = result.stdout.decode("utf-8", errors="replace")
        if result.returncode == SSH_ERROR_STATUS:
            raise RemoteDelegationError(f"ssh {host}: {output.strip() or 'connection failed'}")

        handle = ProcessHandle(command=command, sink=sink, working_directory=directory)
        handle.deliver(output)
        handle.finish(result.returncode)
        return handle
