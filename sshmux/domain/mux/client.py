"""
Command-side client for a multiplexed ssh connection
"""
from __future__ import annotations

import shlex
import threading
from typing import List, Optional, Sequence, Union

from ...core.constants import SFTP_BINARY_NAME
from ...core.exceptions import CommandError
from ...core.interfaces import Client
from ...core.logging import get_logger
from .models import CommandResult
from .sftp import SystemSFTPClient
from .transport import execute

logger = get_logger(__name__)

RemoteCommand = Union[str, Sequence[str]]


def _render(remote_command: RemoteCommand) -> str:
    if isinstance(remote_command, str):
        return remote_command
    return shlex.join(remote_command)


class SystemSSHClient(Client):
    """
    Handle to a connection multiplexed through an ssh control socket.

    Holds no live socket. Every operation spawns the ssh binary with
    base_args(), which routes it through the master behind control_path.
    """

    def __init__(
        self,
        ssh_binary: str,
        control_path: str,
        target: str,
        port: int,
        sftp_binary: str = SFTP_BINARY_NAME,
    ) -> None:
        self._ssh_binary = ssh_binary
        self._control_path = control_path
        self._target = target
        self._port = port
        self._sftp_binary = sftp_binary

    @property
    def ssh_binary(self) -> str:
        return self._ssh_binary

    @property
    def sftp_binary(self) -> str:
        return self._sftp_binary

    @property
    def control_path(self) -> str:
        return self._control_path

    @property
    def target(self) -> str:
        return self._target

    @property
    def port(self) -> int:
        return self._port

    def __repr__(self) -> str:
        return f"SystemSSHClient(target={self._target!r}, port={self._port}, control_path={self._control_path!r})"

    # --------------------
    # Argument construction
    # --------------------
    def base_args(self) -> List[str]:
        """Options every ssh invocation on this connection starts with"""
        return [
            "-o", f"ControlPath={self._control_path}",
            "-o", "BatchMode=yes",
            # always explicit, even for 22
            "-p", str(self._port),
        ]

    def command(
        self,
        remote_command: Optional[RemoteCommand] = None,
        extra_args: Sequence[str] = (),
    ) -> List[str]:
        """
        Full argv for an ssh invocation on this connection.
        
        Args:
            remote_command: Command to run remotely; a list is shell-quoted
            extra_args: ssh options placed between base_args() and the target
        """
        argv = [self._ssh_binary, *self.base_args(), *extra_args, self._target]
        if remote_command is not None:
            argv.append(_render(remote_command))
        return argv

    # --------------------
    # Execution
    # --------------------
    def run(
        self,
        remote_command: RemoteCommand,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
        input: Optional[str] = None,
    ) -> CommandResult:
        """
        Run a remote command and return its output.
        
        A non-zero remote exit is reported in the result, not raised.
        
        Raises:
            TransportError: If ssh can't be spawned, times out or is cancelled
        """
        result = execute(self.command(remote_command), timeout=timeout, cancel=cancel, input=input)
        return CommandResult(
            command=_render(remote_command),
            exit_code=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    def run_checked(
        self,
        remote_command: RemoteCommand,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
        input: Optional[str] = None,
    ) -> CommandResult:
        """Like run(), but raise CommandError on non-zero exit"""
        result = self.run(remote_command, timeout=timeout, cancel=cancel, input=input)
        if not result.ok:
            raise CommandError(result.command, result.exit_code, result.stderr)
        return result

    # --------------------
    # Master control
    # --------------------
    def _control(self, operation: str, timeout: Optional[float]) -> bool:
        argv = [self._ssh_binary, "-O", operation, *self.base_args(), self._target]
        result = execute(argv, timeout=timeout)
        logger.debug("ssh -O %s for %s: exit %d", operation, self._target, result.returncode)
        return result.ok

    def check(self, timeout: Optional[float] = 10) -> bool:
        """Whether a master is currently listening on the control socket"""
        return self._control("check", timeout)

    def exit(self, timeout: Optional[float] = 10) -> bool:
        """Ask the master to shut down; False if none was running"""
        return self._control("exit", timeout)

    # --------------------
    # File transfer
    # --------------------
    def open_sftp(self) -> SystemSFTPClient:
        """SFTP client sharing this connection's control socket"""
        return SystemSFTPClient(
            sftp_binary=self._sftp_binary,
            control_path=self._control_path,
            target=self._target,
            port=self._port,
        )
