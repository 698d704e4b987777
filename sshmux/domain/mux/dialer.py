"""
Dialer establishing multiplexed ssh connections
"""
from __future__ import annotations

import os
import threading
from typing import List, Optional

from ...core.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_CONTROL_PERSIST,
    SFTP_BINARY_NAME,
    SSH_BINARY_NAME,
)
from ...core.exceptions import DialCancelledError, DialError, DialTimeoutError
from ...core.interfaces import Dialer
from ...core.logging import get_logger
from ...core.telemetry import Telemetry, get_telemetry
from ...core.utils import format_command
from .client import SystemSSHClient
from .control import control_directory, control_socket_path, ensure_control_directory
from .locator import BinaryLocator
from .models import ConnectionParams, normalize_params
from .sftp import SystemSFTPClient
from .transport import ErrorKinds, execute

logger = get_logger(__name__)

DIAL_ERRORS = ErrorKinds(DialError, DialTimeoutError, DialCancelledError)

# Remote command run by the dialing ssh; the master outlives it via ControlPersist
_PROBE_COMMAND = "true"


class SystemSSHDialer(Dialer):
    """
    Dials hosts with the system ssh binary, sharing one master per
    (host, user, port) through control sockets.

    A dialer is meant to be built once and reused. It caches where ssh lives
    and holds the control directory; everything else is per dial. Concurrent
    dials to the same target are not serialized here: ssh's own locking on the
    control socket elects one master and the others attach to it.
    """

    def __init__(
        self,
        control_dir: Optional[str] = None,
        ssh_binary: Optional[str] = None,
        sftp_binary: Optional[str] = None,
        control_persist: str = DEFAULT_CONTROL_PERSIST,
        connect_timeout: Optional[int] = DEFAULT_CONNECT_TIMEOUT,
        default_user: Optional[str] = None,
        telemetry: Optional[Telemetry] = None,
    ) -> None:
        """
        Args:
            control_dir: Directory for control sockets (default ~/.ssh/sshmux)
            ssh_binary: Path to ssh; located on PATH lazily when omitted
            sftp_binary: Path to sftp; derived from ssh_binary when omitted
            control_persist: How long an idle master lingers (ssh ControlPersist)
            connect_timeout: ssh ConnectTimeout in seconds (None leaves ssh's default)
            default_user: Identity used when a dial doesn't name one
            telemetry: Collector for dial metrics (global one by default)
        """
        self._control_dir = control_dir or ""
        self._ssh = BinaryLocator(SSH_BINARY_NAME, ssh_binary)
        self._sftp = BinaryLocator(SFTP_BINARY_NAME, sftp_binary)
        self.control_persist = control_persist
        self.connect_timeout = connect_timeout
        self.default_user = default_user
        self.telemetry = telemetry or get_telemetry()

    def __repr__(self) -> str:
        return f"SystemSSHDialer(control_dir={self.control_dir()!r}, ssh={self.ssh()!r})"

    # --------------------
    # Binaries
    # --------------------
    def check_binary(self) -> bool:
        """Look ssh up on PATH; True if its location is (now) known"""
        return self._ssh.locate()

    def ssh(self) -> str:
        """ssh path to spawn: the located one, or plain "ssh" for PATH lookup at exec time"""
        return self._ssh.path

    def sftp(self) -> str:
        """sftp path to spawn, preferring the one installed next to ssh"""
        if self._sftp.cached:
            return self._sftp.cached
        ssh_path = self.ssh()
        if os.path.isabs(ssh_path):
            sibling = os.path.join(os.path.dirname(ssh_path), SFTP_BINARY_NAME)
            if os.path.isfile(sibling):
                return sibling
        self._sftp.locate()
        return self._sftp.path

    # --------------------
    # Control sockets
    # --------------------
    def control_dir(self) -> str:
        return control_directory(self._control_dir)

    def control_path(self) -> str:
        return control_socket_path(self.control_dir())

    def _master_args(self) -> List[str]:
        args = [
            "-o", "ControlMaster=auto",
            "-o", f"ControlPersist={self.control_persist}",
        ]
        if self.connect_timeout:
            args += ["-o", f"ConnectTimeout={self.connect_timeout}"]
        return args

    # --------------------
    # Dialing
    # --------------------
    def handle(self, params: ConnectionParams) -> SystemSSHClient:
        """
        Client for params without spawning anything.
        
        Useful to check on or stop a master started earlier. Operations on the
        handle fail if no master is listening and ssh can't authenticate
        non-interactively.
        """
        normalized = normalize_params(params, self.default_user)
        return SystemSSHClient(
            ssh_binary=self.ssh(),
            control_path=self.control_path(),
            target=normalized.target,
            port=normalized.port,
            sftp_binary=self.sftp(),
        )

    def dial(
        self,
        params: ConnectionParams,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> SystemSSHClient:
        """
        Start a master for params, or attach to the one already running.
        
        The control directory is created before ssh runs and is left in
        place if the dial fails.
        
        Args:
            params: Target host; unset user/port are filled with defaults
            timeout: Seconds to wait for ssh before killing it
            cancel: Event that aborts the dial when set
        
        Returns:
            Client bound to the control socket
        
        Raises:
            InvalidParamsError: If params has no host or a bad port
            ControlDirError: If the control directory can't be created
            DialError: If ssh can't be spawned or exits non-zero
            DialTimeoutError: If timeout elapses
            DialCancelledError: If cancel is set
        """
        normalized = normalize_params(params, self.default_user)

        if not self._ssh.cached and not self.check_binary():
            logger.debug("ssh not found on PATH, spawning by bare name")

        ensure_control_directory(self.control_dir())

        client = self.handle(normalized)
        argv = client.command(_PROBE_COMMAND, extra_args=self._master_args())
        tags = {"target": client.target, "port": str(client.port)}

        logger.debug("Dialing %s: %s", client.target, format_command(argv))
        with self.telemetry.timed("dial.duration", tags):
            try:
                result = execute(argv, timeout=timeout, cancel=cancel, errors=DIAL_ERRORS)
            except DialError as e:
                self._record_failure(client, str(e))
                raise

        if not result.ok:
            error = DialError(
                f"Failed to connect to {client.target}:{client.port}",
                argv=argv,
                exit_code=result.returncode,
                stderr=result.stderr,
            )
            self._record_failure(client, str(error))
            raise error

        logger.debug("Connected to %s via %s", client.target, client.control_path)
        self.telemetry.record_event("dial.success", {"target": client.target, "port": client.port})
        return client

    def _record_failure(self, client: SystemSSHClient, reason: str) -> None:
        logger.warning("Dial to %s failed: %s", client.target, reason)
        self.telemetry.record_event(
            "dial.failure",
            {"target": client.target, "port": client.port, "reason": reason},
        )

    def dial_sftp(
        self,
        params: ConnectionParams,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> SystemSFTPClient:
        """Dial, then return an SFTP client sharing the new connection"""
        return self.dial(params, timeout=timeout, cancel=cancel).open_sftp()
