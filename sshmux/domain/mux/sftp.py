"""
File-transfer client riding an existing ssh control socket
"""
from __future__ import annotations

import posixpath
import threading
from pathlib import Path
from typing import Iterable, List, Optional

from ...core.exceptions import TransferError
from ...core.interfaces import SFTPClient
from ...core.logging import get_logger
from .transport import execute

logger = get_logger(__name__)

_ECHO_PREFIX = "sftp>"


def quote_sftp_path(path: str) -> str:
    """Quote a path for the sftp batch grammar"""
    escaped = str(path).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class SystemSFTPClient(SFTPClient):
    """
    sftp over a multiplexed connection.

    Operations are sent as sftp batch files on stdin; ssh underneath attaches
    to the master at control_path, so no second handshake happens.
    """

    def __init__(self, sftp_binary: str, control_path: str, target: str, port: int) -> None:
        self._sftp_binary = sftp_binary
        self._control_path = control_path
        self._target = target
        self._port = port

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
        return f"SystemSFTPClient(target={self._target!r}, port={self._port}, control_path={self._control_path!r})"

    def base_args(self) -> List[str]:
        """Options every sftp invocation on this connection starts with"""
        return [
            "-o", f"ControlPath={self._control_path}",
            "-o", "BatchMode=yes",
            # sftp spells the port option -P
            "-P", str(self._port),
        ]

    def command(self) -> List[str]:
        """argv of an sftp batch session reading commands from stdin"""
        return [self._sftp_binary, *self.base_args(), "-b", "-", self._target]

    def batch(
        self,
        commands: Iterable[str],
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> str:
        """
        Run sftp batch commands; sftp stops at the first failing one.
        
        Returns:
            sftp's stdout
        
        Raises:
            TransferError: If sftp exits non-zero
            TransportError: If sftp can't be spawned, times out or is cancelled
        """
        script = "".join(f"{c}\n" for c in commands)
        result = execute(self.command(), timeout=timeout, cancel=cancel, input=script)
        if not result.ok:
            raise TransferError(
                f"sftp batch to {self._target} failed (exit={result.returncode}): {result.stderr.strip()}"
            )
        return result.stdout

    def put(self, local_path: str, remote_path: str, timeout: Optional[float] = None) -> None:
        local = Path(local_path).expanduser()
        if not local.exists():
            raise FileNotFoundError(f"Local file not found: {local}")
        logger.debug("put %s -> %s:%s", local, self._target, remote_path)
        self.batch([f"put {quote_sftp_path(str(local))} {quote_sftp_path(remote_path)}"], timeout=timeout)

    def get(self, remote_path: str, local_path: str, timeout: Optional[float] = None) -> None:
        local = Path(local_path).expanduser()
        local.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("get %s:%s -> %s", self._target, remote_path, local)
        self.batch([f"get {quote_sftp_path(remote_path)} {quote_sftp_path(str(local))}"], timeout=timeout)

    def mkdir(self, remote_path: str) -> None:
        self.batch([f"mkdir {quote_sftp_path(remote_path)}"])

    def remove(self, remote_path: str) -> None:
        self.batch([f"rm {quote_sftp_path(remote_path)}"])

    def listdir(self, remote_path: str = ".") -> List[str]:
        """Names of entries in a remote directory"""
        out = self.batch([f"ls -1 {quote_sftp_path(remote_path)}"])
        names = []
        for line in out.splitlines():
            line = line.strip()
            if not line or line.startswith(_ECHO_PREFIX):
                continue
            names.append(posixpath.basename(line.rstrip("/")))
        return names
