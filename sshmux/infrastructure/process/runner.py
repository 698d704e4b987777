"""
Blocking subprocess runner with timeout and cancellation

Output is captured through temporary files rather than pipes: an ssh master
started with ControlPersist forks into the background and keeps inherited
descriptors open, so reading a pipe to EOF would block until the master exits.
"""
import subprocess
import tempfile
import threading
import time
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import IO, List, Optional, Sequence, Union

from ...core.constants import PROCESS_KILL_GRACE, PROCESS_POLL_INTERVAL
from ...core.logging import get_logger
from ...core.utils import format_command

logger = get_logger(__name__)


class ProcessCancelled(Exception):
    """Raised when the caller's cancel event fires before the process exits"""

    def __init__(self, argv: Sequence[str]):
        self.argv = list(argv)
        super().__init__(f"Cancelled: {format_command(argv)}")


@dataclass(frozen=True)
class ProcessResult:
    """Result of a finished subprocess"""
    argv: List[str] = field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _read(f: IO[bytes]) -> str:
    f.seek(0)
    return f.read().decode("utf-8", errors="replace")


def _stdin_source(stack: ExitStack, input: Optional[Union[str, bytes]]):
    if input is None:
        return subprocess.DEVNULL
    data = input.encode("utf-8") if isinstance(input, str) else input
    f = stack.enter_context(tempfile.TemporaryFile())
    f.write(data)
    f.seek(0)
    return f


def _terminate(proc: subprocess.Popen) -> None:
    """Kill the child and reap it so no zombie is left behind"""
    proc.kill()
    try:
        proc.wait(timeout=PROCESS_KILL_GRACE)
    except subprocess.TimeoutExpired:
        logger.warning("Process %s did not exit after SIGKILL", proc.pid)


def _wait(
    proc: subprocess.Popen,
    argv: List[str],
    deadline: Optional[float],
    cancel: Optional[threading.Event],
    poll_interval: float,
) -> int:
    """Wait for exit, raising once the deadline passes or cancel is set"""
    while True:
        if cancel is not None and cancel.is_set():
            raise ProcessCancelled(argv)

        wait_for = poll_interval
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise subprocess.TimeoutExpired(argv, 0)
            wait_for = min(wait_for, remaining)

        try:
            return proc.wait(timeout=wait_for)
        except subprocess.TimeoutExpired:
            continue


def run_process(
    argv: Sequence[str],
    timeout: Optional[float] = None,
    cancel: Optional[threading.Event] = None,
    input: Optional[Union[str, bytes]] = None,
    poll_interval: float = PROCESS_POLL_INTERVAL,
) -> ProcessResult:
    """
    Run a command to completion.
    
    Args:
        argv: Program and arguments (no shell involved)
        timeout: Seconds before the process is killed (None = no deadline)
        cancel: Event that aborts the process when set
        input: Data fed to stdin; stdin is /dev/null when omitted
        poll_interval: How often timeout and cancellation are checked
    
    Returns:
        ProcessResult with decoded stdout/stderr
    
    Raises:
        OSError: If the program can't be spawned (e.g. FileNotFoundError)
        subprocess.TimeoutExpired: If the deadline passes
        ProcessCancelled: If cancel is set before the process exits
    """
    argv = [str(a) for a in argv]
    deadline = time.monotonic() + timeout if timeout is not None else None

    with ExitStack() as stack:
        stdout = stack.enter_context(tempfile.TemporaryFile())
        stderr = stack.enter_context(tempfile.TemporaryFile())
        stdin = _stdin_source(stack, input)

        logger.debug("Running %s", format_command(argv))
        proc = subprocess.Popen(argv, stdin=stdin, stdout=stdout, stderr=stderr)

        try:
            try:
                returncode = _wait(proc, argv, deadline, cancel, poll_interval)
            finally:
                if proc.poll() is None:
                    _terminate(proc)
        except subprocess.TimeoutExpired:
            raise subprocess.TimeoutExpired(argv, timeout, output=_read(stdout), stderr=_read(stderr)) from None

        result = ProcessResult(
            argv=argv,
            returncode=returncode,
            stdout=_read(stdout),
            stderr=_read(stderr),
        )

    logger.debug("Exit %d from %s", result.returncode, argv[0])
    return result
