"""
Run transport binaries and translate process failures into domain errors
"""
import subprocess
import threading
from typing import NamedTuple, Optional, Sequence, Type, Union

from ...core.exceptions import (
    TransportCancelledError,
    TransportError,
    TransportTimeoutError,
)
from ...infrastructure.process import ProcessCancelled, ProcessResult, run_process


class ErrorKinds(NamedTuple):
    """Exception classes raised for spawn failure, timeout and cancellation"""
    failed: Type[TransportError]
    timeout: Type[TransportError]
    cancelled: Type[TransportError]


TRANSPORT_ERRORS = ErrorKinds(TransportError, TransportTimeoutError, TransportCancelledError)


def execute(
    argv: Sequence[str],
    timeout: Optional[float] = None,
    cancel: Optional[threading.Event] = None,
    input: Optional[Union[str, bytes]] = None,
    errors: ErrorKinds = TRANSPORT_ERRORS,
) -> ProcessResult:
    """
    Run argv to completion. A non-zero exit is returned, not raised.
    
    Raises:
        errors.failed: If the binary can't be spawned
        errors.timeout: If timeout elapses (the process is killed)
        errors.cancelled: If cancel is set (the process is killed)
    """
    try:
        return run_process(argv, timeout=timeout, cancel=cancel, input=input)
    except subprocess.TimeoutExpired as e:
        stderr = e.stderr if isinstance(e.stderr, str) else ""
        raise errors.timeout(f"{argv[0]} timed out after {timeout}s", argv=argv, stderr=stderr) from e
    except ProcessCancelled as e:
        raise errors.cancelled(f"{argv[0]} cancelled", argv=argv) from e
    except OSError as e:
        raise errors.failed(f"Cannot run {argv[0]}: {e}", argv=argv) from e
