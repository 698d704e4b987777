"""
Unified exception definitions
"""
from typing import Optional, Sequence


class MuxError(Exception):
    """Base exception class"""
    pass


class ConfigError(MuxError):
    """Configuration error"""
    pass


class InvalidParamsError(MuxError, ValueError):
    """Connection parameters rejected before any work is done"""
    pass


class ControlDirError(MuxError):
    """Control directory could not be created"""
    pass


class TransportError(MuxError):
    """Transport process failed to spawn, or did not finish"""

    def __init__(
        self,
        message: str,
        argv: Optional[Sequence[str]] = None,
        exit_code: Optional[int] = None,
        stderr: str = "",
    ):
        self.argv = list(argv) if argv else []
        self.exit_code = exit_code
        self.stderr = stderr
        detail = f" (exit={exit_code})" if exit_code is not None else ""
        if stderr.strip():
            detail += f": {stderr.strip()}"
        super().__init__(f"{message}{detail}")


class TransportTimeoutError(TransportError):
    """Transport process did not finish before its deadline"""
    pass


class TransportCancelledError(TransportError):
    """Transport process was cancelled by the caller"""
    pass


class DialError(TransportError):
    """Multiplexed connection could not be established or attached to"""
    pass


class DialTimeoutError(DialError, TransportTimeoutError):
    """Dial did not finish before its deadline"""
    pass


class DialCancelledError(DialError, TransportCancelledError):
    """Dial was cancelled by the caller"""
    pass


class CommandError(MuxError):
    """Remote command exited with non-zero status"""

    def __init__(self, command: str, exit_code: int, stderr: str):
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(f"Command {command!r} failed (exit={exit_code}): {stderr.strip()}")


class TransferError(MuxError):
    """File transfer error"""
    pass
