"""
Multiplexing domain models
"""
import dataclasses
import getpass
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ...core.constants import DEFAULT_SSH_PORT, DEFAULT_SSH_USER
from ...core.exceptions import InvalidParamsError


@dataclass(frozen=True)
class ConnectionParams:
    """
    Where and as whom to connect.

    An empty user and a port of 0 mean "unset"; see normalize_params().
    """
    host: str
    user: str = ""
    port: int = 0

    @property
    def target(self) -> str:
        """user@host token passed to ssh"""
        if self.user:
            return f"{self.user}@{self.host}"
        return self.host

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConnectionParams":
        """Create from a dictionary, treating None as unset"""
        port = data.get("port") or 0
        try:
            port = int(port)
        except (TypeError, ValueError):
            raise InvalidParamsError(f"port must be an integer, got {port!r}") from None
        return cls(
            host=data.get("host") or "",
            user=data.get("user") or "",
            port=port,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"host": self.host, "user": self.user, "port": self.port}


@dataclass(frozen=True)
class CommandResult:
    """Result of a remote command execution"""
    command: str
    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def default_identity() -> str:
    """Login name of the invoking user, or root when none can be determined"""
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return DEFAULT_SSH_USER


def _check_token(field: str, value: str) -> None:
    """Reject values ssh would parse as an option or split into several words"""
    if value.startswith("-"):
        raise InvalidParamsError(f"{field} must not start with '-': {value!r}")
    if any(c.isspace() or not c.isprintable() for c in value):
        raise InvalidParamsError(f"{field} must not contain whitespace or control characters: {value!r}")


def normalize_params(params: ConnectionParams, default_user: Optional[str] = None) -> ConnectionParams:
    """
    Fill unset user and port.
    
    The result is a new instance; the input is never modified. Normalizing
    an already normalized value returns an equal value.
    
    Args:
        params: Raw connection parameters
        default_user: Identity used when params.user is empty
            (defaults to the invoking user)
    
    Returns:
        ConnectionParams with user and port always set
    
    Raises:
        InvalidParamsError: If host is empty, host or user could be read as
            an ssh option, or port is out of range
    """
    if not params.host or not params.host.strip():
        raise InvalidParamsError("host must be a non-empty string")
    _check_token("host", params.host)
    if not isinstance(params.port, int) or params.port < 0 or params.port > 65535:
        raise InvalidParamsError(f"port must be 1-65535, got {params.port!r}")

    user = params.user or default_user or default_identity()
    _check_token("user", user)
    port = params.port or DEFAULT_SSH_PORT
    return dataclasses.replace(params, user=user, port=port)
