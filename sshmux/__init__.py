"""
sshmux - shared ssh connections through OpenSSH control sockets

Dials remote hosts with the system ssh binary and reuses one authenticated
master connection per (host, user, port) for every later command and file
transfer:

    from sshmux import ConnectionParams, SystemSSHDialer

    dialer = SystemSSHDialer()
    client = dialer.dial(ConnectionParams(host="example.com", user="deploy"))
    print(client.run("uname -a").stdout)
    client.open_sftp().put("build.tar.gz", "/tmp/build.tar.gz")
"""

__version__ = "0.1.0"

from .core import (
    Client,
    SFTPClient,
    Dialer,
    ConnectionFactory,
    setup_logging,
    get_telemetry,
)
from .core.exceptions import (
    MuxError,
    ConfigError,
    InvalidParamsError,
    ControlDirError,
    TransportError,
    TransportTimeoutError,
    TransportCancelledError,
    DialError,
    DialTimeoutError,
    DialCancelledError,
    CommandError,
    TransferError,
)
from .domain.mux import (
    ConnectionParams,
    CommandResult,
    normalize_params,
    SystemSSHDialer,
    SystemSSHClient,
    SystemSFTPClient,
)

__all__ = [
    # Version
    "__version__",
    # Interfaces
    "Client",
    "SFTPClient",
    "Dialer",
    "ConnectionFactory",
    # Implementations
    "SystemSSHDialer",
    "SystemSSHClient",
    "SystemSFTPClient",
    # Models
    "ConnectionParams",
    "CommandResult",
    "normalize_params",
    # Utilities
    "setup_logging",
    "get_telemetry",
    # Errors
    "MuxError",
    "ConfigError",
    "InvalidParamsError",
    "ControlDirError",
    "TransportError",
    "TransportTimeoutError",
    "TransportCancelledError",
    "DialError",
    "DialTimeoutError",
    "DialCancelledError",
    "CommandError",
    "TransferError",
]
