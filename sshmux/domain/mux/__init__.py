"""
Connection multiplexing domain module
"""
from .models import ConnectionParams, CommandResult, normalize_params, default_identity
from .locator import BinaryLocator
from .control import control_directory, control_socket_path, ensure_control_directory
from .client import SystemSSHClient
from .sftp import SystemSFTPClient
from .dialer import SystemSSHDialer

__all__ = [
    "ConnectionParams",
    "CommandResult",
    "normalize_params",
    "default_identity",
    "BinaryLocator",
    "control_directory",
    "control_socket_path",
    "ensure_control_directory",
    "SystemSSHClient",
    "SystemSFTPClient",
    "SystemSSHDialer",
]
