"""
Core infrastructure layer
"""
from .constants import *
from .exceptions import *
from .logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from .interfaces import Client, SFTPClient, Dialer, ConnectionFactory
from .telemetry import Telemetry, get_telemetry
from .utils import load_ssh_config, parse_host_string, format_command

__all__ = [
    "setup_logging",
    "get_logger",
    "get_stdout_console",
    "get_stderr_console",
    "Client",
    "SFTPClient",
    "Dialer",
    "ConnectionFactory",
    "Telemetry",
    "get_telemetry",
    "load_ssh_config",
    "parse_host_string",
    "format_command",
]
