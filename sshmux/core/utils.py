"""
Core utility functions
"""
import shlex
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

import paramiko

from .constants import SSH_CONFIG_PATH
from .exceptions import ConfigError


# ============================================================
# SSH Config Lookup
# ============================================================

def load_ssh_config(hostname: str, config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration for specified Host from ~/.ssh/config.
    
    Args:
        hostname: Host name in SSH configuration
        config_path: Alternative config file (defaults to ~/.ssh/config)
    
    Returns:
        Dictionary containing host, user, port (user/port are None when unset)
    
    Raises:
        ConfigError: If the config file doesn't exist or can't be parsed
    """
    path = Path(config_path or SSH_CONFIG_PATH).expanduser()
    if not path.exists():
        raise ConfigError(f"{path} does not exist")

    try:
        ssh_config = paramiko.SSHConfig.from_path(str(path))
    except Exception as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    entry = ssh_config.lookup(hostname)
    port = entry.get("port")

    return {
        "host": entry.get("hostname", hostname),
        "user": entry.get("user"),
        "port": int(port) if port else None,
    }


# ============================================================
# Host String Parsing
# ============================================================

def parse_host_string(
    host: str,
    user: Optional[str] = None,
    port: Optional[int] = None,
) -> Tuple[str, Optional[str], Optional[int]]:
    """
    Parse host string into components.
    
    Supports "hostname", "user@hostname" and "user@hostname:port".
    Explicit user/port arguments win over values embedded in the string.
    
    Examples:
        parse_host_string("server") -> ("server", None, None)
        parse_host_string("user@server:2222") -> ("server", "user", 2222)
        parse_host_string("user@server:2222", port=3333) -> ("server", "user", 3333)
    """
    parsed_user = user
    host_part = host

    if "@" in host:
        embedded_user, host_part = host.split("@", 1)
        parsed_user = parsed_user or embedded_user or None

    parsed_host = host_part
    parsed_port = port
    # a single colon is a port separator; more than one is an IPv6 literal
    if host_part.count(":") == 1:
        name, _, port_text = host_part.partition(":")
        if port_text.isdigit():
            parsed_host = name
            parsed_port = port if port else int(port_text)

    return parsed_host, parsed_user, parsed_port


# ============================================================
# Command Formatting
# ============================================================

def format_command(argv: Sequence[str]) -> str:
    """Render an argument vector as a copy-pasteable shell line"""
    return shlex.join(str(a) for a in argv)
