"""
Connection factory and parameter resolution for CLI commands
"""
import threading
from typing import Any, Dict, Optional

from ...core.interfaces import ConnectionFactory
from ...core.utils import load_ssh_config, parse_host_string
from ...domain.mux import ConnectionParams, SystemSSHClient, SystemSSHDialer


class MuxConnectionFactory(ConnectionFactory):
    """Dials through a shared SystemSSHDialer"""
    
    def __init__(
        self,
        dialer: SystemSSHDialer,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ):
        self.dialer = dialer
        self.timeout = timeout
        self.cancel = cancel
    
    def create(self, params: Dict[str, Any]) -> SystemSSHClient:
        """
        Dial and return a client.
        
        Args:
            params: Dictionary with host and optional user/port
        
        Raises:
            DialError: If the connection can't be established
        """
        return self.dialer.dial(
            ConnectionParams.from_dict(params),
            timeout=self.timeout,
            cancel=self.cancel,
        )


def resolve_connection_params(
    host: str,
    user: Optional[str] = None,
    port: Optional[int] = None,
    ssh_config: bool = False,
    cfg: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Resolve connection parameters for a CLI command.
    
    Priority: explicit options > user@host:port string > ~/.ssh/config entry
    > configuration file/environment. Anything still missing is left unset for
    the dialer to fill in.
    
    Args:
        host: Host string (host, user@host or user@host:port)
        user: --user option
        port: --port option
        ssh_config: Treat host as a Host entry of ~/.ssh/config
        cfg: Merged configuration
    
    Returns:
        Dictionary with host, user, port
    """
    cfg = cfg or {}
    hostname, parsed_user, parsed_port = parse_host_string(host, user, port)
    
    params: Dict[str, Any] = {
        "host": hostname,
        "user": cfg.get("user"),
        "port": cfg.get("port"),
    }
    
    if ssh_config:
        entry = load_ssh_config(hostname)
        params["host"] = entry["host"]
        params["user"] = entry["user"] or params["user"]
        params["port"] = entry["port"] or params["port"]
    
    if parsed_user:
        params["user"] = parsed_user
    if parsed_port:
        params["port"] = parsed_port
    
    return params
