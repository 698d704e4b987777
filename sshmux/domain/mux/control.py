"""
Control directory and control socket naming
"""
import os
from pathlib import Path
from typing import Optional

from ...core.constants import CONTROL_DIR_MODE, CONTROL_PATH_TOKEN, DEFAULT_CONTROL_DIR
from ...core.exceptions import ControlDirError


def control_directory(override: Optional[str] = None) -> str:
    """Directory holding control sockets: the override if set, else the default"""
    if override:
        return override
    return os.path.expanduser(DEFAULT_CONTROL_DIR)


def control_socket_path(directory: str) -> str:
    """
    ControlPath template for ssh.
    
    ssh replaces %C with a hash of the connection's (local host, host, port,
    user), so identical triples share one socket and distinct triples don't.
    """
    return os.path.join(directory, CONTROL_PATH_TOKEN)


def ensure_control_directory(directory: str) -> Path:
    """
    Create the control directory (and parents) if missing.
    
    Safe to call concurrently. Permissions of an existing directory are left
    alone.
    
    Raises:
        ControlDirError: If the directory can't be created
    """
    path = Path(directory)
    try:
        path.mkdir(mode=CONTROL_DIR_MODE, parents=True, exist_ok=True)
    except OSError as e:
        raise ControlDirError(f"Cannot create control directory {path}: {e}") from e
    return path
