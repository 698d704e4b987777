"""
Rich-based logging for sshmux

Handlers are attached to the ``sshmux`` package logger, never to the root
logger, so embedding applications keep their own logging configuration.
"""

import logging
from typing import List, Optional, Union
from pathlib import Path

from rich.logging import RichHandler
from rich.console import Console
from rich.traceback import install as install_traceback

from .constants import LOG_FILE_FORMAT, LOGGER_NAME, NOISY_LOGGERS
from .exceptions import ConfigError


# Bound lazily to the current sys.stdout / sys.stderr
_stdout_console = Console()
_stderr_console = Console(stderr=True)

_installed: List[logging.Handler] = []


def _resolve_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ConfigError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[Path] = None,
    rich_tracebacks: bool = True,
) -> logging.Logger:
    """
    Route sshmux log records to stderr (rich) and optionally a file.
    
    Calling it again replaces the handlers installed by the previous call.
    Third-party loggers in NOISY_LOGGERS (paramiko's ssh_config parsing) are
    held at WARNING unless level is DEBUG.
    
    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL) or number
        log_file: Optional log file path
        rich_tracebacks: Render tracebacks with rich
    
    Returns:
        The configured package logger
    
    Raises:
        ConfigError: If level is not a known logging level
    """
    log_level = _resolve_level(level)
    package_logger = logging.getLogger(LOGGER_NAME)
    
    while _installed:
        handler = _installed.pop()
        package_logger.removeHandler(handler)
        handler.close()
    
    rich_handler = RichHandler(
        console=_stderr_console,
        show_time=True,
        show_path=False,
        rich_tracebacks=rich_tracebacks,
        markup=False,
        show_level=True,
    )
    _installed.append(rich_handler)
    
    if log_file:
        log_file = Path(log_file).expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
        _installed.append(file_handler)
    
    for handler in _installed:
        handler.setLevel(log_level)
        package_logger.addHandler(handler)
    package_logger.setLevel(log_level)
    package_logger.propagate = False
    
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(log_level if log_level <= logging.DEBUG else logging.WARNING)
    
    if rich_tracebacks:
        install_traceback(show_locals=False, width=120)
    
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (pass __name__, which lives under the sshmux package)"""
    return logging.getLogger(name)


def get_stdout_console() -> Console:
    """Get stdout console for user-facing output"""
    return _stdout_console


def get_stderr_console() -> Console:
    """Get stderr console for errors and logs"""
    return _stderr_console
