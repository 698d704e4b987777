"""
Project constants definitions
"""

# ============================================================
# Transport Binaries
# ============================================================

SSH_BINARY_NAME = "ssh"
SFTP_BINARY_NAME = "sftp"

# ============================================================
# Default Values
# ============================================================

DEFAULT_SSH_PORT = 22
DEFAULT_SSH_USER = "root"
DEFAULT_CONNECT_TIMEOUT = 10

# ============================================================
# Connection Multiplexing
# ============================================================

DEFAULT_CONTROL_DIR = "~/.ssh/sshmux"
CONTROL_DIR_MODE = 0o700
# Expanded by ssh itself to a hash of (local host, host, port, user)
CONTROL_PATH_TOKEN = "%C"
DEFAULT_CONTROL_PERSIST = "10m"

# ============================================================
# Process Execution
# ============================================================

PROCESS_POLL_INTERVAL = 0.05
PROCESS_KILL_GRACE = 2.0

# ============================================================
# SSH Config
# ============================================================

SSH_CONFIG_PATH = "~/.ssh/config"

# ============================================================
# Environment
# ============================================================

ENV_PREFIX = "SSHMUX_"

# ============================================================
# Logging
# ============================================================

LOGGER_NAME = "sshmux"
LOG_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Third-party loggers kept at WARNING unless running at DEBUG
NOISY_LOGGERS = ("paramiko",)
