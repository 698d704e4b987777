"""
Configuration loader with priority: CLI > env > TOML > defaults
"""
import os
import tomllib
from pathlib import Path
from typing import Dict, Any, Optional

from ...core.constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_CONTROL_PERSIST, ENV_PREFIX
from ...core.exceptions import ConfigError
from ...domain.mux import SystemSSHDialer


class ConfigLoader:
    """Configuration loader with priority support"""
    
    # Environment variable (without prefix) -> config key
    ENV_MAPPINGS = {
        "CONTROL_DIR": "mux.control_dir",
        "CONTROL_PERSIST": "mux.control_persist",
        "CONNECT_TIMEOUT": "mux.connect_timeout",
        "SSH_BINARY": "mux.ssh_binary",
        "SFTP_BINARY": "mux.sftp_binary",
        "USER": "user",
        "PORT": "port",
    }
    
    def __init__(self, env_prefix: str = ENV_PREFIX):
        self._env_prefix = env_prefix
    
    def load_toml(self, path: Path) -> Dict[str, Any]:
        """Load TOML configuration file"""
        path = Path(path).expanduser()
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")
        
        try:
            return tomllib.loads(path.read_text(encoding='utf-8'))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse TOML configuration {path}: {e}") from e
    
    def load_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables"""
        config: Dict[str, Any] = {}
        
        for env_suffix, config_key in self.ENV_MAPPINGS.items():
            value = os.getenv(self._env_prefix + env_suffix)
            if not value:
                continue
            if "." in config_key:
                section, key = config_key.split(".", 1)
                config.setdefault(section, {})[key] = self._convert_value(value)
            else:
                config[config_key] = self._convert_value(value)
        
        return config
    
    def _convert_value(self, value: str) -> Any:
        """Convert string value to appropriate type"""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False
        
        try:
            return int(value)
        except ValueError:
            pass
        
        return value
    
    def merge_configs(self, *configs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configurations with priority.
        Later configs override earlier ones; None values never override.
        """
        result: Dict[str, Any] = {}
        
        for config in configs:
            result = self._deep_merge(result, config)
        
        return result
    
    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries"""
        result = base.copy()
        
        for key, value in override.items():
            if value is None:
                continue
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        
        return result
    
    def load(
        self,
        toml_path: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        use_env: bool = True,
    ) -> Dict[str, Any]:
        """
        Load configuration with priority: CLI > env > TOML
        
        Args:
            toml_path: Path to TOML configuration file
            cli_overrides: CLI parameter overrides
            use_env: Whether to load from environment variables
        
        Returns:
            Merged configuration dictionary
        """
        configs = []
        
        if toml_path:
            configs.append(self.load_toml(toml_path))
        
        if use_env:
            env_config = self.load_env()
            if env_config:
                configs.append(env_config)
        
        if cli_overrides:
            configs.append(cli_overrides)
        
        return self.merge_configs(*configs)


def build_dialer(cfg: Dict[str, Any]) -> SystemSSHDialer:
    """
    Create a dialer from the [mux] section and top-level user of a merged config.
    
    Raises:
        ConfigError: If a setting has the wrong type
    """
    mux = cfg.get("mux", {})
    if not isinstance(mux, dict):
        raise ConfigError("[mux] must be a table")
    
    connect_timeout = mux.get("connect_timeout", DEFAULT_CONNECT_TIMEOUT)
    if isinstance(connect_timeout, bool) or not isinstance(connect_timeout, int) or connect_timeout < 0:
        raise ConfigError(f"mux.connect_timeout must be a non-negative integer, got {connect_timeout!r}")
    
    control_persist = mux.get("control_persist", DEFAULT_CONTROL_PERSIST)
    if isinstance(control_persist, bool):
        control_persist = "yes" if control_persist else "no"
    
    user = cfg.get("user")
    if user is not None and not isinstance(user, str):
        raise ConfigError(f"user must be a string, got {user!r}")
    
    control_dir = mux.get("control_dir")
    if control_dir:
        control_dir = os.path.expanduser(str(control_dir))
    
    return SystemSSHDialer(
        control_dir=control_dir,
        ssh_binary=mux.get("ssh_binary"),
        sftp_binary=mux.get("sftp_binary"),
        control_persist=str(control_persist),
        connect_timeout=connect_timeout,
        default_user=user,
    )
