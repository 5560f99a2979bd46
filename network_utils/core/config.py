import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigError
from .utils import merge_dicts

ENV_PREFIX = "NETUTILS_"
YAML_SUFFIXES = (".yaml", ".yml")

class Config:
    def __init__(self, config_path: Optional[Path] = None):
        self._config: Dict[str, Any] = {}
        self._load_defaults()
        self._load_environment_variables()
        if config_path:
            self.load(config_path)
        self.validate(self._config)

    def _load_defaults(self) -> None:
        """Load default configuration values"""
        self._config = {
            "app": {
                "name": "network_utils",
                "version": "1.0.0"
            },
            "api": {
                "gateway": "",
                "allow_insecure": False,
                "timeout": 30.0,
                "user_agent": "network_utils/1.0",
                "default_headers": {}
            },
            "logging": {
                "level": "INFO",
                "file": None,
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "console_output": False,
                "max_size": 1024 * 1024,
                "backup_count": 3
            }
        }

    def load(self, path: Path) -> None:
        """Load configuration from a JSON or YAML file"""
        path = Path(path)
        try:
            with open(path, 'r') as f:
                if path.suffix.lower() in YAML_SUFFIXES:
                    file_config = yaml.safe_load(f) or {}
                else:
                    file_config = json.load(f)
        except Exception as e:
            raise ConfigError(f"Failed to load config from {path}: {str(e)}")
        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        self.update(file_config)

    def save(self, path: Path) -> None:
        """Save configuration to a JSON or YAML file"""
        path = Path(path)
        with open(path, 'w') as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                yaml.safe_dump(self._config, f, sort_keys=False)
            else:
                json.dump(self._config, f, indent=2)

    def _load_environment_variables(self) -> None:
        """Load configuration from environment variables"""
        for key, value in os.environ.items():
            if key.startswith(ENV_PREFIX):
                # NETUTILS_API_ALLOW_INSECURE -> api.allow_insecure
                parts = key[len(ENV_PREFIX):].lower().split('_')
                if len(parts) < 2:
                    continue
                config_key = f"{parts[0]}.{'_'.join(parts[1:])}"
                self.set(config_key, self._convert_value(value))

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot notation key"""
        try:
            value = self._config
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value by dot notation key"""
        keys = key.split('.')
        d = self._config
        for k in keys[:-1]:
            if not isinstance(d.get(k), dict):
                d[k] = {}
            d = d[k]
        d[keys[-1]] = value

    def update(self, config_dict: Dict[str, Any]) -> None:
        """Deep-merge a dictionary into the configuration"""
        self._config = merge_dicts(self._config, config_dict)

    def validate(self, config: Dict[str, Any]) -> None:
        """Validate configuration values"""
        if "api" in config:
            api_config = config["api"]
            if "timeout" in api_config:
                timeout = api_config["timeout"]
                if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                    raise ConfigError("api.timeout must be a number")
                if timeout <= 0:
                    raise ConfigError("api.timeout must be positive")
            gateway = api_config.get("gateway") or ""
            if not isinstance(gateway, str):
                raise ConfigError("api.gateway must be a string")
            if "://" in gateway:
                raise ConfigError("api.gateway must be a bare host without a scheme")
            if not isinstance(api_config.get("default_headers", {}), dict):
                raise ConfigError("api.default_headers must be a mapping")

    @staticmethod
    def _convert_value(value: str) -> Any:
        """Convert string value to appropriate type"""
        if value.lower() == "true":
            return True
        if value.lower() == "false":
            return False

        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            return value
