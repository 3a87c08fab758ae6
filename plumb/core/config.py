"""Configuration management for Plumb.

Settings are read from INI files and may be overridden per process
with environment variables.
"""

import configparser
import os
from pathlib import Path
from typing import Dict, Optional, Tuple

DEFAULT_IDENTITY = 'Unknown <unknown@example.com>'


class Config:
    """
    Manages Plumb configuration.

    Configuration is stored in INI format, similar to Git:
    - Global config: ~/.plumbconfig
    - Explicit config file passed by the caller (e.g. --config)

    The explicit file takes precedence over global config.
    Environment variables (PLUMB_<SECTION>_<KEY>) take highest precedence.
    """

    GLOBAL_CONFIG_PATH = Path.home() / '.plumbconfig'

    def __init__(self, config_path: Optional[Path] = None, global_path: Optional[Path] = None):
        """
        Initialize Config manager.

        Args:
            config_path: Optional explicit config file
            global_path: Override for the global config location
        """
        self.config_path = Path(config_path) if config_path else None
        self.global_path = Path(global_path) if global_path else self.GLOBAL_CONFIG_PATH
        self._global_config = None
        self._local_config = None

    @property
    def global_config(self) -> configparser.ConfigParser:
        """Load and return global configuration."""
        if self._global_config is None:
            self._global_config = configparser.ConfigParser()
            if self.global_path.exists():
                self._global_config.read(self.global_path)
        return self._global_config

    @property
    def local_config(self) -> configparser.ConfigParser:
        """Load and return the explicit configuration file (empty if none)."""
        if self._local_config is None:
            self._local_config = configparser.ConfigParser()
            if self.config_path and self.config_path.exists():
                self._local_config.read(self.config_path)
        return self._local_config

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value.

        Priority order (highest to lowest):
        1. Environment variables (PLUMB_<SECTION>_<KEY>)
        2. Explicit config file
        3. Global config
        4. Fallback value
        """
        env_key = f"PLUMB_{section.upper()}_{key.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return env_value

        if self.local_config.has_option(section, key):
            return self.local_config.get(section, key)

        if self.global_config.has_option(section, key):
            return self.global_config.get(section, key)

        return fallback

    def get_int(self, section: str, key: str, fallback: int) -> int:
        """
        Get an integer value.

        Raises:
            ValueError: If the configured value is not an integer
        """
        value = self.get(section, key)
        if value is None:
            return fallback
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"{section}.{key} must be an integer, got {value!r}")

    def set(self, section: str, key: str, value: str, save: bool = False) -> None:
        """
        Set a configuration value on the explicit config.

        Args:
            save: Also write the explicit config file
        """
        config = self.local_config
        if not config.has_section(section):
            config.add_section(section)
        config.set(section, key, value)

        if save:
            if not self.config_path:
                raise ValueError("No config file path available")
            with open(self.config_path, 'w') as f:
                config.write(f)

    def list_all(self) -> Dict[str, Dict[str, str]]:
        """
        List all configuration values from files.

        Returns:
            Dict of sections to key-value dicts; explicit values win
        """
        result: Dict[str, Dict[str, str]] = {}
        for config in (self.global_config, self.local_config):
            for section in config.sections():
                result.setdefault(section, {}).update(config.items(section))
        return result

    def get_user_identity(self) -> Tuple[Optional[str], Optional[str]]:
        """
        Get user name and email for commits.

        Returns:
            Tuple of (name, email), either may be None
        """
        return self.get('user', 'name'), self.get('user', 'email')

    def identity(self) -> str:
        """User identity as 'Name <email>', or a placeholder if unset."""
        name, email = self.get_user_identity()
        if not name and not email:
            return DEFAULT_IDENTITY
        return f"{name or 'Unknown'} <{email or 'unknown@example.com'}>"


def get_config(config_path: Optional[Path] = None) -> Config:
    """
    Get a Config instance.

    Args:
        config_path: Explicit config file, or None for global-only config
    """
    return Config(config_path)
