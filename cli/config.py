"""Configuration management for SealDrive CLI."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Union

from common.constants import DEFAULT_APP_URL, DEFAULT_AUTH_URL
from common.logging_config import get_logger

logger = get_logger(__name__)

CONFIG_DIR_NAME = '.sealdrive'


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "app_url": DEFAULT_APP_URL,
        "auth_url": DEFAULT_AUTH_URL,
        "timeout": 30,
        "verify_tls": True,
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.sealdrive/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Environment variables SEALDRIVE_APP_URL and SEALDRIVE_AUTH_URL
        override the file.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / CONFIG_DIR_NAME / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        config = self.DEFAULT_CONFIG.copy()

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    config.update(json.load(f))
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Config file unreadable, using defaults: {e}")
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError as backup_error:
                    logger.warning(f"Could not back up config file: {backup_error}")
                config = self.DEFAULT_CONFIG.copy()
        else:
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except IOError as e:
                logger.warning(f"Could not write default config: {e}")

        if os.environ.get('SEALDRIVE_APP_URL'):
            config['app_url'] = os.environ['SEALDRIVE_APP_URL']
        if os.environ.get('SEALDRIVE_AUTH_URL'):
            config['auth_url'] = os.environ['SEALDRIVE_AUTH_URL']

        return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not save config: {e}")

    def get_app_url(self) -> str:
        """
        Get app server base URL (files and links).

        Returns:
            Base URL string (e.g., "https://localhost:8080")
        """
        return self.data.get('app_url', DEFAULT_APP_URL).rstrip('/')

    def get_auth_url(self) -> str:
        """
        Get auth server base URL (register and login).

        Returns:
            Base URL string (e.g., "https://localhost:27464")
        """
        return self.data.get('auth_url', DEFAULT_AUTH_URL).rstrip('/')

    def get_timeout(self) -> int:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return self.data.get('timeout', 30)

    def get_verify_tls(self) -> Union[bool, str]:
        """
        Get TLS verification setting.

        Returns:
            True/False, or a path to a CA bundle for self-signed deployments
        """
        return self.data.get('verify_tls', True)

    def get_session_path(self) -> Path:
        """
        Get the session store file, next to the config file unless overridden.

        Returns:
            Path to session JSON file
        """
        custom = self.data.get('session_path')
        if custom:
            return Path(custom)
        return self.config_path.parent / 'session.json'
