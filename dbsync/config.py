"""
Configuration loading and validation for Database Sync.
"""

import os
import re
from typing import Any

import yaml

DEFAULT_STORAGE_DIRECTORY = './db-sync'
DEFAULT_SETTINGS_FILENAME = '.db-sync-settings.yaml'
DEFAULT_TABLE_PREFIX = 'wp_'


class ConfigLoader:
    """Loads and validates configuration from YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f)

        return self._resolve_env_vars(config or {})

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Recursively resolve environment variables in config."""
        if isinstance(obj, str):
            matches = self.ENV_VAR_PATTERN.findall(obj)
            for match in matches:
                env_value = os.environ.get(match, '')
                obj = obj.replace(f'${{{match}}}', env_value)
            return obj
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def get_instance(self, instance_name: str) -> dict[str, Any]:
        """Get database instance configuration."""
        instances = self.config.get('instances', {})
        if instance_name not in instances:
            raise ValueError(f"Instance '{instance_name}' not found in configuration")
        return instances[instance_name]

    def get_site_settings(self) -> dict[str, Any]:
        """Get site settings (url, table prefix, environment override)."""
        site = dict(self.config.get('site', {}))
        site.setdefault('url', '')
        site.setdefault('table_prefix', DEFAULT_TABLE_PREFIX)
        return site

    def get_storage_settings(self) -> dict[str, Any]:
        """Get storage settings, filling in the settings file location."""
        storage = dict(self.config.get('storage', {}))
        directory = storage.setdefault('directory', DEFAULT_STORAGE_DIRECTORY)
        storage.setdefault('settings_file', os.path.join(directory, DEFAULT_SETTINGS_FILENAME))
        return storage

    def get_import_settings(self) -> dict[str, Any]:
        """Get import settings."""
        settings = dict(self.config.get('import', {}))
        settings.setdefault('rewrite_urls', True)
        settings.setdefault('delete_after_import', True)
        return settings

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self.config.get('logging', {})
