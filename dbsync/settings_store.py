"""
Durable key-value settings for Database Sync.

Two values are persisted between runs: the last used preset/table
selection and the file identity baseline used for change detection.
Stores are passed to the components that need them.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from .errors import StorageError


class MemorySettingsStore:
    """Settings kept in a dict. Used for tests and one-shot runs."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value


class YamlSettingsStore(MemorySettingsStore):
    """Settings persisted to a YAML file, rewritten on every change."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise StorageError(f"Could not read settings file '{self.path}': {e}") from e
        return data if isinstance(data, dict) else {}

    def set(self, key: str, value: Any) -> None:
        super().set(key, value)
        self._save()

    def _save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w') as f:
                yaml.safe_dump(self._data, f, default_flow_style=False, sort_keys=True)
        except OSError as e:
            raise StorageError(f"Could not write settings file '{self.path}': {e}") from e
        logging.debug(f"Saved settings to {self.path}")
