"""
Table presets for Database Sync.
"""

import logging
from typing import Any, Optional, Sequence

from .models import Preset

CUSTOM_PRESET = 'custom'
DEFAULT_PRESET = 'development'

LAST_PRESET_KEY = 'last_preset'
LAST_TABLES_KEY = 'last_tables'

PRESETS: dict[str, Preset] = {
    'development': Preset(
        key='development',
        name='Development',
        description='Full development environment sync',
        tables=(
            'posts', 'postmeta', 'terms', 'term_relationships', 'term_taxonomy',
            'termmeta', 'options', 'widgets', 'widget_areas', 'users', 'usermeta',
        ),
    ),
    'content': Preset(
        key='content',
        name='Content Only',
        description='Content and structure only',
        tables=('posts', 'postmeta', 'terms', 'term_relationships', 'termmeta'),
    ),
}


class PresetResolver:
    """Maps preset keys to table lists and remembers the last selection."""

    def __init__(self, store: Any, presets: Optional[dict[str, Preset]] = None):
        self.store = store
        self.presets = presets if presets is not None else PRESETS

    def resolve(self, preset_key: str, custom_tables: Optional[Sequence[str]] = None) -> list[str]:
        """Tables for a preset. 'custom' returns the caller's list as given."""
        if preset_key == CUSTOM_PRESET:
            return list(custom_tables or [])

        if preset_key in self.presets:
            return list(self.presets[preset_key].tables)

        logging.warning(f"Unknown preset '{preset_key}', falling back to '{DEFAULT_PRESET}'")
        return list(self.presets[DEFAULT_PRESET].tables)

    def display_name(self, preset_key: str) -> str:
        if preset_key in self.presets:
            return self.presets[preset_key].name
        return 'Custom'

    def remember(self, preset_key: str, tables: Sequence[str]) -> None:
        """Persist the selection so the next export can default to it."""
        self.store.set(LAST_PRESET_KEY, preset_key)
        self.store.set(LAST_TABLES_KEY, list(tables))

    def last_selection(self) -> tuple[str, list[str]]:
        preset_key = self.store.get(LAST_PRESET_KEY, DEFAULT_PRESET)
        return preset_key, list(self.store.get(LAST_TABLES_KEY, []) or [])
