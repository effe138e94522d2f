"""
Utility functions for Database Sync.
"""

import logging
import sys
from pathlib import Path
from typing import Any

LOCAL_URL_MARKERS = ('localhost', '.local')
SIZE_UNITS = ('B', 'KB', 'MB', 'GB', 'TB')


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration."""
    log_level = getattr(logging, log_settings.get('level', 'INFO').upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


def environment_name(site_url: str) -> str:
    """Classify a site URL as 'Local' or 'Remote'."""
    if any(marker in site_url for marker in LOCAL_URL_MARKERS):
        return 'Local'
    return 'Remote'


def format_size(size: int) -> str:
    """Human readable byte size, e.g. '1.5 KB'."""
    value = float(size)
    for unit in SIZE_UNITS:
        if value < 1024 or unit == SIZE_UNITS[-1]:
            if unit == 'B':
                return f"{int(value)} B"
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def truncate(text: str, limit: int = 200) -> str:
    """Shorten text for log and error messages."""
    text = ' '.join(text.split())
    if len(text) <= limit:
        return text
    return text[:limit] + '...'
