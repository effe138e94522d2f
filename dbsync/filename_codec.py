"""
Dump filename encoding and decoding.

The filename is the only place dump metadata lives:

    250825-143022-content-only-local.sql       timestamped
    250825-143022-content-only-local-BAK.sql   backup of the above
    250825-development-local.sql               legacy, no time segment
"""

import logging
import re
from datetime import datetime
from typing import Optional

from .models import FilenameFormat, FilenameInfo

DATE_FORMAT = '%y%m%d'
TIME_FORMAT = '%H%M%S'
SQL_EXTENSION = '.sql'
BACKUP_SUFFIX = '-BAK'
UNKNOWN = 'Unknown'

TIMESTAMPED_PATTERN = re.compile(
    r'^(?P<date>\d{6})-(?P<time>\d{6})-(?P<preset>.+?)-(?P<environment>[^-]+?)(?P<bak>-BAK)?\.sql$'
)
LEGACY_PATTERN = re.compile(
    r'^(?P<date>\d{6})-(?P<preset>.+?)-(?P<environment>[^-]+?)(?P<bak>-BAK)?\.sql$'
)


def slugify(value: str) -> str:
    """Lower-case a label and replace whitespace with dashes."""
    return re.sub(r'\s+', '-', value.strip()).lower()


def unslugify(slug: str) -> str:
    """Turn a slug back into a display label ('content-only' -> 'Content Only')."""
    return ' '.join(part.capitalize() for part in slug.split('-') if part)


def environment_slug(value: str) -> str:
    """Dash-free environment segment ('Staging Server' -> 'staging_server')."""
    return re.sub(r'[\s_-]+', '_', value.strip()).strip('_').lower()


def environment_label(slug: str) -> str:
    """Turn an environment segment back into a label ('staging_server' -> 'Staging Server')."""
    return ' '.join(part.capitalize() for part in slug.split('_') if part)


def encode_filename(
    preset_name: str,
    environment: str,
    when: Optional[datetime] = None,
    backup: bool = False
) -> str:
    """Build a dump filename from its metadata."""
    when = when or datetime.now()
    stamp = when.strftime(f'{DATE_FORMAT}-{TIME_FORMAT}')
    suffix = BACKUP_SUFFIX if backup else ''
    return f"{stamp}-{slugify(preset_name)}-{environment_slug(environment)}{suffix}{SQL_EXTENSION}"


def backup_filename(import_filename: str) -> str:
    """Name of the backup taken before importing `import_filename`."""
    if import_filename.endswith(SQL_EXTENSION):
        return import_filename[:-len(SQL_EXTENSION)] + BACKUP_SUFFIX + SQL_EXTENSION
    return import_filename + BACKUP_SUFFIX + SQL_EXTENSION


def parse_filename(filename: str) -> FilenameInfo:
    """Decode metadata from a dump filename.

    Never raises. Names matching neither the timestamped nor the legacy
    form decode to an UNKNOWN record.
    """
    match = TIMESTAMPED_PATTERN.match(filename)
    if match:
        date, time = match.group('date'), match.group('time')
        info = FilenameInfo(
            format=FilenameFormat.TIMESTAMPED,
            date=date,
            time=time,
            timestamp=f"{date}-{time}",
            preset=unslugify(match.group('preset')),
            preset_slug=match.group('preset'),
            environment=environment_label(match.group('environment')),
            is_backup=match.group('bak') is not None,
            created_at=_parse_datetime(date, time),
        )
        logging.debug(f"Parsed filename '{filename}' - is_backup: {info.is_backup}, timestamp: {info.timestamp}")
        return info

    match = LEGACY_PATTERN.match(filename)
    if match:
        date = match.group('date')
        info = FilenameInfo(
            format=FilenameFormat.LEGACY,
            date=date,
            time='000000',
            timestamp=f"{date}-000000",
            preset=unslugify(match.group('preset')),
            preset_slug=match.group('preset'),
            environment=environment_label(match.group('environment')),
            is_backup=match.group('bak') is not None,
            created_at=_parse_datetime(date, '000000'),
        )
        logging.debug(f"Parsed filename (legacy format) '{filename}' - is_backup: {info.is_backup}")
        return info

    logging.debug(f"Filename '{filename}' did not match any expected pattern")
    return FilenameInfo(
        format=FilenameFormat.UNKNOWN,
        date=UNKNOWN,
        time=UNKNOWN,
        timestamp=UNKNOWN,
        preset=UNKNOWN,
        preset_slug=UNKNOWN,
        environment=UNKNOWN,
        is_backup=False,
    )


def _parse_datetime(date: str, time: str) -> Optional[datetime]:
    # Six digits are not necessarily a valid calendar date
    try:
        return datetime.strptime(f"{date}{time}", f"{DATE_FORMAT}{TIME_FORMAT}")
    except ValueError:
        return None
