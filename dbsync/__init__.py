"""
Database Sync
=============
Export selected database tables to a portable SQL dump and import such
dumps into another database instance, with:
- Table presets and custom selections
- Metadata encoded in dump filenames
- Transactional, all-or-nothing imports
- Automatic backup of overwritten tables, and restore
- URL rewriting inside string literals
- Change detection for the dump directory
"""

from .backup import BackupManager
from .config import ConfigLoader
from .connection import DatabaseConnection
from .database_sync import DatabaseSync
from .dump_generator import DumpGenerator
from .errors import (
    DbSyncError,
    ErrorKind,
    ExecutionError,
    IntegrityError,
    StorageError,
    ValidationError,
)
from .filename_codec import backup_filename, encode_filename, parse_filename
from .importer import DumpImporter, read_source_url, rewrite_urls
from .main import main
from .models import (
    BackupResult,
    DumpFile,
    ExportResult,
    FilenameFormat,
    FilenameInfo,
    ImportPreview,
    ImportResult,
    PollResult,
    Preset,
    StatementResult,
)
from .presets import PRESETS, PresetResolver
from .registry import FileRegistry
from .settings_store import MemorySettingsStore, YamlSettingsStore
from .sql_splitter import extract_create_tables, split_sql, strip_comments
from .utils import environment_name, format_size, setup_logging

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "BackupManager",
    "ConfigLoader",
    "DatabaseConnection",
    "DatabaseSync",
    "DumpGenerator",
    "DumpImporter",
    "FileRegistry",
    "PresetResolver",
    "MemorySettingsStore",
    "YamlSettingsStore",
    # SQL text and filenames
    "backup_filename",
    "encode_filename",
    "extract_create_tables",
    "parse_filename",
    "read_source_url",
    "rewrite_urls",
    "split_sql",
    "strip_comments",
    # Models
    "BackupResult",
    "DumpFile",
    "ExportResult",
    "FilenameFormat",
    "FilenameInfo",
    "ImportPreview",
    "ImportResult",
    "PollResult",
    "Preset",
    "PRESETS",
    "StatementResult",
    # Errors
    "DbSyncError",
    "ErrorKind",
    "ExecutionError",
    "IntegrityError",
    "StorageError",
    "ValidationError",
    # Utilities
    "environment_name",
    "format_size",
    "setup_logging",
]
