"""
Pre-import backups for Database Sync.
"""

import logging
from typing import Any

from .dump_generator import DumpGenerator
from .errors import IntegrityError
from .filename_codec import backup_filename
from .models import BackupResult
from .registry import FileRegistry
from .sql_splitter import extract_create_tables


class BackupManager:
    """Snapshots the tables an import is about to overwrite."""

    def __init__(self, connection: Any, registry: FileRegistry, generator: DumpGenerator):
        self.connection = connection
        self.registry = registry
        self.generator = generator

    def create_backup(self, import_filename: str, sql: str) -> BackupResult:
        """Write `<import>-BAK.sql` covering the tables the dump creates.

        Tables missing from the target have nothing to back up and are
        skipped. An existing backup of the same name is overwritten.
        """
        tables = extract_create_tables(sql)
        if not tables:
            raise IntegrityError("No tables found in import file")

        existing = set(self.connection.get_tables())
        to_backup = [table for table in tables if table in existing]
        skipped = [table for table in tables if table not in existing]
        if skipped:
            logging.info(f"Not in target, nothing to back up: {', '.join(skipped)}")

        filename = backup_filename(import_filename)
        logging.info(f"Creating backup {filename} for tables: {', '.join(to_backup) or '(none)'}")

        content = self.generator.generate_backup(to_backup, import_filename)
        path = self.registry.write_text(filename, content)

        logging.info(f"Backup file created successfully: {filename}")
        return BackupResult(
            filename=filename,
            path=str(path),
            size=path.stat().st_size,
            tables_backed_up=len(to_backup),
        )
