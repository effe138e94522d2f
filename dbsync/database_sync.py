"""
Export, import and restore orchestration for Database Sync.
"""

import contextlib
import logging
from datetime import datetime
from typing import Any, Iterator, Optional, Sequence

from .backup import BackupManager
from .config import ConfigLoader
from .connection import DatabaseConnection
from .dump_generator import DumpGenerator
from .errors import ExecutionError, ValidationError
from .filename_codec import encode_filename
from .importer import DumpImporter, read_source_url, rewrite_urls
from .models import DumpFile, ExportResult, ImportPreview, ImportResult, PollResult
from .presets import PresetResolver
from .registry import FileRegistry
from .settings_store import YamlSettingsStore
from .utils import environment_name


class DatabaseSync:
    """Main class for dump operations.

    Each public method is one self-contained operation. A connection is
    opened per operation unless one was passed in.
    """

    def __init__(
        self,
        config: ConfigLoader,
        instance_name: str = 'primary',
        connection: Optional[Any] = None,
        store: Optional[Any] = None
    ):
        self.config = config
        self.instance_name = instance_name
        self.site_settings = config.get_site_settings()
        self.storage_settings = config.get_storage_settings()
        self.import_settings = config.get_import_settings()

        self.site_url = self.site_settings['url']
        self.table_prefix = self.site_settings['table_prefix']
        self.environment = self.site_settings.get('environment') or environment_name(self.site_url)

        self.store = store if store is not None else YamlSettingsStore(
            self.storage_settings['settings_file']
        )
        self.registry = FileRegistry(self.storage_settings['directory'], self.store)
        self.presets = PresetResolver(self.store)
        self._connection = connection

    @contextlib.contextmanager
    def _connect(self) -> Iterator[Any]:
        if self._connection is not None:
            yield self._connection
            return

        instance_config = self.config.get_instance(self.instance_name)
        with DatabaseConnection.from_config(instance_config) as conn:
            yield conn

    def _generator(self, conn: Any) -> DumpGenerator:
        return DumpGenerator(conn, site_url=self.site_url, table_prefix=self.table_prefix)

    def export(
        self,
        preset: str,
        tables: Optional[Sequence[str]] = None,
        when: Optional[datetime] = None
    ) -> ExportResult:
        """Dump the preset's tables to a new file in the storage directory."""
        tables_to_export = self.presets.resolve(preset, tables)
        if not tables_to_export:
            raise ValidationError("No tables selected for export")

        self.presets.remember(preset, tables_to_export)
        preset_name = self.presets.display_name(preset)

        logging.info(f"Exporting {len(tables_to_export)} table(s) with preset '{preset_name}'")
        with self._connect() as conn:
            content = self._generator(conn).generate(tables_to_export)

        filename = encode_filename(preset_name, self.environment, when=when)
        path = self.registry.write_text(filename, content)

        logging.info(f"Export written to {path}")
        return ExportResult(
            filename=filename,
            path=str(path),
            size=path.stat().st_size,
            preset=preset_name,
            environment=self.environment,
            tables=tables_to_export,
        )

    def import_file(self, filename: str) -> ImportResult:
        """Back up the affected tables, then apply a dump.

        The dump file is removed after a successful import.
        """
        sql = self._read_dump(filename)

        with self._connect() as conn:
            manager = BackupManager(conn, self.registry, self._generator(conn))
            backup = manager.create_backup(filename, sql)

            sql = self._prepare(sql)
            result = DumpImporter(conn).import_sql(sql)

        if not result.ok:
            raise ExecutionError(result.errors[0])

        result.backup = backup
        if self.import_settings['delete_after_import']:
            self.registry.delete(filename)
        return result

    def restore(self, backup_filename: str) -> ImportResult:
        """Apply a backup file. The backup is removed once it has been applied."""
        sql = self._read_dump(backup_filename, label='backup file')

        with self._connect() as conn:
            result = DumpImporter(conn).import_sql(sql)

        if not result.ok:
            raise ExecutionError(result.errors[0])

        self.registry.delete(backup_filename)
        logging.info(f"Restored {backup_filename}")
        return result

    def delete(self, filename: str) -> None:
        self.registry.delete(filename)

    def preview(self, filename: str) -> ImportPreview:
        sql = self._read_dump(filename)
        return DumpImporter(None).preview(sql, target_url=self.site_url)

    def list_files(self) -> list[DumpFile]:
        return self.registry.list_files()

    def poll(self) -> PollResult:
        return self.registry.poll()

    def available_tables(self) -> dict[str, str]:
        with self._connect() as conn:
            return self._generator(conn).available_tables()

    def table_counts(self) -> dict[str, int]:
        """Row count per display-named table."""
        with self._connect() as conn:
            tables = self._generator(conn).available_tables()
            return {display: conn.get_row_count(table) for display, table in tables.items()}

    def _read_dump(self, filename: str, label: str = 'SQL file') -> str:
        if not self.registry.exists(filename):
            raise ValidationError(f"{label.capitalize()} not found: {filename}")
        sql = self.registry.read_text(filename)
        if not sql.strip():
            raise ValidationError(f"Could not read {label}: {filename} is empty")
        return sql

    def _prepare(self, sql: str) -> str:
        """Point URLs from the dump's source site at this site."""
        if not self.import_settings['rewrite_urls'] or not self.site_url:
            return sql

        source_url = read_source_url(sql)
        if source_url and source_url != self.site_url:
            logging.info(f"Rewriting URLs: {source_url} -> {self.site_url}")
            return rewrite_urls(sql, source_url, self.site_url)
        return sql
