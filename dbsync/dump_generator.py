"""
Dump generation for Database Sync.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable

DEFAULT_DIALECT = 'WordPress'
GENERATED_FORMAT = '%Y-%m-%d %H:%M:%S'


class DumpGenerator:
    """Serializes table structure and data to dump text.

    Works against any data source offering get_tables, get_create_table,
    select_all and escape_literal.
    """

    def __init__(
        self,
        connection: Any,
        site_url: str = '',
        table_prefix: str = '',
        dialect: str = DEFAULT_DIALECT
    ):
        self.connection = connection
        self.site_url = site_url
        self.table_prefix = table_prefix
        self.dialect = dialect

        # Everything not listed here is quoted and escaped by the data source
        self._type_formatters: dict[type, Callable[[Any], str]] = {
            type(None): lambda v: 'NULL',
            bytes: lambda v: f"X'{v.hex()}'",
            bytearray: lambda v: f"X'{bytes(v).hex()}'",
            datetime: lambda v: f"'{v.isoformat(sep=' ')}'",
            timedelta: lambda v: f"'{format_time(v)}'",
        }

    def available_tables(self) -> dict[str, str]:
        """Map display names (prefix stripped) to physical table names."""
        tables = {}
        for table in self.connection.get_tables():
            display = table
            if self.table_prefix and table.startswith(self.table_prefix):
                display = table[len(self.table_prefix):]
            tables[display] = table
        return tables

    def generate(self, tables: Iterable[str]) -> str:
        """Dump the given display-named tables, in order.

        Names with no matching table in the data source are skipped.
        """
        tables = list(tables)
        parts = [self._header(
            f"{self.dialect} Database Export",
            f"Exported tables: {', '.join(tables)}",
        )]

        available = self.available_tables()
        for display in tables:
            table = available.get(display)
            if table is None:
                logging.warning(f"Table '{display}' not found, skipping")
                continue
            parts.append(self._dump_table(table, display))

        return ''.join(parts)

    def generate_backup(self, tables: Iterable[str], import_filename: str) -> str:
        """Dump physical tables as a backup taken before `import_filename` is applied."""
        parts = [self._header(
            f"{self.dialect} Database Backup",
            f"Backup before import: {import_filename}",
        )]
        for table in tables:
            parts.append(self._dump_table(table, table))
        return ''.join(parts)

    def _header(self, title: str, detail: str) -> str:
        return (
            f"-- {title}\n"
            f"-- Generated: {datetime.now().strftime(GENERATED_FORMAT)}\n"
            f"-- Source URL: {self.site_url}\n"
            f"-- {detail}\n\n"
        )

    def _dump_table(self, table: str, display: str) -> str:
        create_statement = self.connection.get_create_table(table)
        if not create_statement:
            logging.warning(f"No structure returned for table '{table}', skipping")
            return ''

        sql = f"\n-- Table structure for {display}\n"
        sql += f"DROP TABLE IF EXISTS `{table}`;\n"
        sql += f"{create_statement.rstrip().rstrip(';')};\n\n"
        sql += self._dump_table_data(table, display)
        return sql

    def _dump_table_data(self, table: str, display: str) -> str:
        """Write one INSERT statement per row."""
        sql = f"-- Data for {display}\n"

        columns, rows = self.connection.select_all(table)
        if not rows:
            logging.debug(f"Table '{table}' has no rows")
            return sql + "-- No data found\n\n"

        quoted_columns = ', '.join(f'`{col}`' for col in columns)
        lines = [
            f"INSERT INTO `{table}` ({quoted_columns}) VALUES "
            f"({', '.join(self._format_sql_value(val) for val in row)});\n"
            for row in rows
        ]
        logging.info(f"  {display}: {len(rows)} rows")
        return sql + ''.join(lines) + "\n"

    def _format_sql_value(self, value: Any) -> str:
        """Format a value for an INSERT statement."""
        formatter = self._type_formatters.get(type(value))
        if formatter:
            return formatter(value)

        if isinstance(value, bool):
            value = int(value)
        elif isinstance(value, (set, frozenset)):
            value = ','.join(sorted(value))
        return f"'{self.connection.escape_literal(str(value))}'"


def format_time(value: timedelta) -> str:
    """MySQL TIME literal for a driver timedelta, e.g. '-01:00:00' or '838:59:59.500000'."""
    total = value.days * 86400 + value.seconds
    micros = value.microseconds
    sign = ''
    if total < 0:
        sign = '-'
        total = -total
        if micros:
            total -= 1
            micros = 1000000 - micros
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if micros:
        text += f".{micros:06d}"
    return text
