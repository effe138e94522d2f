"""
Dump import for Database Sync.
"""

import logging
import re
from typing import Any, Optional

from .models import ImportPreview, ImportResult
from .sql_splitter import (
    QUOTE_CHARS,
    create_table_name,
    insert_table_name,
    is_create_table,
    is_insert,
    iter_statements,
)
from .utils import truncate

SOURCE_URL_PATTERN = re.compile(r'^--\s*Source URL:\s*(\S+)\s*$', re.MULTILINE)
STATEMENT_PREVIEW_LENGTH = 200


def read_source_url(sql: str) -> Optional[str]:
    """The site URL declared in a dump's header comment, if any."""
    match = SOURCE_URL_PATTERN.search(sql)
    return match.group(1) if match else None


def rewrite_urls(sql: str, source: str, target: str) -> str:
    """Replace `source` with `target` inside quoted string literals only.

    Text outside quotes (keywords, backticked identifiers, comments) is
    copied unchanged. Backslash escapes are honoured so an escaped quote
    does not end a literal.
    """
    if not source or source == target or source not in sql:
        return sql

    output: list[str] = []
    literal: list[str] = []
    in_string = False
    string_char = ''
    escaped = False

    for char in sql:
        if not in_string:
            output.append(char)
            if char in QUOTE_CHARS:
                in_string = True
                string_char = char
            continue

        if escaped:
            escaped = False
            literal.append(char)
        elif char == '\\':
            escaped = True
            literal.append(char)
        elif char == string_char:
            output.append(''.join(literal).replace(source, target))
            output.append(char)
            literal = []
            in_string = False
            string_char = ''
        else:
            literal.append(char)

    # Unterminated literal at end of input is left as it was
    output.append(''.join(literal))
    return ''.join(output)


class DumpImporter:
    """Replays dump statements against a data source in one transaction."""

    def __init__(self, connection: Any):
        self.connection = connection

    def import_sql(self, sql: str) -> ImportResult:
        """Execute every statement in order; commit all or roll back all.

        A failed statement does not raise: the transaction is rolled back
        and the returned result carries a single error.
        """
        result = ImportResult()

        self.connection.begin_transaction()
        for statement in iter_statements(sql):
            outcome = self.connection.execute_statement(statement)
            if not outcome.ok:
                self.connection.rollback()
                message = (
                    f"SQL Error: {outcome.error} "
                    f"[statement: {truncate(statement, STATEMENT_PREVIEW_LENGTH)}]"
                )
                logging.error(f"Import failed - {message}")
                return ImportResult(errors=[message])

            if is_create_table(statement):
                result.tables_processed += 1
            elif is_insert(statement):
                result.rows_imported += 1

        self.connection.commit()
        logging.info(
            f"Import completed - Tables: {result.tables_processed}, Rows: {result.rows_imported}"
        )
        return result

    def preview(self, sql: str, target_url: str = '') -> ImportPreview:
        """Count the tables and rows a dump would import."""
        preview = ImportPreview(target_url=target_url, source_url=read_source_url(sql))

        for statement in iter_statements(sql):
            table = create_table_name(statement)
            if table is not None:
                preview.tables.setdefault(table, 0)
                continue

            table = insert_table_name(statement)
            if table is not None:
                preview.tables[table] = preview.tables.get(table, 0) + 1
                preview.total_rows += 1

        return preview
