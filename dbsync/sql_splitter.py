"""
Statement splitting for SQL dump text.

This is not a SQL parser. Dumps only ever contain DROP TABLE, CREATE TABLE
and INSERT INTO statements, so a single forward scan that tracks string,
escape and parenthesis state is enough to find statement boundaries, even
when string values carry serialized payloads full of quotes and semicolons.
"""

import re
from typing import Iterator, Optional

LINE_COMMENT_PATTERN = re.compile(r'--.*$', re.MULTILINE)
BLOCK_COMMENT_PATTERN = re.compile(r'/\*.*?\*/', re.DOTALL)
CREATE_TABLE_PATTERN = re.compile(
    r'^CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?`([^`]+)`', re.IGNORECASE
)
INSERT_INTO_PATTERN = re.compile(r'^INSERT\s+INTO\s+`([^`]+)`', re.IGNORECASE)
CREATE_PREFIX_PATTERN = re.compile(r'^CREATE\s+TABLE\b', re.IGNORECASE)
INSERT_PREFIX_PATTERN = re.compile(r'^INSERT\s+INTO\b', re.IGNORECASE)

QUOTE_CHARS = ("'", '"')


def strip_comments(sql: str) -> str:
    """Remove line and block comments.

    The pass is textual: a `--` inside a string literal is stripped too.
    Dumps are generated by this package and do not rely on that.
    """
    sql = LINE_COMMENT_PATTERN.sub('', sql)
    return BLOCK_COMMENT_PATTERN.sub('', sql)


def iter_statements(sql: str, remove_comments: bool = True) -> Iterator[str]:
    """Yield complete statements from SQL text, in order.

    Statements keep their terminating semicolon. A trailing statement
    without one is still yielded.
    """
    if remove_comments:
        sql = strip_comments(sql)

    buffer: list[str] = []
    in_string = False
    string_char = ''
    escaped = False
    paren_depth = 0

    for char in sql:
        buffer.append(char)

        if escaped:
            escaped = False
            continue

        if char == '\\':
            escaped = True
            continue

        if in_string:
            if char == string_char:
                in_string = False
                string_char = ''
            continue

        if char in QUOTE_CHARS:
            in_string = True
            string_char = char
        elif char == '(':
            paren_depth += 1
        elif char == ')':
            paren_depth -= 1
        elif char == ';' and paren_depth == 0:
            statement = _finish(buffer)
            if statement:
                yield statement
            buffer = []

    statement = _finish(buffer)
    if statement:
        yield statement


def _finish(buffer: list[str]) -> str:
    statement = ''.join(buffer).strip()
    # A lone terminator is an empty statement
    if not statement.rstrip(';').strip():
        return ''
    return statement


def split_sql(sql: str) -> list[str]:
    """Split SQL text into a list of statements."""
    return list(iter_statements(sql))


def is_create_table(statement: str) -> bool:
    return CREATE_PREFIX_PATTERN.match(statement) is not None


def is_insert(statement: str) -> bool:
    return INSERT_PREFIX_PATTERN.match(statement) is not None


def create_table_name(statement: str) -> Optional[str]:
    match = CREATE_TABLE_PATTERN.match(statement)
    return match.group(1) if match else None


def insert_table_name(statement: str) -> Optional[str]:
    match = INSERT_INTO_PATTERN.match(statement)
    return match.group(1) if match else None


def extract_create_tables(sql: str) -> list[str]:
    """Names of the tables created by a dump, in order of appearance."""
    tables: list[str] = []
    for statement in iter_statements(sql):
        name = create_table_name(statement)
        if name and name not in tables:
            tables.append(name)
    return tables
