"""
Shared fixtures: an in-memory stand-in for a MySQL data source.

FakeConnection understands exactly the statements dumps contain (DROP TABLE
IF EXISTS, CREATE TABLE, single-row INSERT INTO) and escapes literals the
way MySQL does, so dumps can be generated, imported and compared without a
server.
"""

import copy
import re

import pytest

from dbsync.config import ConfigLoader
from dbsync.models import StatementResult
from dbsync.settings_store import MemorySettingsStore

DROP_PATTERN = re.compile(r'^DROP\s+TABLE\s+IF\s+EXISTS\s+`([^`]+)`\s*;?\s*$', re.IGNORECASE)
CREATE_PATTERN = re.compile(r'^CREATE\s+TABLE\s+`([^`]+)`\s*\((.*)\)[^)]*$', re.IGNORECASE | re.DOTALL)
INSERT_PATTERN = re.compile(
    r'^INSERT\s+INTO\s+`([^`]+)`\s*\((.*?)\)\s*VALUES\s*\((.*)\)\s*;?\s*$',
    re.IGNORECASE | re.DOTALL
)
COLUMN_PATTERN = re.compile(r'^\s*`([^`]+)`', re.MULTILINE)

ESCAPES = {'n': '\n', 'r': '\r', 'Z': '\x1a', '0': '\0', 't': '\t', 'b': '\b'}


def mysql_escape(value: str) -> str:
    value = value.replace('\\', '\\\\')
    value = value.replace('\n', '\\n')
    value = value.replace('\r', '\\r')
    value = value.replace("'", "\\'")
    value = value.replace('"', '\\"')
    return value.replace('\x1a', '\\Z')


def mysql_unescape(value: str) -> str:
    out = []
    chars = iter(value)
    for char in chars:
        if char == '\\':
            nxt = next(chars, '')
            out.append(ESCAPES.get(nxt, nxt))
        else:
            out.append(char)
    return ''.join(out)


def split_fields(text: str) -> list[str]:
    """Split a VALUES tuple body on top-level commas."""
    fields = []
    start = 0
    in_quote = None
    escaped = False
    for pos, char in enumerate(text):
        if escaped:
            escaped = False
        elif char == '\\':
            escaped = True
        elif in_quote:
            if char == in_quote:
                in_quote = None
        elif char in ("'", '"'):
            in_quote = char
        elif char == ',':
            fields.append(text[start:pos].strip())
            start = pos + 1
    fields.append(text[start:].strip())
    return fields


def parse_value(field: str):
    if field.upper() == 'NULL':
        return None
    if len(field) >= 2 and field[0] == field[-1] and field[0] in ("'", '"'):
        return mysql_unescape(field[1:-1])
    return field


class FakeConnection:
    """In-memory data source with transaction support."""

    def __init__(self, tables=None):
        # name -> {'create': str, 'columns': [...], 'rows': [tuple, ...]}
        self.tables = tables or {}
        self.executed: list[str] = []
        self.events: list[str] = []
        self.fail_on = None
        self._snapshot = None

    def add_table(self, name, columns, rows=(), create=None):
        if create is None:
            body = ',\n'.join(f"  `{col}` text" for col in columns)
            create = f"CREATE TABLE `{name}` (\n{body}\n) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4"
        self.tables[name] = {'create': create, 'columns': list(columns), 'rows': [tuple(r) for r in rows]}

    def rows(self, name):
        return list(self.tables[name]['rows'])

    def get_tables(self):
        return list(self.tables)

    def get_create_table(self, table):
        return self.tables[table]['create'] if table in self.tables else None

    def get_row_count(self, table):
        return len(self.tables[table]['rows'])

    def select_all(self, table):
        data = self.tables[table]
        return list(data['columns']), list(data['rows'])

    def escape_literal(self, value):
        return mysql_escape(value)

    def begin_transaction(self):
        self.events.append('begin')
        self._snapshot = copy.deepcopy(self.tables)

    def commit(self):
        self.events.append('commit')
        self._snapshot = None

    def rollback(self):
        self.events.append('rollback')
        if self._snapshot is not None:
            self.tables = self._snapshot
            self._snapshot = None

    def execute_statement(self, statement):
        self.executed.append(statement)
        if self.fail_on and self.fail_on in statement:
            return StatementResult.failure(f"Simulated failure near '{self.fail_on}'")

        match = DROP_PATTERN.match(statement)
        if match:
            self.tables.pop(match.group(1), None)
            return StatementResult()

        match = CREATE_PATTERN.match(statement.rstrip().rstrip(';'))
        if match:
            name = match.group(1)
            if name in self.tables:
                return StatementResult.failure(f"Table '{name}' already exists")
            self.tables[name] = {
                'create': statement.rstrip().rstrip(';'),
                'columns': COLUMN_PATTERN.findall(match.group(2)),
                'rows': [],
            }
            return StatementResult()

        match = INSERT_PATTERN.match(statement)
        if match:
            name = match.group(1)
            if name not in self.tables:
                return StatementResult.failure(f"Table '{name}' doesn't exist")
            columns = [c.strip().strip('`') for c in match.group(2).split(',')]
            values = [parse_value(f) for f in split_fields(match.group(3))]
            if len(columns) != len(values):
                return StatementResult.failure("Column count doesn't match value count")
            table = self.tables[name]
            row = dict(zip(columns, values))
            table['rows'].append(tuple(row.get(col) for col in table['columns']))
            return StatementResult()

        return StatementResult.failure("You have an error in your SQL syntax")


@pytest.fixture
def fake_connection():
    conn = FakeConnection()
    conn.add_table(
        'wp_posts',
        ['ID', 'post_title', 'post_content', 'guid'],
        [
            ('1', 'Hello world', 'Welcome to WordPress.', 'http://source.local/?p=1'),
            ('2', "It's a \"quoted\" title", 'Line one\nLine two; with semicolon', 'http://source.local/?p=2'),
            ('3', None, 'Back\\slash and );', 'http://source.local/?p=3'),
        ],
    )
    conn.add_table(
        'wp_postmeta',
        ['meta_id', 'post_id', 'meta_key', 'meta_value'],
        [
            ('1', '1', '_data', 'a:2:{s:1:"x";i:5;s:3:"url";s:25:"http://source.local/image";}'),
        ],
    )
    conn.add_table('wp_terms', ['term_id', 'name'], [])
    conn.add_table('wp_options', ['option_id', 'option_name', 'option_value'], [
        ('1', 'siteurl', 'http://source.local'),
    ])
    return conn


@pytest.fixture
def settings_store():
    return MemorySettingsStore()


@pytest.fixture
def write_config(tmp_path):
    """Write a configuration file and return its path."""
    def _write(site_url='http://target.local', **extra):
        storage = tmp_path / 'dumps'
        lines = [
            'instances:',
            '  primary:',
            '    host: localhost',
            '    port: 3306',
            '    user: root',
            '    password: secret',
            '    database: wordpress',
            'site:',
            f'  url: {site_url}',
            '  table_prefix: wp_',
            'storage:',
            f'  directory: {storage}',
        ]
        for section, values in extra.items():
            lines.append(f'{section}:')
            for key, value in values.items():
                lines.append(f'  {key}: {value}')
        path = tmp_path / 'config.yaml'
        path.write_text('\n'.join(lines) + '\n')
        return str(path)
    return _write


@pytest.fixture
def config(write_config):
    return ConfigLoader(write_config())


@pytest.fixture
def connection_factory():
    """Build empty FakeConnection instances."""
    return FakeConnection
