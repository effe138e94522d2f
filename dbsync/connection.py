"""
Database connection management for Database Sync.
"""

import logging
from typing import Any, Optional

import mysql.connector
from mysql.connector import Error as MySQLError
from mysql.connector.conversion import MySQLConverter

from .models import StatementResult


class DatabaseConnection:
    """Manages MySQL database connections with context manager support.

    Exposes the small set of operations the dump engine needs from a data
    source: table listing, structure introspection, full-table reads,
    literal escaping, statement execution and transaction control.
    """

    DEFAULT_PORT = 3306
    DEFAULT_CHARSET = 'utf8mb4'

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: Optional[str] = None
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.connection = None
        self._converter = MySQLConverter()

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    @classmethod
    def from_config(cls, instance_config: dict[str, Any]) -> "DatabaseConnection":
        return cls(
            host=instance_config['host'],
            port=instance_config.get('port', cls.DEFAULT_PORT),
            user=instance_config['user'],
            password=instance_config['password'],
            database=instance_config.get('database')
        )

    def connect(self) -> None:
        """Establish database connection."""
        try:
            self.connection = mysql.connector.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database,
                charset=self.DEFAULT_CHARSET,
                use_unicode=True,
                autocommit=True
            )
            logging.info(f"Connected to {self.host}:{self.port}/{self.database or 'N/A'}")
        except MySQLError as e:
            logging.error(f"Failed to connect to database: {e}")
            raise

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Database connection closed")

    def execute_query(self, query: str, params: Optional[tuple] = None) -> list[tuple]:
        """Execute a query and return results."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        finally:
            cursor.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the current database."""
        results = self.execute_query("SHOW TABLES")
        return [row[0] for row in results]

    def get_create_table(self, table: str) -> Optional[str]:
        """Get CREATE TABLE statement."""
        results = self.execute_query(f"SHOW CREATE TABLE `{table}`")
        if not results:
            return None
        return results[0][1]

    def get_row_count(self, table: str) -> int:
        """Get row count for a table."""
        results = self.execute_query(f"SELECT COUNT(*) FROM `{table}`")
        return results[0][0]

    def select_all(self, table: str) -> tuple[list[str], list[tuple]]:
        """Read every row of a table. Returns (column names, rows)."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(f"SELECT * FROM `{table}`")
            rows = cursor.fetchall()
            columns = [desc[0] for desc in cursor.description or []]
            return columns, rows
        finally:
            cursor.close()

    def escape_literal(self, value: str) -> str:
        """Escape a value for use inside a single-quoted SQL literal."""
        escaped = self._converter.escape(value)
        if isinstance(escaped, (bytes, bytearray)):
            escaped = escaped.decode('utf-8')
        return escaped

    def execute_statement(self, statement: str) -> StatementResult:
        """Execute a single statement. Engine errors are returned, not raised."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(statement)
            return StatementResult()
        except MySQLError as e:
            return StatementResult.failure(e.msg if getattr(e, 'msg', None) else str(e))
        finally:
            cursor.close()

    def begin_transaction(self) -> None:
        """Start a transaction. Autocommit stays on outside of it."""
        self.connection.start_transaction()

    def commit(self) -> None:
        self.connection.commit()

    def rollback(self) -> None:
        self.connection.rollback()
