"""
Error types for Database Sync.
"""

from enum import Enum


class ErrorKind(Enum):
    """Machine-distinguishable failure categories."""
    VALIDATION = "validation"
    STORAGE = "storage"
    EXECUTION = "execution"
    INTEGRITY = "integrity"


class DbSyncError(Exception):
    """Base class for all errors reported by an operation."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DbSyncError):
    """Malformed or missing input file, or an empty table selection."""
    kind = ErrorKind.VALIDATION


class StorageError(DbSyncError):
    """Filesystem read, write or delete failure."""
    kind = ErrorKind.STORAGE


class ExecutionError(DbSyncError):
    """A statement failed against the data source; the import was rolled back."""
    kind = ErrorKind.EXECUTION


class IntegrityError(DbSyncError):
    """A dump contains no table definitions where a backup was expected."""
    kind = ErrorKind.INTEGRITY
