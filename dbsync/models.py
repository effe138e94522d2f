"""
Data models and enums for Database Sync.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from .utils import format_size


class FilenameFormat(Enum):
    """Shape of a dump filename."""
    TIMESTAMPED = "timestamped"
    LEGACY = "legacy"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Preset:
    """A named, fixed set of logical table names."""
    key: str
    name: str
    description: str
    tables: tuple[str, ...] = ()


@dataclass(frozen=True)
class FilenameInfo:
    """Metadata decoded from a dump filename."""
    format: FilenameFormat
    date: str
    time: str
    timestamp: str
    preset: str
    preset_slug: str
    environment: str
    is_backup: bool = False
    created_at: Optional[datetime] = None


@dataclass
class DumpFile:
    """A dump file present in the storage directory."""
    filename: str
    path: str
    size: int
    modified: int
    preset: str
    environment: str
    timestamp: str
    is_backup: bool = False

    @property
    def identity(self) -> str:
        """Identity hash used for change detection."""
        return f"{self.filename}|{self.modified}|{self.size}"

    @property
    def human_size(self) -> str:
        return format_size(self.size)


@dataclass
class StatementResult:
    """Outcome of executing a single statement against the data source."""
    ok: bool = True
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> "StatementResult":
        return cls(ok=False, error=error)


@dataclass
class BackupResult:
    """Backup written before an import."""
    filename: str
    path: str
    size: int = 0
    tables_backed_up: int = 0


@dataclass
class ImportResult:
    """Tally of an import or restore."""
    tables_processed: int = 0
    rows_imported: int = 0
    errors: list[str] = field(default_factory=list)
    backup: Optional[BackupResult] = None

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class ExportResult:
    """Dump file produced by an export."""
    filename: str
    path: str
    size: int
    preset: str
    environment: str
    tables: list[str] = field(default_factory=list)


@dataclass
class ImportPreview:
    """What an import would do, without running it."""
    target_url: str
    source_url: Optional[str] = None
    tables: dict[str, int] = field(default_factory=dict)
    total_rows: int = 0


@dataclass
class PollResult:
    """Result of a change-detection poll."""
    changed: bool
    files: list[DumpFile] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            'changed': self.changed,
            'files': [f.filename for f in self.files],
        }
