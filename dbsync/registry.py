"""
Dump file storage and change detection for Database Sync.
"""

import logging
from pathlib import Path
from typing import Any

from .errors import StorageError, ValidationError
from .filename_codec import SQL_EXTENSION, parse_filename
from .models import DumpFile, PollResult

STORED_FILES_KEY = 'stored_files'


class FileRegistry:
    """Enumerates dump files and detects changes between polls.

    The filename is the only identity a dump has; there is no index. A
    poll compares `filename|mtime|size` identities against the set stored
    by the previous poll and then replaces that set.
    """

    def __init__(self, directory: str | Path, store: Any):
        self.directory = Path(directory)
        self.store = store

    def path_for(self, filename: str) -> Path:
        """Resolve a bare dump filename inside the storage directory."""
        if not filename or Path(filename).name != filename or filename in ('.', '..'):
            raise ValidationError(f"Invalid dump filename: '{filename}'")
        if not filename.endswith(SQL_EXTENSION):
            raise ValidationError(f"Dump files must end in {SQL_EXTENSION}: '{filename}'")
        return self.directory / filename

    def exists(self, filename: str) -> bool:
        return self.path_for(filename).is_file()

    def read_text(self, filename: str) -> str:
        path = self.path_for(filename)
        if not path.is_file():
            raise ValidationError(f"SQL file not found: {filename}")
        try:
            return path.read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            raise ValidationError(f"SQL file '{filename}' is not valid UTF-8") from e
        except OSError as e:
            raise StorageError(f"Could not read SQL file '{filename}': {e}") from e

    def write_text(self, filename: str, content: str) -> Path:
        """Write (or overwrite) a dump file."""
        path = self.path_for(filename)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            raise StorageError(f"Failed to save SQL file '{filename}': {e}") from e
        logging.debug(f"Wrote {path}")
        return path

    def delete(self, filename: str) -> None:
        path = self.path_for(filename)
        if not path.is_file():
            raise ValidationError(f"File not found: {filename}")
        try:
            path.unlink()
        except OSError as e:
            raise StorageError(f"Failed to delete file '{filename}': {e}") from e
        logging.info(f"Deleted {filename}")

    def describe(self, path: Path) -> DumpFile:
        stat = path.stat()
        info = parse_filename(path.name)
        return DumpFile(
            filename=path.name,
            path=str(path),
            size=stat.st_size,
            modified=int(stat.st_mtime),
            preset=info.preset,
            environment=info.environment,
            timestamp=info.timestamp,
            is_backup=info.is_backup,
        )

    def list_files(self) -> list[DumpFile]:
        """All dump files, newest first. A missing directory has no files."""
        if not self.directory.is_dir():
            return []

        try:
            files = [
                self.describe(path)
                for path in self.directory.glob(f'*{SQL_EXTENSION}')
                if path.is_file()
            ]
        except OSError as e:
            raise StorageError(f"Could not read storage directory '{self.directory}': {e}") from e

        files.sort(key=lambda f: (f.modified, f.filename), reverse=True)
        return files

    @staticmethod
    def identity(file: DumpFile) -> str:
        return file.identity

    def poll(self) -> PollResult:
        """Report whether the set of dump files changed since the last poll.

        The baseline is only replaced after a successful enumeration.
        """
        current_files = self.list_files()
        current = sorted(self.identity(f) for f in current_files)
        stored = sorted(self.store.get(STORED_FILES_KEY, []) or [])

        first_check = not stored and bool(current)
        added = set(current) - set(stored)
        removed = set(stored) - set(current)
        changed = first_check or bool(added) or bool(removed) or len(current) != len(stored)

        for identity in sorted(added):
            logging.debug(f"New or modified file: {identity}")
        for identity in sorted(removed):
            logging.debug(f"File no longer present: {identity}")
        if first_check:
            logging.debug("First check with files present, reporting as changed")

        self.store.set(STORED_FILES_KEY, current)
        logging.debug(f"Poll: {len(current)} file(s), changed={changed}")
        return PollResult(changed=changed, files=current_files)
