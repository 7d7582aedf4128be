"""File store contract consumed by the card view.

The host application owns the notes. The core reads snapshots through this
protocol and never keeps file data between renders.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from vaultcards.core.types import ROOT, FileRecord, FileStat, FolderPath


class StoreError(Exception):
    """Base class for file store failures."""

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"{type(self).__name__}: {path}")


class ReadError(StoreError):
    """Raised when note content cannot be read."""


class StatError(StoreError):
    """Raised when timestamps for a note cannot be looked up."""


class ConflictError(StoreError):
    """Raised when creating a note at a path that already exists."""


class CreateError(StoreError):
    """Raised when a note cannot be created for any other reason."""


class FileStore(Protocol):
    """Access to the vault's notes."""

    async def list_all_files(self) -> Sequence[FileRecord]:
        """Snapshot of every note in the vault."""
        ...

    async def read_file_content(self, path: str) -> str:
        """Read note text. Raises ReadError."""
        ...

    async def stat_file(self, path: str) -> FileStat:
        """Look up note timestamps. Raises StatError."""
        ...

    async def create_file(self, path: str, content: str) -> FileRecord:
        """Create a note.

        Raises ConflictError if the path is taken, CreateError otherwise.
        """
        ...

    def open_in_editor(self, record: FileRecord) -> None:
        """Ask the host to open a note. Fire-and-forget."""
        ...


def parent_of(path: str) -> FolderPath:
    """Folder part of a '/'-separated path ('' for top-level entries)."""
    if "/" not in path:
        return ROOT
    return path.rsplit("/", 1)[0]


def list_folders(files: Iterable[FileRecord]) -> list[FolderPath]:
    """
    Derive the vault's folders from file parent paths.

    Ancestors of every parent are included, so a folder that only holds
    subfolders still shows up. Root is never part of the result.

    Args:
        files: File snapshot

    Returns:
        Sorted folder paths
    """
    folders: set[FolderPath] = set()
    for record in files:
        folder = record.folder
        while folder and folder not in folders:
            folders.add(folder)
            folder = parent_of(folder)
    return sorted(folders)
