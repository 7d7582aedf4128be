"""Local directory file store.

Serves a folder of Markdown notes (an Obsidian-style vault) through the
FileStore protocol. Filesystem calls block, so each one runs in a worker
thread to keep the event loop free while a render is in flight.
"""

import asyncio
import logging
import os
from collections.abc import Callable
from pathlib import Path

import typer

from vaultcards.core.store import ConflictError, CreateError, ReadError, StatError
from vaultcards.core.types import FileRecord, FileStat

logger = logging.getLogger(__name__)

NOTE_SUFFIX = ".md"


def _created_time(st: os.stat_result) -> float:
    # Birth time where the platform reports it, inode change time otherwise
    return getattr(st, "st_birthtime", st.st_ctime)


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") for part in relative.parts)


def _default_opener(path: Path) -> None:
    typer.launch(str(path))


class LocalVaultStore:
    """FileStore over a directory on disk."""

    def __init__(
        self,
        root: Path | str,
        opener: Callable[[Path], None] | None = None,
    ):
        """
        Initialize store with a vault directory.

        Args:
            root: Vault root directory
            opener: Called with the absolute note path to open it
                (defaults to the OS default application)
        """
        self.root = Path(root).expanduser().resolve()
        self._opener = opener or _default_opener

    def absolute(self, path: str) -> Path:
        """Absolute filesystem path for a vault-relative note path."""
        return self.root / path

    def _record_for(self, absolute: Path, st: os.stat_result) -> FileRecord:
        relative = absolute.relative_to(self.root)
        parent = relative.parent.as_posix()
        return FileRecord(
            path=relative.as_posix(),
            basename=absolute.stem,
            parent_path=None if parent == "." else parent,
            created_at=_created_time(st),
            modified_at=st.st_mtime,
        )

    def _scan(self) -> list[FileRecord]:
        records = []
        for absolute in sorted(self.root.rglob(f"*{NOTE_SUFFIX}")):
            relative = absolute.relative_to(self.root)
            if _is_hidden(relative) or not absolute.is_file():
                continue
            try:
                records.append(self._record_for(absolute, absolute.stat()))
            except OSError as e:
                logger.warning(f"Skipping {relative.as_posix()}: {e}")
        return records

    async def list_all_files(self) -> list[FileRecord]:
        """Snapshot of every note in the vault."""
        records = await asyncio.to_thread(self._scan)
        logger.debug(f"Scanned {len(records)} notes under {self.root}")
        return records

    async def read_file_content(self, path: str) -> str:
        """
        Read note text.

        Raises:
            ReadError: If the note cannot be read or decoded.
        """
        try:
            return await asyncio.to_thread(
                self.absolute(path).read_text, encoding="utf-8"
            )
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(path, f"Failed to read {path}: {e}") from e

    async def stat_file(self, path: str) -> FileStat:
        """
        Look up note timestamps.

        Raises:
            StatError: If the note cannot be stat'ed.
        """
        try:
            st = await asyncio.to_thread(self.absolute(path).stat)
        except OSError as e:
            raise StatError(path, f"Failed to stat {path}: {e}") from e
        return FileStat(created_at=_created_time(st), modified_at=st.st_mtime)

    def _create(self, path: str, content: str) -> FileRecord:
        absolute = self.absolute(path)
        try:
            absolute.parent.mkdir(parents=True, exist_ok=True)
            with open(absolute, "x", encoding="utf-8") as f:
                f.write(content)
            st = absolute.stat()
        except FileExistsError as e:
            if absolute.exists():
                raise ConflictError(path, f"Note already exists: {path}") from e
            # A file is in the way of one of the parent folders
            raise CreateError(path, f"Failed to create {path}: {e}") from e
        except OSError as e:
            raise CreateError(path, f"Failed to create {path}: {e}") from e
        return self._record_for(absolute, st)

    async def create_file(self, path: str, content: str) -> FileRecord:
        """
        Create a note.

        Raises:
            ConflictError: If a file already exists at ``path``.
            CreateError: If the note or its folders cannot be created.
        """
        record = await asyncio.to_thread(self._create, path, content)
        logger.info(f"Created note {record.path}")
        return record

    def open_in_editor(self, record: FileRecord) -> None:
        """Hand the note to the opener."""
        logger.info(f"Opening {record.path}")
        self._opener(self.absolute(record.path))

    def __repr__(self) -> str:
        return f"LocalVaultStore({self.root})"
