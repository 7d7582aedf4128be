"""Shared test fixtures and configuration."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from vaultcards.core.store import ConflictError, ReadError, StatError, parent_of
from vaultcards.core.types import FileRecord, FileStat


def make_record(
    path: str, created_at: float = 0.0, modified_at: float = 0.0
) -> FileRecord:
    """Build a FileRecord the way a store would report it."""
    parent = parent_of(path)
    name = path.rsplit("/", 1)[-1]
    return FileRecord(
        path=path,
        basename=name[:-3] if name.endswith(".md") else name,
        parent_path=parent or None,
        created_at=created_at,
        modified_at=modified_at,
    )


class InMemoryStore:
    """FileStore double backed by dicts."""

    def __init__(self):
        self.records: dict[str, FileRecord] = {}
        self.contents: dict[str, str] = {}
        self.unreadable: set[str] = set()
        self.unstatable: set[str] = set()
        self.stat_calls: list[str] = []
        self.opened: list[str] = []

    def add(
        self,
        path: str,
        content: str = "",
        created_at: float = 0.0,
        modified_at: float = 0.0,
    ) -> FileRecord:
        record = make_record(path, created_at, modified_at)
        self.records[path] = record
        self.contents[path] = content
        return record

    async def list_all_files(self) -> list[FileRecord]:
        return list(self.records.values())

    async def read_file_content(self, path: str) -> str:
        if path in self.unreadable:
            raise ReadError(path)
        return self.contents[path]

    async def stat_file(self, path: str) -> FileStat:
        self.stat_calls.append(path)
        if path in self.unstatable:
            raise StatError(path)
        record = self.records[path]
        return FileStat(created_at=record.created_at, modified_at=record.modified_at)

    async def create_file(self, path: str, content: str) -> FileRecord:
        if path in self.records:
            raise ConflictError(path)
        return self.add(path, content, created_at=1.0, modified_at=1.0)

    def open_in_editor(self, record: FileRecord) -> None:
        self.opened.append(record.path)


@pytest.fixture
def store():
    """Empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def sample_store():
    """Store with a small nested vault.

    Layout:
        a.md
        zeta.md
        f/b.md
        f/g/c.md
        f/g/h/d.md
        notes/Daily.md
    """
    s = InMemoryStore()
    s.add("a.md", "Alpha **note**", created_at=10, modified_at=40)
    s.add("zeta.md", "# Title\nLast one", created_at=20, modified_at=30)
    s.add("f/b.md", "Bravo", created_at=30, modified_at=20)
    s.add("f/g/c.md", "Charlie", created_at=40, modified_at=10)
    s.add("f/g/h/d.md", "Delta", created_at=50, modified_at=50)
    s.add("notes/Daily.md", "- [ ] task", created_at=60, modified_at=60)
    return s


@pytest.fixture
def mock_opener():
    """Opener callable for LocalVaultStore."""
    return MagicMock()


@pytest.fixture
def vault_dir(tmp_path):
    """Vault directory on disk with a few notes."""
    root = tmp_path / "vault"
    (root / "projects" / "alpha").mkdir(parents=True)
    (root / ".obsidian").mkdir()
    (root / "index.md").write_text("# Index\nWelcome to the **vault**")
    (root / "projects" / "plan.md").write_text("Plan [[index]] text")
    (root / "projects" / "alpha" / "spec.md").write_text("Alpha spec")
    (root / ".obsidian" / "workspace.md").write_text("hidden")
    (root / "image.png").write_bytes(b"\x89PNG")
    return root


@pytest.fixture
def mock_env(monkeypatch, tmp_path):
    """Set up mock environment variables."""
    env_vars = {
        "VAULTCARDS_DATA_DIR": str(tmp_path / "data"),
        "VAULTCARDS_SETTINGS_FILE": str(tmp_path / "data" / "settings.yaml"),
        "LOG_LEVEL": "DEBUG",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def make_file():
    """Factory for FileRecord snapshots."""
    return make_record
