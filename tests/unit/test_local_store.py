"""Tests for vaultcards.vault.store module."""

from pathlib import Path

import pytest

from vaultcards.core.session import CardViewSession
from vaultcards.core.store import (
    ConflictError,
    CreateError,
    ReadError,
    StatError,
    StoreError,
)
from vaultcards.core.types import NavigationState, ViewSettings
from vaultcards.core.view_model import PREVIEW_UNAVAILABLE, build
from vaultcards.vault.store import LocalVaultStore


@pytest.fixture
def local_store(vault_dir, mock_opener):
    return LocalVaultStore(vault_dir, opener=mock_opener)


class TestListAllFiles:
    """Tests for LocalVaultStore.list_all_files()."""

    @pytest.mark.asyncio
    async def test_lists_markdown_notes(self, local_store):
        records = await local_store.list_all_files()

        assert [r.path for r in records] == [
            "index.md",
            "projects/alpha/spec.md",
            "projects/plan.md",
        ]

    @pytest.mark.asyncio
    async def test_record_fields(self, local_store):
        records = {r.path: r for r in await local_store.list_all_files()}

        root_note = records["index.md"]
        nested = records["projects/alpha/spec.md"]

        assert root_note.basename == "index"
        assert root_note.parent_path is None
        assert nested.basename == "spec"
        assert nested.parent_path == "projects/alpha"
        assert nested.name == "spec.md"
        assert nested.modified_at > 0

    @pytest.mark.asyncio
    async def test_skips_hidden_folders(self, local_store):
        paths = [r.path for r in await local_store.list_all_files()]

        assert not any(p.startswith(".obsidian") for p in paths)

    @pytest.mark.asyncio
    async def test_empty_vault(self, tmp_path: Path):
        assert await LocalVaultStore(tmp_path).list_all_files() == []


class TestReadAndStat:
    """Tests for content reads and stat lookups."""

    @pytest.mark.asyncio
    async def test_read_file_content(self, local_store):
        content = await local_store.read_file_content("projects/plan.md")

        assert content == "Plan [[index]] text"

    @pytest.mark.asyncio
    async def test_read_missing_raises_read_error(self, local_store):
        with pytest.raises(ReadError) as exc_info:
            await local_store.read_file_content("missing.md")

        assert exc_info.value.path == "missing.md"

    @pytest.mark.asyncio
    async def test_read_undecodable_raises_read_error(self, local_store, vault_dir):
        (vault_dir / "binary.md").write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(ReadError):
            await local_store.read_file_content("binary.md")

    @pytest.mark.asyncio
    async def test_stat_file(self, local_store, vault_dir):
        stat = await local_store.stat_file("index.md")

        assert stat.modified_at == (vault_dir / "index.md").stat().st_mtime

    @pytest.mark.asyncio
    async def test_stat_missing_raises_stat_error(self, local_store):
        with pytest.raises(StatError):
            await local_store.stat_file("missing.md")


class TestCreateFile:
    """Tests for LocalVaultStore.create_file()."""

    @pytest.mark.asyncio
    async def test_creates_note_and_folders(self, local_store, vault_dir):
        record = await local_store.create_file("new/folder/Note.md", "hello")

        assert (vault_dir / "new" / "folder" / "Note.md").read_text() == "hello"
        assert record.path == "new/folder/Note.md"
        assert record.parent_path == "new/folder"

    @pytest.mark.asyncio
    async def test_existing_path_raises_conflict(self, local_store, vault_dir):
        with pytest.raises(ConflictError):
            await local_store.create_file("index.md", "")

        assert (vault_dir / "index.md").read_text().startswith("# Index")

    @pytest.mark.asyncio
    async def test_file_in_place_of_folder_raises_create_error(
        self, local_store, vault_dir
    ):
        """A note where a parent folder should be is a store error, not an OSError."""
        with pytest.raises(CreateError) as exc_info:
            await local_store.create_file("index.md/New Note.md", "")

        assert isinstance(exc_info.value, StoreError)
        assert exc_info.value.path == "index.md/New Note.md"
        assert (vault_dir / "index.md").is_file()


class TestOpenInEditor:
    """Tests for LocalVaultStore.open_in_editor()."""

    @pytest.mark.asyncio
    async def test_passes_absolute_path_to_opener(
        self, local_store, vault_dir, mock_opener
    ):
        records = {r.path: r for r in await local_store.list_all_files()}

        local_store.open_in_editor(records["projects/plan.md"])

        mock_opener.assert_called_once_with(
            vault_dir.resolve() / "projects" / "plan.md"
        )


class TestLocalVaultEndToEnd:
    """The pipeline over a real directory."""

    @pytest.mark.asyncio
    async def test_build_over_directory(self, local_store):
        files = await local_store.list_all_files()
        settings = ViewSettings(show_folders=True, sort_by="name", sort_direction="asc")

        cards = await build(
            files, settings, NavigationState(current_folder="projects"), local_store
        )

        assert cards[0].path == "projects/alpha"
        assert cards[0].child_file_count == 1
        assert cards[1].file.path == "projects/plan.md"
        assert cards[1].preview_text == "Plan  text"

    @pytest.mark.asyncio
    async def test_note_deleted_between_scan_and_read(self, local_store, vault_dir):
        """A note removed mid-render shows the unavailable preview."""
        files = await local_store.list_all_files()
        (vault_dir / "index.md").unlink()

        cards = await build(
            files, ViewSettings(sort_by="name"), NavigationState(), local_store
        )
        by_path = {card.file.path: card for card in cards}

        assert by_path["index.md"].preview_text == PREVIEW_UNAVAILABLE
        assert by_path["index.md"].date_unknown is True
        assert len(cards) == 3

    @pytest.mark.asyncio
    async def test_session_creates_note_in_current_folder(
        self, local_store, vault_dir, mock_opener
    ):
        session = CardViewSession(local_store)
        await session.navigate_to("projects")

        notice = await session.create_new_note()

        assert not notice.is_error
        created = [p.name for p in (vault_dir / "projects").glob("New Note *.md")]
        assert len(created) == 1
        mock_opener.assert_called_once()

    @pytest.mark.asyncio
    async def test_session_reports_create_failure_as_notice(
        self, local_store, mock_opener
    ):
        session = CardViewSession(local_store)
        await session.navigate_to("index.md")

        notice = await session.create_new_note()

        assert notice.is_error
        assert "index.md/New Note" in notice.message
        mock_opener.assert_not_called()
