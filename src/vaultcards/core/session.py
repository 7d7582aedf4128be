"""Card view session - the thin shell around the render pipeline.

A session holds the state for one open card view: where the user is, what
they searched for, and the settings in effect. Every change triggers a
fresh render. Renders are not cancelled when the state changes again; each
one is tagged with a sequence number and only the most recently issued
render may publish its result.
"""

import logging
from datetime import datetime

from vaultcards.core import navigation
from vaultcards.core.config import STAT_CONCURRENCY
from vaultcards.core.store import ConflictError, FileStore, StoreError
from vaultcards.core.types import (
    Breadcrumb,
    FileRecord,
    FolderPath,
    NavigationState,
    Notice,
    RenderResult,
    ViewSettings,
)
from vaultcards.core.view_model import build

logger = logging.getLogger(__name__)

NEW_NOTE_PREFIX = "New Note"


def new_note_path(folder: FolderPath, now: datetime | None = None) -> str:
    """
    Path for a blank note created from the card view.

    Args:
        folder: Folder the note goes in ('' for root)
        now: Timestamp used in the name (defaults to now)

    Returns:
        Path like "folder/New Note 2024-01-28 14-03-59.md"
    """
    stamp = (now or datetime.now()).strftime("%Y-%m-%d %H-%M-%S")
    name = f"{NEW_NOTE_PREFIX} {stamp}.md"
    if folder:
        return f"{folder}/{name}"
    return name


class CardViewSession:
    """State and actions for one open card view."""

    def __init__(
        self,
        store: FileStore,
        settings: ViewSettings | None = None,
        concurrency: int = STAT_CONCURRENCY,
    ):
        """
        Initialize a session at the vault root with no search.

        Args:
            store: File store that owns the notes
            settings: View settings (defaults if omitted)
            concurrency: Maximum store calls in flight per render
        """
        self.store = store
        self.settings = settings or ViewSettings()
        self.concurrency = concurrency
        self.state = NavigationState()
        self._issued = 0
        self._latest: RenderResult | None = None

    @property
    def current_folder(self) -> FolderPath:
        return self.state.current_folder

    @property
    def search_term(self) -> str:
        return self.state.search_term

    @property
    def latest(self) -> RenderResult | None:
        """Most recent render that was not superseded."""
        return self._latest

    def breadcrumbs(self) -> list[Breadcrumb]:
        return navigation.breadcrumbs(self.state.current_folder)

    async def render(self) -> RenderResult | None:
        """
        Run one render pass for the current state.

        Returns:
            The result, or None if a newer render was issued while this
            one was waiting on the store
        """
        self._issued += 1
        sequence = self._issued
        snapshot = self.state.snapshot()
        settings = self.settings

        files = list(await self.store.list_all_files())
        cards = await build(files, settings, snapshot, self.store, self.concurrency)

        if sequence != self._issued:
            logger.debug(
                f"Discarding render #{sequence}, superseded by #{self._issued}"
            )
            return None

        result = RenderResult(
            sequence=sequence, state=snapshot, cards=cards, file_count=len(files)
        )
        self._latest = result
        logger.info(
            f"Card view: found {len(files)} files in vault, "
            f'rendering {len(cards)} cards from folder "{snapshot.current_folder}"'
        )
        return result

    async def navigate_to(self, path: FolderPath) -> RenderResult | None:
        """Move to a folder and re-render."""
        navigation.navigate_to(self.state, path)
        return await self.render()

    async def navigate_up(self) -> RenderResult | None:
        """Move to the parent folder and re-render."""
        navigation.navigate_up(self.state)
        return await self.render()

    async def set_search(self, term: str) -> RenderResult | None:
        """Change the search term and re-render."""
        navigation.set_search(self.state, term)
        return await self.render()

    async def clear_search(self) -> RenderResult | None:
        return await self.set_search("")

    async def update_settings(self, **changes) -> RenderResult | None:
        """
        Apply setting changes and re-render.

        Raises:
            pydantic.ValidationError: If a changed value is invalid.
        """
        merged = {**self.settings.model_dump(), **changes}
        self.settings = ViewSettings.model_validate(merged)
        return await self.render()

    def open_file(self, record: FileRecord) -> None:
        """Ask the host to open a note."""
        logger.debug(f"Opening {record.path}")
        self.store.open_in_editor(record)

    async def create_new_note(self, now: datetime | None = None) -> Notice:
        """
        Create a blank note in the current folder and open it.

        A name collision or any other store failure is reported back as an
        error notice and the view is left as it was.

        Returns:
            Notice describing the outcome
        """
        path = new_note_path(self.state.current_folder, now)
        try:
            record = await self.store.create_file(path, "")
        except ConflictError as e:
            logger.error(f"Error creating new note: {e}")
            return Notice(f"Could not create {path}: already exists", level="error")
        except StoreError as e:
            logger.error(f"Error creating new note: {e}")
            return Notice(f"Could not create {path}: {e}", level="error")

        self.open_file(record)
        await self.render()
        return Notice(f"Created {record.path}")
