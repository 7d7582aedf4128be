"""Build the ordered list of cards for one render pass."""

import asyncio
import logging
from collections.abc import Sequence

from vaultcards.core.index import child_file_count, visible_files, visible_folders
from vaultcards.core.sanitize import make_preview
from vaultcards.core.sorting import (
    DEFAULT_STAT_CONCURRENCY,
    filter_files,
    filter_folders,
    gather_stats,
    sort_files,
)
from vaultcards.core.store import FileStore, ReadError
from vaultcards.core.types import (
    ROOT,
    CardDescriptor,
    FileCard,
    FileRecord,
    FileStat,
    FolderCard,
    NavigationState,
    SortBy,
    ViewSettings,
)

logger = logging.getLogger(__name__)

PREVIEW_UNAVAILABLE = "preview unavailable"


def build_folder_cards(
    all_files: Sequence[FileRecord],
    settings: ViewSettings,
    nav: NavigationState,
) -> list[FolderCard]:
    """
    Folder cards for the current folder.

    Folders are only shown below root, and only when show_folders is on.
    """
    if not settings.show_folders or nav.current_folder == ROOT:
        return []

    folders = filter_folders(
        visible_folders(all_files, nav.current_folder), nav.search_term
    )
    return [
        FolderCard(
            name=folder.rsplit("/", 1)[-1],
            path=folder,
            child_file_count=child_file_count(all_files, folder),
        )
        for folder in folders
    ]


async def _read_preview(
    store: FileStore, record: FileRecord, length: int, semaphore: asyncio.Semaphore
) -> str:
    async with semaphore:
        try:
            content = await store.read_file_content(record.path)
        except ReadError as e:
            logger.warning(f"Preview unavailable for {record.path}: {e}")
            return PREVIEW_UNAVAILABLE
    return make_preview(content, length)


def _display_date(stat: FileStat | None, sort_by: SortBy) -> float | None:
    if stat is None:
        return None
    if sort_by == SortBy.CREATED:
        return stat.created_at
    return stat.modified_at


async def build_file_cards(
    all_files: Sequence[FileRecord],
    settings: ViewSettings,
    nav: NavigationState,
    store: FileStore,
    concurrency: int = DEFAULT_STAT_CONCURRENCY,
) -> list[FileCard]:
    """
    File cards for the current folder, filtered and sorted.

    Content reads and stat lookups fail per card: a failed read shows
    PREVIEW_UNAVAILABLE, a failed stat leaves the date unknown.
    """
    files = filter_files(
        visible_files(all_files, settings, nav.current_folder), nav.search_term
    )
    ordered, stats = await sort_files(
        files, settings.sort_by, settings.sort_direction, store, concurrency
    )

    if settings.show_date and not stats and ordered:
        looked_up = await gather_stats(store, ordered, concurrency)
        stats = {record.path: stat for record, stat in zip(ordered, looked_up)}

    previews: list[str | None] = [None] * len(ordered)
    if settings.show_preview:
        semaphore = asyncio.Semaphore(max(1, concurrency))
        previews = list(
            await asyncio.gather(
                *(
                    _read_preview(store, record, settings.preview_length, semaphore)
                    for record in ordered
                )
            )
        )

    cards = []
    for record, preview in zip(ordered, previews):
        display_date = None
        date_unknown = False
        if settings.show_date:
            display_date = _display_date(stats.get(record.path), settings.sort_by)
            date_unknown = display_date is None
        cards.append(
            FileCard(
                file=record,
                preview_text=preview,
                display_date=display_date,
                date_unknown=date_unknown,
            )
        )
    return cards


async def build(
    all_files: Sequence[FileRecord],
    settings: ViewSettings,
    nav: NavigationState,
    store: FileStore,
    concurrency: int = DEFAULT_STAT_CONCURRENCY,
) -> list[CardDescriptor]:
    """
    Build the cards shown for a navigation state.

    Args:
        all_files: File snapshot taken for this render
        settings: View settings
        nav: Current folder and search term
        store: File store used for previews and stat lookups
        concurrency: Maximum store calls in flight at once

    Returns:
        Folder cards followed by file cards
    """
    folder_cards = build_folder_cards(all_files, settings, nav)
    file_cards = await build_file_cards(all_files, settings, nav, store, concurrency)
    logger.debug(
        f"Built {len(folder_cards)} folder and {len(file_cards)} file cards "
        f'for folder "{nav.current_folder}"'
    )
    return [*folder_cards, *file_cards]
