"""Search filtering and sorting of cards."""

import asyncio
import logging
import math
from collections.abc import Callable, Sequence
from typing import TypeVar

from vaultcards.core.store import FileStore, StatError
from vaultcards.core.types import FileRecord, FileStat, SortBy, SortDirection

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Sort key given to files whose stat lookup failed
LOWEST_SORT_KEY = -math.inf

DEFAULT_STAT_CONCURRENCY = 32


def matches_search(name: str, search_term: str) -> bool:
    """Case-insensitive substring match; an empty term matches everything."""
    if not search_term:
        return True
    return search_term.lower() in name.lower()


def filter_items(
    items: Sequence[T], search_term: str, name_of: Callable[[T], str]
) -> list[T]:
    """
    Keep items whose display name contains the search term.

    Args:
        items: Items to filter
        search_term: Term typed by the user
        name_of: Returns the display name of an item

    Returns:
        Matching items in their original order
    """
    if not search_term:
        return list(items)
    return [item for item in items if matches_search(name_of(item), search_term)]


def filter_files(files: Sequence[FileRecord], search_term: str) -> list[FileRecord]:
    """Filter files by basename."""
    return filter_items(files, search_term, lambda record: record.basename)


def filter_folders(folders: Sequence[str], search_term: str) -> list[str]:
    """Filter folder paths by their last segment."""
    return filter_items(folders, search_term, lambda folder: folder.rsplit("/", 1)[-1])


def _ordered(
    files: Sequence[FileRecord],
    keys: Sequence[object],
    direction: SortDirection,
) -> list[FileRecord]:
    # sorted() is stable, and reverse=True keeps ties in input order too
    indexed = sorted(
        range(len(files)),
        key=lambda i: keys[i],
        reverse=direction == SortDirection.DESC,
    )
    return [files[i] for i in indexed]


def sort_by_name(
    files: Sequence[FileRecord], direction: SortDirection
) -> list[FileRecord]:
    """Sort files on their lowercased basename."""
    keys = [record.basename.lower() for record in files]
    return _ordered(files, keys, direction)


async def gather_stats(
    store: FileStore,
    files: Sequence[FileRecord],
    concurrency: int = DEFAULT_STAT_CONCURRENCY,
) -> list[FileStat | None]:
    """
    Look up timestamps for every file concurrently.

    Failures are logged and reported as None in the matching slot; they
    never abort the batch.

    Args:
        store: File store to query
        files: Files to stat
        concurrency: Maximum lookups in flight at once

    Returns:
        One entry per file, in input order
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _stat(record: FileRecord) -> FileStat | None:
        async with semaphore:
            try:
                return await store.stat_file(record.path)
            except StatError as e:
                logger.warning(f"Stat lookup failed for {record.path}: {e}")
                return None

    return list(await asyncio.gather(*(_stat(record) for record in files)))


def stat_sort_key(stat: FileStat | None, sort_by: SortBy) -> float:
    """Timestamp used for date sorts; failed lookups sort lowest."""
    if stat is None:
        return LOWEST_SORT_KEY
    if sort_by == SortBy.CREATED:
        return stat.created_at
    return stat.modified_at


async def sort_files(
    files: Sequence[FileRecord],
    sort_by: SortBy,
    direction: SortDirection,
    store: FileStore,
    concurrency: int = DEFAULT_STAT_CONCURRENCY,
) -> tuple[list[FileRecord], dict[str, FileStat | None]]:
    """
    Sort files per the view settings.

    Name sorts are done locally. Date sorts fetch timestamps from the store
    in one concurrent batch.

    Args:
        files: Files to sort
        sort_by: Sort property
        direction: Sort direction
        store: File store used for stat lookups
        concurrency: Maximum stat lookups in flight at once

    Returns:
        (sorted files, stats by path) - stats is empty for name sorts
    """
    if sort_by == SortBy.NAME:
        return sort_by_name(files, direction), {}

    stats = await gather_stats(store, files, concurrency)
    keys = [stat_sort_key(stat, sort_by) for stat in stats]
    by_path = {record.path: stat for record, stat in zip(files, stats)}
    return _ordered(files, keys, direction), by_path
