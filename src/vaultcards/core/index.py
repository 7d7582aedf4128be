"""Folder and file visibility over a flat file index."""

from collections.abc import Iterable, Sequence

from vaultcards.core.store import list_folders
from vaultcards.core.types import ROOT, FileRecord, FolderPath, ViewSettings


def is_direct_child(folder: FolderPath, current_folder: FolderPath) -> bool:
    """Whether ``folder`` sits exactly one level below ``current_folder``."""
    if current_folder == ROOT:
        return folder != ROOT and "/" not in folder
    prefix = current_folder + "/"
    if not folder.startswith(prefix):
        return False
    rest = folder[len(prefix) :]
    return bool(rest) and "/" not in rest


def visible_folders(
    all_files: Iterable[FileRecord], current_folder: FolderPath
) -> list[FolderPath]:
    """
    Folders one level below the current folder.

    Args:
        all_files: File snapshot the folder set is derived from
        current_folder: Folder being browsed ('' for root)

    Returns:
        Lexicographically sorted folder paths
    """
    return [
        folder
        for folder in list_folders(all_files)
        if is_direct_child(folder, current_folder)
    ]


def visible_files(
    all_files: Sequence[FileRecord],
    settings: ViewSettings,
    current_folder: FolderPath,
) -> list[FileRecord]:
    """
    Files shown while browsing ``current_folder``.

    At root with ``show_all_files_at_root`` every file in the vault is shown,
    at any depth. Otherwise only files whose parent is exactly the current
    folder are shown. Folders never flatten this way; see visible_folders.

    Args:
        all_files: File snapshot
        settings: View settings
        current_folder: Folder being browsed ('' for root)

    Returns:
        Visible files in index order
    """
    if current_folder == ROOT and settings.show_all_files_at_root:
        return list(all_files)
    return [record for record in all_files if record.folder == current_folder]


def child_file_count(all_files: Iterable[FileRecord], folder: FolderPath) -> int:
    """Number of files directly inside ``folder`` (subfolders not counted)."""
    return sum(1 for record in all_files if record.folder == folder)
