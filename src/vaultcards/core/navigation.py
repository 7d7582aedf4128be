"""Folder navigation helpers."""

from vaultcards.core.store import parent_of
from vaultcards.core.types import ROOT, Breadcrumb, FolderPath, NavigationState

ROOT_LABEL = "Root"


def normalize_folder(path: str | None) -> FolderPath:
    """Strip stray separators so '/a/b/' and 'a/b' name the same folder."""
    if not path:
        return ROOT
    return path.strip("/")


def breadcrumbs(current_folder: FolderPath) -> list[Breadcrumb]:
    """
    Trail from root to the current folder.

    Args:
        current_folder: Folder being browsed

    Returns:
        Root entry followed by one entry per path segment, each pointing
        at the cumulative path up to that segment
    """
    trail = [Breadcrumb(label=ROOT_LABEL, path=ROOT)]
    if not current_folder:
        return trail

    parts = current_folder.split("/")
    for index, part in enumerate(parts):
        trail.append(Breadcrumb(label=part, path="/".join(parts[: index + 1])))
    return trail


def navigate_to(state: NavigationState, path: FolderPath) -> None:
    """Move to ``path``. Paths come from rendered cards, so none are checked."""
    state.current_folder = normalize_folder(path)


def navigate_up(state: NavigationState) -> None:
    """Move to the parent folder; a no-op at root."""
    state.current_folder = parent_of(state.current_folder)


def set_search(state: NavigationState, term: str) -> None:
    state.search_term = term
