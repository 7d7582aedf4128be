"""VaultCards core library - the card view pipeline."""

from typing import TYPE_CHECKING

from vaultcards.core.sanitize import sanitize
from vaultcards.core.store import (
    ConflictError,
    FileStore,
    ReadError,
    StatError,
    StoreError,
)
from vaultcards.core.types import (
    Breadcrumb,
    CardDescriptor,
    FileCard,
    FileRecord,
    FileStat,
    FolderCard,
    NavigationState,
    SortBy,
    SortDirection,
    ViewSettings,
)

if TYPE_CHECKING:
    from vaultcards.core.session import CardViewSession
    from vaultcards.core.view_model import build

__all__ = [
    # Session
    "CardViewSession",
    "build",
    "sanitize",
    # Types
    "Breadcrumb",
    "CardDescriptor",
    "FileCard",
    "FileRecord",
    "FileStat",
    "FolderCard",
    "NavigationState",
    "SortBy",
    "SortDirection",
    "ViewSettings",
    # Store
    "ConflictError",
    "FileStore",
    "ReadError",
    "StatError",
    "StoreError",
]


def __getattr__(name: str):
    if name == "CardViewSession":
        from vaultcards.core.session import CardViewSession

        return CardViewSession
    if name == "build":
        from vaultcards.core.view_model import build

        return build
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
