"""Shared types and data structures for VaultCards."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# '/'-separated folder path, '' is the vault root
FolderPath = str

ROOT: FolderPath = ""

__all__ = [
    "Breadcrumb",
    "CardDescriptor",
    "FileCard",
    "FileRecord",
    "FileStat",
    "FolderCard",
    "FolderPath",
    "NavigationState",
    "Notice",
    "RenderResult",
    "ROOT",
    "SortBy",
    "SortDirection",
    "ViewSettings",
]


class SortBy(StrEnum):
    """Property used to order file cards."""

    NAME = "name"
    CREATED = "created"
    MODIFIED = "modified"


class SortDirection(StrEnum):
    """Sort direction for file cards."""

    ASC = "asc"
    DESC = "desc"


# Values older settings files used for the date sorts
_SORT_BY_ALIASES = {
    "ctime": SortBy.CREATED,
    "mtime": SortBy.MODIFIED,
}


@dataclass(frozen=True)
class FileRecord:
    """Snapshot of one note as reported by the file store."""

    path: str
    basename: str
    parent_path: str | None
    created_at: float
    modified_at: float

    @property
    def name(self) -> str:
        """File name including extension."""
        return self.path.rsplit("/", 1)[-1]

    @property
    def folder(self) -> FolderPath:
        """Containing folder, with root normalized to ''."""
        return self.parent_path or ROOT


@dataclass(frozen=True)
class FileStat:
    """Timestamps returned by a stat lookup."""

    created_at: float
    modified_at: float


class ViewSettings(BaseModel):
    """Display, sorting and layout preferences for the card view.

    Owned by the host; the core only reads it. Defaults mirror the
    values a fresh install starts with.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    show_date: bool = True
    show_preview: bool = True
    preview_length: int = Field(default=100, ge=50, le=500)
    sort_by: SortBy = SortBy.MODIFIED
    sort_direction: SortDirection = SortDirection.DESC
    card_width: int = Field(default=250, ge=150, le=500)
    card_height: int = Field(default=150, ge=100, le=400)
    card_spacing: int = Field(default=10, ge=5, le=30)
    date_format: str = "%b %d, %Y"
    show_breadcrumbs: bool = False
    show_folders: bool = False
    show_all_files_at_root: bool = True

    @field_validator("sort_by", mode="before")
    @classmethod
    def _accept_legacy_sort_by(cls, value: object) -> object:
        if isinstance(value, str):
            return _SORT_BY_ALIASES.get(value.lower(), value.lower())
        return value

    @field_validator("sort_direction", mode="before")
    @classmethod
    def _normalize_direction(cls, value: object) -> object:
        if isinstance(value, str):
            return value.lower()
        return value


@dataclass(frozen=True)
class FolderCard:
    """Card for a navigable folder."""

    name: str
    path: FolderPath
    child_file_count: int


@dataclass(frozen=True)
class FileCard:
    """Card for a single note."""

    file: FileRecord
    preview_text: str | None = None
    display_date: float | None = None
    date_unknown: bool = False


CardDescriptor = FolderCard | FileCard


@dataclass(frozen=True)
class Breadcrumb:
    """One segment of the folder trail."""

    label: str
    path: FolderPath


@dataclass
class NavigationState:
    """Where the user is and what they are searching for.

    Lives for one view session and is never persisted.
    """

    current_folder: FolderPath = ROOT
    search_term: str = ""

    def snapshot(self) -> NavigationState:
        return NavigationState(self.current_folder, self.search_term)


@dataclass(frozen=True)
class RenderResult:
    """Outcome of one accepted render pass."""

    sequence: int
    state: NavigationState
    cards: list[CardDescriptor] = field(default_factory=list)
    file_count: int = 0

    @property
    def folder_cards(self) -> list[FolderCard]:
        return [card for card in self.cards if isinstance(card, FolderCard)]

    @property
    def file_cards(self) -> list[FileCard]:
        return [card for card in self.cards if isinstance(card, FileCard)]


@dataclass(frozen=True)
class Notice:
    """User-facing message produced by a session action."""

    message: str
    level: Literal["info", "error"] = "info"

    @property
    def is_error(self) -> bool:
        return self.level == "error"
