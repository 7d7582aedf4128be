"""Vault access for the card view.

A vault is a directory of Markdown notes, human-editable outside the app
(VS Code, Obsidian, git). This package serves one through the FileStore
protocol so the card view can browse it.
"""

from vaultcards.vault.store import LocalVaultStore

__all__ = [
    "LocalVaultStore",
]
