"""Settings file - YAML persistence for ViewSettings.

Settings are merged over the defaults on load, so a file only needs the
keys the user changed. Older files that used ``ctime``/``mtime`` for the
date sorts still load.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from vaultcards.core.types import ViewSettings

logger = logging.getLogger(__name__)


class SettingsError(Exception):
    """Raised when the settings file is invalid."""

    pass


class SettingsFile:
    """Loads and saves view settings.

    Example:
        settings_file = SettingsFile("~/.vaultcards/settings.yaml")
        settings = settings_file.load()
    """

    # Defaults singleton (frozen, so safe to share)
    _DEFAULTS = ViewSettings()

    def __init__(self, path: Path | str):
        """Initialize with the settings file path.

        Args:
            path: Path to the YAML settings file
        """
        self.path = Path(path).expanduser()
        self._settings: ViewSettings | None = None

    def load(self) -> ViewSettings:
        """Load settings, falling back to defaults for missing keys.

        Returns:
            ViewSettings. Defaults if the file is missing or empty.

        Raises:
            SettingsError: If the file is invalid YAML or holds invalid values.
        """
        if self._settings is not None:
            logger.debug("Returning cached settings")
            return self._settings

        if not self.path.exists():
            logger.debug(f"No settings file at {self.path}")
            self._settings = self._DEFAULTS
            return self._settings

        logger.debug(f"Loading settings from {self.path}")

        try:
            with open(self.path, encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML in {self.path}: {e}")
            raise SettingsError(f"Invalid YAML in {self.path}: {e}") from e

        if raw is None:
            self._settings = self._DEFAULTS
            return self._settings

        if not isinstance(raw, dict):
            logger.error(f"Settings must be a mapping, got {type(raw).__name__}")
            raise SettingsError(
                f"{self.path.name} must be a mapping, got {type(raw).__name__}"
            )

        self._settings = self.parse(raw)
        logger.info(f"Settings loaded from {self.path}")
        return self._settings

    def reload(self) -> ViewSettings:
        """Force reload settings from disk."""
        self._settings = None
        return self.load()

    def save(self, settings: ViewSettings) -> None:
        """Write settings to disk and update the cache."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = settings.model_dump(mode="json")
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)
        self._settings = settings
        logger.info(f"Settings saved to {self.path}")

    @staticmethod
    def parse(raw: dict[str, Any]) -> ViewSettings:
        """Validate a settings mapping.

        Raises:
            SettingsError: If any value is invalid.
        """
        try:
            return ViewSettings.model_validate(raw)
        except ValidationError as e:
            raise SettingsError(f"Invalid settings: {e}") from e

    @property
    def exists(self) -> bool:
        """Check if the settings file exists."""
        return self.path.exists()

    def __repr__(self) -> str:
        return f"SettingsFile({self.path})"
