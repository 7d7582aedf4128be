"""Configuration management for VaultCards core."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"{key}={value!r} is not an integer, using {default}")
        return default


# VaultCards data directory (defaults to ~/.vaultcards)
VAULTCARDS_DATA_DIR = Path(
    get_env("VAULTCARDS_DATA_DIR", os.path.expanduser("~/.vaultcards"))
    or os.path.expanduser("~/.vaultcards")
)

# Vault to browse when none is given on the command line
VAULT_DIR = get_env("VAULTCARDS_VAULT")

# Persisted view settings (YAML)
SETTINGS_FILE = Path(
    get_env("VAULTCARDS_SETTINGS_FILE", str(VAULTCARDS_DATA_DIR / "settings.yaml"))
    or str(VAULTCARDS_DATA_DIR / "settings.yaml")
)

# Maximum store calls (stat lookups, content reads) in flight per render
STAT_CONCURRENCY = get_env_int("VAULTCARDS_STAT_CONCURRENCY", 32)

# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "INFO")


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure and return logger."""
    level_name = (level or LOG_LEVEL or "INFO").upper()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, level_name, logging.INFO),
    )
    return logging.getLogger(__name__)


def validate_vault_path(path: Path | str | None) -> tuple[bool, str]:
    """
    Validate a vault directory.

    Returns:
        (is_valid, message) - If not valid, message explains what's wrong.
    """
    if not path:
        return (
            False,
            "No vault given - pass --vault or set VAULTCARDS_VAULT",
        )

    vault = Path(path).expanduser()
    if not vault.exists():
        return False, f"Vault not found: {vault}"
    if not vault.is_dir():
        return False, f"Vault is not a directory: {vault}"

    return True, ""
