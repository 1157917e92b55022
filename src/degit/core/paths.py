"""Path constants and destination pre-flight checks."""

from __future__ import annotations

import os
from pathlib import Path

from degit.core.errors import DestinationError

CONFIG_DIR = Path("~/.config/degit")
CONFIG_TOML = "config.toml"
ENV_FILE = "env"


def config_dir() -> Path:
    return CONFIG_DIR.expanduser()


def config_path() -> Path:
    override = os.environ.get("DEGIT_CONFIG", "").strip()
    if override:
        return Path(override).expanduser()
    return config_dir() / CONFIG_TOML


def validate_destination(dest: str | Path) -> Path:
    """Check that *dest* is absent or an empty directory, and writable.

    Returns the absolute destination path.
    """
    path = Path(dest).expanduser()
    if path.exists():
        if not path.is_dir():
            raise DestinationError("Destination is not a directory.")
        if any(path.iterdir()):
            raise DestinationError(f"Directory is not empty: {path}")

    existing = _nearest_existing(Path(os.path.abspath(path)))
    if not os.access(existing, os.W_OK):
        raise DestinationError(f"Directory is read-only: {existing}")
    return Path(os.path.abspath(path))


def _nearest_existing(path: Path) -> Path:
    """Walk up from *path* to the closest ancestor that exists on disk."""
    for candidate in [path, *path.parents]:
        if candidate.exists():
            return candidate
    return Path(path.anchor)
