"""Repository for the user settings file (~/.config/degit/config.toml).

    [degit]
    git = "git"        # executable used for ls-remote
    timeout = 30.0     # HTTP timeout in seconds

DEGIT_GIT and DEGIT_HTTP_TIMEOUT override the file.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import tomlkit
from tomlkit.exceptions import TOMLKitError

from degit.core import paths
from degit.core.errors import ConfigError

DEFAULT_GIT = "git"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    """Effective settings after merging file and environment."""

    git: str = DEFAULT_GIT
    timeout: float = DEFAULT_TIMEOUT


def load(path: Path | None = None) -> Settings:
    """Read settings from *path* (or the default location), then apply env overrides."""
    path = path or paths.config_path()
    raw: dict = {}
    if path.is_file():
        try:
            doc = tomlkit.loads(path.read_text())
        except TOMLKitError as exc:
            raise ConfigError(f"Invalid settings file {path}: {exc}") from exc
        section = doc.get("degit", {})
        if not isinstance(section, Mapping):
            raise ConfigError(f"Invalid settings file {path}: [degit] must be a table")
        raw = dict(section)

    git = os.environ.get("DEGIT_GIT", "").strip() or str(raw.get("git", DEFAULT_GIT))
    timeout_raw = os.environ.get("DEGIT_HTTP_TIMEOUT", "").strip() or raw.get(
        "timeout", DEFAULT_TIMEOUT
    )
    return Settings(git=git, timeout=_parse_timeout(timeout_raw))


def _parse_timeout(value: object) -> float:
    try:
        timeout = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid timeout: {value!r}") from exc
    if timeout <= 0:
        raise ConfigError(f"Timeout must be positive, got {timeout}")
    return timeout
