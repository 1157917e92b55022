"""Runtime environment helpers.

Env files hold ``KEY=VALUE`` lines (``export`` prefix and quotes allowed) and
are applied without overriding variables that are already set.
"""

from __future__ import annotations

import os
from pathlib import Path

from degit.core import paths

_USER_ENV_LOADED = False


def load_user_env() -> None:
    """Apply user-level degit env files once per process."""
    global _USER_ENV_LOADED
    if _USER_ENV_LOADED:
        return

    for env_file in _candidate_env_files():
        if env_file.is_file():
            for key, value in parse_env(env_file.read_text()).items():
                os.environ.setdefault(key, value)

    _USER_ENV_LOADED = True


def parse_env(text: str) -> dict[str, str]:
    values: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip().removeprefix("export ").strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, _, value = line.partition("=")
        key, value = key.strip(), value.strip()
        if not key:
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        values.setdefault(key, value)
    return values


def _candidate_env_files() -> list[Path]:
    """Explicit file first, then $DEGIT_HOME, then the config directory."""
    files: list[Path] = []
    override = os.environ.get("DEGIT_ENV_FILE", "").strip()
    if override:
        files.append(Path(override).expanduser())
    home = os.environ.get("DEGIT_HOME", "").strip()
    if home:
        files.append(Path(home).expanduser() / ".env")
    files.append(paths.config_dir() / paths.ENV_FILE)
    return files
