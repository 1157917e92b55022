"""Download service: parse, resolve, then fetch and extract."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from pathlib import Path

import httpx

from degit.core.models import ResolvedSource
from degit.core.paths import validate_destination
from degit.core.source import parse
from degit.fetchers import archive, refs
from degit.repo import config

logger = logging.getLogger(__name__)


def degit(
    src: str,
    dest: str | Path = ".",
    *,
    lister: refs.RefLister | None = None,
    client: httpx.Client | None = None,
    progress: archive.ProgressFactory | None = None,
    on_start: Callable[[ResolvedSource, Path], None] | None = None,
    settings: config.Settings | None = None,
) -> ResolvedSource:
    """Materialise the working tree described by *src* into *dest*.

    *dest* must be absent or an empty directory. Stages run strictly in
    order and the first failure stops the run. Raises a DegitError subclass
    on any expected failure.
    """
    settings = settings or config.load()

    identity = parse(src)
    logger.info("Parsed %s", identity)
    dest_path = validate_destination(dest)

    lister = lister or functools.partial(refs.git_ls_remote, git=settings.git)
    source = ResolvedSource(identity, refs.resolve_hash(identity, lister))

    if on_start:
        on_start(source, dest_path)

    written = archive.fetch_and_extract(
        source, dest_path, client=client, progress=progress, timeout=settings.timeout
    )
    logger.info("Extracted %d entries into %s", len(written), dest_path)
    return source
