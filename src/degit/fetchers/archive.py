"""Download a commit tarball and unpack it into a destination tree.

Every provider wraps the tree in a synthetic root directory
(``owner-name-<sha>/``). It is stripped from each entry, then the optional
subdirectory filter is applied:

    owner-name-abc123/sub/file.txt  →  sub/file.txt   (no subdir)
    owner-name-abc123/sub/file.txt  →  file.txt       (subdir="sub")
    owner-name-abc123/README.md     →  skipped        (subdir="sub")

Entries are consumed from the network one at a time; the archive is never
held in memory.
"""

from __future__ import annotations

import contextlib
import io
import logging
import os
import shutil
import tarfile
from collections.abc import Callable, Iterator
from pathlib import Path, PurePosixPath
from typing import Protocol

import httpx

from degit.core.errors import DownloadError, ExtractionError, RepositoryNotFoundError
from degit.core.models import ResolvedSource

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30.0
DONE_MESSAGE = "Done..."
_NOT_FOUND_STATUSES = {401, 404}


class Progress(Protocol):
    """Side-channel for transfer feedback. Never affects correctness."""

    def advance(self, nbytes: int) -> None: ...

    def status(self, message: str) -> None: ...

    def finish(self, message: str) -> None: ...


ProgressFactory = Callable[[int | None], contextlib.AbstractContextManager[Progress]]


class _NullProgress:
    def advance(self, nbytes: int) -> None:
        pass

    def status(self, message: str) -> None:
        pass

    def finish(self, message: str) -> None:
        pass


@contextlib.contextmanager
def null_progress(_total: int | None = None) -> Iterator[Progress]:
    yield _NullProgress()


# ── Fetch ───────────────────────────────────────────────────────────


def fetch_and_extract(
    source: ResolvedSource,
    dest: Path,
    *,
    client: httpx.Client | None = None,
    progress: ProgressFactory | None = None,
    timeout: float = REQUEST_TIMEOUT,
) -> list[PurePosixPath]:
    """Stream the archive for *source* into *dest*. Returns written paths.

    Partial output is left in place if extraction fails midway.
    """
    url = source.archive_url
    make_progress = progress or null_progress
    logger.info("Fetching %s", url)

    owns_client = client is None
    if client is None:
        client = httpx.Client(follow_redirects=True, timeout=timeout)
    try:
        with client.stream("GET", url) as resp:
            logger.info("Received response status %s", resp.status_code)
            _check_status(resp)

            with make_progress(_content_length(resp)) as bar:
                reader = _StreamReader(resp.iter_bytes(), on_chunk=bar.advance)
                written = extract_archive(
                    reader,
                    dest,
                    subdir=source.identity.subdir,
                    on_entry=lambda p: bar.status(str(p)),
                )
                bar.finish(DONE_MESSAGE)
    except httpx.HTTPError as exc:
        raise DownloadError(f"Download failed for {url}: {exc}") from exc
    finally:
        if owns_client:
            client.close()
    return written


def _check_status(resp: httpx.Response) -> None:
    if resp.status_code == 200:
        return
    if resp.status_code in _NOT_FOUND_STATUSES:
        raise RepositoryNotFoundError("Could not find repository.", status_code=resp.status_code)
    raise DownloadError(
        f"Received response status: {resp.status_code} {resp.reason_phrase}".rstrip(),
        status_code=resp.status_code,
    )


def _content_length(resp: httpx.Response) -> int | None:
    raw = resp.headers.get("content-length")
    if raw is None or not raw.isdigit():
        return None
    return int(raw)


class _StreamReader(io.RawIOBase):
    """Expose an iterator of byte chunks as a readable binary stream."""

    def __init__(self, chunks: Iterator[bytes], on_chunk: Callable[[int], None] | None = None):
        super().__init__()
        self._chunks = iter(chunks)
        self._on_chunk = on_chunk
        self._buffer = b""

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        while not self._buffer:
            chunk = next(self._chunks, None)
            if chunk is None:
                return 0
            if self._on_chunk:
                self._on_chunk(len(chunk))
            self._buffer = chunk
        n = min(len(b), len(self._buffer))
        b[:n] = self._buffer[:n]
        self._buffer = self._buffer[n:]
        return n


# ── Extract ─────────────────────────────────────────────────────────


def extract_archive(
    fileobj: io.RawIOBase | io.BufferedIOBase,
    dest: Path,
    *,
    subdir: str | None = None,
    on_entry: Callable[[PurePosixPath], None] | None = None,
) -> list[PurePosixPath]:
    """Unpack a gzipped tar stream into *dest*, entry by entry."""
    dest = Path(dest)
    root = dest.resolve()
    written: list[PurePosixPath] = []
    prefix = PurePosixPath(subdir) if subdir else None
    try:
        with tarfile.open(fileobj=fileobj, mode="r|gz") as tar:
            for member in tar:
                rel = target_path(member.name, prefix)
                if rel is None:
                    logger.debug("Skipping %s", member.name)
                    continue
                if _write_member(tar, member, root, rel):
                    written.append(rel)
                    if on_entry:
                        on_entry(rel)
    except (tarfile.TarError, EOFError, OSError) as exc:
        raise ExtractionError(f"Could not extract archive: {exc}") from exc
    return written


def target_path(name: str, subdir: PurePosixPath | None = None) -> PurePosixPath | None:
    """Map an archive entry name to its destination-relative path.

    Returns None when the entry falls outside *subdir*.
    """
    parts = PurePosixPath(name).parts
    if not parts:
        raise ExtractionError(f"Malformed archive entry: {name!r}")
    path = PurePosixPath(*parts[1:])

    if subdir is not None:
        if path.parts[: len(subdir.parts)] != subdir.parts:
            return None
        path = PurePosixPath(*path.parts[len(subdir.parts) :])

    if path.is_absolute() or ".." in path.parts:
        raise ExtractionError(f"Archive entry escapes destination: {name}")
    return path


def _ensure_inside(root: Path, path: Path, name: str) -> None:
    # Follows symlinks written by earlier entries.
    resolved = path.resolve()
    if resolved != root and root not in resolved.parents:
        raise ExtractionError(f"Archive entry escapes destination: {name}")


def _write_member(
    tar: tarfile.TarFile, member: tarfile.TarInfo, root: Path, rel: PurePosixPath
) -> bool:
    if not rel.parts and not member.isdir():
        logger.debug("Skipping non-directory entry at archive root: %s", member.name)
        return False
    out = root.joinpath(*rel.parts)

    if member.isdir():
        _ensure_inside(root, out, member.name)
        out.mkdir(parents=True, exist_ok=True)
        return True

    _ensure_inside(root, out.parent, member.name)
    out.parent.mkdir(parents=True, exist_ok=True)
    if out.is_symlink():
        out.unlink()

    if member.isfile():
        src = tar.extractfile(member)
        if src is None:
            raise ExtractionError(f"Unreadable archive entry: {member.name}")
        with src, open(out, "wb") as fh:
            shutil.copyfileobj(src, fh)
        os.chmod(out, member.mode & 0o777)
        return True

    if member.issym():
        if out.exists():
            out.unlink()
        os.symlink(member.linkname, out)
        return True

    logger.debug("Skipping unsupported entry type for %s", member.name)
    return False
