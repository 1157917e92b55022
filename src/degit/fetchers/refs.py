"""Resolve a requested ref to an exact commit hash via `git ls-remote`."""

from __future__ import annotations

import logging
import re
import subprocess
from collections.abc import Callable

from degit.core.errors import RefFetchError, RefNotFoundError
from degit.core.models import GitReference, RefKind, RepositoryIdentity

logger = logging.getLogger(__name__)

RefLister = Callable[[str], str]

_REF_PATH_RE = re.compile(r"refs/(?P<label>[^/]+)/(?P<name>.+)")
_HASH_RE = re.compile(r"[0-9a-fA-F]+")

_KINDS: dict[str, RefKind] = {
    "heads": RefKind.BRANCH,
    "tags": RefKind.TAG,
}


def git_ls_remote(url: str, *, git: str = "git") -> str:
    """Run `git ls-remote <url>` and return its stdout."""
    try:
        r = subprocess.run([git, "ls-remote", url], capture_output=True, text=True)
    except OSError as exc:
        raise RefFetchError(f"could not run {git}: {exc}") from exc
    if r.returncode != 0:
        raise RefFetchError(f"could not fetch remote {url}: {r.stderr.strip()}")
    return r.stdout


def parse_refs(output: str) -> list[GitReference]:
    """Parse ls-remote output. One malformed line fails the whole listing."""
    refs: list[GitReference] = []
    for row in output.splitlines():
        if not row.strip():
            continue
        parts = row.split("\t")
        if len(parts) != 2:
            raise RefFetchError(f"could not parse git ref: {row}")

        sha, ref_path = parts[0].strip(), parts[1].strip()
        if not _HASH_RE.fullmatch(sha):
            raise RefFetchError(f"could not parse git ref hash: {row}")
        sha = sha.lower()

        if ref_path == "HEAD":
            refs.append(GitReference(kind=RefKind.HEAD, name="HEAD", hash=sha))
            continue

        m = _REF_PATH_RE.fullmatch(ref_path)
        if not m:
            raise RefFetchError(f"could not parse {ref_path}")

        label = m.group("label")
        kind = _KINDS.get(label, RefKind.OTHER)
        refs.append(
            GitReference(
                kind=kind,
                name=m.group("name"),
                hash=sha,
                label=label if kind is RefKind.OTHER else None,
            )
        )
    return refs


def fetch_refs(identity: RepositoryIdentity, lister: RefLister | None = None) -> list[GitReference]:
    lister = lister or git_ls_remote
    logger.info("Listing refs for %s", identity.url)
    return parse_refs(lister(identity.url))


def find_hash(refs: list[GitReference], ref: str | None) -> str:
    """Pick the commit for *ref* from a parsed listing.

    No ref (or HEAD) selects the HEAD entry. Otherwise the first entry whose
    name equals *ref* or whose hash starts with it wins, in listing order.
    """
    if ref is None or ref == "HEAD":
        for r in refs:
            if r.kind is RefKind.HEAD:
                return r.hash

    wanted = ref or "HEAD"
    prefix = wanted.lower()
    for r in refs:
        if r.name == wanted or r.hash.startswith(prefix):
            return r.hash

    raise RefNotFoundError(f"Reference not found: {wanted}")


def resolve_hash(identity: RepositoryIdentity, lister: RefLister | None = None) -> str:
    """Resolve the identity's ref to a full commit hash."""
    refs = fetch_refs(identity, lister)
    sha = find_hash(refs, identity.ref)
    logger.info("Resolved %s to %s", identity.ref or "HEAD", sha)
    return sha
