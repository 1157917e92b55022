"""Data shapes for repository identities and remote references.

A source string flows forward through these types:
    "owner/name/sub#ref"  →  RepositoryIdentity
    RepositoryIdentity    →  GitReference list  →  ResolvedSource
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

HostKind = Literal["github", "gitlab", "bitbucket"]

_LABELS: dict[str, str] = {
    "github": "GitHub",
    "gitlab": "GitLab",
    "bitbucket": "BitBucket",
}


# ── Hosts ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Host:
    """A hosting provider. Only GitLab varies by domain (self-hosted)."""

    kind: HostKind
    domain: str

    @classmethod
    def github(cls) -> Host:
        return cls("github", "github.com")

    @classmethod
    def bitbucket(cls) -> Host:
        return cls("bitbucket", "bitbucket.org")

    @classmethod
    def gitlab(cls, domain: str = "gitlab.com") -> Host:
        return cls("gitlab", domain)

    @property
    def label(self) -> str:
        return _LABELS[self.kind]


# ── Repository identity ─────────────────────────────────────────────


@dataclass(frozen=True)
class RepositoryIdentity:
    """A parsed source string. *ref* is raw and unresolved."""

    host: Host
    owner: str
    name: str
    subdir: str | None = None
    ref: str | None = None

    @property
    def url(self) -> str:
        """Canonical web URL, also used as the ls-remote target."""
        return f"https://{self.host.domain}/{self.owner}/{self.name}"

    def __str__(self) -> str:
        project = self.name
        if self.subdir:
            project = f"{project}/{self.subdir}"
        if self.ref:
            project = f"{project}#{self.ref}"
        return f"{self.owner}/{project} from {self.host.label}"


# ── References ──────────────────────────────────────────────────────


class RefKind(Enum):
    HEAD = "head"
    BRANCH = "branch"
    TAG = "tag"
    OTHER = "other"


@dataclass(frozen=True)
class GitReference:
    """One line of a remote's reference list."""

    kind: RefKind
    name: str
    hash: str
    label: str | None = None  # refs/<label>/... segment, OTHER only


@dataclass(frozen=True)
class ResolvedSource:
    """An identity pinned to an exact commit."""

    identity: RepositoryIdentity
    commit_hash: str

    @property
    def archive_url(self) -> str:
        """Provider-specific tarball URL for the pinned commit."""
        repo_url = self.identity.url
        sha = self.commit_hash
        match self.identity.host.kind:
            case "github":
                return f"{repo_url}/archive/{sha}.tar.gz"
            case "gitlab":
                return f"{repo_url}/-/archive/{sha}/{self.identity.name}-{sha}.tar.gz"
            case "bitbucket":
                return f"{repo_url}/get/{sha}.tar.gz"
        raise ValueError(f"Unsupported host: {self.identity.host.kind}")
