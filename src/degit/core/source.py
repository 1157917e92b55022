"""Parse free-form source strings into a RepositoryIdentity.

Supports:
  owner/name
  owner/name/sub/dir#ref
  github:owner/name        gh:   gitlab:  gl:   bitbucket:  bb:
  my.gitlab.host:owner/name
  https://github.com/owner/name.git
  git.example.org/owner/name
  git@bitbucket.org:owner/name.git
"""

from __future__ import annotations

import re

from degit.core.errors import ParseError
from degit.core.models import Host, RepositoryIdentity

_SOURCE_RE = re.compile(
    r"""
    ^
    (?:
        (?:https?://)?(?P<domain>[^:/\s#@]+\.[^:/\s#@]+)/
      | git@(?P<ssh>[^:/\s#]+)[:/]
      | (?P<prefix>[^:/\s#]+):
    )?
    (?P<owner>[^/:\s#]+)
    /(?P<name>[^/\s#]+)
    (?P<subdir>(?:/[^/\s#]+)*)
    /?
    (?:\#(?P<ref>[^\s#]+))?
    $
    """,
    re.VERBOSE,
)

_SHORTHANDS: dict[str, Host] = {
    "github": Host.github(),
    "gh": Host.github(),
    "gitlab": Host.gitlab(),
    "gl": Host.gitlab(),
    "bitbucket": Host.bitbucket(),
    "bb": Host.bitbucket(),
}


def parse(raw: str) -> RepositoryIdentity:
    """Parse *raw* into a RepositoryIdentity, raising ParseError on failure."""
    src = raw.strip()
    m = _SOURCE_RE.match(src)
    if not m:
        raise ParseError(f"Could not parse src: {raw}")

    name = m.group("name").removesuffix(".git")
    if not name:
        raise ParseError(f"Missing repository name in src: {raw}")

    subdir = m.group("subdir").strip("/") or None
    if subdir and {".", ".."} & set(subdir.split("/")):
        raise ParseError(f"Subdirectory may not contain . or .. segments: {raw}")

    return RepositoryIdentity(
        host=_detect_host(m),
        owner=m.group("owner"),
        name=name,
        subdir=subdir,
        ref=m.group("ref"),
    )


def _detect_host(m: re.Match[str]) -> Host:
    domain = m.group("domain") or m.group("ssh")
    if domain:
        return host_for_domain(domain)

    prefix = m.group("prefix")
    if prefix:
        return _SHORTHANDS.get(prefix, Host.gitlab(prefix))

    return Host.github()


def host_for_domain(domain: str) -> Host:
    """Map a literal domain to a host; unknown domains are self-hosted GitLab."""
    match domain:
        case "github.com":
            return Host.github()
        case "bitbucket.org":
            return Host.bitbucket()
    return Host.gitlab(domain)
