"""
degit - Download the contents of a git repository without cloning it.

Resolves a short source string (host, owner, repo, subdirectory, ref) to an
exact commit and unpacks the host's tarball for that commit.
"""

__version__ = "0.1.0"

from degit.core.source import parse
from degit.fetchers.archive import extract_archive, fetch_and_extract
from degit.fetchers.refs import resolve_hash
from degit.services.download import degit

__all__ = [
    "__version__",
    "parse",
    "resolve_hash",
    "fetch_and_extract",
    "extract_archive",
    "degit",
]
