import io
import tarfile
from pathlib import Path

import pytest
from click.testing import CliRunner

ROOT = "octocat-Spoon-Knife-d75ef1c"


@pytest.fixture
def runner():
    """Click CLI runner fixture."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch):
    """Keep user config and overrides out of every test."""
    monkeypatch.setenv("DEGIT_CONFIG", str(tmp_path / "no-such-config.toml"))
    monkeypatch.delenv("DEGIT_GIT", raising=False)
    monkeypatch.delenv("DEGIT_HTTP_TIMEOUT", raising=False)


@pytest.fixture
def make_tarball():
    """Build an in-memory tar.gz wrapped in a synthetic root directory.

    *entries* maps relative paths to file contents; ``None`` makes a directory.
    """

    def _build(entries: dict[str, bytes | None], root: str = ROOT, modes: dict[str, int] | None = None) -> bytes:
        modes = modes or {}
        buf = io.BytesIO()
        with tarfile.open(fileobj=buf, mode="w:gz") as tar:
            top = tarfile.TarInfo(f"{root}/")
            top.type = tarfile.DIRTYPE
            top.mode = 0o755
            tar.addfile(top)
            for name, data in entries.items():
                info = tarfile.TarInfo(f"{root}/{name}")
                if data is None:
                    info.type = tarfile.DIRTYPE
                    info.mode = 0o755
                    tar.addfile(info)
                else:
                    info.size = len(data)
                    info.mode = modes.get(name, 0o644)
                    tar.addfile(info, io.BytesIO(data))
        return buf.getvalue()

    return _build


@pytest.fixture
def sample_tarball(make_tarball) -> bytes:
    return make_tarball(
        {
            "README.md": b"# Spoon-Knife\n",
            "sub": None,
            "sub/a.txt": b"alpha\n",
            "sub/deep": None,
            "sub/deep/b.txt": b"beta\n",
            "subway": None,
            "subway/x.txt": b"not me\n",
        }
    )
