import os
from pathlib import Path

import pytest

from degit.core import env
from degit.core.errors import ConfigError
from degit.repo import config


def test_defaults_without_file(tmp_path: Path):
    settings = config.load(tmp_path / "missing.toml")
    assert settings == config.Settings(git="git", timeout=30.0)


def test_default_location_honours_degit_config(tmp_path: Path, monkeypatch):
    path = tmp_path / "custom.toml"
    path.write_text('[degit]\ngit = "/opt/git/bin/git"\n')
    monkeypatch.setenv("DEGIT_CONFIG", str(path))
    assert config.load().git == "/opt/git/bin/git"


def test_file_values(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text('[degit]\ngit = "git2"\ntimeout = 5.5\n')
    assert config.load(path) == config.Settings(git="git2", timeout=5.5)


def test_env_overrides_file(tmp_path: Path, monkeypatch):
    path = tmp_path / "config.toml"
    path.write_text('[degit]\ngit = "git2"\ntimeout = 5\n')
    monkeypatch.setenv("DEGIT_GIT", "git3")
    monkeypatch.setenv("DEGIT_HTTP_TIMEOUT", "12")
    assert config.load(path) == config.Settings(git="git3", timeout=12.0)


@pytest.mark.parametrize(
    "body",
    [
        "[degit\n",
        "degit = 1\n",
        '[degit]\ntimeout = "soon"\n',
        "[degit]\ntimeout = 0\n",
    ],
)
def test_malformed_settings(tmp_path: Path, body):
    path = tmp_path / "config.toml"
    path.write_text(body)
    with pytest.raises(ConfigError):
        config.load(path)


def _forget(monkeypatch, key: str) -> None:
    """Remove *key* from the environment and restore its absence afterwards."""
    monkeypatch.setenv(key, "")
    monkeypatch.delenv(key)


def test_env_file_loading(tmp_path: Path, monkeypatch):
    env_file = tmp_path / "degit.env"
    env_file.write_text(
        "# comment\n"
        "export DEGIT_TEST_A=alpha\n"
        "DEGIT_TEST_B='quoted value'\n"
        "DEGIT_TEST_C=kept\n"
        "not a pair\n"
    )
    for key in ("DEGIT_TEST_A", "DEGIT_TEST_B"):
        _forget(monkeypatch, key)
    monkeypatch.setenv("DEGIT_TEST_C", "original")
    monkeypatch.setenv("DEGIT_ENV_FILE", str(env_file))
    monkeypatch.setattr(env, "_USER_ENV_LOADED", False)

    env.load_user_env()

    assert os.environ["DEGIT_TEST_A"] == "alpha"
    assert os.environ["DEGIT_TEST_B"] == "quoted value"
    assert os.environ["DEGIT_TEST_C"] == "original"


def test_env_file_sets_git_override(tmp_path: Path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    (home / ".env").write_text("DEGIT_GIT=/usr/local/bin/git\n")
    monkeypatch.setenv("DEGIT_HOME", str(home))
    monkeypatch.delenv("DEGIT_ENV_FILE", raising=False)
    monkeypatch.setattr(env, "_USER_ENV_LOADED", False)
    _forget(monkeypatch, "DEGIT_GIT")

    env.load_user_env()

    assert config.load(tmp_path / "missing.toml").git == "/usr/local/bin/git"


def test_parse_env():
    text = "export A=1\nB = \"two\"\n\n# C=3\n=nokey\nA=again\n"
    assert env.parse_env(text) == {"A": "1", "B": "two"}
