"""Shared fixtures for publish tests."""

import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from gh_release_tools.publish.config import PublishConfig


@pytest.fixture
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate git from the user's configuration and provide an identity.

    Returns the fake HOME directory.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_USER", raising=False)
    return home


@pytest.fixture
def code_dir(tmp_path: Path) -> Path:
    """A plain directory with a couple of files, one of them hidden."""
    directory = tmp_path / "project"
    directory.mkdir()
    (directory / "main.py").write_text("print('hello')\n")
    (directory / ".env.example").write_text("KEY=value\n")
    return directory


@pytest.fixture
def bare_remote(tmp_path: Path) -> Path:
    """An empty bare repository usable as a push target."""
    remote = tmp_path / "remote.git"
    subprocess.run(["git", "init", "--bare", str(remote)], check=True, capture_output=True)
    return remote


@pytest.fixture
def config(code_dir: Path) -> PublishConfig:
    return PublishConfig(
        code_dir=code_dir,
        owner="octo",
        name="project",
        tag="v1.0.0",
        message="Release v1.0.0",
    )


@pytest.fixture
def git_out() -> Callable[..., str]:
    """Return a helper that runs git in a directory and returns stripped stdout."""

    def _git_out(cwd: Path, *args: str) -> str:
        result = subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True, text=True)
        return result.stdout.strip()

    return _git_out
