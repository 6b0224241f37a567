"""Resolve command line options into a publish configuration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from gh_release_tools.publish.common import UsageError

DEFAULT_BRANCH = "main"
DEFAULT_REMOTE = "origin"


@dataclass(frozen=True)
class PublishConfig:
    """Fully resolved settings for one publish run."""

    code_dir: Path
    owner: str
    name: str
    branch: str = DEFAULT_BRANCH
    remote: str = DEFAULT_REMOTE
    visibility: str = "private"
    tag: str = ""
    message: str = ""
    attach_zip: bool = False
    force_push: bool = False

    @property
    def repo_full_name(self) -> str:
        """Return the full repository name as owner/name."""
        return f"{self.owner}/{self.name}"

    @property
    def is_private(self) -> bool:
        return self.visibility == "private"


def default_version_tag(now: datetime | None = None) -> str:
    """Build a timestamp tag such as v20240131-235959."""
    return (now or datetime.now()).strftime("v%Y%m%d-%H%M%S")


def _split_repo(repo: str) -> tuple[str, str]:
    """Split OWNER/NAME into (owner, name).

    Owner is everything before the last slash, name everything after the first.
    """
    if "/" not in repo:
        raise UsageError("--repo must be OWNER/NAME")
    owner = repo.rsplit("/", 1)[0]
    name = repo.split("/", 1)[1]
    if not owner or not name:
        raise UsageError("--repo must be OWNER/NAME")
    return owner, name


def resolve_config(
    code_dir: str | None,
    repo: str | None = None,
    owner: str | None = None,
    name: str | None = None,
    branch: str | None = None,
    remote: str | None = None,
    public: bool = False,
    version: str | None = None,
    message: str | None = None,
    attach_zip: bool = False,
    force_push: bool = False,
) -> PublishConfig:
    """Validate raw options and apply defaults.

    Args:
        code_dir: Path to the code directory.
        repo: Repository in OWNER/NAME format; takes precedence over owner/name.
        owner: Repository owner (user or organization).
        name: Repository name.
        branch: Branch to publish.
        remote: Git remote name.
        public: Create a public repository instead of a private one.
        version: Release tag.
        message: Commit message and release notes.
        attach_zip: Zip the directory and attach it to the release.
        force_push: Push with --force-with-lease.

    Returns:
        PublishConfig with every field populated.

    Raises:
        UsageError: If the directory or the repository name is missing or invalid.
    """
    if not code_dir:
        raise UsageError("Missing --dir")
    path = Path(code_dir).expanduser()
    if not path.is_dir():
        raise UsageError(f"Directory not found: {code_dir}")

    if repo:
        owner, name = _split_repo(repo)
    elif not (owner and name):
        raise UsageError("Provide either --repo OWNER/NAME or both --owner and --name")

    tag = version or default_version_tag()

    return PublishConfig(
        code_dir=path.resolve(),
        owner=owner,
        name=name,
        branch=branch or DEFAULT_BRANCH,
        remote=remote or DEFAULT_REMOTE,
        visibility="public" if public else "private",
        tag=tag,
        message=message or f"Release {tag}",
        attach_zip=attach_zip,
        force_push=force_push,
    )
