"""Prepare the local git workspace: initialize, check out the branch, commit."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from gh_release_tools.publish.common import git, git_checked, info
from gh_release_tools.publish.config import PublishConfig

DEFAULT_GITIGNORE = """\
.DS_Store
Thumbs.db
*.log
node_modules/
dist/
__pycache__/
*.pyc
vendor/
*.swp
*.swo
.cache/
"""


def _readme_text(config: PublishConfig) -> str:
    initialized_at = datetime.now().astimezone().isoformat(timespec="seconds")
    return (
        f"# {config.name}\n"
        "\n"
        f"Initialized by gh-release-tools on {initialized_at}.\n"
        f"Default branch: `{config.branch}`\n"
        f"Visibility: `{config.visibility}`\n"
    )


def _write_if_absent(path: Path, content: str) -> bool:
    if path.exists():
        return False
    path.write_text(content, encoding="utf-8")
    info(f"Created {path.name}")
    return True


def checkout_branch(config: PublishConfig) -> None:
    """Check out the configured branch, creating it from HEAD if it does not exist."""
    code, _, _ = git(config.code_dir, "rev-parse", "--verify", "--quiet", f"refs/heads/{config.branch}")
    if code == 0:
        git_checked(config.code_dir, "checkout", config.branch)
    else:
        git_checked(config.code_dir, "checkout", "-B", config.branch)


def ensure_repository(config: PublishConfig) -> bool:
    """Initialize a git repository in the code directory if there is none.

    Existing files are never overwritten; .gitignore and README.md are only
    written when missing. The configured branch is checked out either way.

    Returns:
        True if a new repository was initialized.
    """
    created = False
    if not (config.code_dir / ".git").is_dir():
        info(f"Initializing git repository in {config.code_dir}")
        git_checked(config.code_dir, "init")
        git_checked(config.code_dir, "checkout", "-B", config.branch)
        _write_if_absent(config.code_dir / ".gitignore", DEFAULT_GITIGNORE)
        _write_if_absent(config.code_dir / "README.md", _readme_text(config))
        created = True

    checkout_branch(config)
    return created


def commit_pending_changes(config: PublishConfig) -> bool:
    """Stage everything and commit when the index differs from HEAD.

    Returns:
        True if a commit was created, False if there was nothing to commit.
    """
    git_checked(config.code_dir, "add", "-A")
    code, _, _ = git(config.code_dir, "diff", "--cached", "--quiet")
    if code == 0:
        info("No staged changes to commit.")
        return False
    git_checked(config.code_dir, "commit", "-m", config.message)
    return True
