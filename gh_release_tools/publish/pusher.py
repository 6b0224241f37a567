"""Push the branch and the annotated release tag."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from gh_release_tools.publish.common import (
    RemoteOperationError,
    git,
    git_checked,
    info,
    warn,
)
from gh_release_tools.publish.config import PublishConfig


@dataclass
class PublishState:
    """Transient facts discovered while publishing."""

    first_push: bool = False
    tag_exists_locally: bool = False
    tag_exists_remotely: bool = False
    zip_path: Path | None = None


def remote_is_reachable(config: PublishConfig) -> bool:
    code, _, _ = git(config.code_dir, "ls-remote", config.remote)
    return code == 0


def remote_has_refs(config: PublishConfig) -> bool:
    code, stdout, _ = git(config.code_dir, "ls-remote", config.remote)
    return code == 0 and bool(stdout)


def remote_has_branch(config: PublishConfig) -> bool:
    code, stdout, _ = git(config.code_dir, "ls-remote", "--heads", config.remote, config.branch)
    return code == 0 and bool(stdout)


def _rebase_best_effort(config: PublishConfig, *args: str) -> bool:
    """Run a rebasing git command; on failure abort the rebase and warn."""
    code, _, stderr = git(config.code_dir, *args)
    if code == 0:
        return True
    warn(f"'git {' '.join(args)}' failed, continuing without it: {stderr}")
    git(config.code_dir, "rebase", "--abort")
    return False


def _push(config: PublishConfig, set_upstream: bool) -> None:
    args = ["push"]
    if config.force_push:
        args.append("--force-with-lease")
    if set_upstream:
        args.append("-u")
    args.extend([config.remote, config.branch])

    code, _, stderr = git(config.code_dir, *args)
    if code != 0:
        raise RemoteOperationError(f"Failed to push branch '{config.branch}' to '{config.remote}': {stderr}")


def push_branch(config: PublishConfig, state: PublishState) -> None:
    """Push the branch, reconciling with whatever the remote already holds.

    On the first push, any existing remote content (for example a README
    created on GitHub) is pulled in with --allow-unrelated-histories. Later
    pushes rebase onto the remote branch first. Both reconciliation steps are
    best-effort; only the push itself is fatal.
    """
    state.first_push = not remote_has_branch(config)

    if state.first_push:
        info(f"Remote branch '{config.branch}' not found. Performing first push workflow.")
        if remote_has_refs(config):
            info("Remote has content. Pulling with rebase and allowing unrelated histories.")
            code, _, stderr = git(config.code_dir, "fetch", config.remote)
            if code != 0:
                raise RemoteOperationError(f"Failed to fetch from '{config.remote}': {stderr}")
            _rebase_best_effort(
                config, "pull", "--rebase", "--allow-unrelated-histories", config.remote, config.branch
            )
        _push(config, set_upstream=True)
        return

    info("Fetching and rebasing onto remote before push...")
    code, _, stderr = git(config.code_dir, "fetch", config.remote, config.branch)
    if code != 0:
        warn(f"Fetch of '{config.remote}/{config.branch}' failed: {stderr}")
    code, _, _ = git(
        config.code_dir, "rev-parse", "--verify", "--quiet", f"refs/remotes/{config.remote}/{config.branch}"
    )
    if code == 0:
        _rebase_best_effort(config, "rebase", f"{config.remote}/{config.branch}")
    _push(config, set_upstream=False)


def local_tag_exists(config: PublishConfig) -> bool:
    code, _, _ = git(config.code_dir, "rev-parse", "--verify", "--quiet", f"refs/tags/{config.tag}")
    return code == 0


def remote_tag_exists(config: PublishConfig) -> bool:
    code, stdout, _ = git(config.code_dir, "ls-remote", "--tags", config.remote)
    if code != 0:
        return False
    ref = f"refs/tags/{config.tag}"
    return any(line.split()[-1] == ref for line in stdout.splitlines() if line.strip())


def tag_release(config: PublishConfig, state: PublishState) -> None:
    """Create the annotated tag and push it, skipping whatever already exists.

    A failed tag push only warns; the release step can still create the tag
    on GitHub.
    """
    state.tag_exists_locally = local_tag_exists(config)
    if state.tag_exists_locally:
        warn(f"Tag '{config.tag}' already exists locally.")
    else:
        git_checked(config.code_dir, "tag", "-a", config.tag, "-m", config.message)

    state.tag_exists_remotely = remote_tag_exists(config)
    if state.tag_exists_remotely:
        warn(f"Tag '{config.tag}' already exists on remote.")
        return

    code, _, _ = git(config.code_dir, "push", config.remote, config.tag)
    if code != 0:
        warn(f"Failed to push tag '{config.tag}'")
