"""Run the publish stages in order: init, commit, remote, push, tag, zip, release.

Every stage skips work that is already done, so re-running with the same tag
only creates what is missing.
"""

from __future__ import annotations

import sys

from gh_release_tools.publish.artifact import build_zip
from gh_release_tools.publish.backends import HostingBackend, select_backend
from gh_release_tools.publish.common import (
    PreconditionError,
    PublishError,
    has_cmd,
    info,
    print_stderr,
)
from gh_release_tools.publish.config import PublishConfig, resolve_config
from gh_release_tools.publish.pusher import PublishState, push_branch, remote_is_reachable, tag_release
from gh_release_tools.publish.remote import build_remote_target, configure_remote
from gh_release_tools.publish.repository import commit_pending_changes, ensure_repository


def publish(config: PublishConfig, backend: HostingBackend | None = None) -> PublishState:
    """Publish the code directory described by config as a GitHub release.

    Args:
        config: Resolved publish settings.
        backend: Hosting backend; chosen by select_backend() when None.

    Returns:
        PublishState describing what was found and done.

    Raises:
        PublishError: On any fatal failure.
    """
    if not has_cmd("git"):
        raise PreconditionError("git not found")

    backend = backend or select_backend()
    state = PublishState()

    ensure_repository(config)
    # Commit before the remote exists so gh repo create --source has history
    commit_pending_changes(config)

    target = build_remote_target(config.repo_full_name)
    configure_remote(config, target)

    if not remote_is_reachable(config):
        info("Remote repository not reachable or empty; will attempt to ensure it exists on GitHub.")
        backend.ensure_repository(config)

    push_branch(config, state)
    tag_release(config, state)

    if config.attach_zip:
        state.zip_path = build_zip(config)

    backend.create_release(config, state.zip_path)
    info(f"Done. Repo: https://github.com/{config.repo_full_name}  Tag: {config.tag}")
    return state


def run(
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
) -> None:
    """Entry point for CLI command.

    Exits with status 1 on any publish error.
    """
    try:
        config = resolve_config(
            code_dir,
            repo=repo,
            owner=owner,
            name=name,
            branch=branch,
            remote=remote,
            public=public,
            version=version,
            message=message,
            attach_zip=attach_zip,
            force_push=force_push,
        )
        publish(config)
    except PublishError as e:
        print_stderr(f"Error: {e}")
        sys.exit(1)
