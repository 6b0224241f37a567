"""Publish CLI command."""

import click
from click.core import ParameterSource

from gh_release_tools.publish.workflow import run


@click.command("publish", context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-d", "--dir", "code_dir", help="Path to the code directory (required)")
@click.option("-r", "--repo", help='Full repo name, e.g. "user/my-repo"')
@click.option("-o", "--owner", help="GitHub owner (user or org)")
@click.option("-n", "--name", help="GitHub repository name")
@click.option("-b", "--branch", help="Default branch name (default: main)")
@click.option("--remote", help="Git remote name (default: origin)")
@click.option("--public/--private", "public", default=False, help="Repository visibility (default: private)")
@click.option("-v", "--version", help="Release tag (default: vYYYYMMDD-HHMMSS)")
@click.option("-m", "--message", help='Commit message / release notes (default: "Release <TAG>")')
@click.option("--zip", "attach_zip", is_flag=True, help="Zip the directory and attach to GitHub release")
@click.option("--force-push", is_flag=True, help="Allow force push with lease if needed")
@click.pass_context
def publish(
    ctx: click.Context,
    code_dir: str | None,
    repo: str | None,
    owner: str | None,
    name: str | None,
    branch: str | None,
    remote: str | None,
    public: bool,
    version: str | None,
    message: str | None,
    attach_zip: bool,
    force_push: bool,
) -> None:
    """Initialize, push, tag, and create a GitHub release for a code directory.

    Usage:
        publish -d <code_dir> -r <owner/repo> [options]
        publish -d <code_dir> -o <owner> -n <repo_name> [options]
    """
    # Invoked without any option: show usage instead of a bare "Missing --dir"
    if all(ctx.get_parameter_source(param) == ParameterSource.DEFAULT for param in ctx.params):
        click.echo(ctx.get_help(), err=True)
        ctx.exit(1)

    run(
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
