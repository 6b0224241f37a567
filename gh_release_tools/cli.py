"""Main CLI entry point for gh-release-tools."""

import click

from gh_release_tools.publish import commands as publish_commands


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="gh-release-tools")
def cli() -> None:
    """Publish local code directories as GitHub releases."""
    pass


cli.add_command(publish_commands.publish, name="publish")


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
