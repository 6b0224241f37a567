"""Shared helpers for the publish workflow.

Error taxonomy, external command execution and progress output.
"""

from __future__ import annotations

import shutil
import subprocess
import sys
from pathlib import Path


class PublishError(RuntimeError):
    """Base class for every fatal publish failure."""


class UsageError(PublishError):
    """Invalid or missing command line arguments."""


class PreconditionError(PublishError):
    """A required tool, credential or directory is missing."""


class CommandError(PublishError):
    """A local command exited with a non-zero status."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str) -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        message = f"'{' '.join(cmd)}' failed with exit code {returncode}"
        if stderr:
            message = f"{message}: {stderr}"
        super().__init__(message)


class RemoteOperationError(PublishError):
    """Creating the repository, pushing or creating the release failed."""


def info(msg: str) -> None:
    """Print an informational progress line."""
    print(f"[INFO] {msg}")


def warn(msg: str) -> None:
    """Print a warning for a skipped or degraded step."""
    print(f"[WARN] {msg}")


def print_stderr(msg: str) -> None:
    """Print message to stderr."""
    print(msg, file=sys.stderr)


def has_cmd(name: str) -> bool:
    """Return True if an executable is available on PATH."""
    return shutil.which(name) is not None


def run_command(cmd: list[str], cwd: Path | None = None) -> tuple[int, str, str]:
    """Run a command and return exit code, stdout, and stderr."""
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        return result.returncode, result.stdout.strip(), result.stderr.strip()
    except FileNotFoundError:
        return 1, "", f"Command not found: {cmd[0]}"


def git(cwd: Path, *args: str) -> tuple[int, str, str]:
    """Run a git command inside cwd."""
    return run_command(["git", *args], cwd=cwd)


def git_checked(cwd: Path, *args: str) -> str:
    """Run a git command inside cwd and return its stdout.

    Raises:
        CommandError: If git exits with a non-zero status.
    """
    code, stdout, stderr = git(cwd, *args)
    if code != 0:
        raise CommandError(["git", *args], code, stderr or stdout)
    return stdout
