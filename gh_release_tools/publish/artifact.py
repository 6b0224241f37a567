"""Package the code directory as a zip artifact for the release."""

from __future__ import annotations

import tempfile
from pathlib import Path

from gh_release_tools.publish.common import (
    CommandError,
    PreconditionError,
    has_cmd,
    info,
    run_command,
)
from gh_release_tools.publish.config import PublishConfig


def artifact_path(config: PublishConfig, tmp_dir: Path | None = None) -> Path:
    """Return the fixed archive location, <tmp>/<name>-<tag>.zip."""
    return (tmp_dir or Path(tempfile.gettempdir())) / f"{config.name}-{config.tag}.zip"


def build_zip(config: PublishConfig, tmp_dir: Path | None = None) -> Path:
    """Zip the whole code directory, hidden files included.

    The archive is left in place after the run.

    Raises:
        PreconditionError: If the zip utility is not installed.
        CommandError: If zip fails.
    """
    if not has_cmd("zip"):
        raise PreconditionError("zip not found but --zip was requested")

    zip_path = artifact_path(config, tmp_dir)
    # zip updates an existing archive in place
    zip_path.unlink(missing_ok=True)

    info(f"Creating zip artifact: {zip_path}")
    cmd = ["zip", "-r", "-q", str(zip_path), "."]
    code, stdout, stderr = run_command(cmd, cwd=config.code_dir)
    if code != 0:
        raise CommandError(cmd, code, stderr or stdout)
    return zip_path
