"""GitHub hosting backends: the gh CLI, and the REST API as a fallback.

The backend is chosen once per run by select_backend(). The gh CLI is
preferred whenever it has an authenticated session; otherwise the REST API
is used with GITHUB_TOKEN.
"""

from __future__ import annotations

import os
import re
from abc import ABC, abstractmethod
from pathlib import Path

import requests

from gh_release_tools.publish.common import (
    PreconditionError,
    RemoteOperationError,
    has_cmd,
    info,
    print_stderr,
    run_command,
    warn,
)
from gh_release_tools.publish.config import PublishConfig

API_URL = "https://api.github.com"
ZIP_CONTENT_TYPE = "application/zip"

UPLOAD_URL_PATTERN = re.compile(r'"upload_url"\s*:\s*"([^"]+)"')


class HostingBackend(ABC):
    """Operations the publish workflow needs from GitHub."""

    @abstractmethod
    def ensure_repository(self, config: PublishConfig) -> bool:
        """Create the repository if it does not exist.

        Returns:
            True if the repository was created, False if it already existed.
        """

    @abstractmethod
    def create_release(self, config: PublishConfig, asset: Path | None = None) -> bool:
        """Create a release for config.tag, attaching asset when given.

        An existing release for the tag is left untouched, asset included.

        Returns:
            True if the release was created, False if it already existed.
        """


class GhCliBackend(HostingBackend):
    """Backend driven by an authenticated gh CLI."""

    @staticmethod
    def is_available() -> bool:
        if not has_cmd("gh"):
            return False
        code, _, _ = run_command(["gh", "auth", "status"])
        return code == 0

    def ensure_repository(self, config: PublishConfig) -> bool:
        code, _, _ = run_command(["gh", "repo", "view", config.repo_full_name])
        if code == 0:
            info(f"Remote GitHub repo exists: {config.repo_full_name}")
            return False

        info(f"Creating GitHub repo with gh: {config.repo_full_name} ({config.visibility})")
        code, _, stderr = run_command(
            [
                "gh",
                "repo",
                "create",
                config.repo_full_name,
                f"--{config.visibility}",
                "--source",
                ".",
                "--disable-issues",
                "--disable-wiki",
            ],
            cwd=config.code_dir,
        )
        if code != 0:
            raise RemoteOperationError(f"Failed to create repo via gh: {stderr}")
        return True

    def create_release(self, config: PublishConfig, asset: Path | None = None) -> bool:
        code, _, _ = run_command(["gh", "release", "view", config.tag, "--repo", config.repo_full_name])
        if code == 0:
            warn(f"Release '{config.tag}' already exists on GitHub.")
            return False

        cmd = ["gh", "release", "create", config.tag]
        if asset is not None and asset.is_file():
            cmd.append(str(asset))
        cmd.extend(
            [
                "--repo",
                config.repo_full_name,
                "--title",
                config.tag,
                "--notes",
                config.message,
            ]
        )

        code, stdout, stderr = run_command(cmd, cwd=config.code_dir)
        if code != 0:
            raise RemoteOperationError(f"Failed to create release via gh: {stderr or stdout}")
        if stdout:
            info(f"Release created: {stdout}")
        return True


def extract_upload_url(response_text: str) -> str | None:
    """Pull the asset upload URL out of a release response.

    The URL template suffix ({?name,label}) is stripped.
    """
    match = UPLOAD_URL_PATTERN.search(response_text)
    if not match:
        return None
    return match.group(1).split("{", 1)[0] or None


class RestApiBackend(HostingBackend):
    """Backend using the GitHub REST API with a bearer token."""

    def __init__(self, token: str, api_url: str = API_URL, session: requests.Session | None = None) -> None:
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
            }
        )

    def _repository_exists(self, config: PublishConfig) -> bool:
        try:
            response = self.session.get(f"{self.api_url}/repos/{config.repo_full_name}")
        except requests.RequestException as e:
            print_stderr(f"Warning: could not query repository: {e}")
            return False
        return '"full_name"' in response.text

    def ensure_repository(self, config: PublishConfig) -> bool:
        if self._repository_exists(config):
            info(f"Remote GitHub repo already exists: {config.repo_full_name}")
            return False

        info("Creating GitHub repo via REST API")
        try:
            response = self.session.post(
                f"{self.api_url}/user/repos",
                json={"name": config.name, "private": config.is_private},
            )
        except requests.RequestException as e:
            raise RemoteOperationError(f"Failed to create repo via API: {e}") from e

        if '"full_name"' not in response.text:
            print_stderr(response.text)
            raise RemoteOperationError("Failed to create repo via API")

        info(f"Created GitHub repo: {config.repo_full_name}")
        return True

    def _release_exists(self, config: PublishConfig) -> bool:
        try:
            response = self.session.get(f"{self.api_url}/repos/{config.repo_full_name}/releases/tags/{config.tag}")
        except requests.RequestException as e:
            print_stderr(f"Warning: could not query release: {e}")
            return False
        return '"upload_url"' in response.text

    def create_release(self, config: PublishConfig, asset: Path | None = None) -> bool:
        if self._release_exists(config):
            warn(f"Release '{config.tag}' already exists on GitHub.")
            return False

        payload = {
            "tag_name": config.tag,
            "name": config.tag,
            "body": config.message,
            "draft": False,
            "prerelease": False,
        }
        try:
            response = self.session.post(f"{self.api_url}/repos/{config.repo_full_name}/releases", json=payload)
        except requests.RequestException as e:
            raise RemoteOperationError(f"Failed to create release via API: {e}") from e

        upload_url = extract_upload_url(response.text)
        if not upload_url:
            print_stderr(response.text)
            raise RemoteOperationError("Failed to create release via API")

        if asset is not None and asset.is_file():
            self._upload_asset(upload_url, asset)
        return True

    def _upload_asset(self, upload_url: str, asset: Path) -> None:
        info(f"Uploading {asset.name}")
        try:
            with asset.open("rb") as f:
                response = self.session.post(
                    upload_url,
                    params={"name": asset.name},
                    headers={"Content-Type": ZIP_CONTENT_TYPE},
                    data=f,
                )
        except (OSError, requests.RequestException) as e:
            raise RemoteOperationError(f"Failed to upload asset: {e}") from e

        if response.status_code >= 300:
            print_stderr(response.text)
            raise RemoteOperationError(f"Failed to upload asset: HTTP {response.status_code}")


class UnavailableBackend(HostingBackend):
    """Placeholder used when neither gh nor a token is available."""

    def ensure_repository(self, config: PublishConfig) -> bool:
        raise PreconditionError("GITHUB_TOKEN not set; cannot create repo without authenticated gh")

    def create_release(self, config: PublishConfig, asset: Path | None = None) -> bool:
        raise PreconditionError("GITHUB_TOKEN not set; cannot create release without authenticated gh")


def select_backend() -> HostingBackend:
    """Check capabilities and return the backend to use for this run."""
    if GhCliBackend.is_available():
        return GhCliBackend()
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return RestApiBackend(token)
    return UnavailableBackend()
