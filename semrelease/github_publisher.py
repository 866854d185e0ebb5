"""Publishing of GitHub releases."""

from __future__ import annotations

import json
import os

import requests

from semrelease.domain import ProjectReleaseResult, PublishParams, ReleaseError

_TOKEN_VARIABLES = ("GH_TOKEN", "GITHUB_TOKEN", "SEMANTIC_RELEASE_GITHUB_TOKEN")


class GitHubPublisher:
    """Creates GitHub releases for tags that have been pushed."""

    def __init__(self, owner: str, repo: str, token: str = ""):
        if not token:
            token = next((os.environ[k] for k in _TOKEN_VARIABLES if os.environ.get(k)), "")
        self.owner = owner
        self.repo = repo
        self.token = token
        self.session = requests.Session()

    def publish(self, params: PublishParams) -> ProjectReleaseResult:
        """Create the release and return its URL in the result."""
        name = f"{params.project} {params.version}" if params.project else params.tag_name
        payload = {
            "tag_name": params.tag_name,
            "name": name,
            "body": params.changelog,
            "prerelease": params.prerelease,
            "draft": False,
        }
        url = f"https://api.github.com/repos/{self.owner}/{self.repo}/releases"
        headers = {
            "Authorization": f"token {self.token}",
            "Content-Type": "application/json",
            "Accept": "application/vnd.github+json",
        }
        try:
            response = self.session.post(
                url, data=json.dumps(payload, separators=(",", ":")), headers=headers
            )
        except requests.RequestException as exc:
            raise ReleaseError(f"publishing release: {exc}") from exc

        if response.status_code != 201:
            raise ReleaseError(
                f"github release failed ({response.status_code}): {response.text}"
            )

        try:
            release = response.json()
        except ValueError as exc:
            raise ReleaseError(f"decoding release response: {exc}") from exc
        if not isinstance(release, dict):
            raise ReleaseError("decoding release response: expected an object")

        return ProjectReleaseResult(
            tag_name=params.tag_name,
            published=True,
            publish_url=str(release.get("html_url") or ""),
            changelog=params.changelog,
        )