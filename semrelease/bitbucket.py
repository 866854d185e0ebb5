"""Lifecycle plugin publishing releases to Bitbucket Cloud."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from dataclasses import dataclass

import requests

from semrelease.domain import ProjectReleaseResult, ReleaseContext, ReleaseError

DEFAULT_API_URL = "https://api.bitbucket.org/2.0"
_TOKEN_VARIABLES = ("BB_TOKEN", "BITBUCKET_TOKEN", "SEMANTIC_RELEASE_BITBUCKET_TOKEN")


def _resolve_token() -> str:
    for key in _TOKEN_VARIABLES:
        value = os.environ.get(key)
        if value:
            return value
    return ""


@dataclass
class BitbucketPluginConfig:
    workspace: str = ""
    repo_slug: str = ""
    token: str = ""
    api_url: str = ""


class BitbucketPlugin:
    """Verifies access to a Bitbucket repository and publishes release tags."""

    name = "bitbucket"

    def __init__(
        self,
        config: BitbucketPluginConfig | None = None,
        logger: logging.Logger | None = None,
    ):
        cfg = dataclasses.replace(config) if config is not None else BitbucketPluginConfig()
        if not cfg.api_url:
            cfg.api_url = DEFAULT_API_URL
        if not cfg.token:
            cfg.token = _resolve_token()
        self.config = cfg
        self.logger = logger or logging.getLogger(__name__)
        self.session = requests.Session()

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.token}",
            "Content-Type": "application/json",
        }

    def _repo_url(self) -> str:
        return f"{self.config.api_url}/repositories/{self.config.workspace}/{self.config.repo_slug}"

    def verify_conditions(self, rc: ReleaseContext) -> None:
        """Raise ReleaseError unless the token and repository are usable."""
        if not self.config.token:
            raise ReleaseError(
                "Bitbucket token not found (set BB_TOKEN, BITBUCKET_TOKEN, "
                "or SEMANTIC_RELEASE_BITBUCKET_TOKEN)"
            )
        if not self.config.workspace or not self.config.repo_slug:
            raise ReleaseError("Bitbucket workspace and repo_slug must be configured")

        try:
            response = self.session.get(self._repo_url(), headers=self._headers())
        except requests.RequestException as exc:
            raise ReleaseError(f"verifying Bitbucket access: {exc}") from exc

        if response.status_code in (401, 403):
            raise ReleaseError(
                f"Bitbucket token is invalid or lacks permissions (HTTP {response.status_code})"
            )
        if response.status_code != 200:
            raise ReleaseError(
                f"Bitbucket API returned HTTP {response.status_code} for repo verification"
            )

    def publish(self, rc: ReleaseContext) -> ProjectReleaseResult | None:
        """Create the release tag through the API; Bitbucket has no releases."""
        plan = rc.current_project
        if plan is None:
            return None

        tag_name = rc.tag_name
        payload: dict[str, object] = {
            "name": tag_name,
            "target": {"hash": "HEAD" if plan.project.path else ""},
        }
        if rc.notes:
            payload["message"] = rc.notes

        try:
            response = self.session.post(
                f"{self._repo_url()}/refs/tags",
                data=json.dumps(payload, separators=(",", ":")),
                headers=self._headers(),
            )
        except requests.RequestException as exc:
            raise ReleaseError(f"publishing tag: {exc}") from exc

        if response.status_code not in (200, 201):
            raise ReleaseError(
                f"Bitbucket create tag failed ({response.status_code}): {response.text}"
            )

        url = (
            f"https://bitbucket.org/{self.config.workspace}/"
            f"{self.config.repo_slug}/src/{tag_name}"
        )
        self.logger.info("created Bitbucket tag tag=%s", tag_name)
        return ProjectReleaseResult(
            project=plan.project,
            version=plan.next_version,
            tag_name=tag_name,
            published=True,
            publish_url=url,
            changelog=rc.notes,
        )

    def add_channel(self, rc: ReleaseContext) -> None:
        """Bitbucket has no release channels; nothing to do."""

    def success(self, rc: ReleaseContext) -> None:
        self.logger.info("Bitbucket release successful tag=%s", rc.tag_name)

    def fail(self, rc: ReleaseContext) -> None:
        if rc.error is not None:
            self.logger.error("Bitbucket release failed error=%s", rc.error)