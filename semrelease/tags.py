"""Formatting and parsing of release tag names."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from semrelease.domain import Tag, Version, parse_version
from semrelease.templating import Template, TemplateError

DEFAULT_REPO_TEMPLATE = "v{{.Version}}"
DEFAULT_PROJECT_TEMPLATE = "{{.Project}}/v{{.Version}}"


class TemplateTagService:
    """Builds tag names from templates and recognises existing tags."""

    def __init__(self, repo_template: str = "", project_template: str = ""):
        self.repo_template = repo_template or DEFAULT_REPO_TEMPLATE
        self.project_template = project_template or DEFAULT_PROJECT_TEMPLATE

    def format_tag(self, project: str, version: Version) -> str:
        """Render the tag name for ``version`` of ``project`` (empty for the repository)."""
        source = self.project_template if project else self.repo_template
        try:
            template = Template(source)
        except TemplateError as exc:
            raise TemplateError(f"parsing tag template: {exc}") from exc
        try:
            return template.render({"Project": project, "Version": str(version)})
        except TemplateError as exc:
            raise TemplateError(f"executing tag template: {exc}") from exc

    def parse_tag(self, tag_name: str) -> tuple[str, Version]:
        """Split a tag into its project (empty for repository tags) and version.

        Raises ValueError when no version can be recognised.
        """
        idx = tag_name.find("/v")
        if idx > 0:
            try:
                return tag_name[:idx], parse_version(tag_name[idx + 1:])
            except ValueError:
                pass

        idx = tag_name.rfind("@")
        if idx > 0:
            try:
                return tag_name[:idx], parse_version(tag_name[idx + 1:])
            except ValueError:
                pass

        try:
            return "", parse_version(tag_name)
        except ValueError as exc:
            raise ValueError(f"cannot parse tag {tag_name!r}: {exc}") from exc

    def find_latest_tag(self, tags: Iterable[Tag], project: str) -> Tag | None:
        """Return the highest-versioned tag belonging to ``project``, or None.

        Matching tags get their ``version`` and ``project`` filled in.
        """
        latest: Tag | None = None
        for tag in tags:
            try:
                tag_project, version = self.parse_tag(tag.name)
            except ValueError:
                continue
            if tag_project != project:
                continue
            tag.version = version
            tag.project = tag_project
            if latest is None or version > latest.version:
                latest = dataclasses.replace(tag)
        return latest