"""Markdown release notes rendered from commit history."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from datetime import date
from typing import Any

from semrelease.domain import ChangelogSectionConfig, Commit, Version
from semrelease.templating import Template, TemplateError

DEFAULT_TEMPLATE = """## {{if .Project}}[{{.Project}}] {{end}}{{.Version}} ({{.Date}})
{{range .Sections}}
### {{.Title}}

{{range .Commits}}- {{if .Scope}}**{{.Scope}}:** {{end}}{{.Description}} ({{.ShortHash}})
{{end}}{{end}}"""

BREAKING_SECTION = "breaking"


def _commit_data(commit: Commit) -> dict[str, Any]:
    return {
        "Hash": commit.hash,
        "ShortHash": commit.hash[:7],
        "Type": commit.type,
        "Scope": commit.scope,
        "Description": commit.description,
        "Author": commit.author,
        "Breaking": commit.is_breaking_change,
    }


class ChangelogGenerator:
    """Renders release notes with the default or a custom template."""

    def __init__(self, custom_template: str = ""):
        self.custom_template = custom_template

    def generate(
        self,
        version: Version,
        project: str,
        commits: Sequence[Commit],
        sections: Sequence[ChangelogSectionConfig],
    ) -> str:
        """Render the notes for ``version`` and strip surrounding whitespace."""
        data = self._template_data(version, project, commits, sections)
        try:
            template = Template(self.custom_template or DEFAULT_TEMPLATE)
        except TemplateError as exc:
            raise TemplateError(f"parsing changelog template: {exc}") from exc
        try:
            rendered = template.render(data)
        except TemplateError as exc:
            raise TemplateError(f"executing changelog template: {exc}") from exc
        return rendered.strip()

    @staticmethod
    def _template_data(
        version: Version,
        project: str,
        commits: Sequence[Commit],
        sections: Sequence[ChangelogSectionConfig],
    ) -> dict[str, Any]:
        breaking = [c for c in commits if c.is_breaking_change]
        by_type: defaultdict[str, list[Commit]] = defaultdict(list)
        for commit in commits:
            if commit.type:
                by_type[commit.type].append(commit)

        rendered_sections = []
        for section in sections:
            if section.hidden:
                continue
            selected = breaking if section.type == BREAKING_SECTION else by_type.get(section.type, [])
            if not selected:
                continue
            rendered_sections.append({
                "Title": section.title,
                "Commits": [_commit_data(c) for c in selected],
            })

        return {
            "Version": str(version),
            "Project": project,
            "Date": date.today().isoformat(),
            "Sections": rendered_sections,
        }