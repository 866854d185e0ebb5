"""Merging of a configuration with the configuration it extends."""

from __future__ import annotations

import dataclasses
from typing import TypeVar

from semrelease.domain import Config, LintConfig

_T = TypeVar("_T")

_CONFIG_FIELDS = (
    "release_mode", "tag_format", "project_tag_format", "repository_url",
    "git_backend", "changelog_template", "branches", "commit_types", "projects",
    "include_paths", "exclude_paths", "changelog_sections", "plugins",
)
_PREPARE_FIELDS = ("changelog_file", "version_file", "additional_files")
_GITHUB_FIELDS = (
    "owner", "repo", "token", "api_url", "assets", "success_comment",
    "fail_comment", "released_labels", "fail_labels",
)
_GITLAB_FIELDS = ("project_id", "token", "api_url", "assets")
_BITBUCKET_FIELDS = ("workspace", "repo_slug", "token", "api_url")
_IDENTITY_FIELDS = ("name", "email")


def _fill(base: _T, parent: _T, names: tuple[str, ...]) -> _T:
    """Copy of ``base`` with each empty field in ``names`` taken from ``parent``."""
    updates = {
        name: getattr(parent, name) for name in names if not getattr(base, name)
    }
    return dataclasses.replace(base, **updates)


def _merge_lint(base: LintConfig, parent: LintConfig) -> LintConfig:
    merged = _fill(base, parent, ("max_subject_length", "allowed_types", "allowed_scopes"))
    merged.enabled = base.enabled or parent.enabled
    return merged


def merge_configs(base: Config, parent: Config) -> Config:
    """Return ``base`` with its unset values filled from ``parent``; base wins."""
    merged = _fill(base, parent, _CONFIG_FIELDS)
    merged.prepare = _fill(base.prepare, parent.prepare, _PREPARE_FIELDS)
    merged.github = _fill(base.github, parent.github, _GITHUB_FIELDS)
    merged.gitlab = _fill(base.gitlab, parent.gitlab, _GITLAB_FIELDS)
    merged.bitbucket = _fill(base.bitbucket, parent.bitbucket, _BITBUCKET_FIELDS)
    merged.lint = _merge_lint(base.lint, parent.lint)
    merged.git_author = _fill(base.git_author, parent.git_author, _IDENTITY_FIELDS)
    merged.git_committer = _fill(base.git_committer, parent.git_committer, _IDENTITY_FIELDS)
    return merged