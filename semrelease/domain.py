"""Core domain types: versions, commits, projects, configuration and release records."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from functools import total_ordering


class ReleaseError(Exception):
    """Base class for errors raised while planning or performing a release."""


class _StrEnum(str, Enum):
    def __str__(self) -> str:
        return self.value


class ProjectType(_StrEnum):
    """How a project was discovered."""

    ROOT = "root"
    GO_WORKSPACE = "go-workspace"
    GO_MODULE = "go-module"
    CONFIGURED = "configured"


class ReleaseMode(_StrEnum):
    """Whether the repository is versioned as one unit or per project."""

    REPO = "repo"
    INDEPENDENT = "independent"


class LintSeverity(_StrEnum):
    """Severity of a lint violation."""

    ERROR = "error"
    WARNING = "warning"


_VERSION_RE = re.compile(
    r"[vV]?(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?"
    r"(?:\+(?P<build>[0-9A-Za-z.-]+))?"
)


def _prerelease_key(prerelease: str) -> tuple:
    if not prerelease:
        return (1,)
    parts = []
    for ident in prerelease.split("."):
        if ident.isdigit():
            parts.append((0, int(ident), ""))
        else:
            parts.append((1, 0, ident))
    return (0, tuple(parts))


@total_ordering
@dataclass(frozen=True)
class Version:
    """A semantic version; build metadata does not take part in comparison."""

    major: int = 0
    minor: int = 0
    patch: int = 0
    prerelease: str = ""
    build: str = field(default="", compare=False)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text

    def _key(self) -> tuple:
        return (self.major, self.minor, self.patch, _prerelease_key(self.prerelease))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()


def parse_version(text: str) -> Version:
    """Parse ``X.Y.Z`` with an optional ``v`` prefix, prerelease and build suffix."""
    match = _VERSION_RE.fullmatch(text.strip())
    if match is None:
        raise ValueError(f"invalid semantic version {text!r}")
    return Version(
        major=int(match["major"]),
        minor=int(match["minor"]),
        patch=int(match["patch"]),
        prerelease=match["pre"] or "",
        build=match["build"] or "",
    )


@dataclass
class Commit:
    """A commit and what was parsed from its message."""

    hash: str = ""
    author: str = ""
    author_email: str = ""
    date: datetime | None = None
    message: str = ""
    type: str = ""
    scope: str = ""
    description: str = ""
    body: str = ""
    footer: str = ""
    is_breaking_change: bool = False
    breaking_note: str = ""
    files_changed: list[str] = field(default_factory=list)


@dataclass
class Project:
    """A releasable unit inside the repository."""

    name: str = ""
    path: str = ""
    type: ProjectType | None = None
    module_path: str = ""
    tag_prefix: str = ""
    dependencies: list[str] = field(default_factory=list)

    def is_root(self) -> bool:
        """True when the project stands for the whole repository."""
        return self.type is ProjectType.ROOT


@dataclass
class ProjectConfig:
    """A project defined statically in configuration."""

    name: str = ""
    path: str = ""
    tag_prefix: str = ""
    dependencies: list[str] = field(default_factory=list)


@dataclass
class Tag:
    """A git tag, with the project and version parsed from its name when known."""

    name: str = ""
    hash: str = ""
    version: Version | None = None
    project: str = ""
    is_annotated: bool = False


@dataclass
class BranchPolicy:
    """Release rules for one branch."""

    name: str = ""
    is_default: bool = False
    prerelease: bool = False
    channel: str = ""


@dataclass
class GitIdentity:
    name: str = ""
    email: str = ""


@dataclass
class PrepareConfig:
    changelog_file: str = ""
    version_file: str = ""
    additional_files: list[str] = field(default_factory=list)


@dataclass
class GitHubConfig:
    owner: str = ""
    repo: str = ""
    token: str = ""
    api_url: str = ""
    assets: list[str] = field(default_factory=list)
    create_release: bool = False
    draft_release: bool = False
    discussion_category_name: str = ""
    success_comment: str = ""
    fail_comment: str = ""
    released_labels: list[str] = field(default_factory=list)
    fail_labels: list[str] = field(default_factory=list)


@dataclass
class GitLabConfig:
    project_id: str = ""
    token: str = ""
    api_url: str = ""
    assets: list[str] = field(default_factory=list)
    milestones: list[str] = field(default_factory=list)


@dataclass
class BitbucketConfig:
    workspace: str = ""
    repo_slug: str = ""
    token: str = ""
    api_url: str = ""


@dataclass
class LintConfig:
    enabled: bool = False
    max_subject_length: int = 0
    allowed_types: list[str] = field(default_factory=list)
    allowed_scopes: list[str] = field(default_factory=list)
    require_scope: bool = False
    require_body: bool = False


@dataclass
class LintViolation:
    rule: str
    message: str
    severity: LintSeverity


@dataclass
class ChangelogSectionConfig:
    type: str = ""
    title: str = ""
    hidden: bool = False


@dataclass
class Config:
    """Complete tool configuration; empty values mean "not set"."""

    release_mode: ReleaseMode | None = None
    tag_format: str = ""
    project_tag_format: str = ""
    repository_url: str = ""
    git_backend: str = ""
    changelog_template: str = ""
    branches: list[BranchPolicy] = field(default_factory=list)
    commit_types: dict[str, str] = field(default_factory=dict)
    projects: list[ProjectConfig] = field(default_factory=list)
    include_paths: list[str] = field(default_factory=list)
    exclude_paths: list[str] = field(default_factory=list)
    changelog_sections: list[ChangelogSectionConfig] = field(default_factory=list)
    plugins: list[str] = field(default_factory=list)
    extends: list[str] = field(default_factory=list)
    prepare: PrepareConfig = field(default_factory=PrepareConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    gitlab: GitLabConfig = field(default_factory=GitLabConfig)
    bitbucket: BitbucketConfig = field(default_factory=BitbucketConfig)
    lint: LintConfig = field(default_factory=LintConfig)
    git_author: GitIdentity = field(default_factory=GitIdentity)
    git_committer: GitIdentity = field(default_factory=GitIdentity)
    dry_run: bool = False
    ci: bool = False
    debug: bool = False
    interactive: bool | None = None
    discover_modules: bool = False
    dependency_propagation: bool = False


@dataclass
class ProjectReleasePlan:
    """What is planned for one project."""

    project: Project = field(default_factory=Project)
    current_version: Version = Version()
    next_version: Version = Version()
    release_type: str = ""
    commits: list[Commit] = field(default_factory=list)
    should_release: bool = False
    reason: str = ""


@dataclass
class ProjectReleaseResult:
    """Outcome of releasing one project."""

    project: Project = field(default_factory=Project)
    version: Version = Version()
    tag_name: str = ""
    published: bool = False
    publish_url: str = ""
    changelog: str = ""
    skipped: bool = False
    error: Exception | None = None


@dataclass
class ReleaseResult:
    projects: list[ProjectReleaseResult] = field(default_factory=list)


@dataclass
class ReleaseContext:
    """State handed to lifecycle plugins."""

    config: Config = field(default_factory=Config)
    branch: str = ""
    branch_policy: BranchPolicy | None = None
    dry_run: bool = False
    ci: bool = False
    repository_root: str = ""
    current_project: ProjectReleasePlan | None = None
    notes: str = ""
    tag_name: str = ""
    result: ReleaseResult | None = None
    error: Exception | None = None


@dataclass
class PublishParams:
    project: str = ""
    version: Version = Version()
    tag_name: str = ""
    changelog: str = ""
    prerelease: bool = False


_DEFAULT_TYPES = [
    "feat", "fix", "docs", "style", "refactor", "perf",
    "test", "build", "ci", "chore", "revert",
]


def default_lint_config() -> LintConfig:
    """Lint rules used when none are configured."""
    return LintConfig(
        enabled=True,
        max_subject_length=72,
        allowed_types=list(_DEFAULT_TYPES),
    )


def _default_sections() -> list[ChangelogSectionConfig]:
    return [
        ChangelogSectionConfig(type="breaking", title="Breaking Changes"),
        ChangelogSectionConfig(type="feat", title="Features"),
        ChangelogSectionConfig(type="fix", title="Bug Fixes"),
        ChangelogSectionConfig(type="perf", title="Performance Improvements"),
        ChangelogSectionConfig(type="revert", title="Reverts"),
        ChangelogSectionConfig(type="docs", title="Documentation", hidden=True),
        ChangelogSectionConfig(type="refactor", title="Code Refactoring", hidden=True),
        ChangelogSectionConfig(type="chore", title="Chores", hidden=True),
    ]


def default_config() -> Config:
    """Configuration used before any file or environment overrides."""
    return Config(
        release_mode=ReleaseMode.REPO,
        tag_format="v{{.Version}}",
        project_tag_format="{{.Project}}/v{{.Version}}",
        git_backend="cli",
        branches=[
            BranchPolicy(name="main", is_default=True),
            BranchPolicy(name="master", is_default=True),
        ],
        commit_types={"feat": "minor", "fix": "patch", "perf": "patch"},
        changelog_sections=_default_sections(),
        prepare=PrepareConfig(changelog_file="CHANGELOG.md"),
        github=GitHubConfig(create_release=True),
        lint=default_lint_config(),
    )