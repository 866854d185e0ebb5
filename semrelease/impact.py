"""Mapping of changed files to the projects they affect."""

from __future__ import annotations

import posixpath
import re
from collections.abc import Iterable, Sequence
from functools import lru_cache

from semrelease.domain import Commit, Project


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> re.Pattern[str] | None:
    """Translate a shell pattern whose wildcards never cross '/'; None if malformed."""
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        elif ch == "\\":
            i += 1
            if i >= n:
                return None
            out.append(re.escape(pattern[i]))
        elif ch == "[":
            end = i + 1
            negate = end < n and pattern[end] == "^"
            if negate:
                end += 1
            start = end
            while end < n and (pattern[end] != "]" or end == start):
                end += 1
            if end >= n or end == start:
                return None
            body = pattern[start:end].replace("\\", "\\\\").replace("^", "\\^")
            out.append(f"[{'^' if negate else ''}{body}]")
            i = end
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("".join(out) + r"\Z")


def _glob_match(pattern: str, name: str) -> bool:
    compiled = _compile_glob(pattern)
    return compiled is not None and compiled.match(name) is not None


def _matches_any(file: str, patterns: Iterable[str]) -> bool:
    for pattern in patterns:
        if _glob_match(pattern, file) or _glob_match(pattern, posixpath.basename(file)):
            return True
        if pattern.endswith("/**"):
            prefix = pattern[:-3]
            if file.startswith(prefix + "/") or file == prefix:
                return True
    return False


def _file_in_project(file: str, project_path: str) -> bool:
    if project_path in ("", "."):
        return True
    return file.startswith(project_path + "/") or file == project_path


class PathBasedImpactAnalyzer:
    """Assigns commits to projects by the paths of the files they change."""

    def __init__(
        self,
        propagate_deps: bool = False,
        include_paths: Sequence[str] | None = None,
        exclude_paths: Sequence[str] | None = None,
    ):
        self.propagate_deps = propagate_deps
        self.include_paths = list(include_paths or [])
        self.exclude_paths = list(exclude_paths or [])

    def analyze(
        self, projects: Sequence[Project], commits: Iterable[Commit]
    ) -> dict[str, list[Commit]]:
        """Return the commits affecting each project, keyed by project name."""
        result: dict[str, list[Commit]] = {}
        for commit in commits:
            for name in self._affected_projects(projects, commit.files_changed):
                result.setdefault(name, []).append(commit)
        if self.propagate_deps:
            self._propagate(projects, result)
        return result

    def _affected_projects(self, projects: Sequence[Project], files: Iterable[str]) -> list[str]:
        affected: list[str] = []
        for file in self._filter_files(files):
            for project in projects:
                if project.name in affected:
                    continue
                if project.is_root() or _file_in_project(file, project.path):
                    affected.append(project.name)
        return affected

    def _filter_files(self, files: Iterable[str]) -> list[str]:
        if not self.include_paths and not self.exclude_paths:
            return list(files)
        return [
            file
            for file in files
            if (not self.include_paths or _matches_any(file, self.include_paths))
            and not _matches_any(file, self.exclude_paths)
        ]

    @staticmethod
    def _propagate(projects: Sequence[Project], result: dict[str, list[Commit]]) -> None:
        # Single pass: a project inherits the commits of a changed dependency.
        for project in projects:
            for dependency in project.dependencies:
                dep_commits = result.get(dependency)
                if dep_commits and project.name not in result:
                    result[project.name] = list(dep_commits)