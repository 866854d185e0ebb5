"""Discovery of the projects that make up a repository."""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import Protocol

from semrelease.domain import Project, ProjectConfig, ProjectType, ReleaseError


class _FileSystem(Protocol):
    def read_file(self, path: str) -> bytes: ...

    def exists(self, path: str) -> bool: ...

    def glob(self, pattern: str) -> list[str]: ...


class _Discoverer(Protocol):
    def discover(self, root_path: str) -> list[Project]: ...


def _base_name(path: str) -> str:
    return os.path.basename(os.path.normpath(path))


def parse_go_work_use(content: str) -> list[str]:
    """Return the directories named by ``use`` directives of a go.work file."""
    dirs: list[str] = []
    in_block = False
    for raw in content.splitlines():
        line = raw.strip()
        if line.startswith("use ("):
            in_block = True
            continue
        if in_block and line == ")":
            in_block = False
            continue
        if in_block:
            if line and not line.startswith("//"):
                dirs.append(line)
            continue
        if line.startswith("use ") and "(" not in line:
            directory = line[len("use"):].strip()
            if directory:
                dirs.append(directory)
    return dirs


def read_module_name(fs: _FileSystem, mod_file: str) -> str:
    """Return the module path declared in a go.mod file, or "" if unreadable."""
    try:
        data = fs.read_file(mod_file)
    except OSError:
        return ""
    for raw in data.decode("utf-8", errors="replace").splitlines():
        line = raw.strip()
        if line.startswith("module "):
            return line[len("module"):].strip()
    return ""


class WorkspaceDiscoverer:
    """Finds projects listed in a go.work file."""

    def __init__(self, fs: _FileSystem):
        self.fs = fs

    def discover(self, root_path: str) -> list[Project]:
        work_file = os.path.join(root_path, "go.work")
        if not self.fs.exists(work_file):
            return []
        try:
            data = self.fs.read_file(work_file)
        except OSError as exc:
            raise ReleaseError(f"reading go.work: {exc}") from exc

        projects = []
        for directory in parse_go_work_use(data.decode("utf-8", errors="replace")):
            mod_path = os.path.normpath(os.path.join(root_path, directory, "go.mod"))
            name = _base_name(root_path) if directory == "." else directory
            projects.append(Project(
                name=name,
                path=directory,
                type=ProjectType.GO_WORKSPACE,
                module_path=read_module_name(self.fs, mod_path),
                tag_prefix=name + "/",
            ))
        return projects


class ModuleDiscoverer:
    """Finds projects by the go.mod files below the repository root."""

    def __init__(self, fs: _FileSystem):
        self.fs = fs

    def discover(self, root_path: str) -> list[Project]:
        try:
            matches = self.fs.glob(root_path + "/**/go.mod")
        except (OSError, ValueError) as exc:
            raise ReleaseError(f"scanning for go.mod files: {exc}") from exc

        projects = []
        for match in matches:
            try:
                rel = os.path.relpath(os.path.dirname(match), root_path)
            except ValueError:
                continue
            if rel == ".":
                name, project_type, prefix = _base_name(root_path), ProjectType.ROOT, ""
            else:
                name, project_type, prefix = rel, ProjectType.GO_MODULE, rel + "/"
            projects.append(Project(
                name=name,
                path=rel,
                type=project_type,
                module_path=read_module_name(self.fs, match),
                tag_prefix=prefix,
            ))
        return projects


class ConfiguredDiscoverer:
    """Builds projects from static configuration."""

    def __init__(self, projects: Sequence[ProjectConfig]):
        self.projects = list(projects)

    def discover(self, root_path: str = "") -> list[Project]:
        return [
            Project(
                name=pc.name,
                path=pc.path,
                type=ProjectType.CONFIGURED,
                dependencies=list(pc.dependencies),
                tag_prefix=pc.tag_prefix or pc.name + "/",
            )
            for pc in self.projects
        ]


class CompositeDiscoverer:
    """Tries discoverers in order; the first non-empty result wins."""

    def __init__(self, *args: _Discoverer):
        self.discoverers = list(args)

    def discover(self, root_path: str) -> list[Project]:
        for discoverer in self.discoverers:
            projects = discoverer.discover(root_path)
            if projects:
                return projects
        return []