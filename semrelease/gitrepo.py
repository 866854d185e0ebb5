"""Access to a git repository through the git command-line tool."""

from __future__ import annotations

import subprocess
from datetime import datetime

from semrelease.domain import Commit, ReleaseError, Tag

_LOG_FORMAT = "--format=%H|%an|%ae|%aI|%s|%b%x00"


class GitError(ReleaseError):
    """Raised when a git command fails."""


def _parse_date(text: str) -> datetime | None:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _parse_commit_entry(entry: str) -> Commit | None:
    first, newline, rest = entry.partition("\n")
    parts = first.split("|", 5)
    if len(parts) < 5:
        return None
    body = parts[5] if len(parts) >= 6 else ""
    if newline:
        body = body + "\n" + rest
    return Commit(
        hash=parts[0],
        author=parts[1],
        author_email=parts[2],
        date=_parse_date(parts[3]),
        message=parts[4],
        body=body.strip(),
    )


def parse_commit_log(output: str) -> list[Commit]:
    """Parse NUL-separated ``git log`` entries; malformed entries are skipped."""
    commits = []
    for entry in output.split("\x00"):
        entry = entry.strip()
        if not entry:
            continue
        commit = _parse_commit_entry(entry)
        if commit is not None:
            commits.append(commit)
    return commits


class GitRepository:
    """Runs git commands inside a working directory."""

    def __init__(self, work_dir: str):
        self.work_dir = work_dir

    def _run(self, *args: str) -> str:
        try:
            proc = subprocess.run(
                ["git", *args],
                cwd=self.work_dir,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            raise GitError(f"git {' '.join(args)}: {exc}") from exc
        if proc.returncode != 0:
            raise GitError(
                f"git {' '.join(args)}: {proc.stderr}: exit status {proc.returncode}"
            )
        return proc.stdout.strip()

    def current_branch(self) -> str:
        return self._run("rev-parse", "--abbrev-ref", "HEAD")

    def list_tags(self) -> list[Tag]:
        """All tags, highest version first, each with the commit it points at."""
        output = self._run("tag", "--list", "--sort=-version:refname")
        tags = []
        for line in output.split("\n"):
            name = line.strip()
            if not name:
                continue
            try:
                commit_hash = self._run("rev-list", "-1", name)
            except GitError:
                commit_hash = ""
            tags.append(Tag(name=name, hash=commit_hash))
        return tags

    def commits_since(self, since_hash: str = "") -> list[Commit]:
        """Commits reachable from HEAD but not from ``since_hash`` (all if empty)."""
        args = ["log", _LOG_FORMAT]
        if since_hash:
            args.append(f"{since_hash}..HEAD")
        output = self._run(*args)
        if not output:
            return []
        return parse_commit_log(output)

    def files_changed_in_commit(self, hash: str) -> list[str]:
        output = self._run("diff-tree", "--no-commit-id", "--name-only", "-r", hash)
        if not output:
            return []
        return output.split("\n")

    def create_tag(self, name: str, hash: str, message: str = "") -> None:
        """Create an annotated tag when ``message`` is given, else a lightweight one."""
        if message:
            self._run("tag", "-a", name, hash, "-m", message)
        else:
            self._run("tag", name, hash)

    def push_tag(self, name: str) -> None:
        self._run("push", "origin", name)

    def head_hash(self) -> str:
        return self._run("rev-parse", "HEAD")

    def remote_url(self) -> str:
        return self._run("remote", "get-url", "origin")