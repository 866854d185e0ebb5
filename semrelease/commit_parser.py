"""Parsing of Conventional Commits messages."""

from __future__ import annotations

import re

from semrelease.domain import Commit

_CONVENTIONAL_RE = re.compile(
    r"(?P<type>[A-Za-z0-9_]+)"
    r"(?:\((?P<scope>[^)]*)\))?"
    r"(?P<breaking>!)?"
    r":\s*(?P<description>.+)"
)

_FOOTER_TOKEN_RE = re.compile(r"[A-Za-z0-9_-]+(?:: | #)")

_BREAKING_PREFIXES = ("BREAKING CHANGE:", "BREAKING-CHANGE:")


def _is_footer(text: str) -> bool:
    first = text.split("\n", 1)[0]
    return bool(_FOOTER_TOKEN_RE.match(first)) or first.startswith(_BREAKING_PREFIXES)


def _split_body_footer(text: str) -> tuple[str, str]:
    parts = text.split("\n\n")
    if len(parts) <= 1:
        return text, ""
    last = parts[-1]
    if _is_footer(last):
        return "\n\n".join(parts[:-1]), last
    return text, ""


def _find_breaking_note(text: str, prefix: str) -> str:
    for line in text.split("\n"):
        line = line.strip()
        if line.startswith(prefix):
            return line[len(prefix):].strip()
    return ""


def _detect_breaking_change(commit: Commit) -> None:
    for prefix in _BREAKING_PREFIXES:
        for text in (commit.footer, commit.body):
            note = _find_breaking_note(text, prefix)
            if note:
                commit.is_breaking_change = True
                commit.breaking_note = note
                return


class ConventionalCommitParser:
    """Turns a raw commit message into a structured Commit."""

    def parse(self, message: str) -> Commit:
        subject, newline, rest = message.partition("\n")
        subject = subject.strip()

        match = _CONVENTIONAL_RE.fullmatch(subject)
        if match is None:
            return Commit(message=subject, description=subject)

        commit = Commit(
            message=subject,
            type=match["type"],
            scope=match["scope"] or "",
            description=match["description"],
            is_breaking_change=match["breaking"] == "!",
        )

        if newline:
            commit.body, commit.footer = _split_body_footer(rest.strip())
            _detect_breaking_change(commit)

        return commit