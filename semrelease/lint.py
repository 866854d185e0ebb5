"""Checking commits against Conventional Commits rules."""

from __future__ import annotations

from semrelease.domain import Commit, LintConfig, LintSeverity, LintViolation


class ConventionalLinter:
    """Validates commits against the configured conventional-commit rules."""

    def __init__(self, config: LintConfig):
        self.config = config

    def lint(self, commit: Commit) -> list[LintViolation]:
        """Return every rule violation found in ``commit``, in rule order."""
        return [
            *self._check_type(commit),
            *self._check_scope(commit),
            *self._check_description(commit),
            *self._check_subject_length(commit),
            *self._check_body(commit),
        ]

    def _check_type(self, commit: Commit) -> list[LintViolation]:
        if not commit.type:
            return [LintViolation(
                "type-empty",
                "commit message must have a type (e.g., feat, fix)",
                LintSeverity.ERROR,
            )]
        allowed = self.config.allowed_types
        if allowed and commit.type not in allowed:
            return [LintViolation(
                "type-enum",
                f'type "{commit.type}" is not allowed; allowed types: {", ".join(allowed)}',
                LintSeverity.ERROR,
            )]
        return []

    def _check_scope(self, commit: Commit) -> list[LintViolation]:
        if self.config.require_scope and not commit.scope:
            return [LintViolation(
                "scope-empty", "commit message must have a scope", LintSeverity.ERROR
            )]
        allowed = self.config.allowed_scopes
        if commit.scope and allowed and commit.scope not in allowed:
            return [LintViolation(
                "scope-enum",
                f'scope "{commit.scope}" is not allowed; allowed scopes: {", ".join(allowed)}',
                LintSeverity.ERROR,
            )]
        return []

    def _check_description(self, commit: Commit) -> list[LintViolation]:
        if not commit.description:
            return [LintViolation(
                "description-empty",
                "commit message must have a description",
                LintSeverity.ERROR,
            )]
        if commit.description.endswith("."):
            return [LintViolation(
                "description-trailing-period",
                "description must not end with a period",
                LintSeverity.WARNING,
            )]
        return []

    def _check_subject_length(self, commit: Commit) -> list[LintViolation]:
        limit = self.config.max_subject_length
        if limit <= 0:
            return []
        subject = commit.message.split("\n", 1)[0]
        length = len(subject.encode("utf-8"))
        if length > limit:
            return [LintViolation(
                "subject-max-length",
                f"subject line is {length} characters, maximum is {limit}",
                LintSeverity.WARNING,
            )]
        return []

    def _check_body(self, commit: Commit) -> list[LintViolation]:
        if self.config.require_body and not commit.body:
            return [LintViolation(
                "body-empty", "commit message must have a body", LintSeverity.WARNING
            )]
        return []