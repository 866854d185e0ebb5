import pytest

from semrelease.domain import Commit, LintConfig, LintSeverity, default_lint_config
from semrelease.lint import ConventionalLinter

DEFAULT = default_lint_config()
TYPES = DEFAULT.allowed_types

CASES = [
    (
        "valid feat commit",
        DEFAULT,
        Commit(type="feat", description="add user login", message="feat: add user login"),
        [],
        0,
    ),
    (
        "missing type",
        DEFAULT,
        Commit(description="update readme", message="update readme"),
        ["type-empty"],
        1,
    ),
    (
        "disallowed type",
        DEFAULT,
        Commit(type="wip", description="work in progress", message="wip: work in progress"),
        ["type-enum"],
        1,
    ),
    (
        "missing description",
        DEFAULT,
        Commit(type="feat", message="feat:"),
        ["description-empty"],
        1,
    ),
    (
        "description trailing period",
        DEFAULT,
        Commit(type="fix", description="fix the bug.", message="fix: fix the bug."),
        ["description-trailing-period"],
        0,
    ),
    (
        "subject too long",
        LintConfig(max_subject_length=20, allowed_types=TYPES),
        Commit(
            type="feat",
            description="this is a very long description that exceeds the limit",
            message="feat: this is a very long description that exceeds the limit",
        ),
        ["subject-max-length"],
        0,
    ),
    (
        "scope required but missing",
        LintConfig(require_scope=True, allowed_types=TYPES),
        Commit(type="feat", description="add login", message="feat: add login"),
        ["scope-empty"],
        1,
    ),
    (
        "scope not in allowed list",
        LintConfig(allowed_types=TYPES, allowed_scopes=["api", "core"]),
        Commit(
            type="feat", scope="unknown", description="add login",
            message="feat(unknown): add login",
        ),
        ["scope-enum"],
        1,
    ),
    (
        "body required but missing",
        LintConfig(allowed_types=TYPES, require_body=True),
        Commit(type="feat", description="add login", message="feat: add login"),
        ["body-empty"],
        0,
    ),
    (
        "valid commit with scope and body",
        LintConfig(
            allowed_types=TYPES, allowed_scopes=["api"], require_scope=True, require_body=True
        ),
        Commit(
            type="feat", scope="api", description="add login",
            body="Added OAuth2 login flow", message="feat(api): add login",
        ),
        [],
        0,
    ),
]


@pytest.mark.parametrize(
    "config, commit, rules, errors", [case[1:] for case in CASES], ids=[c[0] for c in CASES]
)
def test_lint(config, commit, rules, errors):
    violations = ConventionalLinter(config).lint(commit)
    assert [v.rule for v in violations] == rules
    assert sum(v.severity is LintSeverity.ERROR for v in violations) == errors


def test_type_enum_message_lists_allowed_types():
    config = LintConfig(allowed_types=["feat", "fix"])
    (violation,) = ConventionalLinter(config).lint(
        Commit(type="wip", description="x", message="wip: x")
    )
    assert violation.message == 'type "wip" is not allowed; allowed types: feat, fix'


def test_subject_length_only_counts_first_line():
    config = LintConfig(max_subject_length=20)
    commit = Commit(type="feat", description="short", message="feat: short\n" + "x" * 100)
    assert ConventionalLinter(config).lint(commit) == []


def test_multiple_violations_in_rule_order():
    config = LintConfig(require_scope=True, require_body=True)
    violations = ConventionalLinter(config).lint(Commit(message="oops"))
    assert [v.rule for v in violations] == [
        "type-empty", "scope-empty", "description-empty", "body-empty"
    ]