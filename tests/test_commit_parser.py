import pytest

from semrelease.commit_parser import ConventionalCommitParser


@pytest.fixture
def parser():
    return ConventionalCommitParser()


CASES = [
    ("feat: add user login", "feat", "", "add user login", False, ""),
    ("feat(auth): add OAuth support", "feat", "auth", "add OAuth support", False, ""),
    ("fix: correct null pointer", "fix", "", "correct null pointer", False, ""),
    ("feat!: redesign API", "feat", "", "redesign API", True, ""),
    (
        "refactor(core)!: remove deprecated methods",
        "refactor",
        "core",
        "remove deprecated methods",
        True,
        "",
    ),
    (
        "feat: update authentication\n\nBREAKING CHANGE: the login endpoint now requires an API key",
        "feat",
        "",
        "update authentication",
        True,
        "the login endpoint now requires an API key",
    ),
    (
        "fix: change return type\n\nBREAKING-CHANGE: return type changed from string to int",
        "fix",
        "",
        "change return type",
        True,
        "return type changed from string to int",
    ),
    ("updated the readme file", "", "", "updated the readme file", False, ""),
    ("chore: update dependencies", "chore", "", "update dependencies", False, ""),
    (
        "feat(api): add pagination support\n\n"
        "This adds cursor-based pagination to all list endpoints.\n\n"
        "Reviewed-by: Jane Doe",
        "feat",
        "api",
        "add pagination support",
        False,
        "",
    ),
]


@pytest.mark.parametrize(
    "message, want_type, want_scope, want_description, want_breaking, want_note",
    CASES,
    ids=[
        "simple feat",
        "feat with scope",
        "fix",
        "breaking change with bang",
        "breaking change with scope and bang",
        "breaking change in footer",
        "breaking change with hyphen in footer",
        "non-conventional commit",
        "chore commit",
        "commit with body and footer",
    ],
)
def test_parse(parser, message, want_type, want_scope, want_description, want_breaking, want_note):
    commit = parser.parse(message)
    assert commit.type == want_type
    assert commit.scope == want_scope
    assert commit.description == want_description
    assert commit.is_breaking_change == want_breaking
    if want_note:
        assert commit.breaking_note == want_note


def test_body_and_footer_are_split(parser):
    commit = parser.parse(
        "feat(api): add pagination support\n\n"
        "This adds cursor-based pagination to all list endpoints.\n\n"
        "Reviewed-by: Jane Doe"
    )
    assert commit.body == "This adds cursor-based pagination to all list endpoints."
    assert commit.footer == "Reviewed-by: Jane Doe"
    assert commit.message == "feat(api): add pagination support"


def test_issue_reference_footer(parser):
    commit = parser.parse("fix: handle empty input\n\nGuard the parser.\n\nRefs #123")
    assert commit.footer == "Refs #123"
    assert commit.body == "Guard the parser."


def test_no_footer_keeps_whole_body(parser):
    commit = parser.parse("docs: explain\n\nfirst paragraph\n\nsecond paragraph")
    assert commit.body == "first paragraph\n\nsecond paragraph"
    assert commit.footer == ""


def test_breaking_note_in_footer_after_body(parser):
    commit = parser.parse(
        "feat: new config\n\nReworks loading.\n\nBREAKING CHANGE: old keys are gone"
    )
    assert commit.is_breaking_change is True
    assert commit.breaking_note == "old keys are gone"
    assert commit.footer == "BREAKING CHANGE: old keys are gone"


def test_non_conventional_message_ignores_body(parser):
    commit = parser.parse("just words\n\nBREAKING CHANGE: nothing")
    assert commit.type == ""
    assert commit.is_breaking_change is False
    assert commit.body == ""


def test_subject_is_trimmed(parser):
    commit = parser.parse("  fix: tidy  \n")
    assert commit.message == "fix: tidy"
    assert commit.type == "fix"


def test_empty_scope_parentheses(parser):
    commit = parser.parse("feat(): thing")
    assert commit.type == "feat"
    assert commit.scope == ""
    assert commit.description == "thing"