import pytest
from freezegun import freeze_time

from semrelease.changelog import ChangelogGenerator
from semrelease.domain import ChangelogSectionConfig, Commit, Version
from semrelease.templating import TemplateError

SECTIONS = [
    ChangelogSectionConfig(type="breaking", title="Breaking Changes"),
    ChangelogSectionConfig(type="feat", title="Features"),
    ChangelogSectionConfig(type="fix", title="Bug Fixes"),
    ChangelogSectionConfig(type="chore", title="Chores", hidden=True),
]


@freeze_time("2024-01-15")
def test_default_template_output():
    commits = [Commit(hash="abcdef1234", type="feat", scope="auth", description="add login")]
    notes = ChangelogGenerator().generate(Version(1, 2, 0), "api", commits, SECTIONS)
    assert notes == "## [api] 1.2.0 (2024-01-15)\n\n### Features\n\n- **auth:** add login (abcdef1)"


@freeze_time("2024-01-15")
def test_repository_header_has_no_project():
    notes = ChangelogGenerator().generate(Version(1, 0, 0), "", [], SECTIONS)
    assert notes == "## 1.0.0 (2024-01-15)"


def test_hidden_and_empty_sections_are_skipped():
    commits = [
        Commit(hash="1111111111", type="feat", description="new thing"),
        Commit(hash="2222222222", type="chore", description="tidy up"),
    ]
    notes = ChangelogGenerator().generate(Version(1, 0, 0), "", commits, SECTIONS)
    assert "Features" in notes
    assert "Chores" not in notes
    assert "tidy up" not in notes
    assert "Bug Fixes" not in notes
    assert "Breaking Changes" not in notes


def test_breaking_commits_listed_in_breaking_and_type_sections():
    commits = [
        Commit(hash="3333333333", type="feat", description="drop old api", is_breaking_change=True),
        Commit(hash="4444444444", type="fix", description="small fix"),
    ]
    notes = ChangelogGenerator().generate(Version(2, 0, 0), "", commits, SECTIONS)
    assert notes.count("drop old api") == 2
    assert notes.index("Breaking Changes") < notes.index("Features") < notes.index("Bug Fixes")


def test_section_order_follows_configuration():
    sections = [
        ChangelogSectionConfig(type="fix", title="Bug Fixes"),
        ChangelogSectionConfig(type="feat", title="Features"),
    ]
    commits = [
        Commit(hash="a" * 10, type="feat", description="feature"),
        Commit(hash="b" * 10, type="fix", description="bugfix"),
    ]
    notes = ChangelogGenerator().generate(Version(1, 1, 0), "", commits, sections)
    assert notes.index("Bug Fixes") < notes.index("Features")


def test_short_hash_is_truncated_only_when_long():
    commits = [
        Commit(hash="0123456789", type="fix", description="long"),
        Commit(hash="abc", type="fix", description="short"),
    ]
    notes = ChangelogGenerator().generate(Version(1, 0, 1), "", commits, SECTIONS)
    assert "long (0123456)" in notes
    assert "short (abc)" in notes
    assert "0123456789" not in notes


def test_custom_template():
    template = "{{.Version}}|{{range .Sections}}{{.Title}};{{end}}"
    commits = [Commit(hash="5555555555", type="feat", description="x")]
    notes = ChangelogGenerator(template).generate(Version(3, 0, 0), "", commits, SECTIONS)
    assert notes == "3.0.0|Features;"


def test_output_is_stripped():
    notes = ChangelogGenerator("  \n{{.Version}}\n\n").generate(Version(0, 1, 0), "", [], SECTIONS)
    assert notes == "0.1.0"


def test_unparseable_template_raises():
    with pytest.raises(TemplateError, match="parsing changelog template"):
        ChangelogGenerator("{{if .Project}}").generate(Version(1, 0, 0), "", [], SECTIONS)


def test_failing_template_execution_raises():
    with pytest.raises(TemplateError, match="executing changelog template"):
        ChangelogGenerator("{{.Version.Missing}}").generate(Version(1, 0, 0), "", [], SECTIONS)