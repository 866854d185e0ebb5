import pytest

from semrelease.domain import Commit, Project, ProjectType
from semrelease.impact import PathBasedImpactAnalyzer


@pytest.fixture
def projects():
    return [
        Project(name="api", path="services/api"),
        Project(name="worker", path="services/worker"),
        Project(name="shared", path="pkg/shared"),
    ]


@pytest.fixture
def commits():
    return [
        Commit(hash="aaa", files_changed=["services/api/handler.go", "services/api/routes.go"]),
        Commit(hash="bbb", files_changed=["services/worker/main.go"]),
        Commit(hash="ccc", files_changed=["pkg/shared/util.go"]),
        Commit(hash="ddd", files_changed=["services/api/config.go", "pkg/shared/types.go"]),
    ]


def counts(result):
    return {name: len(found) for name, found in result.items()}


def test_basic_mapping(projects, commits):
    result = PathBasedImpactAnalyzer(False, None, None).analyze(projects, commits)
    assert counts(result) == {"api": 2, "worker": 1, "shared": 2}
    assert [c.hash for c in result["api"]] == ["aaa", "ddd"]


def test_dependency_propagation():
    projects = [
        Project(name="api", path="services/api", dependencies=["shared"]),
        Project(name="worker", path="services/worker", dependencies=["shared"]),
        Project(name="shared", path="pkg/shared"),
    ]
    shared_commits = [Commit(hash="xxx", files_changed=["pkg/shared/util.go"])]
    result = PathBasedImpactAnalyzer(True, None, None).analyze(projects, shared_commits)
    assert counts(result) == {"shared": 1, "api": 1, "worker": 1}
    assert result["api"][0].hash == "xxx"


def test_no_propagation_when_disabled():
    projects = [
        Project(name="api", path="services/api", dependencies=["shared"]),
        Project(name="shared", path="pkg/shared"),
    ]
    shared_commits = [Commit(hash="xxx", files_changed=["pkg/shared/util.go"])]
    result = PathBasedImpactAnalyzer(False, None, None).analyze(projects, shared_commits)
    assert "api" not in result
    assert counts(result) == {"shared": 1}


def test_include_paths_filter(projects, commits):
    result = PathBasedImpactAnalyzer(False, ["services/api/**"], None).analyze(projects, commits)
    assert len(result.get("api", [])) == 2
    assert len(result.get("worker", [])) == 0
    assert len(result.get("shared", [])) == 0


def test_exclude_paths_filter(projects, commits):
    result = PathBasedImpactAnalyzer(False, None, ["pkg/shared/**"]).analyze(projects, commits)
    assert len(result.get("api", [])) == 2
    assert len(result.get("worker", [])) == 1
    assert len(result.get("shared", [])) == 0


def test_include_and_exclude_combined(projects, commits):
    analyzer = PathBasedImpactAnalyzer(False, ["services/**"], ["services/worker/**"])
    result = analyzer.analyze(projects, commits)
    assert len(result.get("api", [])) == 2
    assert len(result.get("worker", [])) == 0


def test_glob_pattern_matches_base_name(projects):
    file_commits = [
        Commit(hash="e1", files_changed=["services/api/handler.go"]),
        Commit(hash="e2", files_changed=["services/api/handler.ts"]),
        Commit(hash="e3", files_changed=["docs/readme.md"]),
    ]
    result = PathBasedImpactAnalyzer(False, ["*.go"], None).analyze(projects, file_commits)
    assert len(result.get("api", [])) == 1
    assert result["api"][0].hash == "e1"


def test_star_does_not_cross_directories(projects):
    file_commits = [Commit(hash="f1", files_changed=["services/api/handler.go"])]
    result = PathBasedImpactAnalyzer(False, ["services/*.go"], None).analyze(projects, file_commits)
    assert result == {}


def test_root_project_receives_every_commit(commits):
    projects = [
        Project(name="repo", path="", type=ProjectType.ROOT),
        Project(name="api", path="services/api"),
    ]
    result = PathBasedImpactAnalyzer().analyze(projects, commits)
    assert len(result["repo"]) == len(commits)
    assert len(result["api"]) == 2


def test_dot_path_matches_everything():
    projects = [Project(name="all", path=".")]
    result = PathBasedImpactAnalyzer().analyze(
        projects, [Commit(hash="g1", files_changed=["anything/at/all.txt"])]
    )
    assert counts(result) == {"all": 1}


def test_malformed_pattern_matches_nothing(projects, commits):
    result = PathBasedImpactAnalyzer(False, ["services/[api"], None).analyze(projects, commits)
    assert result == {}