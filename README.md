# semrelease

Building blocks for release automation in git repositories that follow the
Conventional Commits convention. The library parses and lints commit
messages, formats and parses version tags, renders markdown release notes,
finds the projects in a monorepo and the commits that affect each one, loads
configuration files and publishes releases to GitHub or release tags to
Bitbucket Cloud.

## Installation

```
pip install .
pip install ".[test]"   # with the test dependencies
```

## Modules

- `semrelease.domain`: the data types used throughout: `Version` (ordered,
  build metadata ignored in comparisons) and `parse_version`, `Commit`,
  `Project`, `ProjectConfig`, `Tag`, `BranchPolicy`, `Config` and its
  sections (`GitHubConfig`, `GitLabConfig`, `BitbucketConfig`, `LintConfig`,
  `PrepareConfig`, `GitIdentity`, `ChangelogSectionConfig`), release records
  (`ProjectReleasePlan`, `ProjectReleaseResult`, `ReleaseResult`,
  `ReleaseContext`, `PublishParams`), the enums `ProjectType`, `ReleaseMode`
  and `LintSeverity`, `default_config()`, `default_lint_config()` and the
  base exception `ReleaseError`.
- `semrelease.commit_parser`: `ConventionalCommitParser.parse(message)`
  returns a `Commit` with type, scope, description, body and footer, and
  marks breaking changes from a `!` marker or a `BREAKING CHANGE:` /
  `BREAKING-CHANGE:` line. Messages that are not conventional keep only the
  subject as message and description.
- `semrelease.lint`: `ConventionalLinter(config).lint(commit)` returns a list
  of `LintViolation` objects for the rules `type-empty`, `type-enum`,
  `scope-empty`, `scope-enum`, `description-empty`,
  `description-trailing-period`, `subject-max-length` and `body-empty`.
- `semrelease.templating`: `Template(source).render(data)`, a small engine
  for `{{.Field}}` templates with `if`, `else`, `range` and `with` blocks,
  comments and `{{-`/`-}}` trimming. It raises `TemplateError`.
- `semrelease.tags`: `TemplateTagService(repo_template, project_template)`
  formats tags (defaults `v{{.Version}}` and `{{.Project}}/v{{.Version}}`),
  parses `v1.2.3`, `api/v1.2.3` and `mylib@2.0.0` style tags, and picks the
  highest-versioned tag of a project with `find_latest_tag`.
- `semrelease.changelog`: `ChangelogGenerator(custom_template).generate(
  version, project, commits, sections)` renders markdown notes grouped by the
  configured sections. A section of type `breaking` collects breaking
  changes, and hidden or empty sections are left out.
- `semrelease.impact`: `PathBasedImpactAnalyzer(propagate_deps,
  include_paths, exclude_paths).analyze(projects, commits)` maps each
  project name to the commits whose changed files lie in it. It supports
  include and exclude globs (including `dir/**` prefixes) and an optional
  single pass of dependency propagation.
- `semrelease.discovery`: `WorkspaceDiscoverer` (from `go.work`),
  `ModuleDiscoverer` (from `go.mod` files one directory below the root),
  `ConfiguredDiscoverer` (from `ProjectConfig` entries) and
  `CompositeDiscoverer` (first non-empty result wins). It also provides the
  helpers `parse_go_work_use` and `read_module_name`.
- `semrelease.filesystem`: `OSFileSystem`, the disk access used by the
  discoverers (`read_file`, `write_file`, `exists`, `walk`, `glob`).
- `semrelease.gitrepo`: `GitRepository(work_dir)` runs the `git` command for
  `current_branch`, `list_tags`, `commits_since`, `files_changed_in_commit`,
  `create_tag`, `push_tag`, `head_hash` and `remote_url`. It raises
  `GitError`. `parse_commit_log` parses the log output.
- `semrelease.merge`: `merge_configs(base, parent)` fills unset values of
  `base` from `parent`.
- `semrelease.configfile`: `ConfigProvider().load(path)`,
  `load_config_file`, `config_from_mapping`, `resolve_extends` and
  `write_default_config`. They raise `ConfigError`.
- `semrelease.github_publisher`: `GitHubPublisher(owner, repo,
  token).publish(params)` creates a GitHub release.
- `semrelease.bitbucket`: `BitbucketPlugin(config, logger)` with
  `verify_conditions`, `publish` (creates a tag through the Bitbucket API),
  `add_channel`, `success` and `fail`. It is configured with
  `BitbucketPluginConfig`.

## Examples

Parse a commit message:

```python
from semrelease.commit_parser import ConventionalCommitParser

commit = ConventionalCommitParser().parse(
    "feat(auth)!: drop session cookies\n\nBREAKING CHANGE: tokens only"
)
print(commit.type, commit.scope, commit.description, commit.is_breaking_change)
print(commit.breaking_note)   # tokens only
```

Work with tags:

```python
from semrelease.domain import Tag, parse_version
from semrelease.tags import TemplateTagService

tags = TemplateTagService("", "")
print(tags.format_tag("api", parse_version("1.2.3")))   # api/v1.2.3
print(tags.parse_tag("mylib@2.0.0"))                     # ('mylib', Version(...))
latest = tags.find_latest_tag([Tag(name="v1.0.0"), Tag(name="v2.0.0")], "")
print(latest.name)                                       # v2.0.0
```

Lint a commit with the default rules:

```python
from semrelease.commit_parser import ConventionalCommitParser
from semrelease.domain import default_lint_config
from semrelease.lint import ConventionalLinter

linter = ConventionalLinter(default_lint_config())
for violation in linter.lint(ConventionalCommitParser().parse("wip: work in progress")):
    print(violation.rule, violation.severity, violation.message)
```

Render release notes:

```python
from semrelease.changelog import ChangelogGenerator
from semrelease.commit_parser import ConventionalCommitParser
from semrelease.domain import default_config, parse_version

commit = ConventionalCommitParser().parse("fix(api): handle empty body")
commit.hash = "0123456789abcdef"
notes = ChangelogGenerator().generate(
    parse_version("1.0.1"), "", [commit], default_config().changelog_sections
)
print(notes)
```

## Configuration

`ConfigProvider().load()` starts from `default_config()`. Without a path it
looks in the working directory for `.semantic-release`, `.releaserc` and
`release.config`, each with the extension `.json`, `.yaml` or `.yml`. When no
file is found it returns the defaults. Keys in the file are snake_case field
names of `Config`, for example `tag_format`, `release_mode`, `github.owner`
or `lint.allowed_types`. A value that appears in the file can be replaced by
an environment variable named `SEMANTIC_RELEASE_` followed by its upper-case
path, such as `SEMANTIC_RELEASE_GITHUB_OWNER`.

An `extends` list names further configuration files or HTTP(S) URLs.
`resolve_extends` merges them in order. Values already set win, cycles are
rejected, and chains deeper than ten levels are rejected.
`write_default_config()` writes a starter `.semantic-release.yaml`.

## Tokens

When no token is configured, the publishers read one from the environment:

| Publisher         | Variables                                                         |
|-------------------|-------------------------------------------------------------------|
| `GitHubPublisher` | `GH_TOKEN`, `GITHUB_TOKEN`, `SEMANTIC_RELEASE_GITHUB_TOKEN`        |
| `BitbucketPlugin` | `BB_TOKEN`, `BITBUCKET_TOKEN`, `SEMANTIC_RELEASE_BITBUCKET_TOKEN`  |

## What this package does not do

- It has no command-line program. Nothing is installed to run a release,
  show a plan or lint a history from the shell, so callers combine the
  classes above themselves.
- It does not decide version bumps or run a release end to end. There is no
  release planner or executor that turns commits into a `ProjectReleasePlan`
  and tags, pushes and publishes in sequence.
- It does not publish to GitLab. `GitLabConfig` can be loaded and merged,
  but no code talks to the GitLab API.
- On GitHub it only creates releases. It does not verify access, upload
  assets, comment on pull requests, add labels or open failure issues.