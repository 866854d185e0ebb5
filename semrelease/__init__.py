"""Conventional-commit parsing and linting, tags, changelogs, monorepo discovery, configuration and release publishing."""

__version__ = "0.1.0"