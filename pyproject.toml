[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "semrelease"
version = "0.1.0"
description = "Conventional-commit parsing, linting, tag and changelog handling, and release publishing for git repositories"
requires-python = ">=3.10"
keywords = [
    "semver",
    "conventional-commits",
    "changelog",
    "git",
    "tags",
    "monorepo",
    "release",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control :: Git",
    "Topic :: Software Development :: Build Tools",
    "Topic :: System :: Software Distribution",
]
dependencies = [
    "pyyaml>=6.0",
    "requests>=2.28",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
    "freezegun>=1.2",
]

[tool.hatch.build.targets.wheel]
packages = ["semrelease"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
