"""Loading configuration files, environment overrides and ``extends`` chains."""

from __future__ import annotations

import dataclasses
import json
import os
import types
import typing
from collections.abc import Mapping
from enum import Enum
from functools import lru_cache
from typing import Any, Union

import requests
import yaml

from semrelease.domain import (
    BitbucketConfig,
    BranchPolicy,
    ChangelogSectionConfig,
    Config,
    GitHubConfig,
    GitIdentity,
    GitLabConfig,
    LintConfig,
    LintSeverity,
    PrepareConfig,
    ProjectConfig,
    ProjectType,
    ReleaseError,
    ReleaseMode,
    default_config,
)
from semrelease.merge import merge_configs

CONFIG_NAMES = (".semantic-release", ".releaserc", "release.config")
CONFIG_EXTENSIONS = ("json", "yaml", "yml")
ENV_PREFIX = "SEMANTIC_RELEASE"
MAX_EXTENDS_DEPTH = 10
DEFAULT_CONFIG_PATH = ".semantic-release.yaml"

_TRUE_WORDS = {"1", "t", "true", "yes", "y", "on"}
_FALSE_WORDS = {"", "0", "f", "false", "no", "n", "off"}

_NAMED_TYPES: dict[str, Any] = {
    "str": str,
    "int": int,
    "bool": bool,
    "float": float,
    "None": type(None),
    "NoneType": type(None),
    "Any": Any,
    "object": Any,
}
_NAMED_TYPES.update(
    {
        cls.__name__: cls
        for cls in (
            BitbucketConfig,
            BranchPolicy,
            ChangelogSectionConfig,
            Config,
            GitHubConfig,
            GitIdentity,
            GitLabConfig,
            LintConfig,
            LintSeverity,
            PrepareConfig,
            ProjectConfig,
            ProjectType,
            ReleaseMode,
        )
    }
)


class ConfigError(ReleaseError):
    """Raised when configuration cannot be read, decoded or resolved."""


def _normalize_keys(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key).lower(): _normalize_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_normalize_keys(item) for item in value]
    return value


def _parse_text(text: str, ext: str) -> dict[str, Any]:
    try:
        data = json.loads(text) if ext == "json" else yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"parsing config: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError("configuration must be a mapping at the top level")
    return _normalize_keys(data)


def _read_mapping(path: str) -> dict[str, Any]:
    ext = os.path.splitext(path)[1].lower().lstrip(".")
    if ext not in CONFIG_EXTENSIONS:
        raise ConfigError(f'unsupported config type "{ext}"')
    try:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError as exc:
        raise ConfigError(str(exc)) from exc
    return _parse_text(text, ext)


def _split_top(text: str, separator: str) -> list[str]:
    """Split ``text`` on ``separator`` where it is not inside brackets."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        if char == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    parts.append("".join(current).strip())
    return [part for part in parts if part]


def _union(members: list[Any]) -> Any:
    return members[0] if len(members) == 1 else Union[tuple(members)]


def _parse_hint(text: str) -> Any:
    """Turn a field annotation written as text into a type the converter knows."""
    text = text.strip().strip("'\"")
    alternatives = _split_top(text, "|")
    if len(alternatives) > 1:
        return _union([_parse_hint(part) for part in alternatives])
    if text.endswith("]") and "[" in text:
        head, inner = text[:-1].split("[", 1)
        head = head.strip().removeprefix("typing.")
        args = [_parse_hint(part) for part in _split_top(inner, ",")]
        if not args:
            return Any
        if head == "Optional":
            return _union([args[0], type(None)])
        if head == "Union":
            return _union(args)
        if head in ("list", "List", "Sequence"):
            return list[args[0]]
        if head in ("dict", "Dict", "Mapping") and len(args) == 2:
            return dict[args[0], args[1]]
        return Any
    return _NAMED_TYPES.get(text.removeprefix("typing."), Any)


@lru_cache(maxsize=None)
def _hints(cls: type) -> dict[str, Any]:
    return {
        fld.name: _parse_hint(fld.type) if isinstance(fld.type, str) else fld.type
        for fld in dataclasses.fields(cls)
    }


def _to_bool(value: Any, where: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ConfigError(f"{where}: cannot use {value!r} as a boolean")


def _to_int(value: Any, where: str) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text, 0)
        except ValueError:
            pass
    raise ConfigError(f"{where}: cannot use {value!r} as an integer")


def _to_str(value: Any, where: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ConfigError(f"{where}: cannot use {value!r} as a string")


def _convert(hint: Any, value: Any, current: Any, where: str) -> Any:
    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin in (Union, types.UnionType):
        if value is None or value == "":
            return None
        inner = next(arg for arg in args if arg is not type(None))
        return _convert(inner, value, current, where)
    if origin is list:
        if value is None:
            return []
        items = value if isinstance(value, list) else [value]
        return [
            _convert(args[0], item, None, f"{where}[{index}]")
            for index, item in enumerate(items)
        ]
    if origin is dict:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ConfigError(f"{where}: expected a mapping, got {value!r}")
        return {
            str(key): _convert(args[1], item, None, f"{where}.{key}")
            for key, item in value.items()
        }
    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        if not isinstance(value, Mapping):
            raise ConfigError(f"{where}: expected a mapping, got {value!r}")
        target = current if isinstance(current, hint) else hint()
        _apply(target, value, f"{where}.")
        return target
    if isinstance(hint, type) and issubclass(hint, Enum):
        try:
            return hint(str(value))
        except ValueError:
            raise ConfigError(f"{where}: invalid value {value!r}") from None
    if hint is bool:
        return _to_bool(value, where)
    if hint is int:
        return _to_int(value, where)
    if hint is str:
        return _to_str(value, where)
    return value


def _apply(target: Any, data: Mapping[str, Any], where: str) -> None:
    hints = _hints(type(target))
    for fld in dataclasses.fields(target):
        if fld.name not in data:
            continue
        value = _convert(hints[fld.name], data[fld.name], getattr(target, fld.name), where + fld.name)
        setattr(target, fld.name, value)


def _env_overrides(data: Mapping[str, Any], prefix: tuple[str, ...] = ()) -> dict[str, Any]:
    """Replace each known leaf value with ``SEMANTIC_RELEASE_<PATH>`` when that is set."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        path = (*prefix, key)
        if isinstance(value, Mapping):
            result[key] = _env_overrides(value, path)
            continue
        env_value = os.environ.get(f"{ENV_PREFIX}_{'_'.join(path).upper()}")
        result[key] = env_value if env_value else value
    return result


def config_from_mapping(data: Mapping[str, Any]) -> Config:
    """Build a Config from decoded file contents; absent keys stay unset."""
    cfg = Config()
    _apply(cfg, _normalize_keys(data), "")
    return cfg


def load_config_file(path: str) -> Config:
    """Read a JSON or YAML configuration file into a Config."""
    abs_path = os.path.abspath(path)
    try:
        data = _read_mapping(abs_path)
    except ConfigError as exc:
        raise ConfigError(f"reading config file: {exc}") from exc
    try:
        return config_from_mapping(data)
    except ConfigError as exc:
        raise ConfigError(f"unmarshaling config: {exc}") from exc


def _load_from_url(url: str) -> Config:
    try:
        response = requests.get(url, timeout=60)
    except requests.RequestException as exc:
        raise ConfigError(f"fetching URL: {exc}") from exc
    if response.status_code != 200:
        raise ConfigError(f"HTTP {response.status_code} fetching {url}")
    try:
        return config_from_mapping(_parse_text(response.text, "yaml"))
    except ConfigError as exc:
        raise ConfigError(f"unmarshaling config: {exc}") from exc


def _load_ref(ref: str) -> Config:
    if ref.startswith(("http://", "https://")):
        return _load_from_url(ref)
    return load_config_file(ref)


def _resolve(cfg: Config, seen: set[str], depth: int) -> Config:
    if depth > MAX_EXTENDS_DEPTH:
        raise ConfigError(f"extends chain exceeds maximum depth of {MAX_EXTENDS_DEPTH}")
    for ref in cfg.extends:
        if ref in seen:
            raise ConfigError(f'circular extends detected: "{ref}"')
        seen.add(ref)
        try:
            parent = _load_ref(ref)
        except ConfigError as exc:
            raise ConfigError(f'loading extends "{ref}": {exc}') from exc
        parent = _resolve(parent, seen, depth + 1)
        cfg = merge_configs(cfg, parent)
    return cfg


def resolve_extends(base: Config) -> Config:
    """Merge every configuration that ``base`` extends, files or HTTP(S) URLs.

    Values already set in ``base`` win; later entries of ``extends`` are merged
    after earlier ones. Cycles and chains deeper than the limit raise ConfigError.
    """
    return _resolve(base, set(), 0)


def _find_config_file() -> str | None:
    for name in CONFIG_NAMES:
        for ext in CONFIG_EXTENSIONS:
            candidate = f"{name}.{ext}"
            if os.path.isfile(candidate):
                break
        else:
            continue
        try:
            _read_mapping(candidate)
        except ConfigError:
            continue
        return candidate
    return None


class ConfigProvider:
    """Loads configuration from files and ``SEMANTIC_RELEASE_*`` variables."""

    def load(self, path: str = "") -> Config:
        """Return the defaults overlaid with ``path`` or the first config file found.

        Without ``path`` the working directory is searched; if nothing is
        found the defaults are returned unchanged.
        """
        cfg = default_config()
        if not path:
            path = _find_config_file() or ""
            if not path:
                return cfg
        try:
            data = _read_mapping(path)
        except ConfigError as exc:
            raise ConfigError(f"reading config: {exc}") from exc
        try:
            _apply(cfg, _env_overrides(data), "")
        except ConfigError as exc:
            raise ConfigError(f"unmarshaling config: {exc}") from exc
        if cfg.extends:
            try:
                cfg = resolve_extends(cfg)
            except ConfigError as exc:
                raise ConfigError(f"resolving extends: {exc}") from exc
        return cfg


def write_default_config(path: str = DEFAULT_CONFIG_PATH) -> None:
    """Write a starter YAML configuration to ``path``."""
    settings = {
        "release_mode": "repo",
        "tag_format": "v{{.Version}}",
        "project_tag_format": "{{.Project}}/v{{.Version}}",
        "dry_run": False,
        "ci": True,
        "discover_modules": False,
        "dependency_propagation": False,
        "github": {"create_release": True},
    }
    try:
        with open(path, "w", encoding="utf-8") as handle:
            yaml.safe_dump(settings, handle, sort_keys=True, default_flow_style=False)
    except OSError as exc:
        raise ConfigError(f"writing config: {exc}") from exc