"""A small text template engine for changelog and tag formats.

Supported syntax: ``{{.Field}}`` and dotted field chains, ``{{.}}``, ``{{$}}``,
string, number and boolean literals, ``if``/``else if``/``else``/``end``,
``range`` and ``with`` blocks with optional ``else``, ``{{/* comments */}}``
and ``{{-``/``-}}`` whitespace trimming.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from semrelease.domain import ReleaseError


class TemplateError(ReleaseError):
    """Raised when a template cannot be parsed or executed."""


_ACTION_RE = re.compile(r"\{\{(-[ \t\r\n])?(.*?)([ \t\r\n]-)?\}\}", re.DOTALL)
_KEYWORD_RE = re.compile(r"(if|range|with|else|end|define|template|block)\b(.*)\Z", re.DOTALL)
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_INT_RE = re.compile(r"-?\d+")
_WS = " \t\r\n"


class _NoValue:
    def __repr__(self) -> str:
        return "<no value>"


_NO_VALUE = _NoValue()


@dataclass
class _Text:
    text: str


@dataclass
class _Action:
    expr: tuple


@dataclass
class _Block:
    kind: str
    expr: tuple
    body: list = field(default_factory=list)
    orelse: list = field(default_factory=list)


def _tokenize(source: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    pos = 0
    trim_next = False
    for match in _ACTION_RE.finditer(source):
        text = source[pos:match.start()]
        if trim_next:
            text = text.lstrip(_WS)
        if match.group(1):
            text = text.rstrip(_WS)
        if "{{" in text:
            raise TemplateError("unclosed action")
        tokens.append(("text", text))
        tokens.append(("action", match.group(2).strip()))
        trim_next = bool(match.group(3))
        pos = match.end()
    tail = source[pos:]
    if trim_next:
        tail = tail.lstrip(_WS)
    if "{{" in tail:
        raise TemplateError("unclosed action")
    tokens.append(("text", tail))
    return tokens


def _parse_fields(chain: str, text: str) -> tuple[str, ...]:
    names = tuple(chain.split("."))
    if not all(_IDENT_RE.fullmatch(name) for name in names):
        raise TemplateError(f"bad field reference {text!r}")
    return names


def _parse_expr(text: str) -> tuple:
    text = text.strip()
    if not text:
        raise TemplateError("missing value for command")
    if text.startswith('"'):
        try:
            value = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TemplateError(f"bad string literal {text}") from exc
        if not isinstance(value, str):
            raise TemplateError(f"bad string literal {text}")
        return ("const", value)
    if text.startswith("`"):
        if len(text) < 2 or not text.endswith("`") or "`" in text[1:-1]:
            raise TemplateError(f"bad raw string {text}")
        return ("const", text[1:-1])
    if any(ch in _WS for ch in text):
        word = text.split()[0]
        if word.startswith((".", "$")):
            raise TemplateError(f"can't give argument to non-function {word}")
        raise TemplateError(f'function "{word}" not defined')
    if text == ".":
        return ("field", "dot", ())
    if text.startswith("."):
        return ("field", "dot", _parse_fields(text[1:], text))
    if text == "$":
        return ("field", "root", ())
    if text.startswith("$."):
        return ("field", "root", _parse_fields(text[2:], text))
    if text in ("true", "false"):
        return ("const", text == "true")
    if text == "nil":
        raise TemplateError("nil is not a command")
    if _INT_RE.fullmatch(text):
        return ("const", int(text))
    raise TemplateError(f'function "{text}" not defined')


class _Parser:
    def __init__(self, tokens: list[tuple[str, str]]):
        self._tokens = tokens
        self._pos = 0

    def parse(self) -> list:
        nodes, _, _ = self._parse_block(top=True)
        return nodes

    def _parse_block(self, top: bool = False) -> tuple[list, str | None, str]:
        nodes: list = []
        while self._pos < len(self._tokens):
            kind, value = self._tokens[self._pos]
            self._pos += 1
            if kind == "text":
                if value:
                    nodes.append(_Text(value))
                continue
            if value.startswith("/*"):
                if not value.endswith("*/"):
                    raise TemplateError("unclosed comment")
                continue
            keyword_match = _KEYWORD_RE.match(value)
            if keyword_match is None:
                nodes.append(_Action(_parse_expr(value)))
                continue
            keyword, rest = keyword_match.group(1), keyword_match.group(2).strip()
            if keyword in ("end", "else"):
                if top:
                    raise TemplateError(f"unexpected {{{{{keyword}}}}}")
                if keyword == "end":
                    if rest:
                        raise TemplateError(f"unexpected {rest!r} in end")
                    return nodes, "end", ""
                if re.match(r"if\b", rest):
                    return nodes, "else_if", rest[2:]
                if rest:
                    raise TemplateError(f"unexpected {rest!r} in else")
                return nodes, "else", ""
            if keyword in ("define", "template", "block"):
                raise TemplateError(f"{keyword} actions are not supported")
            if ":=" in rest or "=" in rest.split('"')[0]:
                raise TemplateError("variable declarations are not supported")
            nodes.append(self._parse_control(keyword, _parse_expr(rest)))
        if not top:
            raise TemplateError("unexpected EOF")
        return nodes, None, ""

    def _parse_control(self, kind: str, expr: tuple) -> _Block:
        body, end, rest = self._parse_block()
        if end == "end":
            return _Block(kind, expr, body)
        if end == "else_if":
            if kind != "if":
                raise TemplateError(f"else if is not allowed in {kind}")
            nested = self._parse_control("if", _parse_expr(rest))
            return _Block(kind, expr, body, [nested])
        orelse, end2, _ = self._parse_block()
        if end2 != "end":
            raise TemplateError(f"expected end; found {end2}")
        return _Block(kind, expr, body, orelse)


def _field(value: Any, name: str) -> Any:
    if value is None or value is _NO_VALUE:
        raise TemplateError(f"nil pointer evaluating field {name}")
    if isinstance(value, Mapping):
        return value.get(name, _NO_VALUE)
    try:
        return getattr(value, name)
    except AttributeError:
        raise TemplateError(
            f"can't evaluate field {name} in type {type(value).__name__}"
        ) from None


def _is_true(value: Any) -> bool:
    if value is None or value is _NO_VALUE:
        return False
    if isinstance(value, (bool, int, float, str, bytes, list, tuple, dict, set, frozenset)):
        return bool(value)
    if isinstance(value, Mapping):
        return len(value) > 0
    return True


def _format(value: Any) -> str:
    if value is _NO_VALUE:
        return "<no value>"
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_format(item) for item in value) + "]"
    return str(value)


def _iterate(value: Any) -> list:
    if value is None or value is _NO_VALUE:
        return []
    if isinstance(value, bool):
        raise TemplateError(f"range can't iterate over {_format(value)}")
    if isinstance(value, int):
        return list(range(value))
    if isinstance(value, (str, bytes)):
        raise TemplateError(f"range can't iterate over {value!r}")
    if isinstance(value, Mapping):
        return [value[key] for key in sorted(value)]
    try:
        return list(value)
    except TypeError:
        raise TemplateError(f"range can't iterate over {value!r}") from None


class Template:
    """A parsed template that can be rendered against any mapping or object."""

    def __init__(self, source: str):
        self.source = source
        self._nodes = _Parser(_tokenize(source)).parse()

    def render(self, data: Any) -> str:
        """Execute the template with ``data`` as both dot and root."""
        out: list[str] = []
        self._run(self._nodes, data, data, out)
        return "".join(out)

    def _eval(self, expr: tuple, dot: Any, root: Any) -> Any:
        if expr[0] == "const":
            return expr[1]
        value = dot if expr[1] == "dot" else root
        for name in expr[2]:
            value = _field(value, name)
        return value

    def _run(self, nodes: list, dot: Any, root: Any, out: list[str]) -> None:
        for node in nodes:
            if isinstance(node, _Text):
                out.append(node.text)
            elif isinstance(node, _Action):
                out.append(_format(self._eval(node.expr, dot, root)))
            elif node.kind == "if":
                value = self._eval(node.expr, dot, root)
                self._run(node.body if _is_true(value) else node.orelse, dot, root, out)
            elif node.kind == "with":
                value = self._eval(node.expr, dot, root)
                if _is_true(value):
                    self._run(node.body, value, root, out)
                else:
                    self._run(node.orelse, dot, root, out)
            else:
                items = _iterate(self._eval(node.expr, dot, root))
                if not items:
                    self._run(node.orelse, dot, root, out)
                for item in items:
                    self._run(node.body, item, root, out)