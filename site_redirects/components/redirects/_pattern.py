"""
Path pattern matching for pattern rules.

Templates are absolute paths built from literal text and placeholders:

- ``:name``   exactly one segment
- ``:name?``  an optional segment
- ``:name+``  one or more segments
- ``:name*``  zero or more segments
- ``*``       anything (captured as group ``"0"``, ``"1"``, ... in order)

A placeholder directly after ``/`` owns that slash, so ``/lab/:rest*``
matches ``/lab``, ``/lab/a`` and ``/lab/a/b``. Matching is anchored on
the whole pathname and case-sensitive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import SplitResult, urlsplit

from .models import InvalidPatternError, PatternMatch

_TOKEN = re.compile(r"(?P<slash>/?):(?P<name>[A-Za-z]\w*)(?P<mod>[?*+]?)|(?P<star>\*)")

_SEGMENT = r"[^/]+"
_SEGMENTS = r"[^/]+(?:/[^/]+)*"


@dataclass(frozen=True)
class _Placeholder:
    name: str
    slash: bool
    modifier: str


def _parse(template: str) -> list[str | _Placeholder]:
    """Split a template into literal strings and placeholders."""
    if not isinstance(template, str) or not template.startswith("/"):
        raise InvalidPatternError(str(template), "must start with '/'")

    parts: list[str | _Placeholder] = []
    wildcard_count = 0
    pos = 0
    for token in _TOKEN.finditer(template):
        if token.start() > pos:
            parts.append(template[pos : token.start()])
        if token.group("star"):
            parts.append(_Placeholder(str(wildcard_count), False, "*"))
            wildcard_count += 1
        else:
            parts.append(
                _Placeholder(
                    token.group("name"),
                    bool(token.group("slash")),
                    token.group("mod"),
                )
            )
        pos = token.end()
    if pos < len(template):
        parts.append(template[pos:])

    # A bare ':' that did not form a placeholder is almost always a typo.
    for part in parts:
        if isinstance(part, str) and ":" in part:
            raise InvalidPatternError(template, f"dangling ':' in {part!r}")
    return parts


def _group_name(name: str) -> str:
    # Wildcard groups are numbered; regex group names must be identifiers.
    return f"_{name}" if name.isdigit() else name


def _placeholder_regex(ph: _Placeholder) -> str:
    group = _group_name(ph.name)
    if ph.name.isdigit():
        return f"(?P<{group}>.*)"

    body = _SEGMENTS if ph.modifier in ("+", "*") else _SEGMENT
    prefix = "/" if ph.slash else ""
    captured = f"{prefix}(?P<{group}>{body})"
    if ph.modifier in ("?", "*"):
        return f"(?:{captured})?"
    return captured


class PathPattern:
    """Compiled path template matched against a request URL's pathname."""

    def __init__(self, template: str) -> None:
        self.template = template
        parts = _parse(template)
        regex = "".join(
            re.escape(part) if isinstance(part, str) else _placeholder_regex(part)
            for part in parts
        )
        try:
            self._regex = re.compile(regex)
        except re.error as e:
            raise InvalidPatternError(template, str(e)) from e
        self.names: tuple[str, ...] = tuple(
            part.name for part in parts if isinstance(part, _Placeholder)
        )

    def __repr__(self) -> str:
        return f"PathPattern({self.template!r})"

    def match(self, url: SplitResult | str) -> PatternMatch | None:
        """Match the pathname of ``url``; None when it does not match."""
        if isinstance(url, str):
            url = urlsplit(url)
        pathname = url.path or "/"
        found = self._regex.fullmatch(pathname)
        if found is None:
            return None

        groups = {
            (key[1:] if key.startswith("_") else key): value
            for key, value in found.groupdict().items()
            if value is not None
        }
        return PatternMatch(
            pattern=self.template,
            pathname=pathname,
            groups=groups,
            url=url,
        )


class PathTemplateTarget:
    """
    Renders a destination pathname from a template and captured groups.

    Uses the same placeholder syntax as PathPattern. A missing or empty
    group renders as nothing, together with the slash it owns.
    """

    def __init__(self, template: str) -> None:
        self.template = template
        self._parts = _parse(template)
        self.names: tuple[str, ...] = tuple(
            part.name for part in self._parts if isinstance(part, _Placeholder)
        )

    def __repr__(self) -> str:
        return f"PathTemplateTarget({self.template!r})"

    def __call__(self, match: PatternMatch, request: Any = None) -> str:
        rendered: list[str] = []
        for part in self._parts:
            if isinstance(part, str):
                rendered.append(part)
                continue
            value = match.groups.get(part.name, "")
            if value:
                rendered.append(("/" if part.slash else "") + value)
        return "".join(rendered) or "/"
