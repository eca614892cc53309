"""
Classification of single commit message lines.

A line is recognised as one of five shapes, tried in order:

1. ``- category(scope): text``
2. ``- category(scope):``
3. ``- category: text``
4. ``- category:``
5. plain text, with at most one leading ``-`` dropped

The first shape that matches wins. A line that matches none of them
(an empty line, for instance) is returned as a blank :class:`Line`.
Parsing never raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional


# A tag name: optional whitespace, ASCII alphanumerics, optional whitespace.
_TAGNAME = r"[ \t\r\n]*([A-Za-z0-9]+)[ \t\r\n]*"

_CATEGORY_SCOPE_TEXT = re.compile(r"-" + _TAGNAME + r"\(" + _TAGNAME + r"\):(.+)", re.DOTALL)
_CATEGORY_SCOPE = re.compile(r"-" + _TAGNAME + r"\(" + _TAGNAME + r"\):")
_CATEGORY_TEXT = re.compile(r"-" + _TAGNAME + r":(.+)", re.DOTALL)
_CATEGORY = re.compile(r"-" + _TAGNAME + r":")


@dataclass(frozen=True)
class Line:
    """A single classified line of a commit message."""

    scope: Optional[str] = None
    category: Optional[str] = None
    text: Optional[str] = None

    @property
    def is_blank(self) -> bool:
        return self.scope is None and self.category is None and self.text is None


def _category_scope_text(raw: str) -> Optional[Line]:
    match = _CATEGORY_SCOPE_TEXT.fullmatch(raw)
    if match is None:
        return None
    category, scope, text = match.groups()
    return Line(scope=scope.lower(), category=category.lower(), text=text)


def _category_scope(raw: str) -> Optional[Line]:
    match = _CATEGORY_SCOPE.fullmatch(raw)
    if match is None:
        return None
    category, scope = match.groups()
    return Line(scope=scope.lower(), category=category.lower())


def _category_text(raw: str) -> Optional[Line]:
    match = _CATEGORY_TEXT.fullmatch(raw)
    if match is None:
        return None
    category, text = match.groups()
    return Line(category=category.lower(), text=text)


def _category(raw: str) -> Optional[Line]:
    match = _CATEGORY.fullmatch(raw)
    if match is None:
        return None
    return Line(category=match.group(1).lower())


def _plain_text(raw: str) -> Optional[Line]:
    text = raw[1:] if raw.startswith("-") else raw
    if not text:
        return None
    return Line(text=text)


# Most specific first; the order is part of the grammar.
_SHAPES: List[Callable[[str], Optional[Line]]] = [
    _category_scope_text,
    _category_scope,
    _category_text,
    _category,
    _plain_text,
]


def parse_line(raw: str) -> Line:
    """Classify one raw commit message line.

    Parameters
    ----------
    raw : str
        The line, without its trailing newline.

    Returns
    -------
    Line
        The classified line. Tag names are lower-cased; text is kept
        verbatim, including the whitespace right after the colon.
    """
    for shape in _SHAPES:
        line = shape(raw)
        if line is not None:
            return line
    return Line()
