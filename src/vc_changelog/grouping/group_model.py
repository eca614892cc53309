"""
Data models for the organised changelog.

The :class:`ChangeLog` is the structure handed to the renderer: an
ordered list of scopes, each with an ordered list of categories, each
with the changes recorded for it, plus the commits that contributed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .commit_model import Commit


@dataclass
class Change:
    """A single change description.

    Attributes
    ----------
    opening : str
        The headline of the change, always starting with one space.
    rest : List[str]
        The remaining lines of the description.
    """

    opening: str
    rest: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join([self.opening] + self.rest)


@dataclass
class Category:
    """Changes of one category (e.g. "Fixes") within a scope."""

    title: str
    changes: List[Change] = field(default_factory=list)


@dataclass
class Scope:
    """Categorised changes of one scope (e.g. "API")."""

    title: str
    categories: List[Category] = field(default_factory=list)


@dataclass
class ChangeLog:
    """The organised changelog for a revision range.

    Attributes
    ----------
    scopes : List[Scope]
        Scopes in configured order; scopes without changes are omitted.
    commits : List[Commit]
        The interesting commits, in the order they were given.
    range : str
        The revision range the commits were taken from.
    date : str
        The UTC date of the latest commit, ``YYYY-MM-DD``.
    remote_url : Optional[str]
        The fetch URL of the configured remote, if known.
    """

    scopes: List[Scope] = field(default_factory=list)
    commits: List[Commit] = field(default_factory=list)
    range: str = ""
    date: str = ""
    remote_url: Optional[str] = None
