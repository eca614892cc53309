"""
Organisation of tagged commit message lines into scopes and categories.

The :class:`ReportBuilder` walks the lines of each commit, collects runs
of lines opened by a category tag into :class:`ChangeRecord` objects and
files every record whose scope and category are known to the configured
conventions. :meth:`ReportBuilder.finish` then lays the recorded changes
out in the order the conventions declare their scopes and categories.

Unknown tags are not errors: records that do not validate are simply
left out of the report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set

from vc_changelog.config.loader import Conventions

from .commit_model import Commit
from .group_model import Category, Change, Scope


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass
class ChangeRecord:
    """The lines of one change, as collected from a commit message."""

    scope: Optional[str] = None
    category: Optional[str] = None
    text: List[str] = field(default_factory=list)


@dataclass
class RecordedChange:
    """A filed change and its position in encounter order across all commits."""

    sequence: int
    change: Change


def walk_commit(commit: Commit) -> Iterator[ChangeRecord]:
    """Yield the change records of a commit message.

    Every line with a category closes the running record and opens a new
    one. The text of each line, including the opening one, is appended to
    the running record. The last record is yielded after the final line,
    so even an empty message yields one (empty) record.
    """
    current = ChangeRecord()
    for line in commit.lines:
        if line.category:
            yield current
            current = ChangeRecord(scope=line.scope, category=line.category)
        current.text.append(line.text or "")
    yield current


def _split_opening(text: List[str]):
    """Split the text into the opening line and the rest.

    Leading blank lines are dropped and the opening line is made to start
    with a single space. Returns ``None`` if every line is blank.
    """
    for index, segment in enumerate(text):
        if segment.strip():
            opening = segment if segment.startswith(" ") else " " + segment
            return opening, text[index + 1:]
    return None


class ReportBuilder:
    """Collects changes from commits for one changelog.

    Parameters
    ----------
    conventions : Conventions
        The scope and category vocabularies changes are validated against.
    """

    def __init__(self, conventions: Conventions) -> None:
        self.conventions = conventions
        # scope title -> category title -> changes
        self.slots: Dict[str, Dict[str, List[RecordedChange]]] = {}
        self.sequence = 0
        self.date = ""

    def add(self, commit: Commit) -> bool:
        """Record all changes in the commit.

        Returns
        -------
        bool
            True if at least one change of the commit was recorded.
        """
        interesting = False
        for record in walk_commit(commit):
            interesting |= self.record(record)

        if commit.date > self.date:
            self.date = commit.date
        return interesting

    def record(self, record: ChangeRecord) -> bool:
        """File a change record, if its scope and category are known.

        Returns
        -------
        bool
            True if the record was filed.
        """
        scope = self.conventions.scope_title(record.scope)
        category = self.conventions.category_title(record.category)
        if scope is None or category is None or not record.text:
            return False

        split = _split_opening(record.text)
        if split is None:
            return False
        opening, rest = split

        self.sequence += 1
        recorded = RecordedChange(sequence=self.sequence, change=Change(opening=opening, rest=list(rest)))
        self.slots.setdefault(scope, {}).setdefault(category, []).append(recorded)
        logger.debug("Recorded change %d under '%s' / '%s'", self.sequence, scope, category)
        return True

    def finish(self) -> List[Scope]:
        """Lay the recorded changes out in the configured order.

        Scopes and categories follow the order of the conventions. A title
        configured more than once is laid out only at its first position.
        Scopes without changes are left out.
        """
        scopes: List[Scope] = []
        seen_scopes: Set[str] = set()
        for scope_title in self.conventions.scope_titles():
            if scope_title in seen_scopes:
                continue
            seen_scopes.add(scope_title)

            categorized = self.slots.get(scope_title)
            if not categorized:
                continue

            categories: List[Category] = []
            seen_categories: Set[str] = set()
            for category_title in self.conventions.category_titles():
                if category_title in seen_categories:
                    continue
                seen_categories.add(category_title)

                recorded = categorized.get(category_title)
                if recorded:
                    ordered = sorted(recorded, key=lambda entry: entry.sequence)
                    changes = [entry.change for entry in ordered]
                    categories.append(Category(title=category_title, changes=changes))

            if categories:
                scopes.append(Scope(title=scope_title, categories=categories))

        return scopes
