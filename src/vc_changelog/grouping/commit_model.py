"""
Data model and parsing for a single commit.

A commit is handed over by the VCS client as a list of lines: the SHA,
the author, the RFC 2822 timestamp, the subject and then the body lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import List, Optional, Sequence

from .line_parser import Line, parse_line


# Opening marker of a change number tag such as "(#123)"
NUMBER_OPENER = "(#"

_MAX_NUMBER = 2**32 - 1


@dataclass
class Commit:
    """A parsed commit.

    Attributes
    ----------
    sha : str
        The commit SHA.
    author : str
        The author name.
    time : str
        The commit time in local time, rendered with the configured format.
    date : str
        The commit date in UTC as ``YYYY-MM-DD``.
    summary : str
        The subject line without change number tags.
    number : Optional[int]
        The change number (e.g. pull request) from the subject, if any.
    lines : List[Line]
        The classified body lines.
    """

    sha: str
    author: str
    time: str
    date: str
    summary: str
    number: Optional[int] = None
    lines: List[Line] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.sha[:7]} {self.summary}"


def parse_subject(line: str) -> str:
    """Return the subject up to the first change number tag, trimmed."""
    first_open = line.find(NUMBER_OPENER)
    if first_open == -1:
        return line.strip()
    return line[:first_open].strip()


def parse_number(line: str) -> Optional[int]:
    """Return the last change number tagged on the subject line.

    >>> parse_number("foo bar #123 (#101)(#103)")
    103
    """
    last_open = line.rfind(NUMBER_OPENER)
    last_close = line.rfind(")")
    if last_open == -1 or last_close == -1:
        return None

    digits = line[last_open + len(NUMBER_OPENER):last_close]
    if not (digits.isascii() and digits.isdigit()):
        return None

    number = int(digits)
    return number if number <= _MAX_NUMBER else None


def _parse_timestamp(text: str) -> Optional[datetime]:
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError, OverflowError):
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        # "-0000" means an unknown zone; read it as UTC
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_time(text: str, date_format: str) -> str:
    """Render an RFC 2822 timestamp in local time.

    An unparsable timestamp is rendered as the current time.
    """
    parsed = _parse_timestamp(text)
    if parsed is not None:
        try:
            return parsed.astimezone().strftime(date_format)
        except (OverflowError, ValueError):
            # out of range once converted
            pass
    return datetime.now(timezone.utc).astimezone().strftime(date_format)


def parse_date(text: str) -> str:
    """Return the UTC date of an RFC 2822 timestamp, or ``""`` if invalid."""
    parsed = _parse_timestamp(text)
    if parsed is None:
        return ""
    try:
        return parsed.astimezone(timezone.utc).date().isoformat()
    except OverflowError:
        return ""


def parse_commit(lines: Sequence[str], date_format: str) -> Commit:
    """Parse the raw lines of a commit into a :class:`Commit`.

    Raises
    ------
    ValueError
        If the header (SHA, author, time and subject) is incomplete.
    """
    if len(lines) < 4:
        raise ValueError(f"Incomplete commit header: expected 4 lines, got {len(lines)}")

    sha, author, time, subject = lines[:4]
    return Commit(
        sha=sha,
        author=author,
        time=parse_time(time, date_format),
        date=parse_date(time),
        summary=parse_subject(subject),
        number=parse_number(subject),
        lines=[parse_line(line) for line in lines[4:]],
    )
