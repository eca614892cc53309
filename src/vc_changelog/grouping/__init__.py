"""
Parsing and grouping of tagged commit messages.

This package classifies commit message lines, parses commits, and
organises the tagged changes into scopes and categories. See
:mod:`vc_changelog.grouping.line_parser` and
:mod:`vc_changelog.grouping.aggregator` for details.
"""

from .aggregator import ReportBuilder, walk_commit  # noqa: F401
from .commit_model import Commit, parse_commit  # noqa: F401
from .group_model import Category, Change, ChangeLog, Scope  # noqa: F401
from .line_parser import Line, parse_line  # noqa: F401
