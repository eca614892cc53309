"""
Version control system (VCS) integration.

This package contains the Git client used to read commit history for
the changelog: the last tag, the commits in a revision range and their
messages.
"""

from .git_client import GitClient, GitError  # noqa: F401
