"""
Git client implementation for vc_changelog.

This module wraps the read-only Git operations the changelog needs:
locating the repository, finding the last tag, listing the commits in
a revision range and reading commit messages. All subprocess calls go
through :meth:`GitClient._run` so that unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# SHA, author, RFC 2822 author date, subject and body, one per line
COMMIT_FORMAT = "%H%n%an%n%aD%n%s%n%b"


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for reading the history of a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def is_repo(path: Path) -> bool:
        """Return True if the given path is the root of a Git repository."""
        return (path / ".git").exists()

    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if GitClient.is_repo(current):
                return current
            if current.parent == current:
                # reached filesystem root
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If Git cannot be started, or if the command exits with a
            non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid characters instead of failing
            )
        except OSError as e:
            logger.error("Cannot run git: %s", e)
            raise GitError(f"Cannot run git: {e}") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def last_tag(self) -> Optional[str]:
        """Return the most recently created tag, or None if there are no tags."""
        result = self._run(
            [
                "for-each-ref",
                "--count=1",
                "--sort=-creatordate",
                "--format=%(refname:lstrip=2)",
                "refs/tags/*",
            ],
            check=True,
        )
        tags = result.stdout.splitlines()
        return tags[0].strip() if tags and tags[0].strip() else None

    def commits_in_range(self, revision_range: Sequence[str]) -> List[str]:
        """Get the SHAs of all commits in the revision range.

        Parameters
        ----------
        revision_range : Sequence[str]
            ``git log`` revision arguments, e.g. ``["v1.0..HEAD"]``.

        Raises
        ------
        GitError
            If the range cannot be listed.
        """
        result = self._run(["log", "--format=format:%H"] + list(revision_range), check=True)
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def get_commit_message(self, sha: str) -> List[str]:
        """Get the header and message lines of a commit.

        Returns
        -------
        List[str]
            The SHA, author, RFC 2822 date and subject, followed by the
            body lines.

        Raises
        ------
        GitError
            If the commit cannot be read.
        """
        result = self._run(
            ["log", f"--format=format:{COMMIT_FORMAT}", "--max-count=1", sha, "--"],
            check=True,
        )
        return result.stdout.splitlines()

    def get_remote_url(self, remote: str = "origin") -> Optional[str]:
        """Return the fetch URL of the remote, or None if it is not configured."""
        result = self._run(["remote", "get-url", remote], check=False)
        if result.returncode != 0:
            logger.debug("Remote '%s' is not configured", remote)
            return None
        return result.stdout.strip() or None
