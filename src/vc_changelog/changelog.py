"""
Changelog generation for a revision range.

This module ties the pieces together: it resolves the revision range,
reads the commits from the :class:`~vc_changelog.vcs.git_client.GitClient`,
parses them and organises their tagged changes with a
:class:`~vc_changelog.grouping.aggregator.ReportBuilder`.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from vc_changelog.config.loader import Configuration
from vc_changelog.grouping.aggregator import ReportBuilder
from vc_changelog.grouping.commit_model import Commit, parse_commit
from vc_changelog.grouping.group_model import ChangeLog
from vc_changelog.vcs.git_client import GitClient, GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def generate_changelog(commits: Iterable[Commit], config: Configuration) -> ChangeLog:
    """Organise the changes of the given commits.

    Commits without any recorded change are left out of the result.
    """
    builder = ReportBuilder(config.conventions)
    changelog = ChangeLog()

    for commit in commits:
        if builder.add(commit):
            logger.debug("Interesting commit %s", commit)
            changelog.commits.append(commit)
        else:
            logger.debug("No interesting changes in commit %s", commit)

    changelog.scopes = builder.finish()
    changelog.date = builder.date
    return changelog


def default_range(client: GitClient) -> List[str]:
    """Return the range from the last tag to HEAD, or just HEAD without tags."""
    tag = client.last_tag()
    if tag:
        return [f"{tag}..HEAD"]
    logger.warning("No tags found, using HEAD^..HEAD")
    return ["HEAD^..HEAD"]


def read_commits(client: GitClient, revision_range: Sequence[str], date_format: str) -> List[Commit]:
    """Read and parse the commits in the range.

    Commits that cannot be read or parsed are skipped with a warning.

    Raises
    ------
    GitError
        If the commits in the range cannot be listed.
    """
    commits = []
    for sha in client.commits_in_range(revision_range):
        try:
            lines = client.get_commit_message(sha)
            commits.append(parse_commit(lines, date_format))
        except (GitError, ValueError) as exc:
            logger.warning("Commit %s could not be read: %s", sha, exc)
    return commits


def changelog_from_repository(
    client: GitClient,
    config: Configuration,
    revision_range: Optional[Sequence[str]] = None,
) -> ChangeLog:
    """Generate the changelog for a revision range of the repository.

    Parameters
    ----------
    client : GitClient
        The client of the repository.
    config : Configuration
        The conventions and output preferences.
    revision_range : Optional[Sequence[str]]
        ``git log`` revision arguments. Defaults to :func:`default_range`.

    Raises
    ------
    GitError
        If the commits in the range cannot be listed.
    """
    if not revision_range:
        revision_range = default_range(client)

    header = " ".join(revision_range)
    logger.info("Using revision range '%s'", header)

    commits = read_commits(client, revision_range, config.date_format)
    changelog = generate_changelog(commits, config)
    changelog.range = header
    changelog.remote_url = client.get_remote_url(config.output.remote)
    return changelog
