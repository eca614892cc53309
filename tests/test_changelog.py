import unittest

from vc_changelog.changelog import changelog_from_repository, default_range, generate_changelog, read_commits
from vc_changelog.config.loader import Configuration, Conventions, Keyword
from vc_changelog.grouping.commit_model import parse_commit
from vc_changelog.vcs.git_client import GitError


DATE = "Sun, 22 Oct 2017 17:26:56 -0400"


class DummyGitClient:
    def __init__(self, messages, tag="v1.0", fail_list=False):
        self.messages = messages
        self.tag = tag
        self.fail_list = fail_list
        self.ranges = []

    def last_tag(self):
        return self.tag

    def commits_in_range(self, revision_range):
        self.ranges.append(list(revision_range))
        if self.fail_list:
            raise GitError("bad revision")
        return list(self.messages)

    def get_commit_message(self, sha):
        message = self.messages[sha]
        if message is None:
            raise GitError(f"cannot read {sha}")
        return message

    def get_remote_url(self, remote="origin"):
        return "https://example.com/repo.git" if remote == "origin" else None


def config() -> Configuration:
    return Configuration(
        conventions=Conventions(
            scopes=[Keyword("", "General"), Keyword("api", "API")],
            categories=[Keyword("feature", "Features"), Keyword("fix", "Fixes")],
        )
    )


def commit_lines(sha, subject, *body, date=DATE):
    return [sha, "Jane", date, subject] + list(body)


class TestGenerateChangelog(unittest.TestCase):
    def test_only_interesting_commits_are_kept(self) -> None:
        commits = [
            parse_commit(commit_lines("a", "tagged", "- fix(api): fixed"), "%Y"),
            parse_commit(commit_lines("b", "plain", "nothing to see"), "%Y"),
            parse_commit(commit_lines("c", "feature", "- feature: added", date="Mon, 1 Jan 2018 10:00:00 +0000"), "%Y"),
        ]
        changelog = generate_changelog(commits, config())
        self.assertEqual([commit.sha for commit in changelog.commits], ["a", "c"])
        self.assertEqual([scope.title for scope in changelog.scopes], ["General", "API"])
        self.assertEqual(changelog.date, "2018-01-01")

    def test_no_commits(self) -> None:
        changelog = generate_changelog([], config())
        self.assertEqual(changelog.scopes, [])
        self.assertEqual(changelog.commits, [])
        self.assertEqual(changelog.date, "")


class TestChangelogFromRepository(unittest.TestCase):
    def test_default_range(self) -> None:
        self.assertEqual(default_range(DummyGitClient({})), ["v1.0..HEAD"])
        self.assertEqual(default_range(DummyGitClient({}, tag=None)), ["HEAD^..HEAD"])

    def test_unreadable_commits_are_skipped(self) -> None:
        client = DummyGitClient(
            {
                "a": commit_lines("a", "one", "- fix: one"),
                "b": None,
                "c": ["c", "truncated"],
            }
        )
        commits = read_commits(client, ["v1.0..HEAD"], "%Y")
        self.assertEqual([commit.sha for commit in commits], ["a"])

    def test_out_of_range_timestamp_does_not_stop_the_run(self) -> None:
        client = DummyGitClient(
            {
                "a": commit_lines("a", "edge", "- fix: edge", date="Fri, 31 Dec 9999 23:00:00 -1200"),
                "b": commit_lines("b", "normal", "- fix: normal"),
            }
        )
        commits = read_commits(client, ["v1.0..HEAD"], "%Y-%m-%d")
        self.assertEqual([commit.sha for commit in commits], ["a", "b"])
        self.assertEqual(generate_changelog(commits, config()).date, "2017-10-22")

    def test_changelog_from_repository(self) -> None:
        client = DummyGitClient({"a": commit_lines("a", "one (#3)", "- fix(api): one", "detail")})
        changelog = changelog_from_repository(client, config())
        self.assertEqual(client.ranges, [["v1.0..HEAD"]])
        self.assertEqual(changelog.range, "v1.0..HEAD")
        self.assertEqual(changelog.remote_url, "https://example.com/repo.git")
        self.assertEqual(changelog.commits[0].number, 3)
        change = changelog.scopes[0].categories[0].changes[0]
        self.assertEqual((change.opening, change.rest), (" one", ["detail"]))

    def test_explicit_range_and_remote(self) -> None:
        client = DummyGitClient({})
        settings = config()
        settings.output.remote = "upstream"
        changelog = changelog_from_repository(client, settings, ["v0.1", "^v0.0"])
        self.assertEqual(client.ranges, [["v0.1", "^v0.0"]])
        self.assertEqual(changelog.range, "v0.1 ^v0.0")
        self.assertIsNone(changelog.remote_url)

    def test_listing_failure_propagates(self) -> None:
        with self.assertRaises(GitError):
            changelog_from_repository(DummyGitClient({}, fail_list=True), config(), ["bad"])


if __name__ == "__main__":
    unittest.main()
