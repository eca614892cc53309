import subprocess
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from vc_changelog.vcs.git_client import COMMIT_FORMAT, GitClient, GitError


class DummyProc(SimpleNamespace):
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""


class TestGitClient(unittest.TestCase):
    def test_last_tag(self) -> None:
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            return DummyProc(returncode=0, stdout="v0.2.0\n", stderr="")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            client = GitClient(Path("/repo"))
            self.assertEqual(client.last_tag(), "v0.2.0")
        self.assertEqual(calls[0][0], "for-each-ref")
        self.assertIn("refs/tags/*", calls[0])

    def test_last_tag_without_tags(self) -> None:
        with patch.object(GitClient, "_run", return_value=DummyProc(returncode=0, stdout="", stderr="")):
            self.assertIsNone(GitClient(Path("/repo")).last_tag())

    def test_commits_in_range(self) -> None:
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            return DummyProc(returncode=0, stdout="aaa\nbbb\n\n", stderr="")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            shas = GitClient(Path("/repo")).commits_in_range(["v0.1.1", "...", "v0.2.0"])
        self.assertEqual(shas, ["aaa", "bbb"])
        self.assertEqual(calls[0], ["log", "--format=format:%H", "v0.1.1", "...", "v0.2.0"])

    def test_get_commit_message(self) -> None:
        calls = []
        output = "aaa\nJane\nSun, 22 Oct 2017 17:26:56 -0400\nsubject\nbody line\n"

        def fake_run(self, args, check=True):
            calls.append(args)
            return DummyProc(returncode=0, stdout=output, stderr="")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            lines = GitClient(Path("/repo")).get_commit_message("aaa")
        self.assertEqual(lines, ["aaa", "Jane", "Sun, 22 Oct 2017 17:26:56 -0400", "subject", "body line"])
        self.assertIn(f"--format=format:{COMMIT_FORMAT}", calls[0])
        self.assertIn("--max-count=1", calls[0])

    def test_get_remote_url(self) -> None:
        client = GitClient(Path("/repo"))
        with patch.object(GitClient, "_run", return_value=DummyProc(returncode=0, stdout="git@host:me/repo.git\n")):
            self.assertEqual(client.get_remote_url("origin"), "git@host:me/repo.git")
        with patch.object(GitClient, "_run", return_value=DummyProc(returncode=2, stdout="", stderr="no remote")):
            self.assertIsNone(client.get_remote_url("nope"))

    def test_run_raises_on_failure(self) -> None:
        failed = subprocess.CompletedProcess(["git"], 128, stdout="", stderr="fatal: bad revision\n")
        with patch("subprocess.run", return_value=failed):
            client = GitClient(Path("/repo"))
            with self.assertRaises(GitError) as ctx:
                client.get_commit_message("bad")
            self.assertIn("bad revision", str(ctx.exception))

    def test_run_without_git(self) -> None:
        with patch("subprocess.run", side_effect=FileNotFoundError("git")):
            with self.assertRaises(GitError):
                GitClient(Path("/repo")).last_tag()

    def test_find_repo_root(self) -> None:
        import tempfile

        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            nested = root / "src" / "pkg"
            nested.mkdir(parents=True)
            (root / ".git").mkdir()
            self.assertEqual(GitClient.find_repo_root(nested), root)
            self.assertTrue(GitClient.is_repo(root))
            self.assertFalse(GitClient.is_repo(nested))


if __name__ == "__main__":
    unittest.main()
