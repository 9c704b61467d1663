"""
Unit tests for reposcan.infra.git_client
"""
import os
import subprocess
import tempfile
import shutil
import unittest
from unittest.mock import patch, MagicMock

from reposcan.infra import GitClient


def completed(stdout="", returncode=0):
    result = MagicMock()
    result.stdout = stdout
    result.returncode = returncode
    return result


class TestGitClient(unittest.TestCase):
    """Test GitClient with subprocess mocked out"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.repo = os.path.join(self.temp_dir, "widgets")
        os.makedirs(os.path.join(self.repo, ".git"))
        self.client = GitClient(timeout=5)

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_is_git_repo(self):
        self.assertTrue(self.client.is_git_repo(self.repo))
        self.assertFalse(self.client.is_git_repo(self.temp_dir))

    def test_is_git_repo_gitfile(self):
        worktree = os.path.join(self.temp_dir, "worktree")
        os.makedirs(worktree)
        with open(os.path.join(worktree, ".git"), "w") as f:
            f.write("gitdir: /elsewhere\n")
        self.assertTrue(self.client.is_git_repo(worktree))

    @patch('reposcan.infra.git_client.subprocess.run')
    def test_remote_url(self, mock_run):
        mock_run.return_value = completed("git@github.com:acme/widgets.git\n")

        self.assertEqual(self.client.remote_url(self.repo), "git@github.com:acme/widgets.git")

        args, kwargs = mock_run.call_args
        self.assertEqual(args[0], [
            'git', f'--git-dir={os.path.join(self.repo, ".git")}',
            'config', '--get', 'remote.origin.url',
        ])
        self.assertEqual(kwargs['cwd'], self.repo)
        self.assertEqual(kwargs['timeout'], 5)

    @patch('reposcan.infra.git_client.subprocess.run')
    def test_remote_url_named_remote(self, mock_run):
        mock_run.return_value = completed("https://github.com/upstream/widgets\n")

        self.client.remote_url(self.repo, "upstream")

        self.assertIn('remote.upstream.url', mock_run.call_args[0][0])

    @patch('reposcan.infra.git_client.subprocess.run')
    def test_remote_url_missing(self, mock_run):
        mock_run.return_value = completed("", returncode=1)
        self.assertIsNone(self.client.remote_url(self.repo))

    @patch('reposcan.infra.git_client.subprocess.run')
    def test_remote_url_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd='git', timeout=5)
        self.assertIsNone(self.client.remote_url(self.repo))

    @patch('reposcan.infra.git_client.subprocess.run')
    def test_remote_url_git_not_installed(self, mock_run):
        mock_run.side_effect = FileNotFoundError("git")
        self.assertIsNone(self.client.remote_url(self.repo))

    def test_find_root_from_repository(self):
        self.assertEqual(self.client.find_root(self.repo), os.path.realpath(self.repo))

    def test_find_root_from_subdirectory(self):
        nested = os.path.join(self.repo, "src", "lib")
        os.makedirs(nested)
        self.assertEqual(self.client.find_root(nested), os.path.realpath(self.repo))

    def test_find_root_stops_at_nearest_git_entry(self):
        inner = os.path.join(self.repo, "vendor", "inner")
        os.makedirs(os.path.join(inner, ".git"))
        self.assertEqual(self.client.find_root(inner), os.path.realpath(inner))

    def test_find_root_outside_repository(self):
        plain = os.path.join(self.temp_dir, "plain")
        os.makedirs(plain)
        self.assertIsNone(self.client.find_root(plain))

    @patch('reposcan.infra.git_client.subprocess.run')
    def test_fetch(self, mock_run):
        mock_run.return_value = completed("")

        self.assertTrue(self.client.fetch(self.repo))
        self.assertEqual(mock_run.call_args[0][0][2:], ['fetch', 'origin', '--prune'])

    @patch('reposcan.infra.git_client.subprocess.run')
    def test_fetch_failure(self, mock_run):
        mock_run.return_value = completed("", returncode=128)

        with self.assertLogs('reposcan', level='WARNING'):
            self.assertFalse(self.client.fetch(self.repo, "upstream", prune=False))
        self.assertEqual(mock_run.call_args[0][0][2:], ['fetch', 'upstream'])

    @patch('reposcan.infra.git_client.subprocess.run')
    def test_for_each_ref(self, mock_run):
        mock_run.return_value = completed(
            "2024-01-02 origin/old-feature Jane Doe\n2023-06-01 origin/ancient Bob\n"
        )

        lines = self.client.for_each_ref(self.repo)

        self.assertEqual(lines, ["2024-01-02 origin/old-feature Jane Doe", "2023-06-01 origin/ancient Bob"])
        self.assertEqual(mock_run.call_args[0][0][2:], [
            'for-each-ref', '--sort=-committerdate', 'refs/remotes/origin',
            '--format=%(committerdate:short) %(refname:short) %(committername)',
        ])

    @patch('reposcan.infra.git_client.subprocess.run')
    def test_for_each_ref_failure(self, mock_run):
        mock_run.return_value = completed("", returncode=128)
        self.assertEqual(self.client.for_each_ref(self.repo, "refs/remotes/upstream"), [])


if __name__ == '__main__':
    unittest.main()
