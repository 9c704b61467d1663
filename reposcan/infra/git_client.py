"""
Git client infrastructure for reposcan.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic
"""

import os
import subprocess
from typing import Optional, List, Tuple
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


class GitClient:
    """
    Abstraction over git commands.

    Commands are run against the repository's own `.git` entry via
    `--git-dir`, so git never walks up into an enclosing repository.

    Example:
        client = GitClient()
        if client.is_git_repo("/path/to/repo"):
            print(client.remote_url("/path/to/repo"))
    """

    def __init__(self, timeout: int = 30):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (default: 30)
        """
        self.timeout = timeout

    def _run(self, path: str, args: List[str]) -> Tuple[Optional[str], int]:
        """
        Run a git command against the repository at `path`.

        Args:
            path: Repository working directory
            args: Git arguments (e.g., ['config', '--get', 'remote.origin.url'])

        Returns:
            Tuple of (stdout, returncode)
        """
        git_dir = os.path.join(path, '.git')
        cmd = ['git', f'--git-dir={git_dir}'] + args
        try:
            result = subprocess.run(
                cmd,
                cwd=path,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
            return result.stdout.strip() if result.stdout else None, result.returncode

        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            return None, -1
        except OSError as e:
            logger.error(f"Git command failed: {' '.join(cmd)} - {e}")
            return None, -1

    def is_git_repo(self, path: str) -> bool:
        """Check if path contains a .git entry (directory or gitfile)."""
        return (Path(path) / ".git").exists()

    def remote_url(self, path: str, remote: str = "origin") -> Optional[str]:
        """
        Get remote URL.

        Args:
            path: Path to git repository
            remote: Remote name (default: "origin")

        Returns:
            Remote URL or None if not found
        """
        output, code = self._run(path, ['config', '--get', f'remote.{remote}.url'])
        if code == 0 and output:
            return output
        return None

    def find_root(self, path: str) -> Optional[str]:
        """
        Find the repository enclosing `path`.

        Walks from `path` up through its parents and stops at the first
        directory holding a `.git` entry.

        Returns:
            Resolved repository root, or None outside any repository
        """
        start = Path(path).expanduser().resolve()
        for candidate in [start, *start.parents]:
            if self.is_git_repo(str(candidate)):
                return str(candidate)
        return None

    def fetch(self, path: str, remote: str = "origin", prune: bool = True) -> bool:
        """Fetch `remote`, pruning deleted remote branches. Returns success."""
        args = ['fetch', remote]
        if prune:
            args.append('--prune')
        _, code = self._run(path, args)
        if code != 0:
            logger.warning(f"git fetch {remote} failed in {path}")
        return code == 0

    def for_each_ref(
        self,
        path: str,
        ref: str = "refs/remotes/origin",
        fmt: str = "%(committerdate:short) %(refname:short) %(committername)",
        sort: str = "-committerdate"
    ) -> List[str]:
        """
        List refs under `ref`, one formatted line per ref.

        Returns:
            Output lines, or an empty list if git failed
        """
        output, code = self._run(path, ['for-each-ref', f'--sort={sort}', ref, f'--format={fmt}'])
        if code != 0 or not output:
            if code != 0:
                logger.debug(f"git for-each-ref {ref} failed in {path}")
            return []
        return [line for line in output.splitlines() if line.strip()]
