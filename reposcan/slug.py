"""
Remote URL to slug parsing.

A slug is the `org/repo` identifier of a GitHub-style remote. Two URL shapes
are recognized:

    git@github.com:org/repo(.git)
    (https://)github.com/org/repo(.git)

parse_slug never raises; slug_from_repo_path raises SlugError subclasses so
callers can report "no remote" and "unparseable remote" differently.
"""
import os
import re
from typing import Optional

from .errors import PathNotFound, NotARepository, NoRemoteConfigured, SlugParseError
from .infra.git_client import GitClient

# git@host:org/repo
SSH_URL = re.compile(r"^git@(?P<host>[^:/\s@]+):(?P<path>[^\s]+)$")

# https://host/org/repo or host/org/repo; a schemeless host must contain a dot
HTTPS_URL = re.compile(
    r"^(?:(?P<scheme>https)://)?(?P<host>[A-Za-z0-9][A-Za-z0-9.-]*(?::\d+)?)/(?P<path>[^\s]+)$"
)


def _slug_from_path(path: str) -> Optional[str]:
    if path.endswith('.git'):
        path = path[:-len('.git')]
    segments = path.split('/')
    if len(segments) != 2 or not all(segments):
        return None
    return '/'.join(segments)


def parse_slug(url: Optional[str]) -> Optional[str]:
    """
    Extract the `org/repo` slug from a git remote URL.

    Args:
        url: Remote URL in SSH or HTTPS form

    Returns:
        The slug with its original casing, or None if the URL is empty or
        not one of the recognized shapes.
    """
    if not url or not isinstance(url, str):
        return None
    url = url.strip()

    ssh_match = SSH_URL.match(url)
    if ssh_match:
        return _slug_from_path(ssh_match.group('path'))

    https_match = HTTPS_URL.match(url)
    if https_match:
        if not https_match.group('scheme') and '.' not in https_match.group('host'):
            return None
        return _slug_from_path(https_match.group('path'))

    return None


def slug_from_repo_path(path: str, remote: str = "origin",
                        git_client: Optional[GitClient] = None) -> str:
    """
    Read the URL of `remote` for the repository holding `path` and parse its slug.

    `path` may be the repository root or any directory inside it; the
    nearest enclosing directory with a `.git` entry is used.

    Raises:
        PathNotFound: `path` is not an existing directory
        NotARepository: no `.git` entry in `path` or any of its parents
        NoRemoteConfigured: the repository has no such remote
        SlugParseError: the remote URL is not a recognized shape
    """
    path = os.path.expanduser(str(path))
    if not os.path.isdir(path):
        raise PathNotFound(path)

    git = git_client or GitClient()
    root = git.find_root(path)
    if root is None:
        raise NotARepository(path)

    url = git.remote_url(root, remote)
    if not url:
        raise NoRemoteConfigured(path, remote)

    slug = parse_slug(url)
    if slug is None:
        raise SlugParseError(path, url)
    return slug
