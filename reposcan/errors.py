"""
Exceptions raised by reposcan operations.

Discovery errors are only raised in strict mode; in lenient mode the same
conditions are reported as DiscoveryWarning entries on the result.
Slug errors are raised by slug_from_repo_path so callers can tell a missing
remote from a remote whose URL has no recognizable shape.
"""
from typing import Optional


class ReposcanError(Exception):
    """Base class for all reposcan errors."""


class DiscoveryError(ReposcanError):
    """A root path could not be scanned."""

    kind = "discovery_error"

    def __init__(self, root: str, message: Optional[str] = None):
        super().__init__(message or f"{self.kind}: {root}")
        self.root = root


class PathNotFound(DiscoveryError):
    """The path does not exist or is not a directory."""

    kind = "path_not_found"

    def __init__(self, root: str, message: Optional[str] = None):
        super().__init__(root, message or f"Path not found: {root}")


class PermissionDenied(DiscoveryError):
    """The path exists but cannot be listed."""

    kind = "permission_denied"

    def __init__(self, root: str, message: Optional[str] = None):
        super().__init__(root, message or f"Permission denied: {root}")


class SlugError(ReposcanError):
    """A slug could not be derived for a repository."""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path


class NoRemoteConfigured(SlugError):
    """The repository has no URL for the requested remote."""

    def __init__(self, path: str, remote: str = "origin"):
        super().__init__(path, f"No remote '{remote}' configured for {path}")
        self.remote = remote


class SlugParseError(SlugError):
    """The remote URL is present but is not a recognized GitHub-style URL."""

    def __init__(self, path: str, url: str):
        super().__init__(path, f"Failed to parse git URL: {url}")
        self.url = url


class NotARepository(SlugError):
    """Neither the path nor any of its parents holds a `.git` entry."""

    def __init__(self, path: str):
        super().__init__(path, f"Not a git repository: {path}")
