"""
reposcan - Find local clones of GitHub repositories and their slugs.

Quick Start:
    import reposcan

    # Discover repositories: a root may be a repo, a directory of repos,
    # or a directory of organization directories
    result = reposcan.discover(["~/src", "~/work"])
    for record in result:
        print(record.slug, record.path)

    # Roots that could not be scanned
    for warning in result.warnings:
        print(warning.kind, warning.root)

    # Fail instead of warning
    reposcan.discover(["~/missing"], strict=True)  # raises PathNotFound

    # Slugs
    reposcan.parse_slug("git@github.com:acme/widgets.git")  # "acme/widgets"
    reposcan.slug_from_repo_path("~/src/widgets")

    # Stale remote branches, grouped by committer
    reports = reposcan.StaleBranchService().scan(result.records, days=90, workers=4)
    for report in reports:
        print(report.label, report.summary())
"""

__version__ = "0.1.0"

# Domain objects
from .domain import RepositoryRecord, DiscoveryWarning, DiscoveryResult

# Errors
from .errors import (
    ReposcanError,
    DiscoveryError,
    PathNotFound,
    PermissionDenied,
    SlugError,
    NotARepository,
    NoRemoteConfigured,
    SlugParseError,
)

# Operations
from .slug import parse_slug, slug_from_repo_path
from .services import (
    DiscoveryService,
    RepoExecutor,
    RepoOutcome,
    StaleBranchService,
    StaleReport,
    discover,
)
from .infra import GitClient

# Configuration
from .config import load_config

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "RepositoryRecord",
    "DiscoveryWarning",
    "DiscoveryResult",
    # Errors
    "ReposcanError",
    "DiscoveryError",
    "PathNotFound",
    "PermissionDenied",
    "SlugError",
    "NotARepository",
    "NoRemoteConfigured",
    "SlugParseError",
    # Operations
    "discover",
    "parse_slug",
    "slug_from_repo_path",
    "DiscoveryService",
    "RepoExecutor",
    "RepoOutcome",
    "StaleBranchService",
    "StaleReport",
    "GitClient",
    # Configuration
    "load_config",
]
