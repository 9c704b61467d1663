"""
Service layer for reposcan.

Services orchestrate domain objects and infrastructure:
- DiscoveryService: Find repositories under root paths
- RepoExecutor: Run work over discovered repositories
- StaleBranchService: Report remote branches with no recent commits
"""

from .discovery_service import DiscoveryService, discover
from .executor import RepoExecutor, RepoOutcome
from .stale_branches import StaleBranch, StaleReport, StaleBranchService

__all__ = [
    'DiscoveryService',
    'discover',
    'RepoExecutor',
    'RepoOutcome',
    'StaleBranch',
    'StaleReport',
    'StaleBranchService',
]
