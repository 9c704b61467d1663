"""
Domain layer for reposcan.

Contains pure domain objects with no I/O:
- RepositoryRecord: A discovered repository and its slug
- DiscoveryWarning: A root skipped during lenient discovery
- DiscoveryResult: Records and warnings from one discovery pass
"""

from .repository import RepositoryRecord, DiscoveryWarning, DiscoveryResult

__all__ = [
    'RepositoryRecord',
    'DiscoveryWarning',
    'DiscoveryResult',
]
