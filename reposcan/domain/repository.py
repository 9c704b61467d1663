"""
Repository domain objects for reposcan.

RepositoryRecord is what discovery hands back to calling tools. It is
immutable and serializable for JSONL output.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any, List, Iterator
from pathlib import Path
import json


@dataclass(frozen=True)
class RepositoryRecord:
    """
    A directory verified to contain a `.git` entry at discovery time.

    The path is absolute and symlink-resolved. The slug is the `org/repo`
    of the default remote, or None when there is no parseable remote.
    Records are not refreshed; one may go stale if the filesystem changes.

    Example:
        record = RepositoryRecord(path="/home/me/src/widgets")
        record = record.with_slug("acme/widgets")
    """

    path: str
    slug: Optional[str] = None

    @property
    def name(self) -> str:
        """Directory name of the repository."""
        return Path(self.path).name

    def with_slug(self, slug: Optional[str]) -> 'RepositoryRecord':
        """Create a new record with the given slug."""
        return replace(self, slug=slug)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'name': self.name,
            'slug': self.slug,
        }

    def to_jsonl(self) -> str:
        """Convert to single-line JSON for streaming output."""
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def __str__(self) -> str:
        return f"{self.slug or self.name} ({self.path})"


@dataclass(frozen=True)
class DiscoveryWarning:
    """A root or directory that was skipped in lenient mode."""
    root: str
    kind: str  # path_not_found, permission_denied
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'root': self.root,
            'kind': self.kind,
            'message': self.message,
        }


@dataclass
class DiscoveryResult:
    """Records found by one discovery pass plus the warnings it collected."""
    records: List[RepositoryRecord] = field(default_factory=list)
    warnings: List[DiscoveryWarning] = field(default_factory=list)

    def __iter__(self) -> Iterator[RepositoryRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def paths(self) -> List[str]:
        return [record.path for record in self.records]

    @property
    def ok(self) -> bool:
        """True when no root was skipped."""
        return not self.warnings

    def to_dict(self) -> Dict[str, Any]:
        return {
            'records': [r.to_dict() for r in self.records],
            'warnings': [w.to_dict() for w in self.warnings],
        }
