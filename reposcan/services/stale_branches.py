"""
Stale branch report for discovered repositories.

A remote branch is stale when its last commit is at least `days` old.
Branches are read with `git for-each-ref` (newest first) after an optional
`git fetch --prune`, then grouped per repository and per committer.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
import logging
import threading

from ..domain import RepositoryRecord
from ..infra import GitClient
from .executor import RepoExecutor

logger = logging.getLogger(__name__)

REF_FORMAT = "%(committerdate:short) %(refname:short) %(committername)"


@dataclass(frozen=True)
class StaleBranch:
    """A remote branch whose last commit is older than the threshold."""
    branch: str
    days: int
    author: str


@dataclass
class AuthorSummary:
    """Stale branch count and oldest branch age for one committer."""
    author: str
    count: int
    max_days: int


@dataclass
class StaleReport:
    """Stale branches of one repository."""
    record: RepositoryRecord
    branches: List[StaleBranch] = field(default_factory=list)

    @property
    def label(self) -> str:
        return self.record.slug or self.record.name

    def by_author(self) -> Dict[str, List[StaleBranch]]:
        """Branches grouped by committer, oldest branch first."""
        grouped: Dict[str, List[StaleBranch]] = {}
        for branch in self.branches:
            grouped.setdefault(branch.author, []).append(branch)
        for branches in grouped.values():
            branches.sort(key=lambda b: b.days, reverse=True)
        return grouped

    def summary(self) -> List[AuthorSummary]:
        """Per-committer count and max age, oldest first."""
        summaries = [
            AuthorSummary(author=author, count=len(branches), max_days=branches[0].days)
            for author, branches in self.by_author().items()
        ]
        return sorted(summaries, key=lambda s: (-s.max_days, s.author))

    def to_dict(self) -> Dict[str, Any]:
        return {
            author: {
                'branches': [{b.branch: b.days} for b in branches],
                'count': len(branches),
            }
            for author, branches in self.by_author().items()
        }


def parse_ref_line(line: str, days: int, today: date,
                   remote: str = "origin") -> Optional[StaleBranch]:
    """
    Parse one `for-each-ref` line of `REF_FORMAT`.

    Returns:
        StaleBranch if the branch is at least `days` old, else None.
        Lines with fewer than three fields or a bad date give None.
    """
    parts = line.split()
    if len(parts) < 3:
        return None
    try:
        committed = datetime.strptime(parts[0], "%Y-%m-%d").date()
    except ValueError:
        logger.debug(f"Skipping ref with unreadable date: {line}")
        return None

    branch = parts[1]
    prefix = f"{remote}/"
    if branch.startswith(prefix):
        branch = branch[len(prefix):]

    age = (today - committed).days
    if age < days:
        return None
    return StaleBranch(branch=branch, days=age, author=' '.join(parts[2:]))


class StaleBranchService:
    """
    Finds stale remote branches across repositories.

    Example:
        service = StaleBranchService()
        for report in service.scan(result.records, days=90):
            for summary in report.summary():
                print(report.label, summary.author, summary.count, summary.max_days)
    """

    def __init__(
        self,
        git_client: Optional[GitClient] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        self.config = config or {}
        timeout = self.config.get('git', {}).get('timeout_seconds', 30)
        self.git = git_client or GitClient(timeout=timeout)

    def for_repo(
        self,
        path: str,
        days: int,
        ref: str = "refs/remotes/origin",
        fetch: bool = True,
        remote: str = "origin",
        today: Optional[date] = None,
    ) -> List[StaleBranch]:
        """Stale branches under `ref` in the repository at `path`, newest first."""
        if fetch:
            self.git.fetch(path, remote)

        today = today or datetime.now(timezone.utc).date()
        branches = []
        for line in self.git.for_each_ref(path, ref, REF_FORMAT):
            branch = parse_ref_line(line, days, today, remote)
            if branch is not None:
                branches.append(branch)
        return branches

    def scan(
        self,
        records: Sequence[RepositoryRecord],
        days: int,
        ref: str = "refs/remotes/origin",
        fetch: bool = True,
        remote: str = "origin",
        workers: int = 1,
        today: Optional[date] = None,
    ) -> List[StaleReport]:
        """
        Collect stale branches for every record.

        Repositories without stale branches are left out. Reports keep the
        order of `records` whatever order the workers finish in.
        """
        def work(record: RepositoryRecord, found: Dict[str, List[StaleBranch]],
                 lock: threading.Lock) -> None:
            logger.debug(f"Checking stale branches in {record.path}")
            branches = self.for_repo(record.path, days, ref, fetch, remote, today)
            if branches:
                with lock:
                    found[record.path] = branches

        found = RepoExecutor(records, workers=workers).execute_with_state({}, work)
        return [
            StaleReport(record=record, branches=found[record.path])
            for record in records
            if record.path in found
        ]


def group_reports(reports: Sequence[StaleReport]) -> Dict[str, Dict[str, Any]]:
    """Detailed mapping of repository label to committer to branches."""
    grouped: Dict[str, Dict[str, Any]] = {}
    for report in reports:
        # Two clones of one slug are told apart by path
        key = report.label if report.label not in grouped else report.record.path
        grouped[key] = report.to_dict()
    return grouped


def summary_lines(reports: Sequence[StaleReport]) -> List[str]:
    """Text summary: one block per repository, one `author: (count, max_days)` line per committer."""
    lines = []
    for report in reports:
        lines.append(f"{report.label}:")
        for summary in report.summary():
            lines.append(f"  {summary.author}: ({summary.count}, {summary.max_days})")
        lines.append("")
    return lines
