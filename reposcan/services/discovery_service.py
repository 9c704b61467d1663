"""
Repository discovery service for reposcan.

Finds git repositories under a list of root paths:
- A root that itself contains `.git` is a repository; its children are not scanned.
- Otherwise its immediate subdirectories containing `.git` are repositories.
- Subdirectories without `.git` have their own children checked (`org/repo` layout).

Scanning never goes deeper than two levels. Entries are visited in
lexicographic order of their names, and results are deduplicated by
resolved absolute path, keeping the first occurrence.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set
import logging
import os
import stat

from ..domain import RepositoryRecord, DiscoveryWarning, DiscoveryResult
from ..errors import DiscoveryError, PathNotFound, PermissionDenied, SlugError
from ..infra import GitClient
from ..slug import slug_from_repo_path
from .executor import RepoExecutor

logger = logging.getLogger(__name__)

# Deepest level below a root that is checked for `.git`
MAX_DEPTH = 2


@dataclass
class _RootScan:
    """Paths and warnings collected for a single root."""
    root: str
    paths: List[str] = field(default_factory=list)
    warnings: List[DiscoveryWarning] = field(default_factory=list)
    error: Optional[DiscoveryError] = None


class DiscoveryService:
    """
    Service for discovering repositories under root paths.

    Example:
        service = DiscoveryService()
        result = service.discover(["~/src", "~/work"])
        for record in result:
            print(record.slug, record.path)
        for warning in result.warnings:
            print(warning.message)
    """

    def __init__(
        self,
        git_client: Optional[GitClient] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize DiscoveryService.

        Args:
            git_client: Git client instance (creates default if None)
            config: Configuration dict; only the "general" and "git" sections are read
        """
        self.config = config or {}
        timeout = self.config.get('git', {}).get('timeout_seconds', 30)
        self.git = git_client or GitClient(timeout=timeout)

    def _general(self, key: str, default: Any) -> Any:
        return self.config.get('general', {}).get(key, default)

    def worker_count(self, workers: Optional[int]) -> int:
        """Worker count from the argument or config; invalid values give 1."""
        value = self._general('workers', 1) if workers is None else workers
        try:
            return max(1, int(value))
        except (TypeError, ValueError):
            logger.warning(f"Invalid workers value '{value}', using 1")
            return 1

    def discover(
        self,
        roots: Optional[Sequence[str]] = None,
        strict: Optional[bool] = None,
        resolve_slugs: Optional[bool] = None,
        workers: Optional[int] = None,
        remote: Optional[str] = None,
    ) -> DiscoveryResult:
        """
        Discover repositories under each root, in the order given.

        Args:
            roots: Root paths (uses configured repository_directories if None)
            strict: Raise on the first unusable root instead of collecting a warning
            resolve_slugs: Fill each record's slug from its remote URL
            workers: Number of roots scanned concurrently (1 = sequential)
            remote: Remote whose URL provides the slug

        Returns:
            DiscoveryResult with records and per-root warnings

        Raises:
            PathNotFound, PermissionDenied: only when strict
        """
        if roots is None:
            roots = self._general('repository_directories', ['.'])
        if isinstance(roots, str):
            roots = [roots]
        strict = self._general('strict', False) if strict is None else strict
        resolve_slugs = self._general('resolve_slugs', True) if resolve_slugs is None else resolve_slugs
        workers = self.worker_count(workers)
        remote = remote or self._general('remote', 'origin')

        roots = [os.path.expanduser(str(root)) for root in roots]

        if workers > 1 and len(roots) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                scans = list(executor.map(self._scan_root, roots))
        else:
            scans = []
            for root in roots:
                scan = self._scan_root(root)
                scans.append(scan)
                if strict and scan.error:
                    break

        result = self._merge(scans, strict)

        if resolve_slugs and result.records:
            repo_executor = RepoExecutor(result.records, workers=workers)
            outcomes = repo_executor.execute_all(lambda record: self._with_slug(record, remote))
            records = []
            for outcome in outcomes:
                if not outcome.ok:
                    logger.warning(f"Could not read slug for {outcome.record.path}: {outcome.error}")
                records.append(outcome.value if outcome.ok else outcome.record)
            result.records = records

        logger.debug(f"Discovered {len(result.records)} repositories under {len(roots)} root(s)")
        return result

    def _merge(self, scans: List[_RootScan], strict: bool) -> DiscoveryResult:
        """Concatenate per-root scans in input order, dropping duplicate paths."""
        result = DiscoveryResult()
        seen: Set[str] = set()

        for scan in scans:
            if strict and scan.error:
                raise scan.error
            for warning in scan.warnings:
                logger.warning(warning.message)
                result.warnings.append(warning)
            for path in scan.paths:
                if path in seen:
                    logger.debug(f"Skipping duplicate repository {path}")
                    continue
                seen.add(path)
                result.records.append(RepositoryRecord(path=path))

        return result

    def _with_slug(self, record: RepositoryRecord, remote: str) -> RepositoryRecord:
        try:
            return record.with_slug(slug_from_repo_path(record.path, remote, self.git))
        except SlugError as e:
            logger.debug(str(e))
            return record

    def _scan_root(self, root: str) -> _RootScan:
        """
        Collect repository paths for one root.

        Unusable directories become warnings; the first one is also kept
        as `error` so strict callers can raise it.
        """
        scan = _RootScan(root=root)
        visited: Set[str] = set()

        try:
            st = os.stat(root)
        except PermissionError:
            self._skip(scan, PermissionDenied(root))
            return scan
        except OSError:
            self._skip(scan, PathNotFound(root))
            return scan
        if not stat.S_ISDIR(st.st_mode):
            self._skip(scan, PathNotFound(root))
            return scan

        resolved = os.path.realpath(root)
        if self.git.is_git_repo(root):
            scan.paths.append(resolved)
            return scan

        self._scan_dir(root, resolved, 1, scan, visited)
        return scan

    def _scan_dir(self, path: str, resolved: str, depth: int,
                  scan: _RootScan, visited: Set[str]) -> None:
        if resolved in visited:
            return
        visited.add(resolved)

        try:
            children = self._list_subdirs(path)
        except PermissionError:
            self._skip(scan, PermissionDenied(path))
            return
        except FileNotFoundError:
            self._skip(scan, PathNotFound(path))
            return

        for child in children:
            child_resolved = os.path.realpath(child)
            if self.git.is_git_repo(child):
                scan.paths.append(child_resolved)
            elif depth < MAX_DEPTH:
                self._scan_dir(child, child_resolved, depth + 1, scan, visited)

    @staticmethod
    def _list_subdirs(path: str) -> List[str]:
        """Immediate subdirectories of `path` (symlinks followed), sorted by name."""
        subdirs = []
        with os.scandir(path) as entries:
            for entry in entries:
                if entry.name.startswith('.'):
                    continue
                try:
                    if entry.is_dir():
                        subdirs.append(entry.path)
                except OSError:
                    continue
        return sorted(subdirs, key=os.path.basename)

    @staticmethod
    def _skip(scan: _RootScan, error: DiscoveryError) -> None:
        scan.warnings.append(DiscoveryWarning(root=error.root, kind=error.kind, message=str(error)))
        if scan.error is None:
            scan.error = error


def discover(
    roots: Sequence[str],
    strict: bool = False,
    resolve_slugs: bool = True,
    workers: int = 1,
    remote: str = "origin",
    git_client: Optional[GitClient] = None,
    config: Optional[Dict[str, Any]] = None,
) -> DiscoveryResult:
    """Discover repositories under `roots`. See DiscoveryService.discover."""
    service = DiscoveryService(git_client=git_client, config=config)
    return service.discover(
        roots,
        strict=strict,
        resolve_slugs=resolve_slugs,
        workers=workers,
        remote=remote,
    )
