"""
Run work over discovered repositories.

RepoExecutor applies a callable to every record, sequentially or on a
thread pool, and always returns results in the order of its records.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar
import logging
import threading

from ..domain import RepositoryRecord

logger = logging.getLogger(__name__)

T = TypeVar('T')
S = TypeVar('S')


@dataclass
class RepoOutcome(Generic[T]):
    """Result of running work on one repository."""
    record: RepositoryRecord
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RepoExecutor:
    """
    Executes a function on each repository, optionally in parallel.

    Example:
        executor = RepoExecutor(result.records, workers=4)
        outcomes = executor.execute_all(lambda record: record.slug)
    """

    def __init__(self, records: Sequence[RepositoryRecord], workers: int = 1):
        self._records = list(records)
        self.workers = max(1, workers)

    @property
    def records(self) -> List[RepositoryRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def _map(self, fn: Callable[[RepositoryRecord], Any]) -> List[Any]:
        if self.workers > 1 and len(self._records) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                return list(pool.map(fn, self._records))
        return [fn(record) for record in self._records]

    def execute_all(self, work_fn: Callable[[RepositoryRecord], T]) -> List[RepoOutcome[T]]:
        """
        Run `work_fn` on every record and keep every outcome.

        Returns:
            One RepoOutcome per record, holding either the value or the error
        """
        def run(record: RepositoryRecord) -> RepoOutcome[T]:
            try:
                return RepoOutcome(record=record, value=work_fn(record))
            except Exception as e:
                return RepoOutcome(record=record, error=e)

        return self._map(run)

    def execute_with_state(
        self,
        shared_state: S,
        work_fn: Callable[[RepositoryRecord, S, threading.Lock], Any]
    ) -> S:
        """
        Run `work_fn(record, state, lock)` on every record with shared state.

        `work_fn` must hold `lock` while mutating the state. Failures are
        logged and do not stop the other records.

        Returns:
            The shared state after all records ran
        """
        lock = threading.Lock()

        for outcome in self.execute_all(lambda record: work_fn(record, shared_state, lock)):
            if not outcome.ok:
                logger.error(f"{outcome.record.slug or outcome.record.path}: {outcome.error}")

        return shared_state
