"""Tests for RepoExecutor."""

import logging
import time

import pytest

from reposcan.domain import RepositoryRecord
from reposcan.services import RepoExecutor, RepoOutcome


@pytest.fixture
def records():
    return [
        RepositoryRecord(path="/test1", slug="owner/repo1"),
        RepositoryRecord(path="/test2", slug="owner/repo2"),
        RepositoryRecord(path="/test3", slug=None),
    ]


class TestRepoExecutor:

    def test_new(self, records):
        executor = RepoExecutor(records)
        assert len(executor) == 3
        assert executor.records == records
        assert executor

    def test_empty(self):
        executor = RepoExecutor([])
        assert not executor
        assert executor.execute_all(lambda r: r.path) == []

    def test_execute_all(self, records):
        def work(record):
            if record.slug is None:
                raise ValueError("no slug")
            return record.slug.upper()

        outcomes = RepoExecutor(records).execute_all(work)

        assert [o.record for o in outcomes] == records
        assert [o.ok for o in outcomes] == [True, True, False]
        assert outcomes[0].value == "OWNER/REPO1"
        assert isinstance(outcomes[2].error, ValueError)
        assert isinstance(outcomes[0], RepoOutcome)

    def test_parallel_results_in_input_order(self):
        records = [RepositoryRecord(path=f"/r{i}") for i in range(8)]

        def work(record):
            # Later records finish first
            time.sleep(0.01 * (8 - int(record.path[2:])))
            return record.path

        outcomes = RepoExecutor(records, workers=8).execute_all(work)

        assert [o.value for o in outcomes] == [f"/r{i}" for i in range(8)]

    def test_execute_with_state(self, records):
        def work(record, state, lock):
            with lock:
                state.append(record.path)

        state = RepoExecutor(records, workers=3).execute_with_state([], work)

        assert sorted(state) == ["/test1", "/test2", "/test3"]

    def test_execute_with_state_survives_errors(self, records, caplog):
        def work(record, state, lock):
            if record.slug is None:
                raise RuntimeError("no slug")
            with lock:
                state[record.slug] = record.path

        with caplog.at_level(logging.ERROR, logger="reposcan"):
            state = RepoExecutor(records).execute_with_state({}, work)

        assert state == {"owner/repo1": "/test1", "owner/repo2": "/test2"}
        assert "/test3: no slug" in caplog.text

    def test_execute_with_state_error_names_slug(self, records, caplog):
        def work(record, state, lock):
            if record.path == "/test2":
                raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="reposcan"):
            RepoExecutor(records).execute_with_state(None, work)

        assert "owner/repo2: boom" in caplog.text

    def test_workers_floor(self, records):
        assert RepoExecutor(records, workers=0).workers == 1
