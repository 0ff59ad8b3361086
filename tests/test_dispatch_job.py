"""Tests for the guarded periodic sweep."""
import threading
from datetime import datetime, timedelta, timezone

import pytest

from trello_scheduler.core.errors import SweepInProgressError
from trello_scheduler.scheduler import dispatch_job
from trello_scheduler.services.scheduling import schedule

from conftest import NOW


@pytest.fixture
def held_lock():
    dispatch_job._sweep_lock.acquire()
    try:
        yield
    finally:
        dispatch_job._sweep_lock.release()


class TestRunSweep:
    def test_runs_and_records_heartbeat(self, store, executor):
        key = schedule(store, "card1", NOW, "tok", comment="hi", now=NOW)
        result = dispatch_job.run_sweep(store=store, executor=executor, now=NOW + timedelta(seconds=1))

        assert result.processed == [key]
        beat = dispatch_job.get_dispatch_heartbeat()
        assert beat["last_sweep"]["processed"] == 1
        assert beat["last_sweep_error"] is None
        assert beat["is_sweep_running"] is False
        assert beat["last_sweep_duration_seconds"] is not None

    def test_overlap_rejected(self, store, executor, held_lock):
        schedule(store, "card1", NOW, "tok", comment="hi", now=NOW)
        with pytest.raises(SweepInProgressError):
            dispatch_job.run_sweep(store=store, executor=executor, now=NOW)
        assert executor.attempts == []

    def test_store_outage_reported(self, executor):
        class BrokenStore:
            backend_id = "broken"

            def get(self, key):
                raise RuntimeError("down")

        result = dispatch_job.run_sweep(store=BrokenStore(), executor=executor, now=NOW)
        assert len(result.errors) == 2  # both swept buckets failed to load
        assert not dispatch_job.is_sweep_running()


class TestRunDispatchJob:
    def test_skips_on_overlap_without_raising(self, held_lock):
        before = dispatch_job.get_dispatch_heartbeat()["skipped_ticks"]
        dispatch_job.run_dispatch_job()
        assert dispatch_job.get_dispatch_heartbeat()["skipped_ticks"] == before + 1

    def test_concurrent_skips_all_counted(self, held_lock):
        before = dispatch_job.get_dispatch_heartbeat()["skipped_ticks"]
        threads = [threading.Thread(target=dispatch_job.run_dispatch_job) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert dispatch_job.get_dispatch_heartbeat()["skipped_ticks"] == before + 16

    def test_uses_shared_store_and_executor(self, store, executor, client):
        key = schedule(store, "card1", datetime.now(timezone.utc) - timedelta(seconds=1), "tok", comment="hi")
        dispatch_job.run_dispatch_job()
        assert executor.executed == [key]
        assert store.get(key) is None
