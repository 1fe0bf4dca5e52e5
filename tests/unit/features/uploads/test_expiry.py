"""Tests for the deferred deletion registry."""

import asyncio
import logging
from typing import List

import pytest

from core.exceptions import StorageError
from features.uploads.expiry import ExpiryScheduler, get_expiry_scheduler

pytestmark = pytest.mark.anyio


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class GatedClock:
    """Fake ``sleep`` that records durations and blocks until released."""

    def __init__(self) -> None:
        self.slept: List[float] = []
        self.gate = asyncio.Event()

    async def sleep(self, seconds: float) -> None:
        self.slept.append(seconds)
        await self.gate.wait()


class RecordingStore:
    def __init__(self, fail: bool = False) -> None:
        self.deleted: List[str] = []
        self._fail = fail

    async def delete_object(self, key: str) -> None:
        if self._fail:
            raise StorageError("Failed to delete", operation="delete", key=key)
        self.deleted.append(key)


async def test_deletes_only_after_ttl_elapses():
    clock = GatedClock()
    store = RecordingStore()
    scheduler = ExpiryScheduler(sleep=clock.sleep)

    task = scheduler.schedule("a.txt", 60, store.delete_object)
    await asyncio.sleep(0)

    assert clock.slept == [60]
    assert store.deleted == []
    assert scheduler.pending_keys() == ["a.txt"]

    clock.gate.set()
    await task

    assert store.deleted == ["a.txt"]
    assert scheduler.pending_keys() == []


async def test_zero_ttl_schedules_nothing():
    scheduler = ExpiryScheduler(sleep=GatedClock().sleep)

    assert scheduler.schedule("keep.txt", 0, RecordingStore().delete_object) is None
    assert scheduler.pending_keys() == []


async def test_republishing_replaces_pending_deletion():
    clock = GatedClock()
    store = RecordingStore()
    scheduler = ExpiryScheduler(sleep=clock.sleep)

    first = scheduler.schedule("a.txt", 60, store.delete_object)
    second = scheduler.schedule("a.txt", 120, store.delete_object)
    await asyncio.sleep(0)

    assert first is not None and first.cancelled()
    assert scheduler.pending_keys() == ["a.txt"]

    clock.gate.set()
    await second

    assert store.deleted == ["a.txt"]
    assert scheduler.pending_keys() == []


async def test_independent_keys_run_concurrently():
    clock = GatedClock()
    store = RecordingStore()
    scheduler = ExpiryScheduler(sleep=clock.sleep)

    tasks = [scheduler.schedule(key, 30, store.delete_object) for key in ("b.txt", "a.txt")]
    await asyncio.sleep(0)
    assert scheduler.pending_keys() == ["a.txt", "b.txt"]

    clock.gate.set()
    await asyncio.gather(*tasks)

    assert sorted(store.deleted) == ["a.txt", "b.txt"]


async def test_failed_deletion_is_logged_not_raised(caplog):
    scheduler = ExpiryScheduler(sleep=lambda seconds: asyncio.sleep(0))
    caplog.set_level(logging.ERROR, logger="features.uploads.expiry")

    task = scheduler.schedule("a.txt", 5, RecordingStore(fail=True).delete_object)
    await task

    assert task.exception() is None
    assert "Scheduled deletion of a.txt failed" in caplog.text


async def test_shutdown_cancels_everything(caplog):
    clock = GatedClock()
    store = RecordingStore()
    scheduler = ExpiryScheduler(sleep=clock.sleep)
    tasks = [scheduler.schedule(key, 60, store.delete_object) for key in ("a.txt", "b.txt")]
    caplog.set_level(logging.WARNING, logger="features.uploads.expiry")

    await scheduler.shutdown()

    assert all(task.cancelled() for task in tasks)
    assert scheduler.pending_keys() == []
    assert store.deleted == []
    assert "a.txt, b.txt" in caplog.text


def test_process_wide_scheduler_is_shared():
    assert get_expiry_scheduler() is get_expiry_scheduler()


async def test_shutdown_reports_only_live_deletions(caplog):
    clock = GatedClock()
    store = RecordingStore()
    scheduler = ExpiryScheduler(sleep=clock.sleep)
    scheduler.schedule("a.txt", 60, store.delete_object)
    scheduler.schedule("a.txt", 90, store.delete_object)
    caplog.set_level(logging.WARNING, logger="features.uploads.expiry")

    await scheduler.shutdown()

    assert [record.getMessage() for record in caplog.records] == [
        "Shutting down with 1 pending deletion(s); these objects will not expire: a.txt"
    ]


async def test_shutdown_with_nothing_pending_is_quiet(caplog):
    caplog.set_level(logging.WARNING, logger="features.uploads.expiry")

    await ExpiryScheduler(sleep=GatedClock().sleep).shutdown()

    assert caplog.records == []
