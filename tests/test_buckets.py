"""Tests for the minute-bucket index."""
import json
from datetime import datetime, timedelta, timezone

from trello_scheduler.services.scheduling import buckets


class TestMinuteIndex:
    def test_epoch_start(self):
        assert buckets.minute_index(datetime(1970, 1, 1, tzinfo=timezone.utc)) == 0

    def test_floors_within_minute(self):
        start = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
        expected = int(start.timestamp()) // 60
        assert buckets.minute_index(start) == expected
        assert buckets.minute_index(start + timedelta(seconds=59, microseconds=999000)) == expected
        assert buckets.minute_index(start + timedelta(seconds=60)) == expected + 1

    def test_naive_is_utc(self):
        aware = datetime(2026, 10, 19, 12, 0, 30, tzinfo=timezone.utc)
        assert buckets.minute_index(aware.replace(tzinfo=None)) == buckets.minute_index(aware)

    def test_other_timezone_same_instant(self):
        aware = datetime(2026, 10, 19, 12, 0, 30, tzinfo=timezone.utc)
        plus_two = aware.astimezone(timezone(timedelta(hours=2)))
        assert buckets.minute_index(plus_two) == buckets.minute_index(aware)

    def test_bucket_key(self):
        assert buckets.bucket_key(29453760) == "bucket_29453760"


class TestMembership:
    def test_absent_bucket_is_none(self, store):
        assert buckets.load_members(store, 5) is None

    def test_add_creates_and_appends(self, store):
        buckets.add_member(store, 5, "a", 600)
        buckets.add_member(store, 5, "b", 600)
        buckets.add_member(store, 5, "a", 600)
        assert buckets.load_members(store, 5) == ["a", "b"]

    def test_remove_keeps_others(self, store):
        buckets.add_member(store, 5, "a", 600)
        buckets.add_member(store, 5, "b", 600)
        assert buckets.remove_members(store, 5, {"a"}, 600) == ["b"]
        assert buckets.load_members(store, 5) == ["b"]

    def test_remove_last_deletes_bucket(self, store):
        buckets.add_member(store, 5, "a", 600)
        assert buckets.remove_members(store, 5, {"a"}, 600) == []
        assert store.get(buckets.bucket_key(5)) is None

    def test_remove_rereads_stored_members(self, store):
        """Keys added after a sweep loaded the bucket survive its write-back."""
        buckets.add_member(store, 5, "a", 600)
        loaded = buckets.load_members(store, 5)
        buckets.add_member(store, 5, "late", 600)
        buckets.remove_members(store, 5, set(loaded), 600)
        assert buckets.load_members(store, 5) == ["late"]

    def test_corrupt_bucket_reads_empty(self, store):
        store.put(buckets.bucket_key(5), "not json", 600)
        assert buckets.load_members(store, 5) == []
        store.put(buckets.bucket_key(6), json.dumps({"a": 1}), 600)
        assert buckets.load_members(store, 6) == []

    def test_write_empty_deletes(self, store):
        buckets.add_member(store, 5, "a", 600)
        buckets.write_members(store, 5, [], 600)
        assert store.get(buckets.bucket_key(5)) is None

    def test_bucket_ttl_refreshed_on_write(self, store, clock):
        buckets.add_member(store, 5, "a", 600)
        clock.advance(500)
        buckets.add_member(store, 5, "b", 600)
        assert store.ttl_remaining(buckets.bucket_key(5)) == 600
