"""Tests for the HTTP routes (/schedule, /cancel, /process, /pending, /health)."""
from datetime import datetime, timedelta, timezone

from trello_scheduler.services.scheduling import buckets


def _iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TestScheduleRoute:
    def test_schedule_returns_key(self, client, store):
        due = datetime.now(timezone.utc) + timedelta(hours=1)
        resp = client.post(
            "/schedule",
            json={"cardId": "card1", "comment": "hello", "scheduledTime": _iso(due), "trelloToken": "tok"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["key"].startswith("schedule_")
        assert store.get(body["key"]) is not None
        assert buckets.load_members(store, buckets.minute_index(due)) == [body["key"]]

    def test_generic_field_names_accepted(self, client, store):
        due = datetime.now(timezone.utc) + timedelta(hours=1)
        resp = client.post(
            "/schedule",
            json={"targetId": "card1", "markComplete": True, "scheduledTime": _iso(due), "credential": "tok"},
        )
        assert resp.status_code == 200
        assert resp.json()["success"] is True

    def test_missing_fields(self, client, store):
        resp = client.post("/schedule", json={"cardId": "card1", "comment": "hello"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing required fields"}
        assert store.list() == []

    def test_invalid_time(self, client, store):
        resp = client.post(
            "/schedule",
            json={"cardId": "card1", "comment": "hi", "scheduledTime": "tomorrow-ish", "trelloToken": "tok"},
        )
        assert resp.status_code == 400
        assert "scheduledTime" in resp.json()["error"]
        assert store.list() == []

    def test_time_too_far_in_past(self, client, store):
        due = datetime.now(timezone.utc) - timedelta(hours=1)
        resp = client.post(
            "/schedule",
            json={"cardId": "card1", "comment": "hi", "scheduledTime": _iso(due), "trelloToken": "tok"},
        )
        assert resp.status_code == 400
        assert "in the past" in resp.json()["error"]
        assert store.list() == []

    def test_not_json(self, client):
        resp = client.post("/schedule", content=b"nope", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert "error" in resp.json()

    def test_store_failure_is_500(self, client, store):
        def broken_put(key, value, ttl_seconds):
            raise RuntimeError("disk full")

        store.put = broken_put
        due = datetime.now(timezone.utc) + timedelta(hours=1)
        resp = client.post(
            "/schedule",
            json={"cardId": "card1", "comment": "hi", "scheduledTime": _iso(due), "trelloToken": "tok"},
        )
        assert resp.status_code == 500
        assert resp.json() == {"error": "disk full"}


class TestCancelRoute:
    def test_cancel(self, client, store):
        due = datetime.now(timezone.utc) + timedelta(hours=1)
        key = client.post(
            "/schedule",
            json={"cardId": "card1", "comment": "hi", "scheduledTime": _iso(due), "trelloToken": "tok"},
        ).json()["key"]

        resp = client.post("/cancel", json={"key": key, "trelloToken": "tok"})
        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        assert store.list() == []

    def test_cancel_unknown_key_succeeds(self, client):
        resp = client.post("/cancel", json={"key": "schedule_0_gone", "trelloToken": "tok"})
        assert resp.json() == {"success": True}

    def test_cancel_missing_fields(self, client):
        resp = client.post("/cancel", json={"key": "schedule_0_gone"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing required fields"}


class TestProcessRoute:
    def test_process_runs_due_actions(self, client, store, executor):
        due = datetime.now(timezone.utc) - timedelta(seconds=1)
        key = client.post(
            "/schedule",
            json={"cardId": "card1", "comment": "hi", "scheduledTime": _iso(due), "trelloToken": "tok"},
        ).json()["key"]

        body = client.get("/process").json()

        assert body["processed"] == 1
        assert body["errors"] == 0
        assert body["details"]["processed"] == [key]
        assert "timestamp" in body
        assert isinstance(body["minute"], int)
        assert executor.executed == [key]

    def test_process_reports_errors(self, client, executor):
        executor.fail_all = True
        due = datetime.now(timezone.utc) - timedelta(seconds=1)
        key = client.post(
            "/schedule",
            json={"cardId": "card1", "comment": "hi", "scheduledTime": _iso(due), "trelloToken": "tok"},
        ).json()["key"]

        body = client.get("/process").json()

        assert body["processed"] == 0
        assert body["errors"] == 1
        assert body["details"]["errors"][0]["key"] == key

    def test_process_conflict_when_running(self, client):
        from trello_scheduler.scheduler import dispatch_job

        dispatch_job._sweep_lock.acquire()
        try:
            resp = client.get("/process")
        finally:
            dispatch_job._sweep_lock.release()
        assert resp.status_code == 409
        assert resp.json() == {"error": "Sweep already running"}


class TestDiagnostics:
    def test_pending(self, client):
        due = datetime.now(timezone.utc) + timedelta(hours=1)
        key = client.post(
            "/schedule",
            json={"cardId": "card1", "comment": "hi", "scheduledTime": _iso(due), "trelloToken": "tok"},
        ).json()["key"]
        body = client.get("/pending").json()
        assert body["count"] == 1
        assert body["pending"][0]["key"] == key

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["store"] == "memory"
        assert "is_sweep_running" in body["dispatch"]

    def test_cors_preflight(self, client):
        resp = client.options(
            "/schedule",
            headers={"Origin": "https://trello.com", "Access-Control-Request-Method": "POST"},
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] in ("*", "https://trello.com")
