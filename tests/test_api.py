# tests/test_api.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from ambitask.api.app import create_app
from ambitask.core.errors import StoreError
from ambitask.tasks.task_models import parse_timestamp
from ambitask.tasks.task_store import TaskStore


def test_root_reports_health(http: TestClient) -> None:
    resp = http.get("/")
    assert resp.status_code == 200
    assert "working" in resp.json()["message"]


def test_create_returns_201_with_defaults(http: TestClient) -> None:
    resp = http.post("/tasks", json={"title": "Pay rent"})

    assert resp.status_code == 201
    body = resp.json()
    assert body["id"]
    assert body["title"] == "Pay rent"
    assert body["completed"] is False
    assert body["important"] is False
    assert body["notified"] is False
    assert body["dueAt"] is None
    assert body["createdAt"]


def test_create_accepts_due_time_and_blank_due(http: TestClient) -> None:
    with_due = http.post("/tasks", json={"title": "a", "dueAt": "2030-05-01T12:30:00Z"}).json()
    blank_due = http.post("/tasks", json={"title": "b", "dueAt": ""}).json()

    assert parse_timestamp(with_due["dueAt"]) == parse_timestamp("2030-05-01T12:30:00+00:00")
    assert blank_due["dueAt"] is None


def test_create_with_blank_title_is_rejected(http: TestClient, task_store: TaskStore) -> None:
    resp = http.post("/tasks", json={"title": "   "})

    assert resp.status_code == 400
    assert resp.json() == {"error": "title is required"}
    assert task_store.count_tasks() == 0


def test_create_without_title_is_rejected(http: TestClient, task_store: TaskStore) -> None:
    resp = http.post("/tasks", json={"important": True})

    assert resp.status_code == 400
    assert "error" in resp.json()
    assert task_store.count_tasks() == 0


def test_create_with_bad_due_time_is_rejected(http: TestClient) -> None:
    resp = http.post("/tasks", json={"title": "x", "dueAt": "tomorrow-ish"})
    assert resp.status_code == 400
    assert "dueAt" in resp.json()["error"]


def test_create_with_due_time_past_year_9999_is_rejected(http: TestClient, task_store: TaskStore) -> None:
    # Valid ISO-8601, but year 10000 once shifted to UTC.
    resp = http.post("/tasks", json={"title": "x", "dueAt": "9999-12-31T23:00:00-05:00"})

    assert resp.status_code == 400
    assert "dueAt" in resp.json()["error"]
    assert task_store.count_tasks() == 0
    assert http.get("/tasks").status_code == 200


def test_list_is_newest_first(http: TestClient) -> None:
    ids = [http.post("/tasks", json={"title": f"t{i}"}).json()["id"] for i in range(4)]

    listed = http.get("/tasks").json()
    assert [t["id"] for t in listed] == list(reversed(ids))


def test_put_is_a_partial_update(http: TestClient) -> None:
    created = http.post(
        "/tasks", json={"title": "Pay rent", "important": True, "dueAt": "2030-01-01T00:00:00Z"}
    ).json()

    resp = http.put(f"/tasks/{created['id']}", json={"completed": True})

    assert resp.status_code == 200
    body = resp.json()
    assert body["completed"] is True
    assert body["title"] == "Pay rent"
    assert body["important"] is True
    assert parse_timestamp(body["dueAt"]) == parse_timestamp(created["dueAt"])
    assert body["notified"] is False


def test_patch_behaves_like_put(http: TestClient) -> None:
    created = http.post("/tasks", json={"title": "old"}).json()

    body = http.patch(f"/tasks/{created['id']}", json={"title": "  new  ", "notified": True}).json()

    assert body["title"] == "new"
    assert body["notified"] is True
    assert body["completed"] is False


def test_update_can_clear_due_time(http: TestClient) -> None:
    created = http.post("/tasks", json={"title": "x", "dueAt": "2030-01-01T00:00:00Z"}).json()

    body = http.put(f"/tasks/{created['id']}", json={"dueAt": None}).json()
    assert body["dueAt"] is None


def test_update_with_blank_title_is_rejected(http: TestClient) -> None:
    created = http.post("/tasks", json={"title": "keep"}).json()

    resp = http.put(f"/tasks/{created['id']}", json={"title": ""})

    assert resp.status_code == 400
    assert http.get("/tasks").json()[0]["title"] == "keep"


@pytest.mark.parametrize("body", [{"title": None}, {"completed": None}, {"important": None}, {"notified": None}])
def test_update_with_null_field_is_rejected(http: TestClient, body: dict) -> None:
    created = http.post("/tasks", json={"title": "keep", "important": True}).json()

    resp = http.patch(f"/tasks/{created['id']}", json=body)

    assert resp.status_code == 400
    (listed,) = http.get("/tasks").json()
    assert listed["title"] == "keep"
    assert listed["important"] is True
    assert listed["completed"] is False


def test_update_unknown_id_is_404(http: TestClient) -> None:
    resp = http.put("/tasks/missing", json={"completed": True})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Task not found: missing"}


def test_delete_then_delete_again(http: TestClient) -> None:
    keep = http.post("/tasks", json={"title": "keep"}).json()
    gone = http.post("/tasks", json={"title": "gone"}).json()

    first = http.delete(f"/tasks/{gone['id']}")
    second = http.delete(f"/tasks/{gone['id']}")

    assert first.status_code == 200
    assert first.json() == {"success": True}
    assert second.status_code == 404
    assert [t["id"] for t in http.get("/tasks").json()] == [keep["id"]]


class _BrokenStore:
    def list_tasks(self):
        raise StoreError("Task store list failed: disk I/O error")


def test_store_failure_is_a_500_with_message_only() -> None:
    client = TestClient(create_app(_BrokenStore()))  # type: ignore[arg-type]

    resp = client.get("/tasks")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Task store list failed: disk I/O error"}
