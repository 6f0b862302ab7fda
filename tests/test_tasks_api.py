# tests/test_tasks_api.py

from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from database import engine
from models import Task

from .conftest import auth_headers, register


def _create(client, headers, text, priority=0):
    response = client.post("/api/tasks", json={"text": text, "priority": priority}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_create_task_defaults(client):
    session = register(client)
    headers = auth_headers(session["access_token"])

    task = _create(client, headers, "  Write report  ")

    assert task["text"] == "  Write report  "
    assert task["notes"] == ""
    assert task["priority"] == 0
    assert task["user_id"] == session["user"]["id"]
    assert task["id"] and task["created_at"]


def test_list_orders_by_priority(client):
    headers = auth_headers(register(client)["access_token"])
    _create(client, headers, "second", priority=1)
    _create(client, headers, "first", priority=0)
    _create(client, headers, "third", priority=2)

    response = client.get("/api/tasks", headers=headers)

    assert [t["text"] for t in response.json()["data"]] == ["first", "second", "third"]


def test_list_orders_by_created_at_both_directions(client):
    session = register(client)
    headers = auth_headers(session["access_token"])
    base = datetime(2025, 4, 7, 12, 0, 0, tzinfo=timezone.utc)
    with Session(engine) as db:
        for offset, text in enumerate(["old", "middle", "new"]):
            db.add(Task(text=text, priority=0, user_id=session["user"]["id"],
                        created_at=base + timedelta(hours=offset)))
        db.commit()

    newest = client.get("/api/tasks", params={"order": "created_at", "direction": "desc"}, headers=headers)
    oldest = client.get("/api/tasks", params={"order": "created_at", "direction": "asc"}, headers=headers)

    assert [t["text"] for t in newest.json()["data"]] == ["new", "middle", "old"]
    assert [t["text"] for t in oldest.json()["data"]] == ["old", "middle", "new"]


def test_list_rejects_unknown_order(client):
    headers = auth_headers(register(client)["access_token"])

    assert client.get("/api/tasks", params={"order": "text"}, headers=headers).status_code == 422


def test_each_identity_only_sees_own_tasks(client):
    ada = auth_headers(register(client, "ada@example.com")["access_token"])
    bob = auth_headers(register(client, "bob@example.com")["access_token"])
    _create(client, ada, "ada task 1")
    _create(client, ada, "ada task 2", priority=1)
    _create(client, bob, "bob task")

    ada_tasks = client.get("/api/tasks", headers=ada).json()["data"]
    bob_tasks = client.get("/api/tasks", headers=bob).json()["data"]

    assert [t["text"] for t in ada_tasks] == ["ada task 1", "ada task 2"]
    assert [t["text"] for t in bob_tasks] == ["bob task"]


def test_foreign_task_cannot_be_read_changed_or_deleted(client):
    ada = auth_headers(register(client, "ada@example.com")["access_token"])
    bob = auth_headers(register(client, "bob@example.com")["access_token"])
    task = _create(client, ada, "private")

    assert client.get(f"/api/tasks/{task['id']}", headers=bob).status_code == 404
    assert client.patch(f"/api/tasks/{task['id']}", json={"notes": "x"}, headers=bob).status_code == 404
    assert client.delete(f"/api/tasks/{task['id']}", headers=bob).status_code == 404

    still_there = client.get(f"/api/tasks/{task['id']}", headers=ada).json()["data"]
    assert still_there["notes"] == ""


def test_create_for_other_user_is_forbidden(client):
    ada = auth_headers(register(client, "ada@example.com")["access_token"])
    bob_id = register(client, "bob@example.com")["user"]["id"]

    response = client.post("/api/tasks", json={"text": "sneaky", "priority": 0, "user_id": bob_id}, headers=ada)

    assert response.status_code == 403


def test_create_rejects_empty_text_and_negative_priority(client):
    headers = auth_headers(register(client)["access_token"])

    assert client.post("/api/tasks", json={"text": "", "priority": 0}, headers=headers).status_code == 422
    assert client.post("/api/tasks", json={"text": "   ", "priority": 0}, headers=headers).status_code == 422
    assert client.post("/api/tasks", json={"text": "ok", "priority": -1}, headers=headers).status_code == 422


def test_patch_updates_only_given_fields(client):
    headers = auth_headers(register(client)["access_token"])
    task = _create(client, headers, "notes target", priority=3)

    response = client.patch(f"/api/tasks/{task['id']}", json={"notes": "# Heading"}, headers=headers)

    updated = response.json()["data"]
    assert updated["notes"] == "# Heading"
    assert updated["priority"] == 3

    response = client.patch(f"/api/tasks/{task['id']}", json={"priority": 0}, headers=headers)
    updated = response.json()["data"]
    assert updated["notes"] == "# Heading"
    assert updated["priority"] == 0


def test_delete_removes_task(client):
    headers = auth_headers(register(client)["access_token"])
    task = _create(client, headers, "gone soon")

    assert client.delete(f"/api/tasks/{task['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/tasks/{task['id']}", headers=headers).status_code == 404


def test_batch_priorities_apply_together(client):
    headers = auth_headers(register(client)["access_token"])
    a = _create(client, headers, "a", priority=0)
    b = _create(client, headers, "b", priority=1)

    response = client.put("/api/tasks/priorities", headers=headers, json={
        "assignments": [{"id": b["id"], "priority": 0}, {"id": a["id"], "priority": 1}]
    })

    assert response.status_code == 200
    assert response.json()["data"]["updated"] == 2
    listed = client.get("/api/tasks", headers=headers).json()["data"]
    assert [t["text"] for t in listed] == ["b", "a"]


def test_batch_priorities_are_all_or_nothing(client):
    ada = auth_headers(register(client, "ada@example.com")["access_token"])
    bob = auth_headers(register(client, "bob@example.com")["access_token"])
    mine = _create(client, ada, "mine", priority=0)
    theirs = _create(client, bob, "theirs", priority=0)

    response = client.put("/api/tasks/priorities", headers=ada, json={
        "assignments": [{"id": mine["id"], "priority": 5}, {"id": theirs["id"], "priority": 6}]
    })

    assert response.status_code == 404
    assert client.get(f"/api/tasks/{mine['id']}", headers=ada).json()["data"]["priority"] == 0
    assert client.get(f"/api/tasks/{theirs['id']}", headers=bob).json()["data"]["priority"] == 0


def test_health_and_root(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["version"] == "1.0.0"


def test_created_at_round_trips_as_current_utc(client):
    headers = auth_headers(register(client)["access_token"])
    before = datetime.now(timezone.utc)

    task = _create(client, headers, "timestamped")
    fetched = client.get(f"/api/tasks/{task['id']}", headers=headers).json()["data"]

    created = datetime.fromisoformat(fetched["created_at"])
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    assert before - timedelta(minutes=1) <= created <= datetime.now(timezone.utc) + timedelta(minutes=1)
    assert fetched["created_at"] == task["created_at"]
