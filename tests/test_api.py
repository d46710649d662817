from datetime import datetime

from fastapi.testclient import TestClient

from sharedjournal import db
from sharedjournal.api import app
from sharedjournal.version import SHAREDJOURNAL_VERSION


def create_journal(client, **body):
    body.setdefault("title", "Trip")
    response = client.post("/journal/createShared", json=body)
    assert response.status_code == 200, response.text
    return response.json()["shareKey"]


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["status"] == "OK"
    assert body["version"] == SHAREDJOURNAL_VERSION
    assert datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))


def test_version(client):
    response = client.get("/version")
    assert response.json() == {"version": SHAREDJOURNAL_VERSION}


def test_create_shared_journal(client):
    response = client.post(
        "/journal/createShared",
        json={"title": "Trip", "createdBy": {"id": "u1", "username": "alice"}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["title"] == "Trip"
    assert len(body["shareKey"]) == 8
    assert body["message"] == "Shared journal created successfully"


def test_create_shared_journal_with_key(client):
    share_key = create_journal(client, shareKey="ABCD1234")
    assert share_key == "ABCD1234"


def test_create_shared_journal_without_title(client):
    response = client.post("/journal/createShared", json={"shareKey": "ABCD1234"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Title is required"}


def test_create_shared_journal_duplicate_key(client):
    create_journal(client, shareKey="ABCD1234", title="First")

    response = client.post(
        "/journal/createShared", json={"shareKey": "ABCD1234", "title": "Second"}
    )

    assert response.status_code == 409
    assert response.json() == {"success": False, "error": "Share key already exists"}
    journal = client.get("/journal/ABCD1234/entries").json()["journal"]
    assert journal["title"] == "First"


def test_create_shared_journal_bad_key(client):
    response = client.post(
        "/journal/createShared", json={"shareKey": "abc", "title": "Trip"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid share key format"


def test_create_shared_journal_malformed_body(client):
    response = client.post(
        "/journal/createShared",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Invalid request body"


def test_get_entries(client):
    share_key = create_journal(
        client, shareKey="ABCD1234", createdBy={"id": "u1", "username": "alice"}
    )
    client.post(
        f"/journal/{share_key}/entries/sync",
        json={
            "entries": [
                {"id": "e1", "content": "old", "date": "2024-01-01"},
                {"id": "e2", "content": "new", "date": "2024-02-01"},
            ]
        },
    )

    response = client.get(f"/journal/{share_key}/entries")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    journal = body["journal"]
    assert journal["shareKey"] == share_key
    assert journal["title"] == "Trip"
    assert journal["createdBy"] == {"id": "u1", "username": "alice"}
    assert journal["editableByAnyone"] is False
    assert "createdAt" in journal and "updatedAt" in journal
    assert [entry["id"] for entry in body["entries"]] == ["e2", "e1"]
    assert set(body["entries"][0]) == {
        "id",
        "content",
        "date",
        "updated_at",
        "created_by_id",
        "created_by_username",
        "last_edited_by_id",
        "last_edited_by_username",
    }


def test_get_entries_bad_key(client):
    response = client.get("/journal/SHORT/entries")
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid share key format"}


def test_get_entries_not_found(client):
    response = client.get("/journal/NOPE0000/entries")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Journal not found"}


def test_sync_entries(client):
    share_key = create_journal(client)

    response = client.post(
        f"/journal/{share_key}/entries/sync",
        json={
            "entries": [
                {"id": "e1", "content": "Day 1", "date": "2024-01-01"},
                {"id": "e2", "date": "2024-01-02"},
            ]
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["synced"] == [{"id": "e1", "synced": True}]
    assert body["failed"] == [
        {
            "entry": {"id": "e2", "date": "2024-01-02"},
            "error": "Missing required fields (id, content, date)",
        }
    ]
    assert body["message"] == "Synced 1 entries, 1 failed"


def test_sync_entries_empty(client):
    share_key = create_journal(client)

    response = client.post(f"/journal/{share_key}/entries/sync", json={"entries": []})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "synced": [],
        "failed": [],
        "message": "No entries to sync",
    }


def test_sync_entries_missing_array(client):
    share_key = create_journal(client)

    response = client.post(f"/journal/{share_key}/entries/sync", json={})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Entries array is required"}

    response = client.post(
        f"/journal/{share_key}/entries/sync", json={"entries": "e1"}
    )
    assert response.status_code == 400


def test_sync_entries_journal_not_found(client):
    response = client.post(
        "/journal/NOPE0000/entries/sync",
        json={"entries": [{"id": "e1", "content": "x", "date": "2024-01-01"}]},
    )
    assert response.status_code == 404


def test_sync_entries_bad_key(client):
    response = client.post("/journal/NOPE/entries/sync", json={"entries": []})
    assert response.status_code == 400


def test_update_permissions(client):
    share_key = create_journal(client, createdBy={"id": "u1"})

    response = client.patch(
        f"/journal/{share_key}/permissions",
        json={"editableByAnyone": True, "userId": "u1"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "editableByAnyone": True,
        "message": "Journal permissions updated: anyone can edit",
    }
    journal = client.get(f"/journal/{share_key}/entries").json()["journal"]
    assert journal["editableByAnyone"] is True

    response = client.patch(
        f"/journal/{share_key}/permissions", json={"editableByAnyone": False}
    )
    assert response.json()["message"] == "Journal permissions updated: creator only"


def test_update_permissions_forbidden(client):
    share_key = create_journal(client, createdBy={"id": "u1"})

    response = client.patch(
        f"/journal/{share_key}/permissions",
        json={"editableByAnyone": True, "userId": "u2"},
    )

    assert response.status_code == 403
    assert response.json() == {
        "success": False,
        "error": "Only the journal creator can change permissions",
    }


def test_update_permissions_requires_boolean(client):
    share_key = create_journal(client)

    response = client.patch(f"/journal/{share_key}/permissions", json={})
    assert response.status_code == 400
    assert response.json()["error"] == "editableByAnyone must be a boolean"

    response = client.patch(
        f"/journal/{share_key}/permissions", json={"editableByAnyone": "yes"}
    )
    assert response.status_code == 400


def test_update_permissions_not_found(client):
    response = client.patch(
        "/journal/NOPE0000/permissions", json={"editableByAnyone": True}
    )
    assert response.status_code == 404


def test_list_journals(client):
    create_journal(client, shareKey="FIRST000", title="First")
    create_journal(client, shareKey="SECOND00", title="Second")

    response = client.get("/journals")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert {journal["share_key"] for journal in body["journals"]} == {
        "FIRST000",
        "SECOND00",
    }
    assert set(body["journals"][0]) == {
        "share_key",
        "title",
        "created_at",
        "updated_at",
    }


def test_delete_journal(client):
    share_key = create_journal(client)

    response = client.delete(f"/journal/{share_key}")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Journal and all entries deleted successfully",
    }
    assert client.delete(f"/journal/{share_key}").status_code == 404


def test_delete_journal_bad_key(client):
    response = client.delete("/journal/bad")
    assert response.status_code == 400


def test_unknown_endpoint(client):
    response = client.get("/nowhere")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Endpoint not found"}

    response = client.put("/journals")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Endpoint not found"}


def test_unhandled_error():
    def broken_connection():
        raise RuntimeError("database is gone")
        yield

    app.dependency_overrides[db.yield_connection_from_env] = broken_connection
    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            response = test_client.get("/journals")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}


def test_shared_journal_lifecycle(client):
    share_key = create_journal(client, title="Trip", createdBy={"id": "u1"})
    assert len(share_key) == 8
    created = client.get(f"/journal/{share_key}/entries").json()["journal"]

    response = client.post(
        f"/journal/{share_key}/entries/sync",
        json={"entries": [{"id": "e1", "content": "Day 1", "date": "2024-01-01"}]},
    )
    assert response.json()["synced"] == [{"id": "e1", "synced": True}]
    synced = client.get(f"/journal/{share_key}/entries").json()["journal"]
    assert datetime.fromisoformat(synced["updatedAt"]) > datetime.fromisoformat(
        created["updatedAt"]
    )

    client.post(
        f"/journal/{share_key}/entries/sync",
        json={
            "entries": [
                {
                    "id": "e1",
                    "content": "Day 1 edited",
                    "date": "2024-01-01",
                    "lastEditedBy": {"id": "u2"},
                }
            ]
        },
    )
    entries = client.get(f"/journal/{share_key}/entries").json()["entries"]
    assert len(entries) == 1
    assert entries[0]["content"] == "Day 1 edited"
    assert entries[0]["created_by_id"] is None
    assert entries[0]["last_edited_by_id"] == "u2"

    assert client.delete(f"/journal/{share_key}").status_code == 200
    assert client.get(f"/journal/{share_key}/entries").status_code == 404
    assert client.get("/journals").json()["journals"] == []
