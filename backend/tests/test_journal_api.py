"""
Tests for the journal entry API
"""
from datetime import datetime
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from reflect.models.journal import Draft, JournalEntry
from reflect.services.auth_service import AuthService
from reflect.services.journal_service import JournalService


def test_requires_authentication(client, db):
    response = client.get("/api/journal")
    assert response.status_code == 401
    assert response.json()["detail"] == "Authentication required"


def test_create_entry_copies_mood_fields(auth_client):
    response = auth_client.post("/api/journal", json={
        "title": "  First day  ",
        "content": "<p>Went for a <strong>walk</strong></p>",
        "mood": "peaceful",
    })
    assert response.status_code == 201
    entry = response.json()
    assert entry["title"] == "First day"
    assert entry["mood"] == "peaceful"
    assert entry["mood_score"] == 7
    assert entry["mood_query"] == entry["mood_data"]["pixabay_query"]
    assert entry["mood_data"]["label"] == "Peaceful"
    assert entry["collection_id"] is None
    assert entry["preview"] == "Went for a walk"


def test_create_entry_required_messages(auth_client):
    response = auth_client.post("/api/journal", json={"title": " ", "content": ""})
    assert response.status_code == 422
    body = response.json()
    assert body["detail"] == "Validation failed"
    assert body["errors"]["title"] == "Title is required"
    assert body["errors"]["content"] == "Content is required"
    assert body["errors"]["mood"] == "Mood is required"


def test_create_entry_unknown_mood(auth_client):
    response = auth_client.post("/api/journal", json={"title": "x", "content": "y", "mood": "ecstatic"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid mood"


def test_create_entry_image_must_be_allowed(auth_client):
    response = auth_client.post("/api/journal", json={
        "title": "x", "content": "y", "mood": "happy",
        "mood_image_url": "http://insecure.example.com/a.jpg",
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Image host is not allowed"

    response = auth_client.post("/api/journal", json={
        "title": "x", "content": "y", "mood": "happy",
        "mood_image_url": "https://cdn.pixabay.com/photo/a.jpg",
    })
    assert response.status_code == 201
    assert response.json()["mood_image_url"] == "https://cdn.pixabay.com/photo/a.jpg"


def test_create_entry_in_collection(auth_client, make_collection):
    collection = make_collection("Travel")
    response = auth_client.post("/api/journal", json={
        "title": "Lisbon", "content": "<p>Tram 28</p>", "mood": "excited",
        "collection_id": collection["id"],
    })
    assert response.status_code == 201
    assert response.json()["collection_id"] == collection["id"]


def test_blank_collection_means_unorganized(auth_client):
    response = auth_client.post("/api/journal", json={
        "title": "x", "content": "y", "mood": "happy", "collection_id": "",
    })
    assert response.status_code == 201
    assert response.json()["collection_id"] is None


def test_create_entry_unknown_collection(auth_client):
    response = auth_client.post("/api/journal", json={
        "title": "x", "content": "y", "mood": "happy", "collection_id": str(uuid4()),
    })
    assert response.status_code == 404
    assert response.json()["detail"] == "Collection not found"


def test_list_by_collection_and_unorganized(auth_client, make_collection, make_entry):
    collection = make_collection("Work")
    in_collection = make_entry(title="Standup", collection_id=collection["id"])
    loose = make_entry(title="Loose thought")

    response = auth_client.get("/api/journal", params={"collection_id": collection["id"]})
    assert response.status_code == 200
    assert [e["id"] for e in response.json()["data"]["entries"]] == [in_collection["id"]]

    response = auth_client.get("/api/journal", params={"collection_id": "unorganized"})
    assert [e["id"] for e in response.json()["data"]["entries"]] == [loose["id"]]

    response = auth_client.get("/api/journal")
    assert len(response.json()["data"]["entries"]) == 2


def test_list_invalid_collection_id(auth_client):
    response = auth_client.get("/api/journal", params={"collection_id": "not-a-uuid"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid collection id"


def test_list_order(auth_client, db, make_entry):
    older = make_entry(title="Older")
    newer = make_entry(title="Newer")
    db.query(JournalEntry).filter(JournalEntry.title == "Older").update(
        {JournalEntry.created_at: datetime(2025, 1, 1, 9, 0)}
    )
    db.commit()

    response = auth_client.get("/api/journal")
    assert [e["id"] for e in response.json()["data"]["entries"]] == [newer["id"], older["id"]]

    response = auth_client.get("/api/journal", params={"order": "asc"})
    assert [e["id"] for e in response.json()["data"]["entries"]] == [older["id"], newer["id"]]

    response = auth_client.get("/api/journal", params={"order": "sideways"})
    assert response.status_code == 422


def test_list_filters(auth_client, db, make_entry):
    make_entry(title="Beach day", content="<p>Sun and sand</p>", mood="happy")
    make_entry(title="Deadline", content="<p>Too much 100% work</p>", mood="stressed")
    dated = make_entry(title="Old note", content="<p>Archive</p>", mood="neutral")
    db.query(JournalEntry).filter(JournalEntry.title == "Old note").update({JournalEntry.created_at: datetime(2025, 3, 14, 18, 30)})
    db.commit()

    def titles(**params):
        response = auth_client.get("/api/journal", params=params)
        assert response.status_code == 200
        return sorted(e["title"] for e in response.json()["data"]["entries"])

    assert titles(search="BEACH") == ["Beach day"]
    assert titles(search="sand") == ["Beach day"]
    assert titles(search="100%") == ["Deadline"]
    assert titles(mood="stressed") == ["Deadline"]
    assert titles(date="2025-03-14") == [dated["title"]]
    assert titles(search="nothing matches") == []


def test_get_update_delete(auth_client, make_entry):
    entry = make_entry(title="Draft title", mood="sad")

    response = auth_client.get(f"/api/journal/{entry['id']}")
    assert response.status_code == 200
    assert response.json()["title"] == "Draft title"

    response = auth_client.put(f"/api/journal/{entry['id']}", json={
        "title": "Better title", "content": "<p>Feeling better</p>", "mood": "hopeful",
    })
    assert response.status_code == 200
    updated = response.json()
    assert updated["title"] == "Better title"
    assert updated["mood"] == "hopeful"
    assert updated["mood_score"] == 7
    assert updated["mood_query"] == updated["mood_data"]["pixabay_query"]

    response = auth_client.delete(f"/api/journal/{entry['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True}

    response = auth_client.get(f"/api/journal/{entry['id']}")
    assert response.status_code == 404
    assert response.json()["detail"] == "Journal entry not found"


def test_missing_entry(auth_client):
    missing = uuid4()
    assert auth_client.get(f"/api/journal/{missing}").status_code == 404
    assert auth_client.delete(f"/api/journal/{missing}").status_code == 404
    response = auth_client.put(f"/api/journal/{missing}", json={"title": "a", "content": "b", "mood": "happy"})
    assert response.status_code == 404


def test_entries_are_private(client, make_entry, register_user):
    entry = make_entry(title="Mine")

    register_user(client, username="someone_else")

    assert client.get(f"/api/journal/{entry['id']}").status_code == 404
    assert client.delete(f"/api/journal/{entry['id']}").status_code == 404
    assert client.get("/api/journal").json()["data"]["entries"] == []


def test_draft_roundtrip_and_cleared_on_create(auth_client, make_entry):
    response = auth_client.get("/api/journal/draft")
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": None}

    response = auth_client.put("/api/journal/draft", json={"title": "Half", "content": "<p>an idea</p>", "mood": "tired"})
    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Half"

    response = auth_client.put("/api/journal/draft", json={"title": "Half done"})
    draft = auth_client.get("/api/journal/draft").json()["data"]
    assert draft["title"] == "Half done"
    assert draft["mood"] is None

    make_entry()
    assert auth_client.get("/api/journal/draft").json()["data"] is None


def test_racing_first_draft_save_rolls_back(db, monkeypatch):
    user = AuthService(db).register_user("lena", "lena@example.com", "lena-password")
    service = JournalService(db, user.id)
    service.save_draft(title="First")

    # Second request did not see the first draft yet
    monkeypatch.setattr(service, "get_draft", lambda: None)
    with pytest.raises(IntegrityError):
        service.save_draft(title="Second")

    drafts = db.query(Draft).filter(Draft.user_id == user.id).all()
    assert [draft.title for draft in drafts] == ["First"]


def test_failed_delete_keeps_entry(db, monkeypatch):
    user = AuthService(db).register_user("milo", "milo@example.com", "milo-password")
    service = JournalService(db, user.id)
    entry = service.create_entry("Keep me", "<p>text</p>", "happy")

    def broken_commit():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "commit", broken_commit)
    with pytest.raises(OperationalError):
        service.delete_entry(entry.id)
    monkeypatch.undo()

    assert service.get_entry(entry.id) is not None
