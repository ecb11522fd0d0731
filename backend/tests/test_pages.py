"""
Tests for the server-rendered pages
"""
from uuid import uuid4

import pytest

from reflect.api.routes.auth_pages import safe_next
from reflect.api.routes.pages import collection_heading


def test_layout_metadata(client, db):
    response = client.get("/")
    assert response.status_code == 200
    assert "<title>Reflect</title>" in response.text
    assert 'content="Journaling App"' in response.text


def test_index_redirects_signed_in_user(auth_client):
    response = auth_client.get("/", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"


@pytest.mark.parametrize("path,location", [
    ("/dashboard", "/auth/login?next=/dashboard"),
    ("/journal/write", "/auth/login?next=/journal/write"),
    ("/collection/unorganized", "/auth/login?next=/collection/unorganized"),
])
def test_pages_require_login(client, db, path, location):
    response = client.get(path, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == location


def test_login_redirect_keeps_query(client, db):
    response = client.get("/journal/write?edit=abc", follow_redirects=False)
    assert response.headers["location"] == "/auth/login?next=/journal/write%3Fedit%3Dabc"


def test_auth_pages(client, db):
    response = client.get("/auth/login?next=/collection/unorganized")
    assert response.status_code == 200
    assert '"/collection/unorganized"' in response.text

    assert client.get("/auth/register").status_code == 200


def test_auth_page_redirects_signed_in_user(auth_client):
    response = auth_client.get("/auth/login?next=/journal/write", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/journal/write"


@pytest.mark.parametrize("value,expected", [
    (None, "/dashboard"),
    ("", "/dashboard"),
    ("/collection/abc", "/collection/abc"),
    ("//evil.example.com", "/dashboard"),
    ("https://evil.example.com", "/dashboard"),
    ("/\\evil.example.com", "/dashboard"),
])
def test_safe_next(value, expected):
    assert safe_next(value) == expected


def test_collection_heading():
    class Named:
        name = "Travel"

    assert collection_heading("unorganized", None) == "Unorganized Entries"
    assert collection_heading(str(uuid4()), Named()) == "Travel"
    assert collection_heading(str(uuid4()), None) == "Collection"


def test_unorganized_collection_page(auth_client, make_entry):
    make_entry(title="Loose page")
    response = auth_client.get("/collection/unorganized")
    assert response.status_code == 200
    assert "Unorganized Entries" in response.text
    assert "Loose page" in response.text
    assert "Delete Collection" not in response.text


def test_collection_page(auth_client, make_collection, make_entry):
    collection = make_collection("Travel", description="Trips and places")
    make_entry(title="Lisbon", collection_id=collection["id"])
    make_entry(title="Porto", collection_id=collection["id"])
    make_entry(title="Elsewhere")

    response = auth_client.get(f"/collection/{collection['id']}")
    assert response.status_code == 200
    assert "Travel" in response.text
    assert "Trips and places" in response.text
    assert "Lisbon" in response.text
    assert "Elsewhere" not in response.text
    assert "2 journal entries" in response.text


def test_unknown_collection_page(auth_client):
    response = auth_client.get(f"/collection/{uuid4()}")
    assert response.status_code == 200
    assert ">Collection</h1>" in response.text

    response = auth_client.get("/collection/not-a-uuid")
    assert ">Collection</h1>" in response.text


def test_write_page(auth_client):
    response = auth_client.get("/journal/write")
    assert response.status_code == 200
    text = response.text
    assert "What&#39;s on your mind?" in text or "What's on your mind?" in text
    assert "Write your thoughts..." in text
    assert "+ Create New Collection" in text
    assert "Failed to create journal entry. Please try again." in text
    for label in ("Happy", "Overwhelmed", "Grateful"):
        assert label in text


def test_write_page_edit_mode(auth_client, make_entry):
    entry = make_entry(title="Needs a fix")
    response = auth_client.get(f"/journal/write?edit={entry['id']}")
    assert response.status_code == 200
    assert 'value="Needs a fix"' in response.text
    assert "Update" in response.text


def test_entry_page(auth_client, make_collection, make_entry):
    collection = make_collection("Notes")
    entry = make_entry(title="Readable", content="<p>Hello</p>", mood="content", collection_id=collection["id"])

    response = auth_client.get(f"/journal/{entry['id']}")
    assert response.status_code == 200
    assert "Readable" in response.text
    assert f'href="/collection/{collection["id"]}"' in response.text


def test_missing_entry_page(auth_client):
    response = auth_client.get(f"/journal/{uuid4()}")
    assert response.status_code == 404
    assert "Journal entry not found" in response.text


def test_dashboard(auth_client, make_collection, make_entry):
    collection = make_collection("Family")
    make_entry(collection_id=collection["id"])
    make_entry()

    response = auth_client.get("/dashboard")
    assert response.status_code == 200
    assert "Family" in response.text
    assert "Unorganized" in response.text
    assert "Mood Analytics" in response.text


def test_collection_page_search_text_is_full_content(auth_client, make_entry):
    make_entry(title="Long one", content="<p>" + "a" * 200 + " Paris</p>")
    response = auth_client.get("/collection/unorganized")
    assert response.status_code == 200
    assert 'data-text="' + "a" * 200 + ' paris"' in response.text
