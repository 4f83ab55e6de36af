"""
Tests for typed and raw session routes.
"""

import pytest
from fastapi.testclient import TestClient

from service_starter.app.sessions.store import InMemorySessionStore, SessionCookie


DUNE = {"name": "Dune", "author": "Frank Herbert", "rating": 5}
EMMA = {"name": "Emma", "author": "Jane Austen", "rating": 4}


class TestSessionStore:
    """Test cases for the session store and cookie signer."""

    def test_save_load_delete(self):
        store = InMemorySessionStore()
        store.save("abc", {"books": [DUNE]})

        assert store.load("abc") == {"books": [DUNE]}
        assert len(store) == 1

        store.delete("abc")
        assert store.load("abc") is None
        store.delete("abc")

    def test_cookie_round_trip(self):
        cookie = SessionCookie("MySession", "secret")
        session_id = cookie.new_session_id()

        assert cookie.unsign(cookie.sign(session_id)) == session_id

    @pytest.mark.parametrize("value", [None, "", "plain-id", "plain-id.forged"])
    def test_cookie_rejects_unsigned_values(self, value):
        assert SessionCookie("MySession", "secret").unsign(value) is None

    def test_cookie_secret_matters(self):
        signed = SessionCookie("MySession", "secret").sign("abc")
        assert SessionCookie("MySession", "other").unsign(signed) is None


class TestTypedSessionRoutes:
    """Test cases for /session."""

    def test_new_session_is_empty(self, client):
        response = client.get("/session")

        assert response.status_code == 200
        assert response.json() == []

    def test_books_persist_across_requests(self, client, service):
        assert client.post("/session", json=DUNE).status_code == 201
        assert client.post("/session", json=EMMA).status_code == 201

        assert "MySession" in client.cookies
        assert client.get("/session").json() == [DUNE, EMMA]
        assert len(service.session_store) == 1

    def test_sessions_are_isolated_per_cookie(self, client, service):
        client.post("/session", json=DUNE)
        other = TestClient(service.app)

        assert other.get("/session").json() == []

    def test_destroy(self, client, service):
        client.post("/session", json=DUNE)

        response = client.delete("/session")

        assert response.status_code == 204
        assert len(service.session_store) == 0
        assert client.get("/session").json() == []

    def test_tampered_cookie_starts_new_session(self, client):
        client.post("/session", json=DUNE)
        client.cookies.clear()
        client.cookies.set("MySession", "forged.value")

        assert client.get("/session").json() == []

    def test_invalid_book_rejected(self, client):
        response = client.post("/session", json={"name": "Dune"})
        assert response.status_code == 422


class TestRawSessionRoutes:
    """Test cases for /rawsession."""

    def test_append_and_read(self, client):
        assert client.get("/rawsession").json() == []

        response = client.post("/rawsession", json=DUNE)
        assert response.status_code == 201
        assert response.json() == DUNE
        assert "Raw-cookie" in client.cookies

        client.post("/rawsession", json=EMMA)
        assert client.get("/rawsession").json() == [DUNE, EMMA]

    def test_clear(self, client):
        client.post("/rawsession", json=DUNE)

        response = client.delete("/rawsession")

        assert response.status_code == 204
        assert client.get("/rawsession").json() == []

    def test_raw_and_typed_sessions_are_independent(self, client):
        client.post("/rawsession", json=DUNE)

        assert client.get("/session").json() == []
