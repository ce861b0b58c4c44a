"""
Unit tests for the client session context and its file-backed store.
"""

import json

import pytest

from shelf_client import SessionContext, SessionStore, User


@pytest.fixture
def store(tmp_path) -> SessionStore:
    return SessionStore(tmp_path / "session")


@pytest.fixture
def user() -> User:
    return User(id="7", airtable_id="recUser", name="Ada", email="ada@example.com")


class TestSessionContext:
    """Test in-memory session state."""

    def test_anonymous_by_default(self):
        context = SessionContext()

        assert context.user is None
        assert context.is_authenticated is False

    def test_set_user_and_logout(self, user):
        context = SessionContext()

        context.set_user(user)
        assert context.is_authenticated is True

        context.logout()
        assert context.user is None


class TestSessionStore:
    """Test persistence."""

    def test_load_without_file(self, store):
        assert store.load().is_authenticated is False

    def test_save_then_load(self, store, user):
        store.save(SessionContext(user))

        restored = store.load()

        assert restored.user == user

    def test_saved_file_uses_camel_case(self, store, user):
        store.save(SessionContext(user))

        data = json.loads(store.session_file.read_text())
        assert data["airtableId"] == "recUser"
        assert not store.temp_file.exists()

    def test_saving_logged_out_context_removes_file(self, store, user):
        context = SessionContext(user)
        store.save(context)

        context.logout()
        store.save(context)

        assert not store.session_file.exists()
        assert store.load().is_authenticated is False

    @pytest.mark.parametrize("content", ["{not json", '{"name": "no id"}', "[]"])
    def test_corrupt_file_is_discarded(self, store, content):
        store.session_file.write_text(content)

        context = store.load()

        assert context.is_authenticated is False
        assert not store.session_file.exists()
