from typing import Generator

import pytest

from musicstream.lastfm.client import LastfmClient
from musicstream.models.user import User
from musicstream.services.library import LibraryService
from musicstream.storage.database import Database


@pytest.fixture(name="db")
def db_fixture(tmp_path) -> Database:
    """A fresh SQLite database per test."""
    db = Database(db_path=str(tmp_path / "test.db"))
    db.init_db()
    return db


@pytest.fixture(name="lastfm_client")
def lastfm_client_fixture(mocker):
    """A Last.fm client that never leaves the process."""
    client = mocker.Mock(spec=LastfmClient)
    client.enabled = True
    client.scrobble.return_value = {"scrobbles": {"@attr": {"accepted": 1, "ignored": 0}}}
    return client


@pytest.fixture(name="library")
def library_fixture(db, lastfm_client) -> LibraryService:
    return LibraryService(db=db, lastfm_client=lastfm_client)


@pytest.fixture(name="linked_user")
def linked_user_fixture(db) -> User:
    return db.save_user(User(name="alice", email="alice@example.com", lastfm_session_key="sk-alice"))


@pytest.fixture(name="client")
def client_fixture(library) -> Generator:
    """FastAPI TestClient wired to the test library."""
    from fastapi.testclient import TestClient

    from musicstream.web import app
    from musicstream.web.routes import get_library

    app.dependency_overrides[get_library] = lambda: library
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
