"""Build a LibraryService from settings."""

from typing import Optional

from musicstream.config import Settings
from musicstream.lastfm.client import LastfmClient
from musicstream.services.library import LibraryService
from musicstream.storage.database import Database


def get_service(settings: Optional[Settings] = None, db_path: Optional[str] = None) -> LibraryService:
    """Create a LibraryService, creating the database tables if needed."""
    settings = settings or Settings.from_env()
    db = Database(db_path=db_path or settings.db_path)
    db.init_db()
    client = LastfmClient(
        api_key=settings.lastfm_api_key,
        api_secret=settings.lastfm_api_secret,
    )
    return LibraryService(db=db, lastfm_client=client, app_key=settings.app_key)
