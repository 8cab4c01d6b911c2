"""Services for musicstream."""

from musicstream.services.library import LibraryService, NotFoundError
from musicstream.services.scrobble import ScrobbleService

__all__ = ["LibraryService", "NotFoundError", "ScrobbleService"]
