"""Last.fm integration."""

from musicstream.lastfm.client import LASTFM_API_URL, LastfmClient, LastfmError

__all__ = ["LASTFM_API_URL", "LastfmClient", "LastfmError"]
