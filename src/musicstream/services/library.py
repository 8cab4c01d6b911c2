"""Library service tying storage and Last.fm together."""

import logging
from typing import Any, Optional, Union

from musicstream.lastfm.client import LastfmClient
from musicstream.media import get_hash
from musicstream.models.playlist import Playlist
from musicstream.models.song import Song, nl2br
from musicstream.models.user import User
from musicstream.services.scrobble import ScrobbleService
from musicstream.storage.database import Database

log = logging.getLogger(__name__)


class NotFoundError(LookupError):
    """A requested record does not exist."""


class LibraryService:
    """Operations on the song library used by the CLI and web API."""

    def __init__(
        self,
        db: Database,
        lastfm_client: LastfmClient,
        app_key: str = "",
    ):
        """Initialize the library service.

        Args:
            db: Initialized database
            lastfm_client: Client used for scrobbling
            app_key: Application key song IDs are hashed with
        """
        self.db = db
        self.app_key = app_key
        self.scrobbler = ScrobbleService(lastfm_client)

    def add_song(
        self,
        path: str,
        title: str = "",
        length: float = 0.0,
        artist_name: str = "",
        album_name: str = "",
        track: Optional[int] = None,
        lyrics: str = "",
        mtime: Optional[int] = None,
    ) -> Song:
        """Add a song to the library, or update it if the path is known."""
        artist = self.db.get_or_create_artist(artist_name)
        album = self.db.get_or_create_album(artist, album_name)

        song = Song(
            id=get_hash(path, self.app_key),
            album_id=album.id,
            path=path,
            title=title,
            length=length,
            track=track,
            lyrics=lyrics,
            mtime=mtime,
        )
        self.db.save_song(song)
        log.info("Saved song %s (%s)", song.id, path)
        return song

    def get_song(self, song_id: str) -> Optional[Song]:
        return self.db.get_song(song_id)

    def get_song_by_path(self, path: str) -> Optional[Song]:
        return self.db.get_song_by_path(path, key=self.app_key)

    def songs_in_directory(self, directory: str) -> list[Song]:
        return self.db.get_songs_in_directory(directory)

    def get_lyrics(self, song_id: str) -> str:
        """Get a song's lyrics, formatted for display.

        Raises:
            NotFoundError: If the song does not exist
        """
        lyrics = self.db.get_lyrics(song_id)
        if lyrics is None:
            raise NotFoundError(f"Song {song_id} not found")
        return nl2br(lyrics)

    def remove_song_by_path(self, path: str) -> bool:
        """Remove the song backed by a file that left the library."""
        return self.db.delete_songs_by_paths([path], key=self.app_key) > 0

    def create_playlist(self, user_id: int, name: str, song_ids: Optional[list[str]] = None) -> Playlist:
        """Create a playlist for a user.

        Raises:
            NotFoundError: If the user does not exist
        """
        self._get_user(user_id)
        return self.db.save_playlist(Playlist(user_id=user_id, name=name, song_ids=song_ids or []))

    def add_to_playlist(self, playlist_id: int, song_ids: list[str]) -> Playlist:
        """Add songs to a playlist; unknown song IDs are ignored."""
        playlist = self.db.add_songs_to_playlist(playlist_id, song_ids)
        if not playlist:
            raise NotFoundError(f"Playlist {playlist_id} not found")
        return playlist

    def playlists_for_song(self, song_id: str) -> list[Playlist]:
        if not self.db.get_song(song_id):
            raise NotFoundError(f"Song {song_id} not found")
        return self.db.get_playlists_for_song(song_id)

    def _get_user(self, user_id: int) -> User:
        user = self.db.get_user(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def link_lastfm(self, user_id: int, session_key: str) -> User:
        self._get_user(user_id)
        return self.db.set_lastfm_session_key(user_id, session_key)

    def unlink_lastfm(self, user_id: int) -> User:
        self._get_user(user_id)
        return self.db.set_lastfm_session_key(user_id, None)

    def scrobble(self, song_id: str, user_id: int, timestamp: int) -> Union[bool, Any]:
        """Scrobble a song for a user.

        Args:
            song_id: ID of the played song
            user_id: ID of the user who played it
            timestamp: UNIX timestamp the song started playing at

        Returns:
            False if the play was skipped, otherwise the Last.fm response

        Raises:
            NotFoundError: If the song or user does not exist
        """
        song = self.db.get_song(song_id)
        if not song:
            raise NotFoundError(f"Song {song_id} not found")
        user = self._get_user(user_id)

        album = self.db.get_album(song.album_id)
        if not album:
            raise NotFoundError(f"Album {song.album_id} not found")
        artist = self.db.get_artist(album.artist_id)
        if not artist:
            raise NotFoundError(f"Artist {album.artist_id} not found")

        return self.scrobbler.scrobble(song, album, artist, user, timestamp)
