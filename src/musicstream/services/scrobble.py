"""Scrobbling played songs to Last.fm."""

import logging
from typing import Any, Union

from musicstream.lastfm.client import LastfmClient
from musicstream.models.album import Album
from musicstream.models.artist import Artist
from musicstream.models.song import Song
from musicstream.models.user import User

log = logging.getLogger(__name__)


class ScrobbleService:
    """Decides whether a play gets scrobbled and sends it."""

    def __init__(self, client: LastfmClient):
        self.client = client

    def scrobble(
        self,
        song: Song,
        album: Album,
        artist: Artist,
        user: User,
        timestamp: int,
    ) -> Union[bool, Any]:
        """Scrobble a song for a user.

        Args:
            song: The song that was played
            album: The song's album
            artist: The album's artist
            user: The user who played it
            timestamp: UNIX timestamp the song started playing at

        Returns:
            False if the play was skipped, otherwise the Last.fm response.
            Errors from the client are not caught.
        """
        # Placeholder artists mean "no metadata", nothing to report.
        if artist.is_unknown:
            log.debug("Not scrobbling %s: unknown artist", song.id)
            return False

        session_key = user.lastfm_session_key
        if not session_key:
            log.debug("Not scrobbling %s: user %s has no Last.fm session", song.id, user.id)
            return False

        return self.client.scrobble(
            artist.name,
            song.display_title,
            timestamp,
            "" if album.is_unknown else album.name,
            session_key,
        )
