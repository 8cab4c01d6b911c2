"""Pydantic schemas for web API responses."""

from typing import Any, Optional

from pydantic import BaseModel

from musicstream.models.song import Song


class SongResponse(BaseModel):
    """Public representation of a song.

    Path, lyrics and timestamps are never exposed here.
    """

    id: str
    album_id: int
    title: str
    length: float
    track: Optional[int] = None

    @classmethod
    def from_song(cls, song: Song) -> "SongResponse":
        return cls(
            id=song.id,
            album_id=song.album_id,
            title=song.display_title,
            length=song.length,
            track=song.track,
        )


class LyricsResponse(BaseModel):
    """Lyrics of a song, formatted for HTML display."""

    song_id: str
    lyrics: str


class PlaylistResponse(BaseModel):
    """Response model for a playlist."""

    id: int
    user_id: int
    name: str
    song_ids: list[str]


class ScrobbleResponse(BaseModel):
    """Result of a scrobble request."""

    scrobbled: bool
    result: Optional[Any] = None


class StatsResponse(BaseModel):
    """Response from stats endpoint."""

    total_songs: int
    total_albums: int
    total_artists: int
    total_playlists: int
    total_users: int
    total_length: float


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    has_lastfm_key: bool
