"""API routes for the musicstream web service."""

import logging
from functools import lru_cache
from typing import Optional

import requests
from fastapi import APIRouter, Depends, Header, HTTPException

from musicstream import __version__
from musicstream.config import Settings
from musicstream.factory import get_service
from musicstream.lastfm.client import LastfmError
from musicstream.services.library import LibraryService, NotFoundError
from musicstream.web.schemas import (
    ErrorResponse,
    HealthResponse,
    LyricsResponse,
    PlaylistResponse,
    ScrobbleResponse,
    SongResponse,
    StatsResponse,
)

log = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def get_library() -> LibraryService:
    """Create the LibraryService shared by all requests."""
    return get_service(Settings.from_env())


def get_user_id(x_user_id: Optional[int] = Header(None)) -> int:
    """Get the acting user from the X-User-Id header."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="X-User-Id header is required")
    return x_user_id


# Health check endpoint
@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["System"],
    summary="Health check",
)
def health_check(library: LibraryService = Depends(get_library)):
    """Check service health and configuration status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        has_lastfm_key=library.scrobbler.client.enabled,
    )


@router.get(
    "/api/songs",
    response_model=list[SongResponse],
    tags=["Songs"],
    summary="List songs in a directory",
    description="Get all songs whose files live under the given directory.",
)
def get_songs_in_directory(directory: str, library: LibraryService = Depends(get_library)):
    """List songs inside a directory."""
    return [SongResponse.from_song(song) for song in library.songs_in_directory(directory)]


@router.get(
    "/api/songs/{song_id}",
    response_model=SongResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Songs"],
    summary="Get a song",
)
def get_song(song_id: str, library: LibraryService = Depends(get_library)):
    """Get a single song."""
    song = library.get_song(song_id)
    if not song:
        raise HTTPException(status_code=404, detail=f"Song {song_id} not found")
    return SongResponse.from_song(song)


@router.get(
    "/api/songs/{song_id}/lyrics",
    response_model=LyricsResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Songs"],
    summary="Get song lyrics",
    description="Lyrics are left out of song responses and fetched here on demand.",
)
def get_lyrics(song_id: str, library: LibraryService = Depends(get_library)):
    """Get the lyrics of a song."""
    try:
        lyrics = library.get_lyrics(song_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return LyricsResponse(song_id=song_id, lyrics=lyrics)


@router.get(
    "/api/songs/{song_id}/playlists",
    response_model=list[PlaylistResponse],
    responses={404: {"model": ErrorResponse}},
    tags=["Songs"],
    summary="List playlists containing a song",
)
def get_song_playlists(song_id: str, library: LibraryService = Depends(get_library)):
    """Get the playlists a song is on."""
    try:
        playlists = library.playlists_for_song(song_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return [PlaylistResponse(**p.model_dump()) for p in playlists]


@router.post(
    "/api/songs/{song_id}/scrobble/{timestamp}",
    response_model=ScrobbleResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    tags=["Songs"],
    summary="Scrobble a song",
    description="Scrobble a song to Last.fm for the acting user.",
)
def scrobble(
    song_id: str,
    timestamp: int,
    user_id: int = Depends(get_user_id),
    library: LibraryService = Depends(get_library),
):
    """Scrobble a song that started playing at ``timestamp``."""
    try:
        result = library.scrobble(song_id, user_id, timestamp)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except (LastfmError, requests.RequestException) as e:
        log.warning("Scrobbling %s for user %s failed: %s", song_id, user_id, e)
        raise HTTPException(status_code=502, detail=str(e)) from e

    if result is False:
        return ScrobbleResponse(scrobbled=False)
    return ScrobbleResponse(scrobbled=True, result=result)


@router.get(
    "/api/stats",
    response_model=StatsResponse,
    tags=["System"],
    summary="Get statistics",
    description="Get library statistics.",
)
def get_stats(library: LibraryService = Depends(get_library)):
    """Show library statistics."""
    return StatsResponse(**library.db.get_stats())
