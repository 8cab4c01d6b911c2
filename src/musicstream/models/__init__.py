"""Data models for musicstream."""

from musicstream.models.album import Album
from musicstream.models.artist import Artist
from musicstream.models.playlist import Playlist
from musicstream.models.song import Song
from musicstream.models.user import User

__all__ = ["Album", "Artist", "Playlist", "Song", "User"]
