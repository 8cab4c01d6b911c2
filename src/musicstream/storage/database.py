"""SQLite database storage for musicstream."""

from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    create_engine,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Session, relationship, sessionmaker

from musicstream.media import get_hash, normalize_directory
from musicstream.models.album import Album
from musicstream.models.artist import Artist
from musicstream.models.playlist import Playlist
from musicstream.models.song import Song
from musicstream.models.user import User


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


# Association table for playlists and songs
playlist_song = Table(
    "playlist_song",
    Base.metadata,
    Column("playlist_id", Integer, ForeignKey("playlists.id"), primary_key=True),
    Column("song_id", String, ForeignKey("songs.id"), primary_key=True),
)


class ArtistRecord(Base):
    """SQLAlchemy model for artists."""

    __tablename__ = "artists"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)

    albums = relationship("AlbumRecord", back_populates="artist")

    def to_model(self) -> Artist:
        return Artist(id=self.id, name=self.name)


class AlbumRecord(Base):
    """SQLAlchemy model for albums."""

    __tablename__ = "albums"

    id = Column(Integer, primary_key=True)
    artist_id = Column(Integer, ForeignKey("artists.id"), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    cover = Column(String, nullable=True)
    is_unknown = Column(Boolean, nullable=False, default=False)

    artist = relationship("ArtistRecord", back_populates="albums")
    songs = relationship("SongRecord", back_populates="album")

    def to_model(self) -> Album:
        return Album(
            id=self.id,
            artist_id=self.artist_id,
            name=self.name,
            cover=self.cover,
            is_unknown=self.is_unknown,
        )


class SongRecord(Base):
    """SQLAlchemy model for songs."""

    __tablename__ = "songs"

    id = Column(String(32), primary_key=True)
    album_id = Column(Integer, ForeignKey("albums.id"), nullable=False, index=True)
    path = Column(Text, nullable=False, unique=True)
    title = Column(String, nullable=False, default="")
    length = Column(Float, nullable=False, default=0.0)
    track = Column(Integer, nullable=True)
    lyrics = Column(Text, nullable=False, default="")
    mtime = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    album = relationship("AlbumRecord", back_populates="songs")
    playlists = relationship("PlaylistRecord", secondary=playlist_song, back_populates="songs")

    def to_model(self) -> Song:
        """Convert to Pydantic model.

        The title is already decoded, so it is loaded as stored.
        """
        return Song.model_validate(
            {
                "id": self.id,
                "album_id": self.album_id,
                "path": self.path,
                "title": self.title,
                "length": self.length,
                "track": self.track,
                "lyrics": self.lyrics,
                "mtime": self.mtime,
                "created_at": self.created_at,
                "updated_at": self.updated_at,
            },
            context={"stored": True},
        )

    @classmethod
    def from_model(cls, song: Song) -> "SongRecord":
        """Create from Pydantic model."""
        return cls(
            id=song.id,
            album_id=song.album_id,
            path=song.path,
            title=song.title,
            length=song.length,
            track=song.track,
            lyrics=song.lyrics,
            mtime=song.mtime,
            created_at=song.created_at,
            updated_at=song.updated_at,
        )


class PlaylistRecord(Base):
    """SQLAlchemy model for playlists."""

    __tablename__ = "playlists"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)

    songs = relationship("SongRecord", secondary=playlist_song, back_populates="playlists")

    def to_model(self) -> Playlist:
        return Playlist(
            id=self.id,
            user_id=self.user_id,
            name=self.name,
            song_ids=[s.id for s in self.songs],
        )


class UserRecord(Base):
    """SQLAlchemy model for users."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)
    lastfm_session_key = Column(String, nullable=True)

    def to_model(self) -> User:
        return User(
            id=self.id,
            name=self.name,
            email=self.email,
            lastfm_session_key=self.lastfm_session_key,
        )


class Database:
    """SQLite database interface for musicstream."""

    def __init__(self, db_path: str = "musicstream.db"):
        """Initialize the database.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.engine = create_engine(f"sqlite:///{db_path}")
        self.SessionLocal = sessionmaker(bind=self.engine)

    def init_db(self):
        """Create all tables and the placeholder artist and album."""
        Base.metadata.create_all(self.engine)
        with self.get_session() as session:
            if not session.get(ArtistRecord, Artist.UNKNOWN_ID):
                session.add(ArtistRecord(id=Artist.UNKNOWN_ID, name=Artist.UNKNOWN_NAME))
                session.flush()
            if not session.get(AlbumRecord, Album.UNKNOWN_ID):
                session.add(
                    AlbumRecord(
                        id=Album.UNKNOWN_ID,
                        artist_id=Artist.UNKNOWN_ID,
                        name=Album.UNKNOWN_NAME,
                        is_unknown=True,
                    )
                )
            session.commit()

    def get_session(self) -> Session:
        """Get a database session."""
        return self.SessionLocal()

    # Artist operations
    def get_artist(self, artist_id: int) -> Optional[Artist]:
        """Get an artist by ID."""
        with self.get_session() as session:
            record = session.get(ArtistRecord, artist_id)
            return record.to_model() if record else None

    def get_or_create_artist(self, name: str) -> Artist:
        """Get an artist by name, creating it if needed.

        An empty name resolves to the unknown artist.
        """
        name = name.strip()
        if not name:
            name = Artist.UNKNOWN_NAME
        with self.get_session() as session:
            record = session.query(ArtistRecord).filter(ArtistRecord.name == name).first()
            if not record:
                record = ArtistRecord(name=name)
                session.add(record)
                session.commit()
            return record.to_model()

    # Album operations
    def get_album(self, album_id: int) -> Optional[Album]:
        """Get an album by ID."""
        with self.get_session() as session:
            record = session.get(AlbumRecord, album_id)
            return record.to_model() if record else None

    def get_or_create_album(self, artist: Artist, name: str) -> Album:
        """Get an album of an artist by name, creating it if needed.

        An empty name resolves to the artist's own unknown album, so songs
        without an album tag keep their artist.
        """
        name = name.strip()
        unknown = not name
        with self.get_session() as session:
            query = session.query(AlbumRecord).filter(
                AlbumRecord.artist_id == artist.id,
                AlbumRecord.is_unknown == unknown,
            )
            if not unknown:
                query = query.filter(AlbumRecord.name == name)
            record = query.first()
            if not record:
                record = AlbumRecord(
                    artist_id=artist.id,
                    name=Album.UNKNOWN_NAME if unknown else name,
                    is_unknown=unknown,
                )
                session.add(record)
                session.commit()
            return record.to_model()

    # Song operations
    def save_song(self, song: Song) -> None:
        """Save or update a song.

        Songs are keyed by the hash of their path, so saving a rescanned
        file updates the existing row.
        """
        with self.get_session() as session:
            existing = session.get(SongRecord, song.id)
            if existing:
                existing.album_id = song.album_id
                existing.path = song.path
                existing.title = song.title
                existing.length = song.length
                existing.track = song.track
                existing.lyrics = song.lyrics
                existing.mtime = song.mtime
                existing.updated_at = datetime.utcnow()
            else:
                session.add(SongRecord.from_model(song))
            session.commit()

    def get_song(self, song_id: str) -> Optional[Song]:
        """Get a song by ID."""
        with self.get_session() as session:
            record = session.get(SongRecord, song_id)
            return record.to_model() if record else None

    def get_song_by_path(self, path: str, key: str = "") -> Optional[Song]:
        """Get a song by the path of its file.

        Args:
            path: Absolute path of the file
            key: Application key the song IDs were hashed with

        Returns:
            The song, or None if the path is not in the library
        """
        return self.get_song(get_hash(path, key))

    def get_songs_in_directory(self, directory: str) -> list[Song]:
        """Get all songs whose file lives under a directory (recursively)."""
        prefix = normalize_directory(directory)
        with self.get_session() as session:
            query = (
                session.query(SongRecord)
                .filter(SongRecord.path.startswith(prefix, autoescape=True))
                .order_by(SongRecord.path)
            )
            return [r.to_model() for r in query.all()]

    def get_lyrics(self, song_id: str) -> Optional[str]:
        """Get the raw lyrics of a song, or None if there is no such song."""
        with self.get_session() as session:
            row = session.query(SongRecord.lyrics).filter(SongRecord.id == song_id).first()
            return row[0] if row else None

    def delete_song(self, song_id: str) -> bool:
        """Delete a song. Returns whether anything was deleted."""
        with self.get_session() as session:
            record = session.get(SongRecord, song_id)
            if not record:
                return False
            session.delete(record)
            session.commit()
            return True

    def delete_songs_by_paths(self, paths: Iterable[str], key: str = "") -> int:
        """Delete the songs backed by the given files. Returns the count deleted."""
        ids = [get_hash(p, key) for p in paths]
        if not ids:
            return 0
        with self.get_session() as session:
            records = session.query(SongRecord).filter(SongRecord.id.in_(ids)).all()
            for record in records:
                session.delete(record)
            session.commit()
            return len(records)

    # Playlist operations
    def save_playlist(self, playlist: Playlist) -> Playlist:
        """Create or rename a playlist and set its songs."""
        with self.get_session() as session:
            record = session.get(PlaylistRecord, playlist.id) if playlist.id else None
            if not record:
                record = PlaylistRecord(user_id=playlist.user_id)
                session.add(record)
            record.name = playlist.name
            record.songs = (
                session.query(SongRecord).filter(SongRecord.id.in_(playlist.song_ids)).all()
                if playlist.song_ids
                else []
            )
            session.commit()
            return record.to_model()

    def get_playlist(self, playlist_id: int) -> Optional[Playlist]:
        """Get a playlist by ID."""
        with self.get_session() as session:
            record = session.get(PlaylistRecord, playlist_id)
            return record.to_model() if record else None

    def add_songs_to_playlist(self, playlist_id: int, song_ids: list[str]) -> Optional[Playlist]:
        """Add songs to a playlist, skipping ones already on it."""
        with self.get_session() as session:
            record = session.get(PlaylistRecord, playlist_id)
            if not record:
                return None
            existing = {s.id for s in record.songs}
            new_ids = [i for i in song_ids if i not in existing]
            if new_ids:
                record.songs.extend(
                    session.query(SongRecord).filter(SongRecord.id.in_(new_ids)).all()
                )
            session.commit()
            return record.to_model()

    def get_playlists_for_song(self, song_id: str) -> list[Playlist]:
        """Get the playlists a song is on."""
        with self.get_session() as session:
            record = session.get(SongRecord, song_id)
            if not record:
                return []
            return [p.to_model() for p in record.playlists]

    # User operations
    def save_user(self, user: User) -> User:
        """Save or update a user."""
        with self.get_session() as session:
            record = session.get(UserRecord, user.id) if user.id else None
            if not record:
                record = UserRecord()
                session.add(record)
            record.name = user.name
            record.email = user.email
            record.lastfm_session_key = user.lastfm_session_key
            session.commit()
            return record.to_model()

    def get_user(self, user_id: int) -> Optional[User]:
        """Get a user by ID."""
        with self.get_session() as session:
            record = session.get(UserRecord, user_id)
            return record.to_model() if record else None

    def set_lastfm_session_key(self, user_id: int, session_key: Optional[str]) -> Optional[User]:
        """Link (or with None, unlink) a user's Last.fm account."""
        with self.get_session() as session:
            record = session.get(UserRecord, user_id)
            if not record:
                return None
            record.lastfm_session_key = session_key
            session.commit()
            return record.to_model()

    def get_stats(self) -> dict:
        """Get database statistics."""
        with self.get_session() as session:
            return {
                "total_songs": session.query(SongRecord).count(),
                "total_albums": session.query(AlbumRecord).count(),
                "total_artists": session.query(ArtistRecord).count(),
                "total_playlists": session.query(PlaylistRecord).count(),
                "total_users": session.query(UserRecord).count(),
                "total_length": session.query(func.coalesce(func.sum(SongRecord.length), 0.0)).scalar(),
            }
