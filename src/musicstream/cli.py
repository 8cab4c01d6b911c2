"""Command-line interface for the musicstream library."""

import time
from typing import Optional

import click
import requests
from rich.console import Console
from rich.table import Table

from musicstream.config import Settings, setup_logging
from musicstream.factory import get_service
from musicstream.lastfm.client import LastfmError
from musicstream.models.user import User
from musicstream.services.library import LibraryService, NotFoundError

console = Console()


def _service(db: Optional[str]) -> LibraryService:
    return get_service(Settings.from_env(), db_path=db)


def _song_ids(service: LibraryService, paths: tuple[str, ...]) -> list[str]:
    song_ids = []
    for path in paths:
        song = service.get_song_by_path(path)
        if not song:
            raise click.ClickException(f"No song found for {path}")
        song_ids.append(song.id)
    return song_ids


def _format_length(seconds: float) -> str:
    minutes, secs = divmod(int(round(seconds)), 60)
    return f"{minutes}:{secs:02d}"


@click.group()
@click.version_option()
@click.option("--log-level", default=None, help="Logging level (default: $MUSICSTREAM_LOG_LEVEL)")
def main(log_level: Optional[str]):
    """musicstream - manage and scrobble your music library."""
    setup_logging(log_level or Settings.from_env().log_level)


@main.command()
@click.argument("path")
@click.option("--title", "-t", default="", help="Song title")
@click.option("--length", default=0.0, type=float, help="Duration in seconds")
@click.option("--artist", "-a", default="", help="Artist name")
@click.option("--album", "-A", default="", help="Album name")
@click.option("--track", type=int, default=None, help="Track number")
@click.option("--db", default=None, help="Database path")
def add(path: str, title: str, length: float, artist: str, album: str, track: Optional[int], db: Optional[str]):
    """Add a song file to the library (or update it)."""
    service = _service(db)
    song = service.add_song(
        path=path,
        title=title,
        length=length,
        artist_name=artist,
        album_name=album,
        track=track,
    )
    console.print(f"[green]Saved {song.display_title} ({song.id})[/green]")


@main.command()
@click.argument("path")
@click.option("--db", default=None, help="Database path")
def show(path: str, db: Optional[str]):
    """Show the song stored for a file path."""
    service = _service(db)
    song = service.get_song_by_path(path)

    if not song:
        raise click.ClickException(f"No song found for {path}")

    table = Table(title="Song")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("ID", song.id)
    table.add_row("Title", song.display_title)
    table.add_row("Length", _format_length(song.length))
    table.add_row("Track", str(song.track) if song.track else "-")
    table.add_row("Path", song.path)

    console.print(table)


@main.command("ls")
@click.argument("directory")
@click.option("--db", default=None, help="Database path")
def list_directory(directory: str, db: Optional[str]):
    """List songs inside a directory."""
    service = _service(db)
    songs = service.songs_in_directory(directory)

    if not songs:
        console.print(f"[yellow]No songs found in {directory}[/yellow]")
        return

    table = Table(title=f"Songs in {directory}")
    table.add_column("#", style="dim")
    table.add_column("Title", style="green")
    table.add_column("Length", style="yellow")
    table.add_column("Path", style="dim")

    for i, song in enumerate(songs, 1):
        table.add_row(str(i), song.display_title, _format_length(song.length), song.path)

    console.print(table)


@main.command()
@click.argument("song_id")
@click.option("--db", default=None, help="Database path")
def lyrics(song_id: str, db: Optional[str]):
    """Print the lyrics of a song."""
    service = _service(db)
    try:
        text = service.get_lyrics(song_id)
    except NotFoundError as e:
        raise click.ClickException(str(e)) from e

    if not text:
        console.print("[yellow]No lyrics[/yellow]")
        return
    console.print(text, markup=False)


@main.command("rm")
@click.argument("path")
@click.option("--db", default=None, help="Database path")
def remove(path: str, db: Optional[str]):
    """Remove the song for a deleted file."""
    service = _service(db)
    if not service.remove_song_by_path(path):
        raise click.ClickException(f"No song found for {path}")
    console.print(f"[green]Removed {path}[/green]")


@main.command("add-user")
@click.argument("name")
@click.argument("email")
@click.option("--db", default=None, help="Database path")
def add_user(name: str, email: str, db: Optional[str]):
    """Create a user."""
    service = _service(db)
    user = service.db.save_user(User(name=name, email=email))
    console.print(f"[green]Created user {user.name} (id {user.id})[/green]")


@main.command("link-lastfm")
@click.argument("user_id", type=int)
@click.argument("session_key", required=False)
@click.option("--unlink", is_flag=True, help="Remove the linked session instead")
@click.option("--db", default=None, help="Database path")
def link_lastfm(user_id: int, session_key: Optional[str], unlink: bool, db: Optional[str]):
    """Link a user to Last.fm with a session key."""
    service = _service(db)
    try:
        if unlink:
            service.unlink_lastfm(user_id)
            console.print(f"[green]Unlinked Last.fm for user {user_id}[/green]")
            return
        if not session_key:
            raise click.UsageError("SESSION_KEY is required unless --unlink is given")
        service.link_lastfm(user_id, session_key)
    except NotFoundError as e:
        raise click.ClickException(str(e)) from e
    console.print(f"[green]Linked Last.fm for user {user_id}[/green]")


@main.command()
@click.argument("path")
@click.option("--user", "-u", "user_id", required=True, type=int, help="User who played the song")
@click.option("--timestamp", type=int, default=None, help="UNIX time playback started (default: now)")
@click.option("--db", default=None, help="Database path")
def scrobble(path: str, user_id: int, timestamp: Optional[int], db: Optional[str]):
    """Scrobble the song at PATH to Last.fm."""
    service = _service(db)
    song = service.get_song_by_path(path)
    if not song:
        raise click.ClickException(f"No song found for {path}")

    try:
        result = service.scrobble(song.id, user_id, timestamp or int(time.time()))
    except NotFoundError as e:
        raise click.ClickException(str(e)) from e
    except (LastfmError, requests.RequestException) as e:
        raise click.ClickException(f"Scrobble failed: {e}") from e

    if result is False:
        console.print("[yellow]Skipped (unknown artist or Last.fm not linked)[/yellow]")
    else:
        console.print(f"[green]Scrobbled {song.display_title}[/green]")


@main.command("create-playlist")
@click.argument("user_id", type=int)
@click.argument("name")
@click.argument("paths", nargs=-1)
@click.option("--db", default=None, help="Database path")
def create_playlist(user_id: int, name: str, paths: tuple[str, ...], db: Optional[str]):
    """Create a playlist for a user, optionally with the songs at PATHS."""
    service = _service(db)
    song_ids = _song_ids(service, paths)
    try:
        playlist = service.create_playlist(user_id, name, song_ids)
    except NotFoundError as e:
        raise click.ClickException(str(e)) from e
    console.print(
        f"[green]Created playlist {playlist.name} (id {playlist.id}) with {len(playlist.song_ids)} songs[/green]"
    )


@main.command("add-to-playlist")
@click.argument("playlist_id", type=int)
@click.argument("paths", nargs=-1, required=True)
@click.option("--db", default=None, help="Database path")
def add_to_playlist(playlist_id: int, paths: tuple[str, ...], db: Optional[str]):
    """Add the songs at PATHS to a playlist."""
    service = _service(db)
    try:
        playlist = service.add_to_playlist(playlist_id, _song_ids(service, paths))
    except NotFoundError as e:
        raise click.ClickException(str(e)) from e
    console.print(f"[green]{playlist.name} now has {len(playlist.song_ids)} songs[/green]")


@main.command()
@click.argument("path")
@click.option("--db", default=None, help="Database path")
def playlists(path: str, db: Optional[str]):
    """List the playlists the song at PATH is on."""
    service = _service(db)
    song = service.get_song_by_path(path)
    if not song:
        raise click.ClickException(f"No song found for {path}")

    found = service.playlists_for_song(song.id)
    if not found:
        console.print("[yellow]Not on any playlist[/yellow]")
        return

    table = Table(title=f"Playlists with {song.display_title}")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="green")
    table.add_column("Songs", style="yellow")

    for playlist in found:
        table.add_row(str(playlist.id), playlist.name, str(len(playlist.song_ids)))

    console.print(table)


@main.command()
@click.option("--db", default=None, help="Database path")
def stats(db: Optional[str]):
    """Show library statistics."""
    service = _service(db)
    db_stats = service.db.get_stats()

    table = Table(title="Library Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Songs", str(db_stats["total_songs"]))
    table.add_row("Albums", str(db_stats["total_albums"]))
    table.add_row("Artists", str(db_stats["total_artists"]))
    table.add_row("Playlists", str(db_stats["total_playlists"]))
    table.add_row("Users", str(db_stats["total_users"]))
    table.add_row("Total length", _format_length(db_stats["total_length"]))

    console.print(table)


if __name__ == "__main__":
    main()
