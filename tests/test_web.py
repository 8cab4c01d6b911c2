from musicstream import __version__
from musicstream.lastfm.client import LastfmError


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__, "has_lastfm_key": True}


def test_get_song_hides_private_fields(client, library):
    song = library.add_song("/music/Abba/Waterloo.mp3", length=165, lyrics="secret words")

    response = client.get(f"/api/songs/{song.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Waterloo"
    assert data["length"] == 165.0
    for hidden in ("lyrics", "path", "mtime", "created_at", "updated_at"):
        assert hidden not in data


def test_get_missing_song(client):
    assert client.get("/api/songs/nope").status_code == 404


def test_songs_in_directory(client, library):
    library.add_song("/music/Abba/a.mp3")
    library.add_song("/music/Abba2/b.mp3")

    response = client.get("/api/songs", params={"directory": "/music/Abba"})

    assert response.status_code == 200
    assert [s["title"] for s in response.json()] == ["a"]


def test_lyrics(client, library):
    song = library.add_song("/music/a.mp3", lyrics="one\ntwo")

    response = client.get(f"/api/songs/{song.id}/lyrics")

    assert response.status_code == 200
    assert response.json() == {"song_id": song.id, "lyrics": "one<br />\ntwo"}
    assert client.get("/api/songs/nope/lyrics").status_code == 404


def test_scrobble_requires_user(client, library):
    song = library.add_song("/music/a.mp3", artist_name="ABBA")
    assert client.post(f"/api/songs/{song.id}/scrobble/1700000000").status_code == 401


def test_scrobble(client, library, lastfm_client, linked_user):
    song = library.add_song("/music/a.mp3", title="Waterloo", artist_name="ABBA")

    response = client.post(
        f"/api/songs/{song.id}/scrobble/1700000000",
        headers={"X-User-Id": str(linked_user.id)},
    )

    assert response.status_code == 200
    assert response.json() == {"scrobbled": True, "result": lastfm_client.scrobble.return_value}
    lastfm_client.scrobble.assert_called_once_with("ABBA", "Waterloo", 1700000000, "", "sk-alice")


def test_scrobble_skipped(client, library, lastfm_client, linked_user):
    song = library.add_song("/music/a.mp3")

    response = client.post(
        f"/api/songs/{song.id}/scrobble/1700000000",
        headers={"X-User-Id": str(linked_user.id)},
    )

    assert response.json() == {"scrobbled": False, "result": None}
    lastfm_client.scrobble.assert_not_called()


def test_scrobble_errors(client, library, lastfm_client, linked_user):
    song = library.add_song("/music/a.mp3", artist_name="ABBA")
    headers = {"X-User-Id": str(linked_user.id)}

    assert client.post("/api/songs/nope/scrobble/1", headers=headers).status_code == 404
    assert client.post(f"/api/songs/{song.id}/scrobble/1", headers={"X-User-Id": "999"}).status_code == 404

    lastfm_client.scrobble.side_effect = LastfmError(9, "Invalid session key")
    response = client.post(f"/api/songs/{song.id}/scrobble/1", headers=headers)
    assert response.status_code == 502
    assert "Invalid session key" in response.json()["detail"]


def test_stats(client, library):
    library.add_song("/music/a.mp3", length=60, artist_name="ABBA", album_name="Arrival")

    data = client.get("/api/stats").json()

    assert data["total_songs"] == 1
    assert data["total_albums"] == 2
    assert data["total_artists"] == 2
    assert data["total_length"] == 60.0


def test_song_playlists(client, library, linked_user):
    song = library.add_song("/music/a.mp3")
    playlist = library.create_playlist(linked_user.id, "Mix", [song.id])

    response = client.get(f"/api/songs/{song.id}/playlists")

    assert response.status_code == 200
    assert response.json() == [
        {"id": playlist.id, "user_id": linked_user.id, "name": "Mix", "song_ids": [song.id]}
    ]
    assert client.get("/api/songs/nope/playlists").status_code == 404


def test_get_song_keeps_stored_title(client, library):
    song = library.add_song("/music/a.mp3", title="&amp;lt;3")
    assert client.get(f"/api/songs/{song.id}").json()["title"] == "&lt;3"
