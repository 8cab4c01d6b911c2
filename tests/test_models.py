from musicstream.models.album import Album
from musicstream.models.artist import Artist
from musicstream.models.song import Song, nl2br


def make_song(**overrides) -> Song:
    fields = {"id": "abc", "album_id": 2, "path": "/music/Abba/01 Waterloo.mp3"}
    fields.update(overrides)
    return Song(**fields)


def test_title_is_entity_decoded_on_write():
    song = make_song(title="Caf&eacute; &amp; Bar")
    assert song.title == "Café & Bar"


def test_title_is_entity_decoded_on_assignment():
    song = make_song(title="Plain")
    song.title = "Rock &#039;n&#039; Roll"
    assert song.title == "Rock 'n' Roll"


def test_title_keeps_incomplete_references():
    assert make_song(title="Rock&not Roll").title == "Rock&not Roll"
    assert make_song(title="Rock &not; Roll").title == "Rock ¬ Roll"
    assert make_song(title="AT&T &bogus;").title == "AT&T &bogus;"


def test_title_is_decoded_only_once():
    assert make_song(title="&amp;lt;3").title == "&lt;3"


def test_stored_title_is_loaded_as_is():
    song = Song.model_validate(
        {"id": "abc", "album_id": 2, "path": "/music/a.mp3", "title": "&lt;3"},
        context={"stored": True},
    )
    assert song.title == "&lt;3"


def test_none_title_is_stored_empty():
    assert make_song(title=None).title == ""


def test_display_title_falls_back_to_file_name():
    song = make_song(title="")
    assert song.display_title == "01 Waterloo"
    assert song.title == ""


def test_display_title_strips_only_last_extension():
    song = make_song(path="/music/Various/track.remix.flac")
    assert song.display_title == "track.remix"


def test_display_title_keeps_stored_title():
    assert make_song(title="Waterloo").display_title == "Waterloo"


def test_lyrics_get_line_breaks_for_display():
    song = make_song(lyrics="My my\nAt Waterloo\r\nNapoleon")
    assert song.display_lyrics == "My my<br />\nAt Waterloo<br />\r\nNapoleon"
    assert song.lyrics == "My my\nAt Waterloo\r\nNapoleon"


def test_nl2br_passes_empty_values_through():
    assert nl2br("") == ""
    assert nl2br(None) is None
    assert make_song(lyrics=None).display_lyrics == ""


def test_length_is_coerced_to_float():
    song = make_song(length="183.5")
    assert song.length == 183.5
    assert isinstance(make_song(length=200).length, float)


def test_hidden_fields_are_left_out_of_dumps():
    song = make_song(title="Waterloo", lyrics="la la", mtime=1700000000)
    data = song.model_dump()
    for hidden in ("lyrics", "path", "mtime", "created_at", "updated_at"):
        assert hidden not in data
    assert data["title"] == "Waterloo"
    assert "/music" not in song.model_dump_json()


def test_unknown_sentinels():
    assert Artist(id=Artist.UNKNOWN_ID, name=Artist.UNKNOWN_NAME).is_unknown
    assert not Artist(id=5, name="Unknown Artist").is_unknown
    assert Album(id=8, artist_id=2, name=Album.UNKNOWN_NAME, is_unknown=True).is_unknown
    assert not Album(id=3, artist_id=2, name="Arrival").is_unknown
    assert not Album(id=4, artist_id=2, name=Album.UNKNOWN_NAME).is_unknown
