import hashlib

import pytest
import requests

from musicstream.lastfm.client import LASTFM_API_URL, LastfmClient, LastfmError


@pytest.fixture(name="client")
def client_fixture() -> LastfmClient:
    return LastfmClient(api_key="key", api_secret="secret")


def mock_response(mocker, payload, status_code=200):
    resp = mocker.Mock()
    resp.status_code = status_code
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code}")
    return resp


def test_enabled():
    assert LastfmClient("key", "secret").enabled
    assert not LastfmClient("key", None).enabled
    assert not LastfmClient(None, "secret").enabled


def test_signature_sorts_params_and_skips_format(client):
    params = {"sk": "s", "method": "track.scrobble", "api_key": "key", "format": "json"}
    expected = hashlib.md5(b"api_keykeymethodtrack.scrobbleskssecret").hexdigest()
    assert client.build_signature(params) == expected


def test_scrobble_posts_signed_request(client, mocker):
    post = mocker.patch.object(
        client.session, "post", return_value=mock_response(mocker, {"scrobbles": {}})
    )

    result = client.scrobble("ABBA", "Waterloo", 1700000000, "Waterloo", "sk")

    assert result == {"scrobbles": {}}
    args, kwargs = post.call_args
    assert args == (LASTFM_API_URL,)
    data = kwargs["data"]
    assert data["method"] == "track.scrobble"
    assert data["artist"] == "ABBA"
    assert data["track"] == "Waterloo"
    assert data["album"] == "Waterloo"
    assert data["timestamp"] == 1700000000
    assert data["sk"] == "sk"
    assert data["api_key"] == "key"
    assert data["format"] == "json"
    unsigned = {k: v for k, v in data.items() if k != "api_sig"}
    assert data["api_sig"] == client.build_signature(unsigned)


def test_empty_album_is_left_out(client, mocker):
    post = mocker.patch.object(
        client.session, "post", return_value=mock_response(mocker, {"scrobbles": {}})
    )
    client.scrobble("ABBA", "Waterloo", 1700000000, "", "sk")
    assert "album" not in post.call_args.kwargs["data"]


def test_error_payload_raises(client, mocker):
    mocker.patch.object(
        client.session,
        "post",
        return_value=mock_response(mocker, {"error": 9, "message": "Invalid session key"}, 403),
    )
    with pytest.raises(LastfmError) as excinfo:
        client.scrobble("ABBA", "Waterloo", 1700000000, "", "bad")
    assert excinfo.value.code == 9
    assert excinfo.value.message == "Invalid session key"


def test_transport_errors_propagate(client, mocker):
    mocker.patch.object(client.session, "post", side_effect=requests.Timeout("slow"))
    with pytest.raises(requests.Timeout):
        client.scrobble("ABBA", "Waterloo", 1700000000, "", "sk")
