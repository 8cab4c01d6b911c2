"""Minimal Last.fm API client for scrobbling."""

import hashlib
import logging
from typing import Any, Optional

import requests

log = logging.getLogger(__name__)

LASTFM_API_URL = "https://ws.audioscrobbler.com/2.0/"

# Parameters Last.fm leaves out when computing api_sig
_UNSIGNED_PARAMS = {"format", "callback"}


class LastfmError(Exception):
    """An error payload returned by the Last.fm API."""

    def __init__(self, code: int, message: str):
        super().__init__(f"Last.fm error {code}: {message}")
        self.code = code
        self.message = message


class LastfmClient:
    """Talks to the Last.fm web service on behalf of linked users."""

    def __init__(
        self,
        api_key: Optional[str],
        api_secret: Optional[str],
        api_url: str = LASTFM_API_URL,
        timeout: float = 30,
    ):
        """Initialize the client.

        Args:
            api_key: Last.fm API key
            api_secret: Shared secret used to sign write requests
            api_url: API root
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.api_secret = api_secret
        self.api_url = api_url
        self.timeout = timeout
        self.session = requests.Session()

    @property
    def enabled(self) -> bool:
        """Whether the API key and secret are both configured."""
        return bool(self.api_key and self.api_secret)

    def build_signature(self, params: dict[str, Any]) -> str:
        """Compute the api_sig for a set of request parameters."""
        payload = "".join(
            f"{name}{params[name]}" for name in sorted(params) if name not in _UNSIGNED_PARAMS
        )
        return hashlib.md5(f"{payload}{self.api_secret}".encode("utf-8")).hexdigest()

    def _post(self, params: dict[str, Any]) -> dict[str, Any]:
        params = {**params, "api_key": self.api_key}
        params["api_sig"] = self.build_signature(params)
        params["format"] = "json"

        resp = self.session.post(self.api_url, data=params, timeout=self.timeout)
        # Last.fm reports API errors with a 4xx status *and* a JSON body, so
        # look at the body before the status.
        try:
            data = resp.json()
        except ValueError:
            resp.raise_for_status()
            raise

        if isinstance(data, dict) and "error" in data:
            raise LastfmError(int(data["error"]), data.get("message", ""))

        resp.raise_for_status()
        return data

    def scrobble(
        self,
        artist: str,
        track: str,
        timestamp: int,
        album: str,
        session_key: str,
    ) -> dict[str, Any]:
        """Scrobble a track.

        Args:
            artist: Artist name
            track: Track title
            timestamp: UNIX timestamp the track started playing at
            album: Album name; left out of the request when empty
            session_key: Session key of the user to scrobble for

        Returns:
            Decoded Last.fm response

        Raises:
            LastfmError: If Last.fm rejects the scrobble
            requests.RequestException: On transport errors
        """
        params = {
            "method": "track.scrobble",
            "artist": artist,
            "track": track,
            "timestamp": int(timestamp),
            "sk": session_key,
        }
        if album:
            params["album"] = album

        log.info("Scrobbling %s - %s at %d", artist, track, int(timestamp))
        return self._post(params)
