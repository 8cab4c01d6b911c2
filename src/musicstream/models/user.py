"""User model."""

from typing import Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    """An account that plays and scrobbles songs."""

    id: Optional[int] = Field(default=None)
    name: str
    email: str
    lastfm_session_key: Optional[str] = Field(
        default=None,
        exclude=True,
        description="Last.fm session key, set once the account is linked",
    )

    class Config:
        from_attributes = True

    @property
    def connected_to_lastfm(self) -> bool:
        return bool(self.lastfm_session_key)
