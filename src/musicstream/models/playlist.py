"""Playlist model."""

from typing import Optional

from pydantic import BaseModel, Field


class Playlist(BaseModel):
    """A user-owned, ordered collection of songs."""

    id: Optional[int] = Field(default=None)
    user_id: int = Field(description="Owner")
    name: str
    song_ids: list[str] = Field(default_factory=list)

    class Config:
        from_attributes = True
