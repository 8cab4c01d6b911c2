"""Album model."""

from typing import ClassVar, Optional

from pydantic import BaseModel, Field


class Album(BaseModel):
    """An album, owned by a single artist.

    Every artist can own one placeholder album (``is_unknown``) collecting
    their songs that carry no album tag. The one owned by the unknown artist
    is seeded with ``UNKNOWN_ID``.
    """

    UNKNOWN_ID: ClassVar[int] = 1
    UNKNOWN_NAME: ClassVar[str] = "Unknown Album"

    id: int = Field(description="Album ID")
    artist_id: int = Field(description="Owning artist")
    name: str = Field(description="Album name")
    cover: Optional[str] = Field(default=None, description="Cover image file name")
    is_unknown: bool = Field(default=False, description="Placeholder for songs without an album tag")

    class Config:
        from_attributes = True
