"""Artist model."""

from typing import ClassVar

from pydantic import BaseModel, Field


class Artist(BaseModel):
    """A performing artist."""

    UNKNOWN_ID: ClassVar[int] = 1
    UNKNOWN_NAME: ClassVar[str] = "Unknown Artist"

    id: int = Field(description="Artist ID")
    name: str = Field(description="Artist name")

    class Config:
        from_attributes = True

    @property
    def is_unknown(self) -> bool:
        """Whether this is the placeholder artist for songs without metadata."""
        return self.id == self.UNKNOWN_ID
