"""Song model representing an audio file in the library."""

import html
import re
from datetime import datetime
from pathlib import PurePath
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

_NEWLINE = re.compile(r"(\r\n|\n\r|\n|\r)")
# Only complete references; "Rock&not Roll" is left alone.
_ENTITY = re.compile(r"&(?:#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);")


def decode_entities(text: str) -> str:
    """Decode semicolon-terminated HTML character references in ``text``."""
    return _ENTITY.sub(lambda m: html.unescape(m.group(0)), text)


def nl2br(text: Optional[str]) -> Optional[str]:
    """Insert an HTML line break before every newline in ``text``."""
    if not text:
        return text
    return _NEWLINE.sub(r"<br />\1", text)


class Song(BaseModel):
    """A song in the library.

    The ID is derived from the file path (see ``musicstream.media.get_hash``),
    so rescanning a file always lands on the same record.

    ``path``, ``lyrics``, ``mtime`` and the timestamps are left out of
    ``model_dump()`` and JSON output. Lyrics in particular can be large and
    are fetched on demand instead.
    """

    id: str = Field(description="Hash of the file path")
    album_id: int = Field(description="Album the song belongs to")
    path: str = Field(exclude=True, description="Absolute path of the audio file")
    title: str = Field(default="", description="Title as stored; may be empty")
    length: float = Field(default=0.0, description="Duration in seconds")
    track: Optional[int] = Field(default=None, description="Track number")
    lyrics: str = Field(default="", exclude=True)
    mtime: Optional[int] = Field(default=None, exclude=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, exclude=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow, exclude=True)

    class Config:
        from_attributes = True
        validate_assignment = True

    @field_validator("title", mode="before")
    @classmethod
    def decode_title(cls, value, info: ValidationInfo):
        # Tags read from some files come back HTML entity encoded. Rows
        # loaded from the database were decoded when they were written.
        if value is None:
            return ""
        if info.context and info.context.get("stored"):
            return value
        return decode_entities(str(value))

    @field_validator("lyrics", mode="before")
    @classmethod
    def empty_lyrics(cls, value):
        return value or ""

    @property
    def display_title(self) -> str:
        """The title, or the file name without extension when there is none."""
        return self.title or PurePath(self.path).stem

    @property
    def display_lyrics(self) -> str:
        """Lyrics with line breaks for rendering in HTML."""
        return nl2br(self.lyrics)
