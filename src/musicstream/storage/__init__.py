"""Persistence layer for musicstream."""

from musicstream.storage.database import Database

__all__ = ["Database"]
