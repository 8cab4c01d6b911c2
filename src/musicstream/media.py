"""Helpers for working with media files on disk."""

import hashlib
import os


def get_hash(path: str, key: str = "") -> str:
    """Get the identity key of a file path.

    Args:
        path: Absolute path of the media file
        key: Optional application secret mixed into the hash

    Returns:
        md5 hex digest of ``key + path``
    """
    return hashlib.md5(f"{key}{path}".encode("utf-8")).hexdigest()


def normalize_directory(path: str) -> str:
    """Trim a directory path and make it end with exactly one separator.

    Without the trailing separator "/music/Ab" would also prefix-match
    "/music/Abba/...".
    """
    return path.strip().rstrip(os.sep) + os.sep
