"""musicstream - music library backend for a streaming web app."""

__version__ = "0.1.0"
