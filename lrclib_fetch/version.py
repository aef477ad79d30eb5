"""Version of lrclib-fetch."""

__version__ = "0.1.0"
