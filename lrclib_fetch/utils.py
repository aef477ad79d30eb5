"""Utilitary functions."""

import logging
from dataclasses import dataclass
from typing import Any, TypeVar, overload

logger = logging.getLogger(__name__)

ExpectedT = TypeVar("ExpectedT")
DefaultT = TypeVar("DefaultT")


@dataclass(frozen=True)
class LookupRequest:
    """The metadata used to look up the lyrics of a song."""

    artist_name: str
    track_name: str
    album_name: str = ""
    duration: int = 0

    def to_params(self) -> dict[str, str]:
        """
        Return the query parameters for the LRCLIB API.

        The album is only sent if it is not empty and the duration only if it is positive.
        """
        params = {
            "artist_name": self.artist_name,
            "track_name": self.track_name,
        }
        if self.album_name:
            params["album_name"] = self.album_name
        if self.duration > 0:
            params["duration"] = str(self.duration)
        return params

    def __str__(self) -> str:
        """Return a human-readable version of the request (for logging)."""
        return format_query(self.track_name, self.artist_name, self.album_name)


@overload
def get_typed(data: dict[str, Any], key: str, expected: type[ExpectedT]) -> ExpectedT | None: ...


@overload
def get_typed(
    data: dict[str, Any], key: str, expected: type[ExpectedT], default: DefaultT
) -> ExpectedT | DefaultT: ...


def get_typed(data, key, expected, default=None):
    """
    Return `data[key]` if it has the `expected` type, `default` if it is missing or `null`.

    `bool` values are never accepted as numbers (even though `bool` is a subclass of `int`).
    An `int` is accepted where a `float` is expected.

    >>> get_typed({"duration": 180}, "duration", float)
    180.0
    >>> get_typed({"plainLyrics": None}, "plainLyrics", str)

    Raises:
        TypeError: if the value is present but has another type.

    """
    value = data.get(key)
    if value is None:
        return default

    if expected is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, bool) and expected is not bool:
        msg = f"{key!r} should be {expected.__name__}, got bool"
        raise TypeError(msg)
    if not isinstance(value, expected):
        msg = f"{key!r} should be {expected.__name__}, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def format_query(song: str, artist: str | None = None, album: str | None = None) -> str:
    """Return a formatted version of `song`, `artist` and `album` (for logging)."""
    return f"'{song}'" + (f" - '{artist}'" if artist else "") + (f" on '{album}'" if album else "")
