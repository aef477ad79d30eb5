"""Utility functions to read tags from audio files and to save lyrics into them."""

import logging
from pathlib import Path

import mutagen
import mutagen.id3
from mutagen.flac import FLAC
from mutagen.mp4 import MP4
from mutagen.oggvorbis import OggVorbis

from .utils import LookupRequest

logger = logging.getLogger(__name__)


def read_lookup_request(filename: str | Path) -> LookupRequest:
    """
    Return a `LookupRequest` built with the tags of an audio file.

    Raises:
        ValueError: if the file is not a supported audio file.

    """
    try:
        audio = mutagen.File(filename, easy=True)
    except mutagen.MutagenError as err:
        msg = f"Can't read the tags of {filename}: {err}"
        raise ValueError(msg) from err
    if audio is None:
        msg = f"{filename} is not a supported audio file"
        raise ValueError(msg)

    tags = audio.tags or {}

    def get_tag(name: str) -> str:
        values = tags.get(name) or [""]
        return str(values[0])

    length = getattr(audio.info, "length", 0) or 0

    request = LookupRequest(
        artist_name=get_tag("artist"),
        track_name=get_tag("title"),
        album_name=get_tag("album"),
        duration=round(length),
    )
    logger.debug("Tags of %s: %r", filename, request)
    return request


def embed_lyrics(filename: str | Path, lyrics: str) -> None:
    """
    Embed the lyrics into an audio file, replacing the existing ones.

    MP3 files get an `USLT` frame, FLAC and Ogg Vorbis files a `LYRICS` comment and MP4 files a `©lyr` atom.

    Raises:
        ValueError: if the file format is not supported.

    """
    path = Path(filename)
    if path.suffix.lower() == ".mp3":
        try:
            tags = mutagen.id3.ID3(path)
        except mutagen.id3.ID3NoHeaderError:
            tags = mutagen.id3.ID3()
        tags.delall("USLT")
        tags.add(mutagen.id3.USLT(encoding=3, lang="eng", desc="", text=lyrics))
        tags.save(path, v2_version=3)
        logger.info("Lyrics embedded into %s", path)
        return

    try:
        audio = mutagen.File(path)
    except mutagen.MutagenError as err:
        msg = f"Can't read {path}: {err}"
        raise ValueError(msg) from err

    if isinstance(audio, FLAC | OggVorbis):
        if audio.tags is None:
            audio.add_tags()
        audio.tags["LYRICS"] = lyrics
    elif isinstance(audio, MP4):
        if audio.tags is None:
            audio.add_tags()
        audio.tags["\xa9lyr"] = [lyrics]
    else:
        msg = f"Can't embed lyrics into {path}: unsupported format"
        raise ValueError(msg)

    audio.save()
    logger.info("Lyrics embedded into %s", path)


def write_lrc(filename: str | Path, lyrics: str) -> Path:
    """Write the lyrics into a `.lrc` file. Return its path."""
    path = Path(filename)
    path.write_text(lyrics + "\n", "utf-8")
    logger.info("Lyrics saved to %s", path)
    return path
