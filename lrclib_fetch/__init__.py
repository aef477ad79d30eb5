"""Lyrics fetcher for LRCLIB."""

import argparse
import logging
import sys
from pathlib import Path

from rich import get_console
from rich.traceback import Traceback
from rich.traceback import install as install_traceback
from yt_dlp.utils import sanitize_filename

from .config import Settings
from .context import Context
from .lrclib import fetch_lrclib_lyrics, fetch_request
from .tags import embed_lyrics, read_lookup_request, write_lrc
from .utils import LookupRequest
from .version import __version__

__all__ = ["Context", "LookupRequest", "Settings", "__version__", "fetch_lrclib_lyrics", "fetch_request", "main"]

logger = logging.getLogger(__name__)

# add a newline between each message on Termux
logging.basicConfig(format="[%(name)s] %(message)s" + ("\n" if hasattr(sys, "getandroidapilevel") else ""))


def parse_query(query: str) -> tuple[str, str]:
    """Parse a song query string (`track -- artist`). Return the track and the artist."""
    if "--" in query:
        track, artist = (part.strip() for part in query.split("--", 1))
    else:
        track = query.strip()
        artist = ""

    logger.debug("Parsed query: track = %r, artist = %r", track, artist)

    return track, artist


def lrc_filename(request: LookupRequest) -> str:
    """Return the name of the `.lrc` file for a request that doesn't come from an audio file."""
    name = f"{request.artist_name} - {request.track_name}" if request.artist_name else request.track_name
    return sanitize_filename(name + ".lrc")


def print_error(description: str, error: Exception) -> None:
    """Print an error on stderr, with a traceback if the verbose mode is enabled."""
    print(f"Error when processing {description}:", file=sys.stderr)
    if logger.isEnabledFor(logging.INFO):
        get_console().print(Traceback.from_exception(type(error), error, error.__traceback__))
    else:
        print(f"{type(error).__name__}: {error}", file=sys.stderr)


def output_lyrics(lyrics: str, lrc_path: Path | str | None) -> None:
    """Write the lyrics into `lrc_path` or print them if it is `None`."""
    if lrc_path is not None:
        write_lrc(lrc_path, lyrics)
    else:
        get_console().print(lyrics, markup=False, highlight=False)


def process_file(ctx: Context, filename: str, *, lrc: bool = False, embed: bool = False) -> bool:
    """Fetch the lyrics of an audio file. Return `True` if lyrics were found."""
    request = read_lookup_request(filename)
    lyrics = fetch_request(ctx, request)
    if not lyrics:
        print(f"No lyrics found for {filename}", file=sys.stderr)
        return False

    if embed:
        embed_lyrics(filename, lyrics)
    if lrc or not embed:
        output_lyrics(lyrics, Path(filename).with_suffix(".lrc") if lrc else None)
    return True


def process_query(ctx: Context, request: LookupRequest, *, lrc: bool = False) -> bool:
    """Fetch the lyrics of a song query. Return `True` if lyrics were found."""
    lyrics = fetch_request(ctx, request)
    if not lyrics:
        print(f"No lyrics found for {request}", file=sys.stderr)
        return False

    output_lyrics(lyrics, lrc_filename(request) if lrc else None)
    return True


def main(argv: list[str] | None = None) -> int:
    """Run the CLI. Return the exit code."""
    install_traceback(show_locals=True)

    parser = argparse.ArgumentParser(prog="lrclib-fetch", fromfile_prefix_chars="@")
    parser.add_argument("QUERY", nargs="*", help="songs to look up ('track -- artist')")
    parser.add_argument(
        "-f",
        "--file",
        action="extend",
        nargs="+",
        default=[],
        help="audio files to look up (with their tags)",
    )
    parser.add_argument("--album", default="", help="album name of the queried songs")
    parser.add_argument("--duration", type=int, default=0, help="duration of the queried songs, in seconds")
    parser.add_argument("--lrc", action="store_true", help="save the lyrics into .lrc files")
    parser.add_argument("--embed", action="store_true", help="embed the lyrics into the audio files")
    parser.add_argument("--deadline", type=float, default=None, help="maximum time for all the lookups, in seconds")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="show more information")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(argv)

    logging.root.setLevel(
        {
            0: logging.WARNING,
            1: logging.INFO,
            2: logging.DEBUG,
        }.get(args.verbose, logging.DEBUG)
    )

    if not args.QUERY and not args.file:
        parser.error("nothing to look up (give a QUERY or --file)")

    ctx = Context(args.deadline)
    all_found = True

    for query in args.QUERY:
        track, artist = parse_query(query)
        request = LookupRequest(artist, track, args.album, args.duration)
        try:
            all_found &= process_query(ctx, request, lrc=args.lrc)
        except OSError as err:
            print_error(query, err)
            all_found = False

    for filename in args.file:
        try:
            all_found &= process_file(ctx, filename, lrc=args.lrc, embed=args.embed)
        except (ValueError, OSError) as err:
            print_error(filename, err)
            all_found = False

    ctx.cancel()
    return 0 if all_found else 1


if __name__ == "__main__":
    sys.exit(main())
