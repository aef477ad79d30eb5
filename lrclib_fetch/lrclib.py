"""Functions to get lyrics from LRCLIB."""

import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Self
from urllib.parse import urlencode

import requests

from .config import LRCLIB_GET_URL, Settings
from .context import Context
from .utils import LookupRequest, format_query, get_typed

logger = logging.getLogger(__name__)

# errors raised by requests before anything is sent
REQUEST_CONSTRUCTION_ERRORS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.URLRequired,
)


@dataclass(frozen=True)
class LyricsRecord:
    """A response of the LRCLIB `/api/get` endpoint."""

    id: int = 0
    name: str = ""
    track_name: str = ""
    artist_name: str = ""
    album_name: str = ""
    duration: float = 0.0
    instrumental: bool = False
    plain_lyrics: str | None = None
    synced_lyrics: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> Self:  # noqa: ANN401
        """
        Create a `LyricsRecord` from decoded JSON data.

        Missing and `null` values are replaced by empty values.

        Raises:
            TypeError: if `data` is not an object or if a value has the wrong type.

        """
        if not isinstance(data, dict):
            msg = f"expected a JSON object, got {type(data).__name__}"
            raise TypeError(msg)

        return cls(
            id=get_typed(data, "id", int, 0),
            name=get_typed(data, "name", str, ""),
            track_name=get_typed(data, "trackName", str, ""),
            artist_name=get_typed(data, "artistName", str, ""),
            album_name=get_typed(data, "albumName", str, ""),
            duration=get_typed(data, "duration", float, 0.0),
            instrumental=get_typed(data, "instrumental", bool, False),
            plain_lyrics=get_typed(data, "plainLyrics", str),
            synced_lyrics=get_typed(data, "syncedLyrics", str),
        )

    def best_lyrics(self) -> str:
        """Return the synced lyrics if there are some, otherwise the plain lyrics, otherwise `""`."""
        if self.synced_lyrics:
            logger.debug("RESULT: synced lyrics FOUND")
            return self.synced_lyrics

        if self.plain_lyrics:
            logger.debug("RESULT: plain lyrics FOUND")
            return self.plain_lyrics

        logger.debug("RESULT: lyrics NOT FOUND")
        return ""

    def log(self) -> None:
        """Log the contents of the record (only the length of the lyrics)."""
        logger.debug("RESPONSE DATA")
        logger.debug("  id           = %d", self.id)
        logger.debug("  name         = %r", self.name)
        logger.debug("  trackName    = %r", self.track_name)
        logger.debug("  artistName   = %r", self.artist_name)
        logger.debug("  albumName    = %r", self.album_name)
        logger.debug("  duration     = %.2f", self.duration)
        logger.debug("  instrumental = %s", self.instrumental)
        for key, lyrics in (("syncedLyrics", self.synced_lyrics), ("plainLyrics", self.plain_lyrics)):
            if lyrics is None:
                logger.debug("  %s = <nil>", key)
            else:
                logger.debug("  %s length = %d", key, len(lyrics))


def build_url(request: LookupRequest, api_url: str = LRCLIB_GET_URL) -> str:
    """Return the full URL used to look up `request` (with its form-encoded query string)."""
    return f"{api_url}?{urlencode(request.to_params())}"


def fetch_lrclib_lyrics(  # noqa: PLR0913
    ctx: Context | None,
    artist_name: str,
    track_name: str,
    album_name: str = "",
    duration: int = 0,
    *,
    session: requests.Session | None = None,
    settings: Settings | None = None,
) -> str:
    """
    Fetch the lyrics of a song on LRCLIB.

    Return the synced lyrics if available, otherwise the plain lyrics, otherwise `""`.
    No exception is raised: all the errors are logged and give `""`.
    """
    request = LookupRequest(artist_name, track_name, album_name, duration)
    return fetch_request(ctx, request, session=session, settings=settings)




def fetch_request(
    ctx: Context | None,
    request: LookupRequest,
    *,
    session: requests.Session | None = None,
    settings: Settings | None = None,
) -> str:
    """
    Fetch the lyrics for a `LookupRequest`. See `fetch_lrclib_lyrics`.

    The call returns after `settings.timeout` seconds at most, or as soon as `ctx` is cancelled.
    If a `session` is given, it is used and left open, otherwise a new one is created and closed.
    """
    ctx = ctx or Context.background()
    settings = settings or Settings.from_env()

    logger.info("Searching %s on LRCLIB...", format_query(request.track_name, request.artist_name, request.album_name))

    url = build_url(request, settings.api_url)

    logger.debug("REQUEST")
    logger.debug("  artist_name = %r", request.artist_name)
    logger.debug("  track_name  = %r", request.track_name)
    logger.debug("  album_name  = %r", request.album_name)
    logger.debug("  duration    = %d", request.duration)
    logger.debug("  url         = %s", url)

    if ctx.cancelled:
        logger.debug("Cancelled before sending the request, aborting")
        return ""

    timeout = settings.timeout
    remaining = ctx.remaining()
    if remaining is not None:
        timeout = min(timeout, remaining)

    # requests' timeout only limits each socket operation, this one limits the whole call
    call_ctx = Context(timeout)
    unlink = ctx.on_cancel(call_ctx.cancel)

    own_session = session is None
    http = requests.Session() if session is None else session
    try:
        lyrics = _get_lyrics(call_ctx, http, url, timeout, settings.user_agent)
    finally:
        unlink()
        call_ctx.cancel()
        if own_session:
            http.close()

    if lyrics is None:
        if ctx.cancelled:
            logger.debug("Request cancelled, aborting")
        else:
            logger.debug("ERROR request timed out after %.2f seconds", timeout)
        return ""
    return lyrics


def _download(
    call_ctx: Context, http: requests.Session, url: str, timeout: float, user_agent: str
) -> requests.Response:
    """Send the request and read the body of a successful response (in a worker thread)."""
    response = http.get(url, headers={"User-Agent": user_agent}, timeout=timeout, stream=True)
    # closing the response aborts the body download
    call_ctx.on_cancel(response.close)
    try:
        if response.status_code == HTTPStatus.OK:
            _ = response.content
    except BaseException:
        response.close()
        raise
    return response


def _close_response(future: Future[requests.Response]) -> None:
    """Release the connection of a response that arrived after the call returned."""
    if not future.cancelled() and future.exception() is None:
        future.result().close()
        logger.debug("Late response closed")


def _get_lyrics(  # noqa: PLR0911
    call_ctx: Context, http: requests.Session, url: str, timeout: float, user_agent: str
) -> str | None:
    """Return the lyrics (possibly `""`), or `None` if `call_ctx` was cancelled before the end of the request."""
    finished = threading.Event()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="lrclib")
    future = executor.submit(_download, call_ctx, http, url, timeout, user_agent)
    executor.shutdown(wait=False)
    future.add_done_callback(lambda _: finished.set())

    unregister = call_ctx.on_cancel(finished.set)
    try:
        finished.wait()
    finally:
        unregister()

    if not future.done():
        future.add_done_callback(_close_response)
        return None

    try:
        response = future.result()
    except REQUEST_CONSTRUCTION_ERRORS as err:
        logger.debug("ERROR creating request: %s", err)
        return ""
    except requests.exceptions.RequestException as err:
        if call_ctx.cancelled:
            return None
        logger.debug("ERROR executing request: %s", err)
        return ""

    try:
        if call_ctx.cancelled:
            return None

        logger.debug("RESPONSE status_code=%d", response.status_code)

        if response.status_code != HTTPStatus.OK:
            logger.debug("non-200 response, aborting")
            return ""

        try:
            # like Go's json.Decoder, the data after the first JSON value is ignored
            data, _ = json.JSONDecoder().raw_decode(response.text.lstrip())
            record = LyricsRecord.from_json(data)
            logger.debug("JSON decoding OK")
        except (json.JSONDecodeError, TypeError) as err:
            logger.debug("ERROR decoding JSON: %s", err)
            return ""
    finally:
        response.close()

    record.log()
    return record.best_lyrics()
