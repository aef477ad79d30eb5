"""Test configuration and fixtures.

Provides fake HTTP responses and sessions, and a local HTTP server, so that no test touches the internet.
"""

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import requests


class FakeResponse(requests.Response):
    """A `requests.Response` with an in-memory body that remembers if it was closed."""

    def __init__(self, status_code=200, body=b""):
        super().__init__()
        self.status_code = status_code
        if isinstance(body, dict | list):
            body = json.dumps(body)
        self._content = body.encode() if isinstance(body, str) else body
        self._content_consumed = True
        self.encoding = "utf-8"
        self.closed = False

    def close(self):
        self.closed = True


class FakeSession:
    """A session returning a given response (or raising a given error) and recording the calls."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []
        self.closed = False

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


def lyrics_record(synced=None, plain=None, **overrides):
    """Return a JSON body of the LRCLIB `/api/get` endpoint."""
    record = {
        "id": 3396226,
        "name": "I Want to Live",
        "trackName": "I Want to Live",
        "artistName": "Borislav Slavov",
        "albumName": "Baldur's Gate 3 (Original Game Soundtrack)",
        "duration": 233,
        "instrumental": False,
        "plainLyrics": plain,
        "syncedLyrics": synced,
    }
    record.update(overrides)
    return record


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove the configuration variables from the environment."""
    for name in ("LRCLIB_API_URL", "LRCLIB_TIMEOUT", "LRCLIB_USER_AGENT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_session():
    """Return a factory of `FakeSession`s answering with a `FakeResponse`."""

    def factory(status_code=200, body=b"", error=None):
        return FakeSession(FakeResponse(status_code, body), error)

    return factory


@pytest.fixture
def lyrics_server():
    """
    Start a local HTTP server.

    Set `server.answer` to a function `(handler, stop)` writing the response. `stop` is set at teardown.
    """
    stop = threading.Event()

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            server.paths.append(self.path)
            try:
                server.answer(self, stop)
            except OSError:
                # the client went away
                pass

        def log_message(self, *args):
            pass

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    server.url = f"http://127.0.0.1:{server.server_address[1]}/api/get"
    server.paths = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield server

    stop.set()
    server.shutdown()
    server.server_close()
