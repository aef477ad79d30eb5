"""
Configuration of the LRCLIB client.

The defaults can be overridden with environment variables:
- `LRCLIB_API_URL`: URL of the `/api/get` endpoint (e.g. for a self-hosted mirror)
- `LRCLIB_TIMEOUT`: request timeout in seconds
- `LRCLIB_USER_AGENT`: value of the `User-Agent` header
"""

import logging
import os
from dataclasses import dataclass

from .version import __version__

logger = logging.getLogger(__name__)

LRCLIB_GET_URL = "https://lrclib.net/api/get"
DEFAULT_TIMEOUT = 15.0
DEFAULT_USER_AGENT = f"lrclib-fetch/{__version__}"


@dataclass(frozen=True)
class Settings:
    """Settings used when talking to LRCLIB."""

    api_url: str = LRCLIB_GET_URL
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls) -> "Settings":
        """Return the settings, overridden by the environment variables."""
        timeout = DEFAULT_TIMEOUT
        raw_timeout = os.environ.get("LRCLIB_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning("Invalid LRCLIB_TIMEOUT %r, using %s seconds", raw_timeout, DEFAULT_TIMEOUT)
            else:
                if timeout <= 0:
                    logger.warning("LRCLIB_TIMEOUT must be positive, using %s seconds", DEFAULT_TIMEOUT)
                    timeout = DEFAULT_TIMEOUT

        return cls(
            api_url=os.environ.get("LRCLIB_API_URL") or LRCLIB_GET_URL,
            timeout=timeout,
            user_agent=os.environ.get("LRCLIB_USER_AGENT") or DEFAULT_USER_AGENT,
        )
