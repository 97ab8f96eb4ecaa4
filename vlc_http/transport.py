"""
HTTP transport for the VLC web interface.

One call is one GET against VLC's Lua HTTP interface with Basic auth, and
the body decoded as a JSON object.  Retry policy is left to callers.

Usage:
    transport = Transport("http://127.0.0.1:8080", "", "secret")
    await transport.start()
    status = await transport.get_json("/requests/status.json")
    await transport.close()
"""

import asyncio
import base64
import json
import logging

import aiohttp

from .errors import DecodeError, TransportError

logger = logging.getLogger(__name__)


class Transport:
    """Issues authenticated GET requests and decodes JSON bodies."""

    def __init__(self, base_url: str, username: str = "", password: str = "",
                 timeout: float = 5.0,
                 session: aiohttp.ClientSession | None = None):
        self.base_url = base_url.rstrip("/")
        credentials = f"{username or ''}:{password or ''}".encode("utf-8")
        self.authorization = "Basic " + base64.b64encode(credentials).decode("ascii")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    @property
    def started(self) -> bool:
        return self._session is not None and not self._session.closed

    async def start(self):
        """Open the HTTP session (no-op when one was injected)."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": "vlc-http/1.0"},
            )
            self._owns_session = True

    async def close(self):
        if self._session and self._owns_session:
            await self._session.close()
        self._session = None

    async def get_json(self, path: str) -> dict:
        """GET ``path`` (already carrying its query string) and decode it.

        Raises TransportError on connection failure, timeout or non-2xx,
        DecodeError when the body is not a JSON object.
        """
        if not self.started:
            await self.start()

        url = f"{self.base_url}{path}"
        logger.debug("GET %s", url)
        try:
            async with self._session.get(
                url,
                headers={"Authorization": self.authorization},
                timeout=self.timeout,
            ) as resp:
                resp.raise_for_status()
                body = await resp.read()
        except aiohttp.ClientResponseError as e:
            raise TransportError(f"VLC answered HTTP {e.status} for {path}",
                                 status=e.status) from e
        except asyncio.TimeoutError as e:
            raise TransportError(f"Request to {url} timed out") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        try:
            data = json.loads(body)
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            raise DecodeError(f"Invalid JSON from {path}: {e}") from e
        if not isinstance(data, dict):
            raise DecodeError(f"Expected a JSON object from {path}, got {type(data).__name__}")
        return data
