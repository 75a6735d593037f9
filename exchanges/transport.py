"""
HTTP transports for signed Bitcoin.de requests.

A transport only moves bytes: it sends exactly the method, URL, headers and
body it is given and hands back the status code and raw body text. Any
failure to complete the exchange is raised as ``TransportFailure``.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

import aiohttp
import requests

from .errors import TransportFailure

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class TransportResponse:
    """Status code and raw body of an HTTP response."""

    status: int
    body: str


class HttpTransport(Protocol):
    """Blocking transport."""

    def execute(self, method: str, url: str, headers: Dict[str, str], body: Optional[str]) -> TransportResponse:
        ...


class AsyncHttpTransport(Protocol):
    """Non-blocking transport."""

    async def execute(self, method: str, url: str, headers: Dict[str, str], body: Optional[str]) -> TransportResponse:
        ...


class RequestsTransport:
    """Transport backed by a ``requests.Session``."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        """
        Args:
            timeout: Connect and read timeout in seconds
            session: Session to reuse (a new one is created if omitted)
        """
        self.timeout = timeout
        self.session = session or requests.Session()

    def execute(self, method: str, url: str, headers: Dict[str, str], body: Optional[str]) -> TransportResponse:
        """
        Send one request.

        Returns:
            TransportResponse with status and body text

        Raises:
            TransportFailure: On timeout, connection, DNS or TLS errors
        """
        data = body.encode("utf-8") if body else None
        try:
            response = self.session.request(method, url, headers=headers, data=data, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logging.error(f"Timeout after {self.timeout}s: {method} {url}")
            raise TransportFailure(f"Request timed out after {self.timeout}s", cause=e, timeout=True)
        except requests.exceptions.SSLError as e:
            logging.error(f"TLS error on {method} {url}: {e}")
            raise TransportFailure(f"TLS error: {e}", cause=e)
        except requests.exceptions.ConnectionError as e:
            logging.error(f"Connection error on {method} {url}: {e}")
            raise TransportFailure(f"Connection failed: {e}", cause=e)
        except requests.exceptions.RequestException as e:
            logging.error(f"Request failed: {method} {url}: {e}")
            raise TransportFailure(f"Request failed: {e}", cause=e)

        return TransportResponse(status=response.status_code, body=response.text)

    def close(self) -> None:
        self.session.close()


class AiohttpTransport:
    """
    Transport backed by an ``aiohttp.ClientSession``.

    The session is created on first use and bound to the running event
    loop. Use ``async with`` or call ``close()`` when done.
    A session passed in by the caller is used as is and left open by
    ``close()``.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, session: Optional[aiohttp.ClientSession] = None):
        self.timeout = timeout
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def connect(self) -> None:
        """Create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True

    async def close(self) -> None:
        """Close the HTTP session if this transport created it."""
        if not self._owns_session:
            return
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "AiohttpTransport":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def execute(self, method: str, url: str, headers: Dict[str, str], body: Optional[str]) -> TransportResponse:
        """
        Send one request.

        Raises:
            TransportFailure: On timeout or any aiohttp client error
        """
        await self.connect()
        data = body.encode("utf-8") if body else None
        try:
            async with self._session.request(method, url, headers=headers, data=data) as resp:
                # Invalid UTF-8 is replaced, never raised
                text = await resp.text(errors="replace")
                return TransportResponse(status=resp.status, body=text)
        except asyncio.TimeoutError as e:
            logging.error(f"Timeout after {self.timeout}s: {method} {url}")
            raise TransportFailure(f"Request timed out after {self.timeout}s", cause=e, timeout=True)
        except aiohttp.ClientError as e:
            logging.error(f"Connection error on {method} {url}: {e}")
            raise TransportFailure(f"Connection failed: {e}", cause=e)
