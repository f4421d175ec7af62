"""Reusable client that owns the underlying httpx transport."""

from __future__ import annotations

import logging
import threading
from typing import Any

import httpx

from .cookies import Cookie, CookieSession
from .fluent import FluentConfigurable
from .request import Request
from .security import is_absolute_url
from .settings import ClientSettings, GlobalSettings, global_settings
from .util import combine_url, to_invariant_string

logger = logging.getLogger(__name__)


class FluentClient(FluentConfigurable):
    """A reusable object for making HTTP calls.

    The httpx client behind it is created on first use and shared by every
    request built from this instance. Configuration methods mutate the client
    in place and return it.
    """

    def __init__(self, base_url: str | None = None, *, settings: GlobalSettings | None = None) -> None:
        self.base_url = base_url
        self.settings = ClientSettings(parent=settings or global_settings)
        self.headers: dict[str, str] = {}
        self.cookies: dict[str, Cookie] = {}
        self._transport: httpx.AsyncClient | None = None
        self._transport_lock = threading.Lock()
        self._closed = False

    @property
    def transport(self) -> httpx.AsyncClient:
        """The httpx client used to send requests, created at most once."""
        if self._transport is None:
            with self._transport_lock:
                if self._closed:
                    raise RuntimeError("Cannot send a request with a closed FluentClient.")
                if self._transport is None:
                    self._transport = self.settings.transport_factory.create_client(self.settings)
                    logger.debug("Created transport for client base_url=%s", self.base_url)
        return self._transport

    @property
    def has_transport(self) -> bool:
        return self._transport is not None

    @property
    def is_closed(self) -> bool:
        return self._closed

    def request(self, *url_segments: Any) -> Request:
        """Build a Request.

        With no segments the base URL is used. If the first segment is not an
        absolute URL, the segments are appended to the base URL.
        """
        if not url_segments:
            if not self.base_url:
                raise ValueError(
                    "Cannot create a Request. No URL segments were passed, "
                    "and this client does not have a base_url defined."
                )
            return Request(self, self.base_url)

        first = url_segments[0]
        if not is_absolute_url(first):
            if not self.base_url:
                raise ValueError(
                    "Cannot create a Request. This client does not have a base_url defined, "
                    "and the first segment passed is not a valid URL."
                )
            return Request(self, combine_url(self.base_url, *url_segments))

        return Request(self, combine_url(to_invariant_string(first), *url_segments[1:]))

    def start_cookie_session(self) -> CookieSession:
        return CookieSession(self)

    async def aclose(self) -> None:
        """Close the underlying transport. Requests already built keep their state."""
        with self._transport_lock:
            transport, self._transport = self._transport, None
            self._closed = True
        if transport is not None:
            await transport.aclose()

    async def __aenter__(self) -> FluentClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"<FluentClient base_url={self.base_url!r}>"
