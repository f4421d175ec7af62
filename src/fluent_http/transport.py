"""Factories for the httpx clients that carry requests over the wire."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import httpx

if TYPE_CHECKING:
    from .settings import HttpSettings


class TransportFactory(Protocol):
    """Builds the underlying httpx client for a FluentClient."""

    def create_client(self, settings: HttpSettings) -> httpx.AsyncClient: ...


class DefaultTransportFactory:
    """Creates a pooled httpx.AsyncClient for real network I/O."""

    def __init__(self, *, follow_redirects: bool = True, verify: bool = True) -> None:
        self.follow_redirects = follow_redirects
        self.verify = verify

    def create_client(self, settings: HttpSettings) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=settings.timeout,
            follow_redirects=self.follow_redirects,
            verify=self.verify,
            trust_env=False,
        )
