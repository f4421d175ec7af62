"""Caches FluentClient instances by a key derived from the request URL."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

import httpx

from .client import FluentClient
from .security import validate_url
from .settings import GlobalSettings

logger = logging.getLogger(__name__)

KeyPolicy = Callable[[httpx.URL], str]


def per_host_key(url: httpx.URL) -> str:
    """One client per host. Scheme and port do not take part in the key."""
    return url.host.lower()


def per_base_url_key(url: httpx.URL) -> str:
    """One client per URL, ignoring query string and fragment."""
    base = str(url).partition("#")[0].partition("?")[0]
    return base.rstrip("/")


_POLICIES: dict[str, KeyPolicy] = {
    "host": per_host_key,
    "base_url": per_base_url_key,
}


class ClientFactory:
    """Creates and caches clients.

    Calls for the same key are serialized so a client is created and configured
    at most once at a time. Calls for different keys do not wait on each other.
    """

    def __init__(self, key_policy: str | KeyPolicy = "host", *, settings: GlobalSettings | None = None) -> None:
        if callable(key_policy):
            self._key_policy = key_policy
        elif key_policy in _POLICIES:
            self._key_policy = _POLICIES[key_policy]
        else:
            raise ValueError(f"Unknown key policy: {key_policy!r}")
        self._settings = settings
        self._clients: dict[str, FluentClient] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def get_cache_key(self, url: str | httpx.URL) -> str:
        return self._key_policy(validate_url(url))

    def _lock_for(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    def _get_or_create(self, key: str, url: httpx.URL) -> FluentClient:
        client = self._clients.get(key)
        if client is None or client.is_closed:
            client = self._clients[key] = self.create_client(url)
            logger.debug("Created client for key %s", key)
        return client

    def create_client(self, url: httpx.URL) -> FluentClient:
        """Build a new client for url. Override to customize client creation."""
        return FluentClient(settings=self._settings)

    def get(self, url: str | httpx.URL) -> FluentClient:
        """Return the cached client for url, creating it if needed."""
        parsed = validate_url(url)
        key = self._key_policy(parsed)
        with self._lock_for(key):
            return self._get_or_create(key, parsed)

    def configure_client(self, url: str | httpx.URL, configurator: Callable[[FluentClient], Any]) -> ClientFactory:
        """Run configurator against the client for url while holding its key lock."""
        parsed = validate_url(url)
        key = self._key_policy(parsed)
        with self._lock_for(key):
            configurator(self._get_or_create(key, parsed))
        return self

    def clear(self) -> None:
        """Forget cached clients without closing them."""
        with self._guard:
            self._clients = {}
            self._locks = {}

    async def aclose(self) -> None:
        with self._guard:
            clients, self._clients = list(self._clients.values()), {}
            self._locks = {}
        for client in clients:
            await client.aclose()

    def __len__(self) -> int:
        return len(self._clients)
