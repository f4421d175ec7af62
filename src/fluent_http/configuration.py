"""Process-wide entry points: global settings and the default client factory."""

from __future__ import annotations

import threading
from typing import Any, Callable

import httpx

from .client import FluentClient
from .factory import ClientFactory
from .request import Request
from .settings import GlobalSettings, global_settings

_factory_lock = threading.Lock()
client_factory = ClientFactory("host")


def configure(configurator: Callable[[GlobalSettings], Any]) -> GlobalSettings:
    """Change global settings. Concurrent calls are serialized."""
    return global_settings.configure(configurator)


def get_client_factory() -> ClientFactory:
    return client_factory


def set_client_factory(factory: ClientFactory) -> None:
    """Replace the factory used by get_client, configure_client and request."""
    global client_factory
    with _factory_lock:
        client_factory = factory


def configure_client(url: str | httpx.URL, configurator: Callable[[FluentClient], Any]) -> ClientFactory:
    return get_client_factory().configure_client(url, configurator)


def get_client(url: str | httpx.URL) -> FluentClient:
    return get_client_factory().get(url)


def request(url: str | httpx.URL) -> Request:
    """Build a request on the cached client for url."""
    return get_client(url).request(str(url))


def reset() -> None:
    """Clear explicit global settings and forget cached clients."""
    global_settings.reset_defaults()
    get_client_factory().clear()


__all__ = [
    "client_factory",
    "configure",
    "configure_client",
    "get_client",
    "get_client_factory",
    "global_settings",
    "request",
    "reset",
    "set_client_factory",
]
