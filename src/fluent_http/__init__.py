"""Fluent, testable HTTP client built on httpx."""

from .call import HttpCall
from .client import FluentClient
from .configuration import (
    configure,
    configure_client,
    get_client,
    get_client_factory,
    global_settings,
    request,
    reset,
    set_client_factory,
)
from .cookies import Cookie, CookieSession
from .exceptions import (
    FluentHttpError,
    HttpCallError,
    HttpParsingError,
    HttpTestAssertionError,
    HttpTimeoutError,
)
from .factory import ClientFactory, per_base_url_key, per_host_key
from .request import Request
from .response import HttpResponse
from .serializers import JsonSerializer, UrlEncodedSerializer
from .settings import ClientSettings, GlobalSettings, HttpSettings, RequestSettings
from .transport import DefaultTransportFactory, TransportFactory

__all__ = [
    "ClientFactory",
    "ClientSettings",
    "Cookie",
    "CookieSession",
    "DefaultTransportFactory",
    "FluentClient",
    "FluentHttpError",
    "GlobalSettings",
    "HttpCall",
    "HttpCallError",
    "HttpParsingError",
    "HttpResponse",
    "HttpSettings",
    "HttpTestAssertionError",
    "HttpTimeoutError",
    "JsonSerializer",
    "Request",
    "RequestSettings",
    "TransportFactory",
    "UrlEncodedSerializer",
    "configure",
    "configure_client",
    "get_client",
    "get_client_factory",
    "global_settings",
    "per_base_url_key",
    "per_host_key",
    "request",
    "reset",
    "set_client_factory",
]
