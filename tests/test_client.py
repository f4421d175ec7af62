from __future__ import annotations

import asyncio

import httpx
import pytest

from fluent_http import FluentClient, GlobalSettings, global_settings
from fluent_http.settings import DEFAULT_TIMEOUT


class RecordingTransportFactory:
    def __init__(self) -> None:
        self.created = 0

    def create_client(self, settings) -> httpx.AsyncClient:
        self.created += 1
        return httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))


def test_request_with_no_segments_uses_base_url() -> None:
    client = FluentClient("https://api.com/v1")

    assert str(client.request().url) == "https://api.com/v1"


def test_request_appends_relative_segments_to_base_url() -> None:
    client = FluentClient("https://api.com/v1/")

    request = client.request("/users", 42, "orders")

    assert str(request.url) == "https://api.com/v1/users/42/orders"


def test_request_with_absolute_first_segment_ignores_base_url() -> None:
    client = FluentClient("https://api.com")

    request = client.request("https://other.com/a", "b")

    assert str(request.url) == "https://other.com/a/b"


def test_request_without_base_url_raises() -> None:
    client = FluentClient()

    with pytest.raises(ValueError):
        client.request()
    with pytest.raises(ValueError):
        client.request("users")


def test_fluent_configuration_mutates_client_in_place() -> None:
    client = FluentClient("https://api.com")

    returned = (
        client.with_header("X-One", 1)
        .with_headers({"x_two": "2"})
        .with_timeout(15)
        .allow_http_status("404", 500)
    )

    assert returned is client
    assert client.headers == {"X-One": "1", "x-two": "2"}
    assert client.settings.timeout == 15
    assert client.settings.allowed_http_status_range == "404,500"


def test_header_names_are_case_insensitive_and_none_removes() -> None:
    client = FluentClient("https://api.com").with_header("Accept", "text/plain")

    client.with_header("accept", "application/json")
    assert client.headers == {"accept": "application/json"}

    client.with_header("ACCEPT", None)
    assert client.headers == {}


def test_basic_auth_and_bearer_token_headers() -> None:
    client = FluentClient("https://api.com").with_basic_auth("user", "pass")
    assert client.headers["Authorization"] == "Basic dXNlcjpwYXNz"

    client.with_oauth_bearer_token("token")
    assert client.headers == {"Authorization": "Bearer token"}


def test_cookies_enable_cookie_support() -> None:
    client = FluentClient("https://api.com").with_cookies({"a": 1, "b": True})

    assert client.settings.cookies_enabled is True
    assert client.cookies["a"].value == "1"
    assert client.cookies["b"].value == "true"


def test_client_settings_inherit_from_global() -> None:
    global_settings.timeout = 20
    client = FluentClient("https://api.com")

    assert client.settings.parent is global_settings
    assert client.settings.timeout == 20

    global_settings.reset_defaults()
    assert client.settings.timeout == 20
    assert FluentClient().settings.timeout == DEFAULT_TIMEOUT


def test_client_accepts_its_own_global_layer() -> None:
    isolated = GlobalSettings()
    isolated.timeout = 3

    client = FluentClient(settings=isolated)

    assert client.settings.timeout == 3
    assert global_settings.timeout == DEFAULT_TIMEOUT


def test_transport_is_created_once_and_closed() -> None:
    factory = RecordingTransportFactory()
    client = FluentClient("https://api.com").configure(lambda s: setattr(s, "transport_factory", factory))

    async def scenario() -> None:
        async with client:
            await client.request().get()
            await client.request("again").get()
            assert client.has_transport

    asyncio.run(scenario())

    assert factory.created == 1
    assert client.is_closed
    with pytest.raises(RuntimeError):
        client.transport
