from __future__ import annotations

import asyncio

import pytest
from pydantic import BaseModel

from fluent_http import FluentClient, HttpParsingError
from fluent_http.testing import HttpTest


class Item(BaseModel):
    id: int
    name: str


def fetch(test_setup, reader):
    async def scenario():
        response = await FluentClient("https://api.com").request("items").get()
        return await reader(response)

    with HttpTest() as test:
        test_setup(test)
        return asyncio.run(scenario())


def test_json_then_string_reserializes_capture() -> None:
    async def reader(response):
        data = await response.get_json()
        again = await response.get_json()
        text = await response.get_string()
        return data, again, text

    data, again, text = fetch(lambda t: t.respond_with_json({"id": 1, "name": "a"}), reader)

    assert data == {"id": 1, "name": "a"}
    assert again is data
    assert text == '{"id":1,"name":"a"}'


def test_string_then_bytes_then_json() -> None:
    async def reader(response):
        return await response.get_string(), await response.get_bytes(), await response.get_json(Item)

    text, raw, item = fetch(lambda t: t.respond_with('{"id": 2, "name": "é"}'), reader)

    assert text == '{"id": 2, "name": "é"}'
    assert raw == text.encode("utf-8")
    assert item == Item(id=2, name="é")


def test_bytes_then_string_decodes() -> None:
    async def reader(response):
        return await response.get_bytes(), await response.get_string()

    raw, text = fetch(lambda t: t.respond_with(b"hello"), reader)

    assert raw == b"hello"
    assert text == "hello"


def test_stream_read_gives_up_the_capture() -> None:
    async def reader(response):
        chunks = [chunk async for chunk in await response.get_stream()]
        return b"".join(chunks), await response.get_string(), await response.get_json()

    body, text, data = fetch(lambda t: t.respond_with("streamed"), reader)

    assert body == b"streamed"
    assert text is None
    assert data is None


def test_invalid_json_raises_parsing_error_and_keeps_text() -> None:
    async def reader(response):
        with pytest.raises(HttpParsingError) as info:
            await response.get_json()
        return info.value, await response.get_string()

    error, text = fetch(lambda t: t.respond_with("<html>"), reader)

    assert str(error) == "Response could not be deserialized to JSON: GET https://api.com/items"
    assert error.expected_format == "JSON"
    assert error.status_code == 200
    assert text == "<html>"


def test_model_validation_failure_is_a_parsing_error() -> None:
    async def reader(response):
        with pytest.raises(HttpParsingError) as info:
            await response.get_json(Item)
        return info.value

    error = fetch(lambda t: t.respond_with_json({"id": "not-a-number"}), reader)

    assert error.cause is not None


def test_handled_parsing_error_returns_none() -> None:
    def handle(call) -> None:
        call.exception_handled = True

    async def scenario():
        request = FluentClient("https://api.com").request().configure(lambda s: setattr(s, "on_error", handle))
        response = await request.get()
        return await response.get_json(), response.call.exception

    with HttpTest() as test:
        test.respond_with("oops")
        data, exception = asyncio.run(scenario())

    assert data is None
    assert isinstance(exception, HttpParsingError)


def test_get_json_or_default() -> None:
    async def reader(response):
        return await response.get_json_or_default(Item, default="fallback")

    assert fetch(lambda t: t.respond_with("nope"), reader) == "fallback"


def test_headers_are_case_insensitive_and_joined() -> None:
    async def reader(response):
        return response.headers

    headers = fetch(lambda t: t.respond_with("", headers=[("X-Multi", "a"), ("x-multi", "b"), ("X-One", 1)]), reader)

    assert headers["x-multi"] == "a, b"
    assert headers["X-ONE"] == "1"


def test_response_cookies_are_parsed() -> None:
    async def reader(response):
        return response.cookies, response.status_code, response.reason_phrase

    cookies, status, reason = fetch(lambda t: t.respond_with(status=201, cookies={"sid": "abc", "theme": "dark"}), reader)

    assert cookies["sid"].value == "abc"
    assert cookies["theme"].value == "dark"
    assert (status, reason) == (201, "Created")
