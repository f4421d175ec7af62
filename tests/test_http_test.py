from __future__ import annotations

import asyncio

import pytest

import fluent_http
from fluent_http import FluentClient, HttpCallError, global_settings
from fluent_http.testing import HttpTest
from fluent_http.transport import DefaultTransportFactory


def test_queued_response_is_returned_and_logged() -> None:
    async def scenario() -> str:
        response = await fluent_http.request("https://api.com/").get()
        return await response.get_string()

    with HttpTest() as test:
        test.respond_with("hello", 200)
        assert asyncio.run(scenario()) == "hello"

        assert len(test.call_log) == 1
        test.should_have_called("https://api.com/").with_verb("GET").times(1)


def test_allowed_status_returns_response() -> None:
    async def scenario() -> int:
        response = await fluent_http.request("https://api.com/").allow_http_status(404).get()
        return response.status_code

    with HttpTest() as test:
        test.respond_with(status=404)
        assert asyncio.run(scenario()) == 404


def test_empty_queue_synthesizes_ok_response() -> None:
    async def scenario() -> tuple[int, str]:
        response = await fluent_http.request("https://api.com/").get()
        return response.status_code, await response.get_string()

    with HttpTest():
        assert asyncio.run(scenario()) == (200, "")


def test_global_status_range_can_be_cleared() -> None:
    async def call() -> int:
        response = await FluentClient("https://api.com").request("teapot").get()
        return response.status_code

    with HttpTest() as test:
        fluent_http.configure(lambda s: setattr(s, "allowed_http_status_range", "4xx"))
        test.respond_with(status=418)
        assert asyncio.run(call()) == 418

        fluent_http.configure(lambda s: setattr(s, "allowed_http_status_range", None))
        test.respond_with(status=418)
        with pytest.raises(HttpCallError) as info:
            asyncio.run(call())

    assert info.value.status_code == 418


def test_responses_are_served_in_order() -> None:
    async def scenario() -> list[str]:
        client = FluentClient("https://api.com")
        bodies = []
        for _ in range(3):
            response = await client.request().get()
            bodies.append(await response.get_string())
        return bodies

    with HttpTest() as test:
        test.respond_with("one").respond_with_json({"n": 2})
        assert asyncio.run(scenario()) == ["one", '{"n":2}', ""]
        assert len(test.response_queue) == 0


def test_call_log_is_ordered_by_completion() -> None:
    async def scenario() -> None:
        client = FluentClient("https://api.com")
        await asyncio.gather(client.request("a").get(), client.request("b").get())

    with HttpTest() as test:
        asyncio.run(scenario())

        assert [call.http_status for call in test.call_log] == [200, 200]
        assert all(call.ended_utc is not None for call in test.call_log)
        ended = [call.ended_utc for call in test.call_log]
        assert ended == sorted(ended)


def test_failed_calls_are_logged() -> None:
    async def scenario() -> None:
        with pytest.raises(HttpCallError):
            await FluentClient("https://api.com").request("slow").get()

    with HttpTest() as test:
        test.simulate_timeout()
        asyncio.run(scenario())

        assert len(test.call_log) == 1
        assert test.call_log[0].completed is False


def test_existing_after_call_is_still_invoked() -> None:
    seen = []
    global_settings.after_call = seen.append

    async def scenario() -> None:
        await FluentClient("https://api.com").request().get()

    with HttpTest() as test:
        asyncio.run(scenario())
        assert seen == test.call_log


def test_current_and_dispose() -> None:
    assert HttpTest.current() is None

    test = HttpTest()
    assert HttpTest.current() is test
    assert global_settings.is_set("transport_factory")

    test.dispose()
    test.dispose()

    assert HttpTest.current() is None
    assert isinstance(global_settings.transport_factory, DefaultTransportFactory)
    assert global_settings.after_call is None


def test_cached_clients_are_forgotten_between_tests() -> None:
    real = fluent_http.get_client("https://api.com")

    with HttpTest():
        faked = fluent_http.get_client("https://api.com")

    assert faked is not real
    assert fluent_http.get_client("https://api.com") is not faked


def test_should_not_have_called() -> None:
    async def scenario() -> None:
        await fluent_http.request("https://api.com/users").post_string("x")

    with HttpTest() as test:
        asyncio.run(scenario())

        test.should_not_have_called("https://api.com/orders")
        with pytest.raises(AssertionError):
            test.should_not_have_called("https://api.com/users")
