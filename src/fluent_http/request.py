"""A single HTTP call built from a FluentClient."""

from __future__ import annotations

import asyncio
import copy
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import httpx

from .call import HttpCall, fire_event, handle_exception
from .cookies import Cookie, CookieSession, build_cookie_header
from .exceptions import HttpCallError
from .fluent import FluentConfigurable
from .response import HttpResponse
from .security import sanitize_headers, validate_url
from .settings import RequestSettings
from .util import combine_url, set_header, to_invariant_string, to_key_value_pairs

if TYPE_CHECKING:
    from .client import FluentClient

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Request(FluentConfigurable):
    """One unit of work against an absolute URL.

    Headers and cookies are copied from the client when the request is built,
    so later changes on either side stay independent. Every fluent method
    returns a new Request.
    """

    def __init__(self, client: FluentClient, url: str | httpx.URL) -> None:
        self.client = client
        self.url = validate_url(url)
        self.settings = RequestSettings(parent=client.settings)
        self.headers: dict[str, str] = {}
        for name, value in self.settings.default_headers.items():
            set_header(self.headers, name, value)
        for name, value in client.headers.items():
            set_header(self.headers, name, value)
        self.cookies: dict[str, Cookie] = dict(client.cookies)
        self.cookie_session: CookieSession | None = None

    def _fluent_target(self) -> Request:
        clone = copy.copy(self)
        clone.settings = self.settings.copy()
        clone.headers = dict(self.headers)
        if self.cookie_session is None:
            clone.cookies = dict(self.cookies)
        return clone

    def bind_cookie_session(self, session: CookieSession) -> Request:
        """Return a request that reads and writes the session's cookie mapping."""
        clone = self._fluent_target()
        clone.cookie_session = session
        clone.cookies = session.cookies
        clone.settings.cookies_enabled = True
        return clone

    def append_path_segment(self, segment: Any) -> Request:
        return self.append_path_segments(segment)

    def append_path_segments(self, *segments: Any) -> Request:
        clone = self._fluent_target()
        base, hash_sep, fragment = str(self.url).partition("#")
        base, query_sep, query = base.partition("?")
        clone.url = validate_url(combine_url(base, *segments) + query_sep + query + hash_sep + fragment)
        return clone

    def set_query_param(self, name: str, value: Any) -> Request:
        clone = self._fluent_target()
        if value is None:
            clone.url = self.url.copy_remove_param(name)
        elif isinstance(value, (list, tuple)):
            url = self.url.copy_remove_param(name)
            clone.url = url.copy_merge_params([(name, to_invariant_string(v)) for v in value])
        else:
            clone.url = self.url.copy_set_param(name, to_invariant_string(value))
        return clone

    def set_query_params(self, values: Any) -> Request:
        request = self
        for name, value in to_key_value_pairs(values):
            request = request.set_query_param(name, value)
        return request

    def remove_query_param(self, name: str) -> Request:
        return self.set_query_param(name, None)

    async def send(
        self,
        method: str,
        content: str | bytes | None = None,
        *,
        content_type: str | None = None,
    ) -> HttpResponse:
        """Send the request and return the response.

        Raises HttpCallError (or a subclass) on transport failure or a status
        that is neither 2xx nor allowed, unless an on_error hook handles it.
        """
        settings = self.settings
        headers = dict(self.headers)
        if content_type is not None:
            set_header(headers, "Content-Type", content_type)
        if settings.cookies_enabled and self.cookies:
            set_header(headers, "Cookie", build_cookie_header(self.cookies.values()))

        http_request = httpx.Request(
            method.upper(),
            self.url,
            headers=headers,
            content=content,
            extensions={"timeout": httpx.Timeout(settings.timeout).as_dict()},
        )
        call = HttpCall(
            request=self,
            http_request=http_request,
            request_body=content if isinstance(content, str) else None,
        )
        call.started_utc = _utcnow()
        await fire_event(settings.before_call, call)
        logger.debug("Sending %s headers=%s", call, sanitize_headers(headers))

        try:
            http_response = await self.client.transport.send(http_request, stream=True)
            call.response = HttpResponse(http_response, call)
            call.ended_utc = _utcnow()
            self._merge_response_cookies(call.response)
            if not call.succeeded:
                try:
                    await http_response.aread()
                finally:
                    await http_response.aclose()
                raise HttpCallError(call)
            return call.response
        except asyncio.CancelledError as exc:
            call.exception = exc
            raise
        except Exception as exc:
            return await handle_exception(call, exc)
        finally:
            if call.ended_utc is None:
                call.ended_utc = _utcnow()
            logger.debug("Finished %s status=%s duration=%s", call, call.http_status, call.duration)
            await fire_event(settings.after_call, call)

    def _merge_response_cookies(self, response: HttpResponse) -> None:
        for name, cookie in response.cookies.items():
            self.cookies[name] = cookie

    async def get(self) -> HttpResponse:
        return await self.send("GET")

    async def head(self) -> HttpResponse:
        return await self.send("HEAD")

    async def options(self) -> HttpResponse:
        return await self.send("OPTIONS")

    async def delete(self) -> HttpResponse:
        return await self.send("DELETE")

    async def post(self, content: str | bytes | None = None, *, content_type: str | None = None) -> HttpResponse:
        return await self.send("POST", content, content_type=content_type)

    async def put(self, content: str | bytes | None = None, *, content_type: str | None = None) -> HttpResponse:
        return await self.send("PUT", content, content_type=content_type)

    async def patch(self, content: str | bytes | None = None, *, content_type: str | None = None) -> HttpResponse:
        return await self.send("PATCH", content, content_type=content_type)

    async def post_json(self, data: Any) -> HttpResponse:
        return await self._send_json("POST", data)

    async def put_json(self, data: Any) -> HttpResponse:
        return await self._send_json("PUT", data)

    async def patch_json(self, data: Any) -> HttpResponse:
        return await self._send_json("PATCH", data)

    async def post_url_encoded(self, data: Any) -> HttpResponse:
        body = self.settings.url_encoded_serializer.serialize(data)
        return await self.send("POST", body, content_type=FORM_CONTENT_TYPE)

    async def post_string(self, text: str) -> HttpResponse:
        return await self.send("POST", text, content_type=TEXT_CONTENT_TYPE)

    async def put_string(self, text: str) -> HttpResponse:
        return await self.send("PUT", text, content_type=TEXT_CONTENT_TYPE)

    async def _send_json(self, method: str, data: Any) -> HttpResponse:
        body = self.settings.json_serializer.serialize(data)
        return await self.send(method, body, content_type=JSON_CONTENT_TYPE)

    async def get_json(self, model: Any = None) -> Any:
        """Send a GET and deserialize the JSON body."""
        response = await self.get()
        if response is None:
            return None
        return await response.get_json(model)

    async def get_string(self) -> str | None:
        response = await self.get()
        if response is None:
            return None
        return await response.get_string()

    async def get_bytes(self) -> bytes | None:
        response = await self.get()
        if response is None:
            return None
        return await response.get_bytes()

    def __repr__(self) -> str:
        return f"<Request {self.url}>"
