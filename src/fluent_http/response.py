"""Wrapper around a received httpx.Response."""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING, Any, AsyncIterator

import httpx

from .call import handle_exception
from .cookies import Cookie, parse_set_cookie
from .exceptions import HttpParsingError

if TYPE_CHECKING:
    from .call import HttpCall

_JSON = "json"
_STRING = "string"
_BYTES = "bytes"


class HttpResponse:
    """A received response whose body can be read once and replayed.

    The first read captures the body; later reads are served from the capture.
    Reading the body as a stream gives up the capture, so every read after
    ``get_stream`` returns None.
    """

    def __init__(self, response: httpx.Response, call: HttpCall) -> None:
        self.response_message = response
        self.call = call
        self._captured_kind: str | None = None
        self._captured_body: Any = None
        self._stream_read = False

    @property
    def status_code(self) -> int:
        return self.response_message.status_code

    @property
    def reason_phrase(self) -> str:
        return self.response_message.reason_phrase

    @cached_property
    def headers(self) -> httpx.Headers:
        """Response headers, case-insensitive, repeated names joined with ', '."""
        flattened: dict[str, list[str]] = {}
        names: dict[str, str] = {}
        for name, value in self.response_message.headers.multi_items():
            key = name.lower()
            names.setdefault(key, name)
            flattened.setdefault(key, []).append(value)
        return httpx.Headers({names[key]: ", ".join(values) for key, values in flattened.items()})

    @cached_property
    def cookies(self) -> dict[str, Cookie]:
        received: dict[str, Cookie] = {}
        for header in self.response_message.headers.get_list("set-cookie"):
            for cookie in parse_set_cookie(header):
                received[cookie.name] = cookie
        return received

    @property
    def _serializer(self) -> Any:
        return self.call.request.settings.json_serializer

    async def _read(self) -> bytes:
        return await self.response_message.aread()

    async def get_json(self, model: Any = None) -> Any:
        """Deserialize the JSON body, into ``model`` when given.

        Raises HttpParsingError if the body is not valid for ``model`` unless an
        on_error hook marks it handled, in which case None is returned.
        """
        if self._stream_read:
            return None
        if self._captured_kind == _JSON and model is None:
            return self._captured_body
        if self._captured_kind in (_STRING, _BYTES):
            data = self._captured_body
        else:
            data = await self._read()
        try:
            value = self._serializer.deserialize(data, model)
        except Exception as exc:
            if self._captured_kind is None:
                self._captured_kind = _STRING
                self._captured_body = self._decode(data)
            error = HttpParsingError(self.call, "JSON", exc)
            error.__cause__ = exc
            await handle_exception(self.call, error)
            return None
        self._captured_kind = _JSON
        self._captured_body = value
        return value

    async def get_json_or_default(self, model: Any = None, default: Any = None) -> Any:
        """Like get_json, but returns default instead of raising on a parse failure."""
        try:
            value = await self.get_json(model)
        except HttpParsingError:
            return default
        return default if value is None else value

    async def get_string(self) -> str | None:
        if self._stream_read:
            return None
        if self._captured_kind == _STRING:
            return self._captured_body
        if self._captured_kind == _BYTES:
            return self._decode(self._captured_body)
        if self._captured_kind == _JSON:
            # The body was parsed straight into an object; re-serialize it.
            return self._serializer.serialize(self._captured_body)
        self._captured_body = self._decode(await self._read())
        self._captured_kind = _STRING
        return self._captured_body

    async def get_bytes(self) -> bytes | None:
        if self._stream_read:
            return None
        if self._captured_kind == _BYTES:
            return self._captured_body
        if self._captured_kind == _STRING:
            return self._captured_body.encode(self._encoding)
        if self._captured_kind == _JSON:
            return self._serializer.serialize(self._captured_body).encode("utf-8")
        self._captured_body = await self._read()
        self._captured_kind = _BYTES
        return self._captured_body

    async def get_stream(self) -> AsyncIterator[bytes]:
        """Return the body as an async byte iterator. Later reads return None."""
        self._stream_read = True
        self._captured_kind = None
        self._captured_body = None
        return self.response_message.aiter_bytes()

    @property
    def _encoding(self) -> str:
        return self.response_message.encoding or "utf-8"

    def _decode(self, data: bytes | str) -> str:
        if isinstance(data, str):
            return data
        try:
            return data.decode(self._encoding, errors="replace")
        except LookupError:
            return data.decode("utf-8", errors="replace")

    async def aclose(self) -> None:
        await self.response_message.aclose()

    async def __aenter__(self) -> HttpResponse:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"<HttpResponse [{self.status_code}]>"
