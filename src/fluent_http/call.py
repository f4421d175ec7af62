"""The diagnostic record of one HTTP call, and the hook/exception rules around it."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Callable

import httpx

from .exceptions import HttpCallError, HttpTimeoutError
from .status_range import is_status_match

if TYPE_CHECKING:
    from .request import Request
    from .response import HttpResponse

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class HttpCall:
    """Request, response, timing and failure details of one call.

    Available to event hooks, carried by every HttpCallError, and logged by
    HttpTest.
    """

    request: Request
    http_request: httpx.Request
    request_body: str | None = None
    response: HttpResponse | None = None
    exception: BaseException | None = None
    # Event hooks set this to stop an exception from propagating.
    exception_handled: bool = False
    started_utc: datetime | None = None
    ended_utc: datetime | None = None

    @property
    def http_response(self) -> httpx.Response | None:
        return self.response.response_message if self.response is not None else None

    @property
    def http_status(self) -> int | None:
        return self.response.status_code if self.response is not None else None

    @property
    def duration(self) -> timedelta | None:
        if self.started_utc is None or self.ended_utc is None:
            return None
        return self.ended_utc - self.started_utc

    @property
    def completed(self) -> bool:
        return self.response is not None

    @property
    def succeeded(self) -> bool:
        if self.response is None:
            return False
        status = self.response.status_code
        if 200 <= status < 300:
            return True
        return is_status_match(self.request.settings.allowed_http_status_range, status)

    def __str__(self) -> str:
        return f"{self.http_request.method} {self.http_request.url}"


async def fire_event(handler: Callable[[HttpCall], Any] | None, call: HttpCall) -> None:
    """Invoke a sync or async event hook."""
    if handler is None:
        return
    result = handler(call)
    if inspect.isawaitable(result):
        await result


async def handle_exception(call: HttpCall, exc: BaseException) -> HttpResponse | None:
    """Record exc on call, run the on_error hook, then raise unless the hook handled it."""
    call.exception = exc
    await fire_event(call.request.settings.on_error, call)
    if call.exception_handled:
        logger.debug("Exception handled by on_error hook: %s", call)
        return call.response
    if isinstance(exc, HttpCallError):
        raise exc
    if isinstance(exc, httpx.TimeoutException):
        raise HttpTimeoutError(call, exc) from exc
    raise HttpCallError(call, exc) from exc
