"""Library-specific exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from .call import HttpCall


class FluentHttpError(Exception):
    """Base exception for all fluent-http failures."""

    def __init__(
        self,
        message: str,
        *,
        call: HttpCall | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.call = call
        self.cause = cause


class HttpCallError(FluentHttpError):
    """Raised when a call fails, either in transport or with a non-success status."""

    def __init__(self, call: HttpCall, cause: BaseException | None = None, message: str | None = None) -> None:
        super().__init__(message or _build_message(call, cause), call=call, cause=cause)

    @property
    def status_code(self) -> int | None:
        return self.call.http_status if self.call is not None else None

    async def get_response_string(self) -> str | None:
        """Return the body of the failed response, or None if no response arrived."""
        if self.call is None or self.call.response is None:
            return None
        return await self.call.response.get_string()

    async def get_response_json(self, model: Any = None) -> Any:
        if self.call is None or self.call.response is None:
            return None
        return await self.call.response.get_json_or_default(model)


class HttpTimeoutError(HttpCallError):
    """Raised when a call exceeds its configured timeout."""

    def __init__(self, call: HttpCall, cause: BaseException | None = None) -> None:
        super().__init__(call, cause, message=f"Call timed out: {call}")


class HttpParsingError(HttpCallError):
    """Raised when a response body cannot be deserialized."""

    def __init__(self, call: HttpCall, expected_format: str, cause: BaseException | None = None) -> None:
        super().__init__(
            call,
            cause,
            message=f"Response could not be deserialized to {expected_format}: {call}",
        )
        self.expected_format = expected_format


class HttpTestAssertionError(FluentHttpError, AssertionError):
    """Raised by HttpTest assertions when logged calls don't meet expectations."""

    def __init__(
        self,
        conditions: Sequence[str],
        expected_count: int | None,
        actual_count: int,
        *,
        negate: bool = False,
    ) -> None:
        self.conditions = list(conditions)
        self.expected_count = expected_count
        self.actual_count = actual_count
        self.negate = negate
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.expected_count is None:
            expected = "no calls" if self.negate else "any calls"
        else:
            expected = _count_phrase(self.expected_count)
            if self.negate:
                expected = f"other than {expected}"
        if self.conditions:
            expected += " matching " + " and ".join(self.conditions)
        else:
            expected += " to be made"

        if self.actual_count == 0:
            actual = "no matching calls were made"
        elif self.actual_count == 1:
            actual = "1 matching call was made"
        else:
            actual = f"{self.actual_count} matching calls were made"
        return f"Expected {expected}, but {actual}."


def _count_phrase(count: int) -> str:
    return "1 call" if count == 1 else f"{count} calls"


def _build_message(call: HttpCall, cause: BaseException | None) -> str:
    if call.completed and not call.succeeded:
        reason = call.response.reason_phrase if call.response is not None else ""
        status = f"{call.http_status} ({reason})" if reason else f"{call.http_status}"
        return f"Call failed with status code {status}: {call}"
    if cause is not None:
        return f"Call failed. {cause}: {call}"
    return f"Call failed: {call}"
