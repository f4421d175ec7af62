"""Cookie model, Set-Cookie parsing and cookie sessions."""

from __future__ import annotations

from dataclasses import dataclass
from http.cookies import CookieError, SimpleCookie
from typing import TYPE_CHECKING, Any, Iterable

from .util import to_invariant_string

if TYPE_CHECKING:
    from .client import FluentClient
    from .request import Request


@dataclass(frozen=True)
class Cookie:
    name: str
    value: str
    domain: str | None = None
    path: str | None = None
    expires: str | None = None
    secure: bool = False
    http_only: bool = False

    @classmethod
    def of(cls, name: str, value: Any, expires: str | None = None) -> Cookie:
        return cls(name=name, value="" if value is None else to_invariant_string(value), expires=expires)

    def to_set_cookie_header(self) -> str:
        """Render the cookie the way a server would send it."""
        parts = [f"{self.name}={self.value}"]
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.path:
            parts.append(f"Path={self.path}")
        if self.expires:
            parts.append(f"Expires={self.expires}")
        if self.secure:
            parts.append("Secure")
        if self.http_only:
            parts.append("HttpOnly")
        return "; ".join(parts)


def parse_set_cookie(header: str) -> list[Cookie]:
    """Parse one Set-Cookie header value. Malformed values yield no cookies."""
    jar: SimpleCookie = SimpleCookie()
    try:
        jar.load(header)
    except CookieError:
        return []
    cookies: list[Cookie] = []
    for name, morsel in jar.items():
        cookies.append(
            Cookie(
                name=name,
                value=morsel.value,
                domain=morsel["domain"] or None,
                path=morsel["path"] or None,
                expires=morsel["expires"] or None,
                secure=bool(morsel["secure"]),
                http_only=bool(morsel["httponly"]),
            )
        )
    return cookies


def build_cookie_header(cookies: Iterable[Cookie]) -> str:
    return "; ".join(f"{c.name}={c.value}" for c in cookies)


class CookieSession:
    """Requests created through a session share one evolving cookie mapping.

    Cookies set by responses are visible to every later request of the
    session, and the client's own cookies seed the mapping.
    """

    def __init__(self, client: FluentClient) -> None:
        self.client = client
        self.cookies: dict[str, Cookie] = dict(client.cookies)

    def request(self, *url_segments: Any) -> Request:
        request = self.client.request(*url_segments)
        return request.bind_cookie_session(self)

    def __enter__(self) -> CookieSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    async def __aenter__(self) -> CookieSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None
