"""Fluent configuration shared by FluentClient and Request.

Every method works on ``self._fluent_target()``. A client returns itself, so
configuration sticks to the shared instance. A request returns a fresh copy,
so forking a chain never changes a sibling chain.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar

from .cookies import Cookie
from .security import encode_basic_auth
from .settings import HttpSettings
from .util import set_header, to_invariant_string, to_key_value_pairs

Self = TypeVar("Self", bound="FluentConfigurable")


class FluentConfigurable:
    settings: HttpSettings
    headers: dict[str, str]
    cookies: dict[str, Cookie]

    def _fluent_target(self: Self) -> Self:
        return self

    def configure(self: Self, configurator: Callable[[HttpSettings], Any]) -> Self:
        """Run configurator against the settings layer."""
        target = self._fluent_target()
        configurator(target.settings)
        return target

    def with_header(self: Self, name: str, value: Any) -> Self:
        target = self._fluent_target()
        set_header(target.headers, name, value)
        return target

    def with_headers(self: Self, headers: Any, *, replace_underscore_with_hyphen: bool = True) -> Self:
        """Set several headers from a mapping, pydantic model or dataclass."""
        target = self._fluent_target()
        for name, value in to_key_value_pairs(headers):
            if replace_underscore_with_hyphen:
                name = name.replace("_", "-")
            set_header(target.headers, name, value)
        return target

    def with_basic_auth(self: Self, username: str, password: str) -> Self:
        return self.with_header("Authorization", encode_basic_auth(username, password))

    def with_oauth_bearer_token(self: Self, token: str) -> Self:
        return self.with_header("Authorization", f"Bearer {token}")

    def enable_cookies(self: Self) -> Self:
        target = self._fluent_target()
        target.settings.cookies_enabled = True
        return target

    def with_cookie(self: Self, name: str | Cookie, value: Any = None, expires: str | None = None) -> Self:
        target = self._fluent_target()
        cookie = name if isinstance(name, Cookie) else Cookie.of(name, value, expires)
        target.settings.cookies_enabled = True
        target.cookies[cookie.name] = cookie
        return target

    def with_cookies(self: Self, cookies: Any, expires: str | None = None) -> Self:
        target = self._fluent_target()
        if cookies is None:
            return target
        target.settings.cookies_enabled = True
        for name, value in to_key_value_pairs(cookies):
            cookie = value if isinstance(value, Cookie) else Cookie.of(name, value, expires)
            target.cookies[cookie.name] = cookie
        return target

    def with_timeout(self: Self, seconds: float | None) -> Self:
        target = self._fluent_target()
        target.settings.timeout = seconds
        return target

    def allow_http_status(self: Self, *statuses: int | str) -> Self:
        """Treat the given codes or patterns (``"4xx"``, ``"400-404"``) as non-errors."""
        target = self._fluent_target()
        patterns = [to_invariant_string(s) for s in _flatten(statuses)]
        current = target.settings.allowed_http_status_range
        if current:
            patterns.insert(0, current)
        target.settings.allowed_http_status_range = ",".join(patterns) if patterns else None
        return target

    def allow_any_http_status(self: Self) -> Self:
        target = self._fluent_target()
        target.settings.allowed_http_status_range = "*"
        return target


def _flatten(values: Iterable[Any]) -> list[Any]:
    flat: list[Any] = []
    for value in values:
        if isinstance(value, (list, tuple, set)):
            flat.extend(value)
        else:
            flat.append(value)
    return flat
