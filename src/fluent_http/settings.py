"""Layered HTTP settings: global -> client -> request.

Each layer stores only the values explicitly set on it. A read falls through
to the parent layer and finally to a hard-coded default. When a child layer
is created it copies the explicit values of its parent, so later changes to
(or a reset of) the parent never rewrite what the child already captured.
"""

from __future__ import annotations

import os
import threading
from types import MappingProxyType
from typing import Any, Callable

from .serializers import JsonSerializer, UrlEncodedSerializer
from .status_range import validate_status_pattern
from .transport import DefaultTransportFactory

DEFAULT_TIMEOUT = 100.0

_DEFAULT_JSON_SERIALIZER = JsonSerializer()
_DEFAULT_URL_ENCODED_SERIALIZER = UrlEncodedSerializer()
_DEFAULT_TRANSPORT_FACTORY = DefaultTransportFactory()


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _validate_timeout(value: Any) -> None:
    if value is not None and value <= 0:
        raise ValueError("timeout must be greater than 0")


def _default(name: str) -> Any:
    # Environment overrides are evaluated at call time.
    if name == "timeout":
        return _float_env("FLUENT_HTTP_TIMEOUT", DEFAULT_TIMEOUT)
    if name == "cookies_enabled":
        return _bool_env("FLUENT_HTTP_COOKIES_ENABLED", False)
    if name == "default_headers":
        return MappingProxyType({})
    if name == "json_serializer":
        return _DEFAULT_JSON_SERIALIZER
    if name == "url_encoded_serializer":
        return _DEFAULT_URL_ENCODED_SERIALIZER
    if name == "transport_factory":
        return _DEFAULT_TRANSPORT_FACTORY
    return None


class _Option:
    """Attribute that resolves through the settings chain."""

    def __init__(self, validator: Callable[[Any], None] | None = None) -> None:
        self.validator = validator
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: HttpSettings | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance.get(self.name)

    def __set__(self, instance: HttpSettings, value: Any) -> None:
        instance.set(self.name, value)

    def __delete__(self, instance: HttpSettings) -> None:
        instance.unset(self.name)


class HttpSettings:
    """One layer of settings."""

    timeout = _Option(_validate_timeout)
    cookies_enabled = _Option()
    allowed_http_status_range = _Option(validate_status_pattern)
    default_headers = _Option()
    json_serializer = _Option()
    url_encoded_serializer = _Option()
    before_call = _Option()
    after_call = _Option()
    on_error = _Option()
    transport_factory = _Option()

    def __init__(self, parent: HttpSettings | None = None) -> None:
        self._parent = parent
        self._values: dict[str, Any] = parent.explicit_values() if parent is not None else {}

    @property
    def parent(self) -> HttpSettings | None:
        return self._parent

    def explicit_values(self) -> dict[str, Any]:
        """Return a copy of the values set directly on this layer."""
        return dict(self._values)

    def is_set(self, name: str) -> bool:
        return name in self._values

    def get(self, name: str) -> Any:
        self._check_name(name)
        if name in self._values:
            return self._values[name]
        if self._parent is not None:
            return self._parent.get(name)
        return _default(name)

    def set(self, name: str, value: Any) -> None:
        option = self._check_name(name)
        if option.validator is not None:
            option.validator(value)
        if name == "default_headers" and value is not None:
            value = MappingProxyType(dict(value))
        self._values[name] = value

    def unset(self, name: str) -> None:
        self._check_name(name)
        self._values.pop(name, None)

    def copy(self) -> HttpSettings:
        """Return a sibling layer with the same parent and its own copy of the values."""
        clone = type(self)(self._parent)
        clone._values = dict(self._values)
        return clone

    def _check_name(self, name: str) -> _Option:
        option = getattr(type(self), name, None)
        if not isinstance(option, _Option):
            raise AttributeError(f"Unknown setting: {name}")
        return option

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"


class GlobalSettings(HttpSettings):
    """Process-wide default layer."""

    def __init__(self) -> None:
        super().__init__(parent=None)
        self._lock = threading.Lock()

    def configure(self, configurator: Callable[[GlobalSettings], Any]) -> GlobalSettings:
        """Apply configurator while holding this layer's lock."""
        with self._lock:
            configurator(self)
        return self

    def reset_defaults(self) -> None:
        """Forget every explicit global value.

        Client and request layers created earlier keep the values they copied.
        """
        with self._lock:
            self._values = {}


class ClientSettings(HttpSettings):
    """Settings owned by one FluentClient."""


class RequestSettings(HttpSettings):
    """Override layer owned by one Request."""


global_settings = GlobalSettings()
