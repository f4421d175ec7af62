"""Small helpers shared by clients, requests and the test assertions."""

from __future__ import annotations

import dataclasses
import re
from typing import Any, Iterable, Mapping, MutableMapping

from pydantic import BaseModel


def to_key_value_pairs(values: Any) -> list[tuple[str, Any]]:
    """Flatten a structured value into ordered (name, value) pairs.

    Accepts mappings, pydantic models, dataclass instances and iterables of
    pairs. Anything else is rejected rather than inspected reflectively.
    """
    if values is None:
        return []
    if isinstance(values, Mapping):
        return [(str(k), v) for k, v in values.items()]
    if isinstance(values, BaseModel):
        return [(str(k), v) for k, v in values.model_dump(by_alias=True).items()]
    if dataclasses.is_dataclass(values) and not isinstance(values, type):
        return [(f.name, getattr(values, f.name)) for f in dataclasses.fields(values)]
    if isinstance(values, (str, bytes)):
        raise TypeError("expected a mapping or record, not a string")
    if isinstance(values, Iterable):
        pairs: list[tuple[str, Any]] = []
        for item in values:
            name, value = item
            pairs.append((str(name), value))
        return pairs
    raise TypeError(f"cannot convert {type(values).__name__} to name/value pairs")


def matches_pattern(text: str | None, pattern: str | None) -> bool:
    """Case-sensitive whole-string match where ``*`` matches any run of characters."""
    if pattern == "*":
        return True
    if pattern is None:
        return False
    if text is None:
        text = ""
    regex = re.escape(pattern).replace(r"\*", ".*")
    return re.fullmatch(regex, text, flags=re.DOTALL) is not None


def to_invariant_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def set_header(headers: MutableMapping[str, str], name: str, value: Any) -> None:
    """Set a header, replacing any existing name regardless of case. None removes it."""
    for existing in [k for k in headers if k.lower() == name.lower()]:
        del headers[existing]
    if value is not None:
        headers[name] = to_invariant_string(value)


def get_header(headers: Mapping[str, str], name: str) -> str | None:
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value
    return None


def combine_url(base: str, *segments: Any) -> str:
    """Join URL parts with exactly one '/' between each."""
    url = str(base)
    for segment in segments:
        part = to_invariant_string(segment)
        if not part:
            continue
        if url.endswith("/") and part.startswith("/"):
            url += part.lstrip("/")
        elif url.endswith("/") or part.startswith("/") or part.startswith("?"):
            url += part
        else:
            url += "/" + part
    return url
