"""Parsing of allowed HTTP status patterns such as ``"4xx,500-503"``."""

from __future__ import annotations

import re

_ITEM = re.compile(r"^(?:\*|[0-9xX]{1,3}\*?)$")


def _check(item: str, pattern: str) -> str:
    if not _ITEM.match(item):
        raise ValueError(f"Invalid HTTP status pattern: {pattern!r}")
    return item


def _bound(item: str, fill: str) -> int:
    if item == "*":
        return 0 if fill == "0" else 999
    digits = item.rstrip("*").ljust(3, "x")
    return int(re.sub("[xX]", fill, digits))


def _item_regex(item: str) -> str:
    if item == "*":
        return r"\d+"
    body = "".join(r"\d" if c in "xX" else c for c in item.rstrip("*"))
    return body + (r"\d*" if item.endswith("*") else "")


def _parse(pattern: str) -> list[tuple[int, int] | str]:
    items: list[tuple[int, int] | str] = []
    for raw in pattern.split(","):
        item = raw.replace(" ", "")
        if "-" in item:
            start, _, end = item.partition("-")
            low = _bound(_check(start, pattern), "0")
            high = _bound(_check(end, pattern), "9")
            items.append((low, high))
        else:
            items.append(_item_regex(_check(item, pattern)))
    return items


def validate_status_pattern(pattern: str | None) -> None:
    """Raise ValueError if pattern cannot be parsed."""
    if pattern:
        _parse(pattern)


def is_status_match(pattern: str | None, status: int) -> bool:
    """Return True if status is covered by pattern.

    Items are separated by commas. Each item is ``*``, an exact code, a code
    with ``x`` digit wildcards (``4xx``), a prefix ending in ``*`` (``40*``) or
    an inclusive range of those (``400-499``, ``4xx-5xx``). None never matches.
    """
    if not pattern:
        return False
    for item in _parse(pattern):
        if isinstance(item, tuple):
            if item[0] <= status <= item[1]:
                return True
        elif re.fullmatch(item, str(status)):
            return True
    return False
