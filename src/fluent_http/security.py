"""URL validation and credential helpers."""

from __future__ import annotations

import base64
import binascii
from typing import Mapping

import httpx


SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "proxy-authorization",
    "set-cookie",
    "x-api-key",
}


def sanitize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return headers with sensitive values redacted for logging."""
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            redacted[key] = "[REDACTED]"
        else:
            redacted[key] = value
    return redacted


def is_absolute_url(url: object) -> bool:
    """Return True if url parses as an absolute http(s) URL."""
    if url is None:
        return False
    try:
        parsed = httpx.URL(str(url))
    except (httpx.InvalidURL, TypeError):
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.host)


def validate_url(url: str | httpx.URL) -> httpx.URL:
    """Parse url, rejecting anything that is not an absolute http(s) URL."""
    text = str(url) if url is not None else ""
    if not text:
        raise ValueError("url is required")
    if "\x00" in text:
        raise ValueError("Invalid url")
    try:
        parsed = httpx.URL(text)
    except httpx.InvalidURL as exc:
        raise ValueError(f"Invalid url: {text}") from exc
    if not parsed.scheme or not parsed.host:
        raise ValueError(f"url must include scheme and host: {text}")
    if parsed.scheme not in {"http", "https"}:
        raise ValueError(f"Unsupported url scheme: {parsed.scheme}")
    return parsed


def encode_basic_auth(username: str, password: str) -> str:
    """Build the value of a Basic Authorization header."""
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {token}"


def decode_basic_auth(header_value: str | None) -> tuple[str, str] | None:
    """Split a Basic Authorization header into (username, password).

    Returns None when the value is missing, uses another scheme, is not valid
    Base64, or has no ':' separator.
    """
    if not header_value or not header_value.startswith("Basic "):
        return None
    encoded = header_value[len("Basic ") :].strip()
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password
