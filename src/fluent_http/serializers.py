"""Serializers used to build request bodies and read response bodies."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlencode

from pydantic import TypeAdapter
from pydantic_core import to_json

from .util import to_invariant_string, to_key_value_pairs


class JsonSerializer:
    """JSON serializer backed by pydantic.

    Models, dataclasses and plain containers all serialize the same way, and
    ``deserialize`` validates into ``model`` when one is given.
    """

    def serialize(self, obj: Any) -> str:
        return to_json(obj).decode("utf-8")

    def deserialize(self, data: bytes | str, model: Any = None) -> Any:
        if model is None:
            return json.loads(data)
        return TypeAdapter(model).validate_json(data)


class UrlEncodedSerializer:
    """Form (application/x-www-form-urlencoded) serializer."""

    def serialize(self, obj: Any) -> str:
        if isinstance(obj, str):
            return obj
        pairs: list[tuple[str, str]] = []
        for name, value in to_key_value_pairs(obj):
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                pairs.extend((name, to_invariant_string(v)) for v in value if v is not None)
            else:
                pairs.append((name, to_invariant_string(value)))
        return urlencode(pairs)

    def deserialize(self, data: bytes | str, model: Any = None) -> Any:
        raise NotImplementedError("Deserializing URL-encoded data is not supported.")
