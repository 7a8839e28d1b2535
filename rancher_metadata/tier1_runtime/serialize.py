"""
rancher_metadata.tier1_runtime.serialize
───────────────────────────────────────────
Decoding of metadata service response bodies into a tagged result:

    Structured(value)   body parsed as JSON
    Raw(text)           body was not JSON; kept verbatim
    ABSENT              service reported {"code": 404} for the path

Accessors match on the variant instead of probing the value for keys.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Union

from rancher_metadata.tier0_core.http import HTTP

Decoder = Callable[[str], Any]


@dataclass(frozen=True)
class Structured:
    value: Any


@dataclass(frozen=True)
class Raw:
    text: str


class Absent:
    """Singleton marker for "no such path". Falsy, like the value it stands for."""

    _instance: "Absent | None" = None

    def __new__(cls) -> "Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = Absent()

Decoded = Union[Structured, Raw, Absent]


def json_decode(text: str) -> Any:
    """Default decoder. Raises ValueError (json.JSONDecodeError) on bad input."""
    return json.loads(text)


def is_not_found(value: Any) -> bool:
    """True for the service's not-found body: a mapping with code == 404."""
    return isinstance(value, dict) and value.get("code") == HTTP.NOT_FOUND


def decode_body(body: str, decoder: Decoder = json_decode) -> Decoded:
    """
    Decode a response body into a tagged result.

    Usage:
        decode_body('{"name": "web_1"}')    # → Structured({"name": "web_1"})
        decode_body('10.42.0.7')            # → Raw('10.42.0.7')
        decode_body('{"code": 404}')        # → ABSENT
    """
    try:
        value = decoder(body)
    except ValueError:
        return Raw(body)
    if is_not_found(value):
        return ABSENT
    return Structured(value)


def unwrap(result: Decoded) -> Any:
    """Return the plain value behind a decoded result (None when absent)."""
    if isinstance(result, Structured):
        return result.value
    if isinstance(result, Raw):
        return result.text
    return None


__all__ = [
    "Structured",
    "Raw",
    "Absent",
    "ABSENT",
    "Decoded",
    "Decoder",
    "json_decode",
    "is_not_found",
    "decode_body",
    "unwrap",
]
