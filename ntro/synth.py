"""TypeScript type synthesis from value trees."""

from __future__ import annotations

import json
import re

from .models import (
    BoolValue,
    FloatValue,
    IntValue,
    MappingValue,
    NullValue,
    SequenceValue,
    StrValue,
    Value,
)

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_NON_FINITE = {".inf", "+.inf", "-.inf", ".nan"}


def is_identifier(name: str) -> bool:
    """Return True when ``name`` can be used as a bare TypeScript property key."""
    return IDENTIFIER_PATTERN.fullmatch(name) is not None


def quote_string(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def format_key(key: str) -> str:
    """Return ``key`` bare when it is an identifier, JSON-quoted otherwise."""
    return key if is_identifier(key) else quote_string(key)


def synthesize(value: Value) -> str:
    """Return the exact TypeScript type expression accepting ``value``.

    Scalars become literal types, sequences become positional tuples and mappings
    become object types with their keys in source order.
    """
    if isinstance(value, NullValue):
        return "null"
    if isinstance(value, BoolValue):
        return "true" if value.value else "false"
    if isinstance(value, (IntValue, FloatValue)):
        return _numeric_literal(value.text)
    if isinstance(value, StrValue):
        return quote_string(value.value)
    if isinstance(value, SequenceValue):
        return "[" + ", ".join(synthesize(item) for item in value.items) + "]"
    if isinstance(value, MappingValue):
        if not value.pairs:
            return "{}"
        members = "; ".join(f"{format_key(key)}: {synthesize(item)}" for key, item in value.pairs)
        return "{ " + members + " }"
    raise TypeError(f"Unsupported value node: {value!r}")


def _numeric_literal(text: str) -> str:
    if text.lower() in _NON_FINITE:
        return "number"
    if text.startswith("+"):
        return text[1:]
    return text


__all__ = ["format_key", "is_identifier", "quote_string", "synthesize"]
