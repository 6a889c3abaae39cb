"""Assemble the request body from flat body values.

JSON media types (anything containing ``json``, so ``application/hal+json``
and ``application/vnd.api+json; charset=utf-8`` qualify) get a nested JSON
document: every value is cast through its declared body parameter and dotted
keys are expanded into nested objects. Keys without a declared parameter are
sent as strings.

``application/x-www-form-urlencoded`` bodies are re-encoded verbatim, without
casting or nesting. Any other media type is an error.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from specrun.exceptions import ParseError, UnsupportedFormatError, quote
from specrun.models import Operation, ParameterLocation
from specrun.request.casting import CastValue, cast_parameter
from specrun.request.values import encode_values

FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"
_MAX_PLAIN_INTEGRAL = 1e21


def is_json(media_type: str) -> bool:
    """Return True for JSON media types, including vendor variants."""
    return "json" in media_type


def check_body_format(op: Operation) -> None:
    """Raise :class:`UnsupportedFormatError` if *op*'s body cannot be encoded."""
    if op.has_body and not is_json(op.body_format) and op.body_format != FORM_MEDIA_TYPE:
        raise UnsupportedFormatError(op.body_format)


def assemble_body(op: Operation, body_values: httpx.QueryParams) -> Optional[bytes]:
    """Encode *body_values* in *op*'s body format.

    Returns:
        The body bytes, or ``None`` when the operation takes no body.

    Raises:
        UnsupportedFormatError: If the body format is neither JSON nor form.
        CastError: If a value does not match its parameter's type.
        ParseError: If dotted keys conflict with each other.
    """
    if not op.has_body:
        return None
    check_body_format(op)

    if op.body_format == FORM_MEDIA_TYPE:
        return encode_values(body_values).encode("utf-8")

    flat: dict[str, CastValue] = {}
    for name in body_values.keys():
        value = body_values[name]
        param = op.parameters.by_name(ParameterLocation.BODY, name)
        flat[name] = cast_parameter(param, value) if param else value
    return dump_json(nest_values(flat))


def nest_values(flat: dict[str, CastValue]) -> dict[str, Any]:
    """Expand dotted keys of *flat* into nested dictionaries.

    Example::

        >>> nest_values({"sku": "S1", "meta.published": True})
        {'sku': 'S1', 'meta': {'published': True}}

    Raises:
        ParseError: If a dotted key passes through a key that already holds
            a value, e.g. ``meta=1`` together with ``meta.published=true``.
    """
    nested: dict[str, Any] = {key: value for key, value in flat.items() if "." not in key}

    # Sorted, so "a.b" is placed before "a.b.c" and the conflict is reported on the longer key
    for key in sorted(k for k in flat if "." in k):
        segments = key.split(".")
        node = nested
        for depth, segment in enumerate(segments[:-1], start=1):
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                prefix = ".".join(segments[:depth])
                raise ParseError(f"parse body: {quote(key)} conflicts with {quote(prefix)}")
            node = child
        node[segments[-1]] = flat[key]
    return nested


def dump_json(document: Any) -> bytes:
    """Serialize *document* as compact JSON with sorted keys.

    Integral floats below 1e21 are written as plain integers, so ``10.0``
    becomes ``10`` and ``1e16`` becomes ``10000000000000000``. Bytes that were
    not valid UTF-8 in the form input become U+FFFD.
    """
    return json.dumps(
        _json_ready(document), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def _json_ready(value: Any) -> Any:
    if isinstance(value, str):
        return _valid_utf8(value)
    if isinstance(value, float):
        if value.is_integer() and abs(value) < _MAX_PLAIN_INTEGRAL:
            return int(value)
        return value
    if isinstance(value, dict):
        return {_valid_utf8(key): _json_ready(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_json_ready(item) for item in value]
    return value


def _valid_utf8(text: str) -> str:
    return text.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")
