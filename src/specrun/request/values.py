"""Parse raw command-line input into :class:`RequestValues`.

Headers arrive as ``"Name: Value"`` strings, path values as a positional
list, and query and body values as single form-encoded strings such as
``sort=-created_at&tags=a,b``. Nothing here looks at the operation: values
are parsed exactly as given and matched against parameters later.

Form strings follow the usual ``application/x-www-form-urlencoded`` rules:
pairs separated by ``&``, ``+`` for space, ``%XX`` escapes. A ``;`` inside a
pair is rejected instead of being treated as a separator.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import quote_plus

import httpx

from specrun.exceptions import ParseError, quote

_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass
class RequestValues:
    """The raw values for one request.

    ``query`` and ``body`` may hold several values per key; only the first
    is consumed when building the request.
    """

    header: httpx.Headers = field(default_factory=httpx.Headers)
    path: list[str] = field(default_factory=list)
    query: httpx.QueryParams = field(default_factory=httpx.QueryParams)
    body: httpx.QueryParams = field(default_factory=httpx.QueryParams)


def parse_request_values(
    headers: Optional[list[str]] = None,
    path_values: Optional[list[str]] = None,
    query: str = "",
    body: str = "",
) -> RequestValues:
    """Parse raw header, path, query, and body input.

    Args:
        headers: ``"Name: Value"`` strings. A repeated name keeps the last
            value.
        path_values: Positional path values, used verbatim.
        query: Form-encoded query string.
        body: Form-encoded body string.

    Returns:
        The parsed values.

    Raises:
        ParseError: If a header has no ``:``, or the query or body string
            has a bad escape or a ``;`` separator.

    Example::

        >>> values = parse_request_values(["X-Vendor: acme"], ["123"], "page=2")
        >>> values.header["x-vendor"], values.query["page"]
        ('acme', '2')
    """
    header_values = httpx.Headers()
    for header in headers or []:
        name, sep, value = header.partition(":")
        if not sep:
            raise ParseError(f"parse header: could not parse {quote(header)}")
        header_values[name.strip()] = value.strip()

    try:
        query_values = parse_form(query)
    except ValueError as exc:
        raise ParseError(f"parse query: {exc}") from exc
    try:
        body_values = parse_form(body)
    except ValueError as exc:
        raise ParseError(f"parse body: {exc}") from exc

    return RequestValues(
        header=header_values,
        path=list(path_values or []),
        query=query_values,
        body=body_values,
    )


def parse_form(text: str) -> httpx.QueryParams:
    """Parse a form-encoded string, keeping repeated keys in order.

    Escapes that do not decode as UTF-8 are kept with ``surrogateescape``,
    so :func:`encode_values` writes back the original bytes.

    Raises:
        ValueError: On a ``;`` in a pair or a malformed ``%`` escape. The
            first problem found is reported.
    """
    pairs: list[tuple[str, str]] = []
    for pair in text.split("&"):
        if not pair:
            continue
        if ";" in pair:
            raise ValueError("invalid semicolon separator in query")
        key, _, value = pair.partition("=")
        pairs.append((_unescape(key), _unescape(value)))
    return httpx.QueryParams(pairs)


def _unescape(text: str) -> str:
    match = _ESCAPE_RE.search(text)
    if match:
        bad = text[match.start() : match.start() + 3]
        raise ValueError(f"invalid URL escape {quote(bad)}")

    raw = bytearray()
    i = 0
    while i < len(text):
        char = text[i]
        if char == "%":
            raw.append(int(text[i + 1 : i + 3], 16))
            i += 3
            continue
        raw.extend(b" " if char == "+" else char.encode("utf-8", errors="surrogateescape"))
        i += 1
    return raw.decode("utf-8", errors="surrogateescape")


def encode_values(values: httpx.QueryParams) -> str:
    """Encode *values* as a form string, sorted by key.

    Values of a repeated key keep their order. Spaces become ``+``.

    Example::

        >>> encode_values(httpx.QueryParams([("q", "a b"), ("page", "2")]))
        'page=2&q=a+b'
    """
    parts = []
    for key in sorted(values.keys()):
        for value in values.get_list(key):
            parts.append(f"{_encode(key)}={_encode(value)}")
    return "&".join(parts)


def _encode(text: str) -> str:
    return quote_plus(text, safe="", errors="surrogateescape")
