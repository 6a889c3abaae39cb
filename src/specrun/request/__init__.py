"""Request construction: parse raw values, cast, validate, and build.

Typical usage::

    from specrun.request import build_request, parse_request_values

    values = parse_request_values(["X-Vendor: acme"], ["123"], "", "price=1099")
    request = build_request(op, "https://api.example.com", values, profile.auth)

Sub-modules:

* :mod:`~specrun.request.values` -- raw input parsing and form encoding.
* :mod:`~specrun.request.casting` -- type casting and parameter validation.
* :mod:`~specrun.request.body` -- JSON/form body assembly.
* :mod:`~specrun.request.builder` -- URL and ``httpx.Request`` construction.
"""

from specrun.request.body import assemble_body, nest_values
from specrun.request.builder import build_request, request_url, validate
from specrun.request.casting import CastValue, cast_parameter, cast_value
from specrun.request.values import RequestValues, encode_values, parse_request_values

__all__ = [
    "CastValue",
    "RequestValues",
    "assemble_body",
    "build_request",
    "cast_parameter",
    "cast_value",
    "encode_values",
    "nest_values",
    "parse_request_values",
    "request_url",
    "validate",
]
