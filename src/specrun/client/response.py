"""Render an :class:`httpx.Response` through the output system.

The body goes to stdout. JSON bodies (any media type containing ``json``)
are decoded and pretty-printed; everything else is printed as text. With
``--verbose`` the status line and the sorted response headers are written
to stderr first.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from specrun.output import get_output
from specrun.request.body import is_json


def format_api_response(response: httpx.Response, verbose: bool = False) -> None:
    """Print *response* using the global :class:`~specrun.output.OutputManager`.

    Args:
        response: The response to render.
        verbose: Also print the status line and headers to stderr.
    """
    output = get_output()
    content_type = response.headers.get("content-type", "")

    if verbose:
        output.info(f"{response.http_version} {response.status_code} {response.reason_phrase}")
        for name in sorted({key.title() for key in response.headers.keys()}):
            for value in response.headers.get_list(name):
                output.header(name, value)
        output.info("")

    data = extract_response_data(response, content_type)
    if data is not None:
        output.format_response(data, content_type)


def extract_response_data(response: httpx.Response, content_type: str = "") -> Any:
    """Return the decoded body of *response*.

    JSON media types are decoded; a body that fails to decode is returned as
    text. Returns ``None`` for an empty body.
    """
    if not response.content:
        return None

    if is_json(content_type):
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            pass
    return response.text
