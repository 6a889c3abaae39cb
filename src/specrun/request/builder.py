"""Turn an :class:`~specrun.models.Operation` plus raw values into an ``httpx.Request``.

:func:`build_request` runs every step in order and either returns a complete
request or raises; there is no partially built result:

1. Check the body format can be encoded.
2. Validate: path arity, then header, query and body parameters.
3. Substitute path placeholders and append the encoded query string.
4. Assemble the body.
5. Set headers: user values, ``Content-Type``, ``User-Agent``, auth.
"""

from __future__ import annotations

import platform
import re
from typing import Optional

import httpx

from specrun import __version__
from specrun.auth import CommandRunner, authenticate, run_command
from specrun.exceptions import PathArityError
from specrun.models import AuthConfig, Operation
from specrun.request.body import assemble_body, check_body_format
from specrun.request.casting import validate_parameters
from specrun.request.values import RequestValues, encode_values

USER_AGENT = f"specrun/{__version__} ({platform.system().lower()} {platform.machine()})"
_PLACEHOLDER_RE = re.compile(r"\{[^{}]*\}")


def validate(op: Operation, values: RequestValues) -> None:
    """Validate *values* against *op*'s parameters.

    Extra path values are ignored.

    Raises:
        PathArityError: If fewer path values than path parameters are given.
        ValidationError: For the first missing or disallowed value.
    """
    want = len(op.parameters.path)
    got = len(values.path)
    if got < want:
        raise PathArityError(got, want)

    validate_parameters(op.parameters.header, values.header)
    validate_parameters(op.parameters.query, values.query)
    validate_parameters(op.parameters.body, values.body)


def request_url(op: Operation, server_url: str, values: RequestValues) -> str:
    """Return the absolute URL for *op*.

    Each ``{name}`` placeholder is replaced by the path value at the same
    position, as-is (no escaping). One trailing ``/`` is trimmed from
    *server_url*, so ``https://api.example.com/`` and ``/users/{userId}``
    join as ``https://api.example.com/users/test-user``.
    """
    replacements = {
        f"{{{param.name}}}": value for param, value in zip(op.parameters.path, values.path)
    }
    # Single pass, so a value containing "{name}" is not substituted again
    path = _PLACEHOLDER_RE.sub(lambda m: replacements.get(m.group(0), m.group(0)), op.path)
    if len(values.query) > 0:
        path = f"{path}?{encode_values(values.query)}"

    if server_url.endswith("/"):
        server_url = server_url[:-1]
    return server_url + path


def build_request(
    op: Operation,
    server_url: str,
    values: RequestValues,
    auth: Optional[AuthConfig] = None,
    command_runner: CommandRunner = run_command,
) -> httpx.Request:
    """Build the request for one invocation of *op*.

    Args:
        op: The operation to call.
        server_url: Base URL the operation path is appended to.
        values: Parsed user input.
        auth: The profile's auth settings, if any.
        command_runner: Runs the credential command, see
            :func:`~specrun.auth.authenticate`.

    Returns:
        The request, ready to be sent.

    Raises:
        UnsupportedFormatError: If the body format cannot be encoded.
        PathArityError: If path values are missing.
        ValidationError: If a value is missing or not allowed.
        CastError: If a body value does not match its type.
        ParseError: If dotted body keys conflict.
        AuthError: If credentials cannot be obtained.
    """
    check_body_format(op)
    validate(op, values)

    url = request_url(op, server_url, values)
    body = assemble_body(op, values.body)

    headers = httpx.Headers(values.header)
    if op.has_body:
        headers["Content-Type"] = op.body_format
    headers["User-Agent"] = USER_AGENT
    authenticate(headers, auth, command_runner)

    return httpx.Request(op.method.value.upper(), url, headers=headers, content=body)
