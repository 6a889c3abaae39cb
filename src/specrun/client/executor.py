"""Send a built request and report the outcome.

:class:`Executor` wraps :class:`httpx.Client` and must be used as a context
manager so the connection pool is closed. Transport failures (DNS, refused
connections, timeouts) are raised as
:class:`~specrun.exceptions.ConnectionError_`; HTTP error statuses are not
exceptions here, they only change the exit code returned by :func:`execute`.
"""

from __future__ import annotations

from typing import Optional

import httpx

from specrun.client.response import format_api_response
from specrun.exceptions import ConnectionError_
from specrun.exit_codes import EXIT_GENERIC_FAILURE, EXIT_SUCCESS
from specrun.output import get_output


class Executor:
    """Blocking sender for pre-built :class:`httpx.Request` objects.

    Args:
        timeout: Seconds to wait for connect/read/write operations.
        transport: Optional transport, e.g. :class:`httpx.MockTransport` in
            tests.

    Example::

        with Executor() as executor:
            response = executor.send(request)
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> Executor:
        self._client = httpx.Client(timeout=self._timeout, transport=self._transport)
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def send(self, request: httpx.Request) -> httpx.Response:
        """Send *request* and return the fully read response.

        Raises:
            ConnectionError_: If the request could not be completed.
        """
        assert self._client is not None, "Executor not initialised -- use as context manager"

        get_output().debug(f"{request.method} {request.url}")
        try:
            return self._client.send(request)
        except httpx.RequestError as exc:
            raise ConnectionError_(f"{request.method} {request.url}: {exc}") from exc


def execute(
    request: httpx.Request,
    verbose: bool = False,
    transport: Optional[httpx.BaseTransport] = None,
) -> int:
    """Send *request*, print the response, and return the process exit code.

    Returns:
        :data:`~specrun.exit_codes.EXIT_SUCCESS` for statuses below 400,
        :data:`~specrun.exit_codes.EXIT_GENERIC_FAILURE` otherwise.
    """
    with Executor(transport=transport) as executor:
        response = executor.send(request)

    format_api_response(response, verbose=verbose)
    if response.status_code >= 400:
        return EXIT_GENERIC_FAILURE
    return EXIT_SUCCESS
