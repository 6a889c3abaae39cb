"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specrun.exceptions.SpecrunError` subclass.
Shell scripts wrapping specrun can inspect the exit code to determine the
failure class without parsing stderr.

Example::

    $ specrun products create-product -b "price=abc"
    $ echo $?
    2   # EXIT_INVALID_USAGE -- "abc" is not a valid integer
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred, or the API answered with HTTP >= 400."""

EXIT_INVALID_USAGE = 2
"""The request could not be built from the supplied values."""

EXIT_AUTH_FAILURE = 3
"""Credentials could not be obtained or the auth configuration is invalid."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI description could not be loaded or parsed."""
