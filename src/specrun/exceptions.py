"""Exception hierarchy for specrun.

All exceptions inherit from :class:`SpecrunError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specrun.exit_codes`.
The top-level error handler in :func:`specrun.app.main` catches
``SpecrunError``, prints the message and exits with the appropriate code.

The request-building engine never prints or exits on its own: every failure
is raised with a stable message, since shell scripts and tests match the
text literally.

Subclass hierarchy::

    SpecrunError (exit 1)
    +-- ParseError              (exit 2)
    +-- PathArityError          (exit 2)
    +-- ValidationError         (exit 2)
    +-- CastError               (exit 2)
    +-- UnsupportedFormatError  (exit 2)
    +-- AuthError               (exit 3)
    +-- ConnectionError_        (exit 6)
    +-- SpecParseError          (exit 7)
    +-- ConfigError             (exit 1)
"""

from __future__ import annotations

from specrun.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
)


_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def quote(value: str) -> str:
    """Return *value* as a double-quoted, escaped string literal.

    Printable characters are kept as they are. Control characters become
    ``\\xNN``, other non-printable characters ``\\uNNNN`` or ``\\UNNNNNNNN``.
    Bytes that were not valid UTF-8 (decoded with ``surrogateescape``) are
    shown as ``\\xNN`` as well.

    Example::

        >>> print(quote("tab\\there\\x01"))
        "tab\\there\\x01"
    """
    parts = []
    for char in value:
        code = ord(char)
        if char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif 0xDC80 <= code <= 0xDCFF:
            parts.append(f"\\x{code - 0xDC00:02x}")
        elif char.isprintable():
            parts.append(char)
        elif code < 0x80:
            parts.append(f"\\x{code:02x}")
        elif code < 0x10000:
            parts.append(f"\\u{code:04x}")
        else:
            parts.append(f"\\U{code:08x}")
    return '"' + "".join(parts) + '"'


class SpecrunError(Exception):
    """Base exception for all specrun errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specrun.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ParseError(SpecrunError):
    """Raised for syntactically malformed header, query, or body input."""

    exit_code = EXIT_INVALID_USAGE


class PathArityError(SpecrunError):
    """Raised when fewer path values are given than the operation declares."""

    exit_code = EXIT_INVALID_USAGE

    def __init__(self, got: int, want: int):
        super().__init__(f"too few path parameters: got {got}, want {want}")
        self.got = got
        self.want = want


class ValidationError(SpecrunError):
    """Raised for a missing required value or a value outside the enum.

    Attributes:
        location: The parameter location (``header``, ``query``, ...).
        name: The parameter name.
    """

    exit_code = EXIT_INVALID_USAGE

    def __init__(self, message: str, location: str, name: str):
        super().__init__(message)
        self.location = location
        self.name = name


class CastError(SpecrunError):
    """Raised when a string cannot be converted to its declared type.

    Without a ``param_name`` the message is the bare cast failure
    (``"3.2" is not a valid integer``); with one it is wrapped as
    ``could not process storage: "3.2" is not a valid integer``.

    Attributes:
        value: The offending raw string (the failing element for arrays).
        target_type: The type the value was cast to.
        param_name: The parameter being processed, when known.
    """

    exit_code = EXIT_INVALID_USAGE

    def __init__(
        self,
        value: str,
        target_type: str,
        param_name: str | None = None,
        reason: str | None = None,
    ):
        self.value = value
        self.target_type = target_type
        self.param_name = param_name
        self.reason = reason or f"{quote(value)} is not a valid {target_type}"
        message = self.reason
        if param_name is not None:
            message = f"could not process {param_name}: {self.reason}"
        super().__init__(message)

    def for_parameter(self, name: str) -> CastError:
        """Return a copy of this error attributed to parameter *name*."""
        return CastError(self.value, self.target_type, name, self.reason)


class UnsupportedFormatError(SpecrunError):
    """Raised when an operation declares a body media type specrun cannot encode."""

    exit_code = EXIT_INVALID_USAGE

    def __init__(self, body_format: str):
        super().__init__(f"unsupported body format {body_format}")
        self.body_format = body_format


class AuthError(SpecrunError):
    """Raised when credentials cannot be obtained or the auth type is invalid."""

    exit_code = EXIT_AUTH_FAILURE


class ConnectionError_(SpecrunError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class SpecParseError(SpecrunError):
    """Raised when the OpenAPI description cannot be loaded or parsed."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class ConfigError(SpecrunError):
    """Raised for configuration problems (missing file, invalid YAML, unknown profile)."""

    exit_code = EXIT_GENERIC_FAILURE
