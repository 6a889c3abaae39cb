"""Auth types and the header each one produces.

:func:`credential_header` is a pure function: given the configured type,
the resolved credentials, and an optional header-name override, it returns
the single ``(name, value)`` header pair to attach to the request.
"""

from __future__ import annotations

import base64
import enum

from specrun.exceptions import AuthError, quote

DEFAULT_API_KEY_HEADER = "X-API-Key"


class AuthType(str, enum.Enum):
    """Supported ways of presenting credentials."""

    BEARER = "bearer"
    BASIC = "basic"
    API_KEY = "api-key"

    @classmethod
    def parse(cls, value: str) -> AuthType:
        """Return the member for *value*.

        Raises:
            AuthError: If *value* is empty or not a known type.
        """
        if not value:
            raise AuthError("auth type not specified")
        try:
            return cls(value)
        except ValueError:
            raise AuthError(f"unrecognized auth type {quote(value)}") from None


def credential_header(
    auth_type: AuthType | str, credentials: str, header_name: str = ""
) -> tuple[str, str]:
    """Return the header that carries *credentials*.

    * ``bearer`` -- ``Authorization: Bearer <credentials>``
    * ``basic`` -- ``Authorization: Basic <base64(credentials)>``; the
      credentials are expected as ``user:password``.
    * ``api-key`` -- ``<header_name>: <credentials>``, where the header name
      defaults to ``X-API-Key``.

    Args:
        auth_type: An :class:`AuthType` or its string value.
        credentials: The resolved credentials.
        header_name: Header name override for ``api-key``.

    Raises:
        AuthError: If the type is empty or unknown.

    Example::

        >>> credential_header("api-key", "s3cret", "X-MyApp-Key")
        ('X-MyApp-Key', 's3cret')
    """
    kind = AuthType.parse(auth_type)
    if kind is AuthType.BEARER:
        return "Authorization", f"Bearer {credentials}"
    if kind is AuthType.BASIC:
        encoded = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
        return "Authorization", f"Basic {encoded}"
    return header_name or DEFAULT_API_KEY_HEADER, credentials
