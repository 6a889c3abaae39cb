"""Authentication for outgoing requests.

- :class:`AuthType` -- the closed set of supported schemes.
- :func:`credential_header` -- maps (type, credentials, header override) to
  one header pair.
- :func:`authenticate` -- resolves credentials for a profile, running the
  credential command when configured, and sets the header.
- :func:`run_command` -- the default :data:`CommandRunner`.

Typical usage::

    from specrun.auth import authenticate

    headers = httpx.Headers()
    authenticate(headers, profile.auth)
"""

from specrun.auth.base import DEFAULT_API_KEY_HEADER, AuthType, credential_header
from specrun.auth.command import CommandRunner, run_command
from specrun.auth.manager import authenticate, resolve_credentials

__all__ = [
    "DEFAULT_API_KEY_HEADER",
    "AuthType",
    "CommandRunner",
    "authenticate",
    "credential_header",
    "resolve_credentials",
    "run_command",
]
