"""Apply a profile's :class:`~specrun.models.AuthConfig` to request headers.

The decision is made fresh for every request:

1. Neither ``credentials`` nor ``command`` configured -- nothing to do.
2. ``command`` configured -- run it; its trimmed output is the credentials.
   It takes precedence over ``credentials``.
3. Set the header produced by :func:`~specrun.auth.base.credential_header`.
"""

from __future__ import annotations

import httpx

from specrun.auth.base import credential_header
from specrun.auth.command import CommandRunner, run_command
from specrun.exceptions import AuthError
from specrun.models import AuthConfig


def resolve_credentials(
    auth_config: AuthConfig, command_runner: CommandRunner = run_command
) -> str:
    """Return the credentials for *auth_config*, running its command if set.

    Returns:
        The credentials, or ``""`` when none are configured.

    Raises:
        AuthError: If the command fails or prints nothing.
    """
    if not auth_config.command:
        return auth_config.credentials

    credentials = command_runner(auth_config.command)
    if not credentials:
        raise AuthError("no credentials received")
    return credentials


def authenticate(
    headers: httpx.Headers,
    auth_config: AuthConfig | None,
    command_runner: CommandRunner = run_command,
) -> None:
    """Set the auth header for *auth_config* on *headers*, replacing any existing one.

    Args:
        headers: The outgoing request headers, modified in place.
        auth_config: The profile's auth settings; ``None`` means no auth.
        command_runner: Used to run ``auth_config.command``.

    Raises:
        AuthError: If credentials cannot be obtained or the auth type is
            missing or unknown.
    """
    if auth_config is None or not (auth_config.credentials or auth_config.command):
        return

    credentials = resolve_credentials(auth_config, command_runner)
    name, value = credential_header(
        auth_config.type, credentials, auth_config.api_key_header
    )
    headers[name] = value
