"""Typer application and CLI entry point for specrun.

One command covers every use::

    specrun                                   # list profiles
    specrun PROFILE                           # list the profile's operations
    specrun PROFILE OPERATION --help          # show an operation's parameters
    specrun PROFILE OPERATION [PATH_VALUES...] [-H ...] [-q ...] [-b ...] [-v]

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.

See Also:
    :mod:`specrun.config`: Profile configuration.
    :mod:`specrun.request`: Request construction.
"""

from __future__ import annotations

import signal
import sys
from typing import Any, Optional

import typer

from specrun import __version__
from specrun.exit_codes import EXIT_GENERIC_FAILURE, EXIT_SUCCESS

app = typer.Typer(
    name="specrun",
    help="Run API operations described by an OpenAPI document.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specrun {__version__}")
        raise typer.Exit()


@app.command(add_help_option=False)
def run(
    profile: Optional[str] = typer.Argument(None, help="Profile from .specrun.yaml."),
    operation: Optional[str] = typer.Argument(None, help="Operation ID."),
    path_values: Optional[list[str]] = typer.Argument(
        None, help="Values for the operation's path parameters, in order."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help='Header string, e.g. "X-Vendor: acme". Can be repeated.'
    ),
    query: str = typer.Option(
        "", "--query", "-q", help="Query string, containing one or more query parameters."
    ),
    body: str = typer.Option(
        "", "--body", "-b", help="Body string, containing one or more body parameters."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Print the HTTP status and headers before the body."
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    show_help: bool = typer.Option(
        False, "--help", "-h", help="Display this help text and exit."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Run an operation from the profile's API description.

    Initialises the global :class:`~specrun.output.OutputManager`, resolves
    the profile, and then either prints usage or builds and sends one
    request. Every :class:`~specrun.exceptions.SpecrunError` is printed and
    turned into its exit code.
    """
    from specrun.exceptions import SpecrunError
    from specrun.output import OutputManager, error, set_output

    set_output(OutputManager(no_color=no_color, verbose=verbose))
    try:
        code = _run(
            profile,
            operation,
            path_values or [],
            header or [],
            query,
            body,
            verbose,
            show_help,
        )
    except SpecrunError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    if code != EXIT_SUCCESS:
        raise typer.Exit(code=code)


def _run(
    profile_name: Optional[str],
    operation_id: Optional[str],
    path_values: list[str],
    headers: list[str],
    query: str,
    body: str,
    verbose: bool,
    show_help: bool,
) -> int:
    from specrun.client import execute
    from specrun.commands.form import prompt_body
    from specrun.commands.usage import (
        print_operation_usage,
        print_profile_usage,
        print_usage,
    )
    from specrun.config import load_config, resolve_profile
    from specrun.exceptions import ConfigError, SpecrunError
    from specrun.output import debug
    from specrun.parser import extract_operations, extract_servers, load_document
    from specrun.request import build_request, parse_request_values

    config = load_config()
    if profile_name is None:
        print_usage(config.names())
        return EXIT_SUCCESS

    profile = resolve_profile(config, profile_name)
    spec = load_document(profile.spec_file)
    operations = extract_operations(spec)
    server_url = profile.server_url
    if not server_url:
        servers = extract_servers(spec)
        server_url = servers[0] if servers else ""
    debug(f"Profile {profile_name}: {len(operations)} operations, server {server_url!r}")

    if operation_id is None:
        print_profile_usage(profile_name, server_url, operations)
        return EXIT_SUCCESS

    op = operations.by_id(operation_id)
    if op is None:
        raise SpecrunError(f"unknown operation {operation_id}")
    if show_help or len(path_values) < len(op.parameters.path):
        print_operation_usage(op, profile_name)
        return EXIT_SUCCESS
    if not server_url:
        raise ConfigError(
            f"profile {profile_name} has no server_url and the API document declares no servers"
        )

    values = parse_request_values(headers, path_values, query, body)
    if not body and op.has_body and sys.stdin.isatty():
        values.body = prompt_body(op)

    request = build_request(op, server_url, values, profile.auth)
    return execute(request, verbose=verbose)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``specrun`` console script.

    Unhandled :class:`~specrun.exceptions.SpecrunError` instances cause a
    clean exit with the error's ``exit_code``; anything else is reported as
    an unexpected error with a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specrun.exceptions import SpecrunError
        from specrun.output import error

        if isinstance(exc, SpecrunError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
