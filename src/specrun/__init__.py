"""specrun -- Run any operation from an OpenAPI document on the command line.

This package turns an OpenAPI 2.0/3.x description into a catalog of
operations and builds fully-formed HTTP requests from raw command-line
strings: the path template is expanded, the query string encoded, body
values are cast to their declared types and reassembled into a nested JSON
document (or a form body), and authentication is attached.

Typical workflow::

    specrun                              # list configured profiles
    specrun products                     # list the operations of a profile
    specrun products get-product 01H8... # run an operation

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: Read-only profile configuration.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
