"""Usage screens: profiles, a profile's operations, and one operation's parameters.

Everything here writes to stdout through :mod:`specrun.output`, since usage
text is the data the user asked for.
"""

from __future__ import annotations

from specrun.models import Operation, Operations, Parameter
from specrun.output import print_data, print_table
from specrun.strings import to_snake

OPTIONS = [
    ["-H, --header TEXT", "Header string, e.g. \"X-Vendor: acme\". Can be repeated."],
    ["-q, --query TEXT", "Query string, containing one or more query parameters."],
    ["-b, --body TEXT", "Body string, containing one or more body parameters."],
    ["-v, --verbose", "Print the HTTP status and headers before the response body."],
    ["--no-color", "Disable colored output."],
    ["-h, --help", "Display this help text and exit."],
    ["--version", "Show version and exit."],
]


def print_usage(profiles: list[str]) -> None:
    """Print top-level usage with the configured profile names."""
    print_data("Usage: specrun PROFILE OPERATION")
    print_data("\nspecrun is an API client powered by OpenAPI.")
    print_data("\nProfiles:")
    if profiles:
        print_table([], [["", name] for name in profiles])
    else:
        print_data("    (none configured in .specrun.yaml)")
    print_data("\nRun specrun PROFILE to get a list of available operations.")


def print_profile_usage(profile: str, server_url: str, operations: Operations) -> None:
    """Print the operations of *profile*, grouped by tag."""
    print_data(f"Usage: specrun {profile} OPERATION")
    print_data(f"\nRuns the specified operation on {server_url}")
    if not operations:
        return

    rows: list[list[str]] = []
    for tag in operations.tags():
        rows.append(["", tag or "(untagged)", ""])
        for op in operations.by_tag(tag):
            op_id = f"{op.id} (deprecated)" if op.deprecated else op.id
            rows.append(["", f"    {op_id}", op.summary])

    print_data("\nOperations:")
    print_table([], rows)
    print_data(
        f"\nRun specrun {profile} OPERATION --help to view the available "
        "arguments for an operation."
    )


def print_operation_usage(op: Operation, profile: str) -> None:
    """Print the arguments, parameters, and options of *op*."""
    placeholders = "".join(f" {to_snake(p.name).upper()}" for p in op.parameters.path)
    print_data(f"Usage: specrun {profile} {op.id}{placeholders}")

    if op.summary:
        print_data(f"\n{op.summary_with_flags}")
    if op.description:
        print_data(f"\n{op.description}")

    sections = (
        ("Path parameters", op.parameters.path),
        ("Header parameters", op.parameters.header),
        ("Query parameters", op.parameters.query),
        ("Body parameters", op.parameters.body),
    )
    for title, params in sections:
        if params:
            print_data(f"\n{title}:")
            print_table([], [["", p.name_with_flags, describe(p)] for p in params])

    print_data("\nOptions:")
    print_table([], [["", *option] for option in OPTIONS])


def describe(param: Parameter) -> str:
    """Return the description column for *param*, with type and enum hints.

    Example::

        >>> describe(Parameter(location="query", name="sort", description="Sort order.",
        ...                    enum_values=["name", "-name"], default="name"))
        'Sort order. One of: name, -name. Default: name.'
    """
    parts = [param.description] if param.description else []
    if param.is_array:
        parts.append(f"Comma-separated list of {param.items_type or 'string'}s.")
    if param.enum_values:
        parts.append(f"One of: {', '.join(param.enum_values)}.")
    if param.default:
        parts.append(f"Default: {param.default}.")
    return " ".join(parts)
