"""Interactive prompt for body values when ``--body`` was not given.

Each body parameter is asked for in order: booleans as a yes/no confirm,
enums as a choice, everything else as free text. Required text values are
asked for again until something is entered. Defaults from the description
are pre-filled.
"""

from __future__ import annotations

import click
import httpx
import typer

from specrun.models import Operation, Parameter
from specrun.output import info
from specrun.request.casting import validate_parameters


def prompt_body(op: Operation) -> httpx.QueryParams:
    """Ask for every body parameter of *op* and return the answers.

    Empty answers are left out.

    Raises:
        ValidationError: If the answers do not satisfy the body parameters.
        click.exceptions.Abort: If the user presses Ctrl-C or Ctrl-D.
    """
    if op.summary:
        info(op.summary)

    answers: list[tuple[str, str]] = []
    for param in op.parameters.body:
        value = _prompt_parameter(param)
        if value != "":
            answers.append((param.name, value))

    values = httpx.QueryParams(answers)
    validate_parameters(op.parameters.body, values)
    return values


def _prompt_parameter(param: Parameter) -> str:
    label = f"{param.label}*" if param.required else param.label

    if param.schema_type == "boolean":
        checked = typer.confirm(label, default=param.default == "true")
        return "true" if checked else "false"

    if param.enum_values:
        default = param.default if param.default in param.enum_values else param.enum_values[0]
        return typer.prompt(label, type=click.Choice(param.enum_values), default=default)

    if param.required and not param.default:
        # No default makes click repeat the prompt on empty input
        return typer.prompt(label)
    return typer.prompt(label, default=param.default, show_default=bool(param.default))
