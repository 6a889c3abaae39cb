"""Cast raw string values to their declared types and validate them.

Casting rules:

* ``boolean`` -- ``1 t T TRUE true True`` and ``0 f F FALSE false False``.
* ``integer`` -- base 10, optional sign, signed 64-bit range.
* ``number`` -- a finite decimal float, exponent allowed.
* ``array`` -- split on ``,`` and cast each element to the item type.
* ``string`` and anything unknown -- passed through unchanged.

Validation is separate from casting and always runs first: it checks that
required values are present and that non-empty values belong to the enum.
"""

from __future__ import annotations

import math
import re
from typing import Optional, Sequence, Union

import httpx

from specrun.exceptions import CastError, ValidationError
from specrun.models import Parameter

CastValue = Union[str, int, float, bool, list["CastValue"]]

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def cast_value(raw: str, target_type: str, items_type: Optional[str] = None) -> CastValue:
    """Convert *raw* to *target_type*.

    Args:
        raw: The string to convert.
        target_type: A JSON Schema primitive type.
        items_type: Element type when *target_type* is ``array``; defaults
            to ``string``.

    Returns:
        The typed value. Arrays always have at least one element.

    Raises:
        CastError: If *raw* (or, for arrays, the first bad element) is not a
            valid value of the type.

    Example::

        >>> cast_value("4,8,15", "array", "integer")
        [4, 8, 15]
        >>> cast_value("yes", "boolean")
        Traceback (most recent call last):
        ...
        specrun.exceptions.CastError: "yes" is not a valid boolean
    """
    if target_type == "array":
        if items_type == "array":
            raise CastError(raw, "array", reason="nested arrays are not supported")
        return [cast_value(element, items_type or "string") for element in raw.split(",")]

    if target_type == "boolean":
        if raw in _TRUE:
            return True
        if raw in _FALSE:
            return False
        raise CastError(raw, target_type)

    if target_type == "integer":
        if _INTEGER_RE.fullmatch(raw):
            number = int(raw)
            if _INT64_MIN <= number <= _INT64_MAX:
                return number
        raise CastError(raw, target_type)

    if target_type == "number":
        if _NUMBER_RE.fullmatch(raw):
            number = float(raw)
            if math.isfinite(number):
                return number
        raise CastError(raw, target_type)

    return raw


def cast_parameter(param: Parameter, raw: str) -> CastValue:
    """Cast *raw* for *param*, naming the parameter in any error.

    An empty value is returned as ``""`` whatever the declared type.

    Raises:
        CastError: ``could not process <name>: ...``
    """
    if raw == "":
        return raw
    try:
        return cast_value(raw, param.schema_type, param.items_type)
    except CastError as exc:
        raise exc.for_parameter(param.name) from exc


def validate_parameter(param: Parameter, value: str) -> None:
    """Check *value* against *param*'s required flag and enum.

    Empty values skip the enum check.

    Raises:
        ValidationError: If the value is missing or not an allowed value.
    """
    location = param.location.value
    if value == "" and param.required:
        raise ValidationError(
            f'missing required {location} parameter "{param.name}"',
            location,
            param.name,
        )
    if value != "" and param.enum_values and value not in param.enum_values:
        allowed = ", ".join(param.enum_values)
        raise ValidationError(
            f'invalid value for {location} parameter "{param.name}" (allowed values: {allowed})',
            location,
            param.name,
        )


def validate_parameters(
    params: Sequence[Parameter], values: Union[httpx.Headers, httpx.QueryParams]
) -> None:
    """Validate each of *params* against the first value given for its name.

    Raises:
        ValidationError: For the first invalid parameter, in declaration order.
    """
    for param in params:
        validate_parameter(param, values.get(param.name) or "")
