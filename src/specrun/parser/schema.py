"""Resolve the shape of schema nodes and flatten object schemas.

Two pure functions do the work:

* :func:`resolve_shape` reduces a parameter or property schema to a
  :class:`SchemaShape` (primitive type, array item type, enum, default,
  example, description, deprecation).
* :func:`flatten_schema` walks an object schema and returns one body
  :class:`~specrun.models.Parameter` per leaf property, with nested names
  joined by dots (``meta.category.catalog``).

Enum values, defaults and examples are turned into strings here, so nothing
downstream ever inspects the typed values from the description again.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from specrun.exceptions import SpecParseError
from specrun.models import Parameter, ParameterLocation
from specrun.parser.resolver import is_unresolved_ref
from specrun.strings import sanitize


@dataclass(frozen=True)
class SchemaShape:
    """The parts of a schema node that the request engine cares about."""

    schema_type: str = "string"
    items_type: Optional[str] = None
    enum_values: tuple[str, ...] = ()
    default: str = ""
    example: str = ""
    description: str = ""
    deprecated: bool = False


def schema_type(schema: Any) -> str:
    """Return the primitive type declared by *schema*.

    A type union such as ``["string", "null"]`` resolves to its first
    element, whatever it is. A schema with no ``type`` is a ``string``,
    unless it declares ``properties`` or ``allOf``, in which case it is an
    ``object``.
    """
    if not isinstance(schema, dict):
        return "string"

    declared = schema.get("type")
    if isinstance(declared, list):
        declared = declared[0] if declared else None
    if declared:
        return str(declared)
    if "properties" in schema or "allOf" in schema:
        return "object"
    return "string"


def stringify(value: Any) -> str:
    """Render an enum member, default, or example as a string.

    Example::

        >>> stringify(True), stringify(10.0), stringify([1, 2]), stringify(None)
        ('true', '10', '1,2', '')
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True, separators=(",", ":"))
    return str(value)


def resolve_shape(schema: Any) -> SchemaShape:
    """Reduce *schema* to a :class:`SchemaShape`.

    Args:
        schema: A resolved schema dict. Anything else is treated as an empty
            (string) schema.

    Raises:
        SpecParseError: If *schema* or its ``items`` is a circular ``$ref``.
    """
    _reject_cycle(schema)
    if not isinstance(schema, dict):
        return SchemaShape()

    resolved_type = schema_type(schema)
    items_type = None
    if resolved_type == "array":
        items = schema.get("items") or {}
        _reject_cycle(items)
        items_type = schema_type(items)

    return SchemaShape(
        schema_type=resolved_type,
        items_type=items_type,
        enum_values=tuple(stringify(v) for v in schema.get("enum") or []),
        default=stringify(schema.get("default")),
        example=stringify(schema.get("example")),
        description=sanitize(schema.get("description")),
        deprecated=bool(schema.get("deprecated", False)),
    )


def flatten_schema(schema: Any, prefix: str = "") -> list[Parameter]:
    """Flatten an object schema into body parameters, one per leaf property.

    Properties are visited in name order. A child object is expanded in place
    with its name plus ``.`` as the prefix for its own children. A property is
    required when its parent lists it under ``required``.

    Args:
        schema: The request body schema (or a nested object property).
        prefix: Dotted path of *schema* itself, ``""`` at the top level.

    Returns:
        The leaf parameters; never any of type ``object``.

    Raises:
        SpecParseError: If a circular ``$ref`` is reached.

    Example::

        >>> [p.name for p in flatten_schema({
        ...     "type": "object",
        ...     "properties": {
        ...         "sku": {"type": "string"},
        ...         "meta": {"type": "object", "properties": {"published": {"type": "boolean"}}},
        ...     },
        ... })]
        ['meta.published', 'sku']
    """
    _reject_cycle(schema)
    properties, required = _object_members(schema)

    params: list[Parameter] = []
    for name in sorted(properties):
        child = properties[name]
        full_name = f"{prefix}{name}"
        _reject_cycle(child, full_name)
        if schema_type(child) == "object":
            params.extend(flatten_schema(child, prefix=f"{full_name}."))
            continue

        shape = resolve_shape(child)
        params.append(
            Parameter(
                location=ParameterLocation.BODY,
                name=full_name,
                description=shape.description,
                schema_type=shape.schema_type,
                items_type=shape.items_type,
                enum_values=shape.enum_values,
                default=shape.default,
                example=shape.example,
                required=name in required,
                deprecated=shape.deprecated,
            )
        )
    return params


def _object_members(schema: Any) -> tuple[dict[str, Any], set[str]]:
    """Collect ``properties`` and ``required`` from *schema* and its ``allOf``."""
    if not isinstance(schema, dict):
        return {}, set()

    properties: dict[str, Any] = {}
    required: set[str] = set()
    for part in schema.get("allOf") or []:
        _reject_cycle(part)
        part_properties, part_required = _object_members(part)
        properties.update(part_properties)
        required |= part_required

    properties.update(schema.get("properties") or {})
    required.update(schema.get("required") or [])
    return properties, required


def _reject_cycle(schema: Any, name: str = "") -> None:
    if is_unresolved_ref(schema):
        where = f" at {name}" if name else ""
        raise SpecParseError(f"circular $ref {schema['$ref']}{where} is not supported")
