"""Build the operation catalog from a resolved API description.

:func:`extract_operations` walks ``paths`` in sorted order and, for each
method in :class:`~specrun.models.HTTPMethod` order, produces one frozen
:class:`~specrun.models.Operation`. The result is identical for every load
of the same document, including the hash-based IDs of operations that do not
declare an ``operationId``.

Parameter merging follows OpenAPI: parameters declared on the path item
apply to every operation under it and come first; an operation-level
parameter with the same ``name`` and ``in`` replaces the path-level one.
"""

from __future__ import annotations

import zlib
from typing import Any, Optional

from specrun.models import (
    HTTPMethod,
    Operation,
    Operations,
    Parameter,
    ParameterLocation,
    Parameters,
)
from specrun.output import debug
from specrun.parser.loader import is_swagger2, load_spec, validate_spec_version
from specrun.parser.resolver import resolve_refs
from specrun.parser.schema import flatten_schema, resolve_shape, stringify
from specrun.parser.swagger2 import convert_to_v3
from specrun.strings import sanitize, to_kebab

# Locations a declared (non-body) parameter may use
_PARAM_LOCATIONS = ("header", "path", "query")


def load_document(source: str) -> dict[str, Any]:
    """Load *source* and return it as a resolved OpenAPI 3 dictionary.

    Swagger 2.0 documents are converted after their references are inlined.

    Raises:
        SpecParseError: If the document cannot be loaded, has an unsupported
            version, or contains unresolvable references.
    """
    raw = load_spec(source)
    version = validate_spec_version(raw)
    debug(f"Loaded spec {source} (version {version})")
    spec = resolve_refs(raw)
    if is_swagger2(version):
        spec = convert_to_v3(spec)
    return spec


def load_operations(source: str) -> Operations:
    """Load the description at *source* and return its operation catalog."""
    return extract_operations(load_document(source))


def extract_operations(spec: dict[str, Any]) -> Operations:
    """Return every operation declared in the resolved document *spec*.

    Raises:
        SpecParseError: If a request body schema contains a circular
            reference.
    """
    paths = spec.get("paths") or {}
    ops = Operations()

    for path in sorted(paths):
        path_item = paths[path]
        if not isinstance(path_item, dict):
            continue
        shared_params = path_item.get("parameters") or []

        for method in HTTPMethod:
            operation = path_item.get(method.value)
            if not isinstance(operation, dict):
                continue
            ops.append(_build_operation(method, path, shared_params, operation))

    return ops


def extract_servers(spec: dict[str, Any]) -> list[str]:
    """Return the server URLs of *spec*, with variables set to their defaults."""
    urls = []
    for server in spec.get("servers") or []:
        url = server.get("url", "/")
        for name, variable in (server.get("variables") or {}).items():
            url = url.replace(f"{{{name}}}", str(variable.get("default", "")))
        urls.append(url)
    return urls


def operation_id(declared: Optional[str], path: str) -> str:
    """Return the kebab-case *declared* ID, or an Adler-32 hash of *path*.

    Example::

        >>> operation_id("listProducts", "/products")
        'list-products'
        >>> operation_id(None, "/products")
        '113403a4'
    """
    slug = to_kebab(declared)
    if slug:
        return slug
    return f"{zlib.adler32(path.encode('utf-8')):08x}"


def _build_operation(
    method: HTTPMethod,
    path: str,
    shared_params: list[dict[str, Any]],
    operation: dict[str, Any],
) -> Operation:
    params: list[Parameter] = []
    for raw in _merge_parameters(shared_params, operation.get("parameters") or []):
        param = _build_parameter(raw)
        if param is not None:
            params.append(param)

    body_format = ""
    request_body = operation.get("requestBody")
    if isinstance(request_body, dict):
        # Only the first declared media type is used
        for media_type, media in (request_body.get("content") or {}).items():
            body_format = media_type
            params.extend(flatten_schema((media or {}).get("schema") or {}))
            break

    tags = operation.get("tags") or []
    return Operation(
        id=operation_id(operation.get("operationId"), path),
        method=method,
        path=path,
        tag=str(tags[0]) if tags else "",
        summary=operation.get("summary") or "",
        description=sanitize(operation.get("description")),
        deprecated=bool(operation.get("deprecated", False)),
        parameters=Parameters.classify(*params),
        body_format=body_format,
    )


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Path-level parameters come first, minus any that the operation redeclares
    with the same ``name`` and ``in``.
    """
    overridden = {(p.get("name", ""), p.get("in", "")) for p in op_params}
    merged = [
        p for p in path_params if (p.get("name", ""), p.get("in", "")) not in overridden
    ]
    merged.extend(op_params)
    return merged


def _build_parameter(raw: dict[str, Any]) -> Optional[Parameter]:
    """Convert a declared parameter; cookie and unknown locations yield ``None``."""
    name = raw.get("name", "")
    location = raw.get("in", "")
    if location not in _PARAM_LOCATIONS:
        debug(f"Skipping {location or 'unlocated'} parameter {name!r}")
        return None

    schema = raw.get("schema")
    if schema is None:
        # OpenAPI 3 allows a parameter to carry its schema under a media type
        for media in (raw.get("content") or {}).values():
            schema = (media or {}).get("schema")
            break
    shape = resolve_shape(schema or {})

    return Parameter(
        location=ParameterLocation(location),
        name=name,
        description=sanitize(raw.get("description")) or shape.description,
        style=raw.get("style", ""),
        schema_type=shape.schema_type,
        items_type=shape.items_type,
        enum_values=shape.enum_values,
        default=shape.default,
        example=stringify(raw["example"]) if "example" in raw else shape.example,
        # Path parameters are always required
        required=location == "path" or bool(raw.get("required", False)),
        deprecated=bool(raw.get("deprecated", False)) or shape.deprecated,
    )
