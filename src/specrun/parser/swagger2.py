"""Convert Swagger 2.0 documents into the OpenAPI 3 layout.

Only the parts the extractor reads are converted:

* ``schemes`` + ``host`` + ``basePath`` become ``servers``.
* Non-body parameters get a ``schema`` built from their inline ``type``,
  ``items``, ``enum``, ``default`` and ``format`` fields.
* An ``in: body`` parameter becomes a ``requestBody`` with one content entry
  per ``consumes`` media type (``application/json`` when none is declared).
* ``in: formData`` parameters are merged into a single object schema under a
  form media type (``application/x-www-form-urlencoded`` by default).

The input is expected to have its ``$ref`` pointers already inlined.
"""

from __future__ import annotations

from typing import Any

from specrun.models import HTTPMethod

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
_SCHEMA_KEYS = (
    "type",
    "format",
    "items",
    "enum",
    "default",
    "minimum",
    "maximum",
    "pattern",
)


def convert_to_v3(spec: dict[str, Any]) -> dict[str, Any]:
    """Return an OpenAPI 3 shaped copy of the Swagger 2.0 document *spec*."""
    global_consumes = spec.get("consumes") or []
    paths: dict[str, Any] = {}

    for path, path_item in (spec.get("paths") or {}).items():
        if not isinstance(path_item, dict):
            continue
        shared = path_item.get("parameters") or []
        converted: dict[str, Any] = {
            "parameters": [
                _convert_parameter(p) for p in shared if p.get("in") not in ("body", "formData")
            ]
        }
        shared_payload = [p for p in shared if p.get("in") in ("body", "formData")]

        for method in HTTPMethod:
            operation = path_item.get(method.value)
            if not isinstance(operation, dict):
                continue
            consumes = operation.get("consumes") or global_consumes
            converted[method.value] = _convert_operation(operation, shared_payload, consumes)

        paths[path] = converted

    return {
        "openapi": "3.0.3",
        "info": spec.get("info", {}),
        "servers": _convert_servers(spec),
        "paths": paths,
    }


def _convert_servers(spec: dict[str, Any]) -> list[dict[str, str]]:
    host = spec.get("host", "")
    base_path = spec.get("basePath", "")
    if not host:
        return [{"url": base_path}] if base_path else []
    schemes = spec.get("schemes") or ["https"]
    return [{"url": f"{scheme}://{host}{base_path}"} for scheme in schemes]


def _convert_operation(
    operation: dict[str, Any],
    shared_payload: list[dict[str, Any]],
    consumes: list[str],
) -> dict[str, Any]:
    params = operation.get("parameters") or []
    payload = shared_payload + [p for p in params if p.get("in") in ("body", "formData")]

    converted = {
        key: operation[key]
        for key in ("operationId", "summary", "description", "tags", "deprecated")
        if key in operation
    }
    converted["parameters"] = [
        _convert_parameter(p) for p in params if p.get("in") not in ("body", "formData")
    ]

    request_body = _convert_payload(payload, consumes)
    if request_body is not None:
        converted["requestBody"] = request_body
    return converted


def _convert_parameter(param: dict[str, Any]) -> dict[str, Any]:
    converted = {
        key: param[key]
        for key in ("name", "in", "description", "required", "deprecated")
        if key in param
    }
    converted["schema"] = _inline_schema(param)
    return converted


def _inline_schema(param: dict[str, Any]) -> dict[str, Any]:
    """Build a schema from a Swagger 2.0 parameter's inline type fields."""
    schema = {key: param[key] for key in _SCHEMA_KEYS if key in param}
    if schema.get("type") == "file":
        schema["type"] = "string"
        schema["format"] = "binary"
    if "x-example" in param:
        schema["example"] = param["x-example"]
    return schema


def _convert_payload(
    payload: list[dict[str, Any]], consumes: list[str]
) -> dict[str, Any] | None:
    body = next((p for p in payload if p.get("in") == "body"), None)
    if body is not None:
        media_types = [c for c in consumes if c not in _FORM_TYPES] or ["application/json"]
        return {
            "required": body.get("required", False),
            "description": body.get("description", ""),
            "content": {mt: {"schema": body.get("schema") or {}} for mt in media_types},
        }

    form_params = [p for p in payload if p.get("in") == "formData"]
    if not form_params:
        return None

    schema: dict[str, Any] = {"type": "object", "properties": {}}
    required = []
    for param in form_params:
        prop = _inline_schema(param)
        if param.get("description"):
            prop["description"] = param["description"]
        schema["properties"][param.get("name", "")] = prop
        if param.get("required"):
            required.append(param.get("name", ""))
    if required:
        schema["required"] = required

    media_types = [c for c in consumes if c in _FORM_TYPES] or [_FORM_TYPES[0]]
    return {"content": {mt: {"schema": schema} for mt in media_types}}
