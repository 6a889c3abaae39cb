"""Inline ``$ref`` JSON Reference pointers in API descriptions.

Descriptions use ``{"$ref": "#/components/schemas/Product"}`` (or
``#/definitions/...`` in Swagger 2.0) to share schemas and parameters.
:func:`resolve_refs` returns a deep copy of the document in which every
internal reference is replaced by its target, so the extractor only ever sees
plain dictionaries.

A reference that is already being expanded further up the same branch is a
cycle. It is left in place as the original ``{"$ref": ...}`` dict; the schema
flattener reports it when a request body reaches it.
"""

from __future__ import annotations

import copy
from typing import Any

from specrun.exceptions import SpecParseError


def resolve_refs(document: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *document* with every internal ``$ref`` inlined.

    Args:
        document: The raw description as returned by
            :func:`~specrun.parser.loader.load_spec`.

    Returns:
        A new dictionary. The input is not modified.

    Raises:
        SpecParseError: If a reference is external or points at a location
            that does not exist.
    """
    root = copy.deepcopy(document)
    return _inline(root, root, frozenset())


def is_unresolved_ref(node: Any) -> bool:
    """Return True when *node* is a ``$ref`` dict left behind by a cycle."""
    return isinstance(node, dict) and "$ref" in node


def _lookup(pointer: str, root: dict[str, Any]) -> Any:
    """Follow the JSON Pointer *pointer* (``#/a/b/0``) from *root*."""
    if not pointer.startswith("#/"):
        raise SpecParseError(f"unsupported external $ref {pointer!r}")

    node: Any = root
    for token in pointer[2:].split("/"):
        # RFC 6901 escapes
        token = token.replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict):
            if token not in node:
                raise SpecParseError(f"cannot resolve $ref {pointer!r}: {token!r} not found")
            node = node[token]
        elif isinstance(node, list):
            try:
                node = node[int(token)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"cannot resolve $ref {pointer!r}: bad array index {token!r}"
                ) from exc
        else:
            raise SpecParseError(
                f"cannot resolve $ref {pointer!r}: {type(node).__name__} has no children"
            )
    return node


def _inline(node: Any, root: dict[str, Any], stack: frozenset[str]) -> Any:
    """Recursively replace references below *node*.

    *stack* holds the pointers being expanded on the current branch only,
    so two siblings may reference the same schema without tripping the
    cycle check.
    """
    if isinstance(node, dict):
        if "$ref" in node:
            pointer = node["$ref"]
            if pointer in stack:
                return node
            return _inline(_lookup(pointer, root), root, stack | {pointer})
        return {key: _inline(value, root, stack) for key, value in node.items()}

    if isinstance(node, list):
        return [_inline(item, root, stack) for item in node]

    return node
