"""API description parser -- load, resolve ``$ref`` pointers, build operations.

Typical usage::

    from specrun.parser import load_document, extract_operations, extract_servers

    spec = load_document("openapi.yaml")
    ops = extract_operations(spec)
    server_url = extract_servers(spec)[0]

Sub-modules:

* :mod:`~specrun.parser.loader` -- I/O (URL, file, stdin), format detection
  and version validation.
* :mod:`~specrun.parser.resolver` -- ``$ref`` inlining with cycle detection.
* :mod:`~specrun.parser.swagger2` -- Swagger 2.0 to OpenAPI 3 conversion.
* :mod:`~specrun.parser.schema` -- schema shapes and object flattening.
* :mod:`~specrun.parser.extractor` -- the operation catalog.
"""

from specrun.parser.extractor import (
    extract_operations,
    extract_servers,
    load_document,
    load_operations,
)
from specrun.parser.loader import load_spec, validate_spec_version

__all__ = [
    "extract_operations",
    "extract_servers",
    "load_document",
    "load_operations",
    "load_spec",
    "validate_spec_version",
]
