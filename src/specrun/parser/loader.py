"""Read API descriptions from a local file, a URL, or stdin.

Both JSON and YAML are accepted. The format is guessed from the file
extension or the response ``Content-Type`` and confirmed by parsing: JSON is
tried first because it is the stricter grammar, then YAML.

Public functions:

* :func:`load_spec` -- fetch and parse a description into a dictionary.
* :func:`validate_spec_version` -- accept Swagger 2.0 and OpenAPI 3.x,
  returning the declared version string.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from specrun.exceptions import SpecParseError
from specrun.output import debug


def load_spec(source: str) -> dict[str, Any]:
    """Load an API description from a URL, a file path, or ``-`` for stdin.

    Args:
        source: An ``http://``/``https://`` URL, a path on disk, or ``-``.

    Returns:
        The parsed document.

    Raises:
        SpecParseError: If the source cannot be read or is not a JSON/YAML
            mapping.
    """
    if source == "-":
        return _read_stdin()
    if source.startswith(("http://", "https://")):
        return _fetch_url(source)
    return _read_file(source)


def _read_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"read spec from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("read spec from stdin: no input received")
    return _parse_content(content)


def _fetch_url(url: str) -> dict[str, Any]:
    """Download a description, using the response media type as a format hint."""
    debug(f"Fetching spec from {url}")
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"fetch spec from {url}: HTTP {exc.response.status_code}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"
    return _parse_content(response.text, hint=hint)


def _read_file(path: str) -> dict[str, Any]:
    """Read a description from disk; ``.json``/``.yaml``/``.yml`` set the hint."""
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"spec file is empty: {path}")

    hint = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}.get(
        file_path.suffix.lower(), ""
    )
    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as JSON, falling back to YAML.

    Args:
        content: Raw document text.
        hint: ``"json"`` (no YAML fallback), ``"yaml"`` (skip JSON), or ``""``.

    Raises:
        SpecParseError: If neither parser yields a mapping.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            return _ensure_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"invalid JSON: {exc}") from exc
            json_error = exc

    try:
        return _ensure_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        message = "could not parse spec as JSON or YAML"
        if json_error:
            message += f"\n  JSON error: {json_error}"
        message += f"\n  YAML error: {exc}"
        raise SpecParseError(message) from exc


def _ensure_mapping(document: Any) -> dict[str, Any]:
    if not isinstance(document, dict):
        kind = "empty document" if document is None else type(document).__name__
        raise SpecParseError(f"spec must be a JSON/YAML object (got {kind})")
    return document


def validate_spec_version(spec: dict[str, Any]) -> str:
    """Return the declared version of *spec*.

    Swagger documents must declare ``swagger: "2.0"``; OpenAPI documents
    any ``3.x`` version.

    Args:
        spec: The parsed document.

    Returns:
        The version string, e.g. ``"2.0"`` or ``"3.0.3"``.

    Raises:
        SpecParseError: If no version is declared or it is not supported.
    """
    if "swagger" in spec:
        version = str(spec["swagger"])
        if version != "2.0":
            raise SpecParseError(f"unsupported Swagger version {version}")
        return version

    if "openapi" not in spec:
        raise SpecParseError(
            "missing 'openapi' field: is this an OpenAPI 3.x or Swagger 2.0 document?"
        )

    version = str(spec["openapi"])
    if not version.startswith("3."):
        raise SpecParseError(f"unsupported OpenAPI version {version}")
    return version


def is_swagger2(version: str) -> bool:
    """Return True when *version* came from a Swagger 2.0 ``swagger`` field."""
    return version == "2.0"
