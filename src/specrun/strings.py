"""Text helpers shared by the parser and the usage renderer.

* :func:`sanitize` -- strip HTML markup from API descriptions.
* :func:`to_kebab` -- turn an ``operationId`` into a command-line slug.
* :func:`to_label` -- turn a parameter name into a human-readable label.
* :func:`to_snake` -- turn a parameter name into a ``<placeholder>`` name.
"""

from __future__ import annotations

import re

_TAG_RE = re.compile(r"<[^>]*>")
_LOWER_UPPER_RE = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_DELIMITER_RE = re.compile(r"[^a-zA-Z0-9]+")


def sanitize(text: str | None) -> str:
    """Strip HTML tags and surrounding newlines from *text*.

    Descriptions in real-world API documents often carry ``<b>`` or ``<br>`` markup
    meant for rendered documentation, which is noise in a terminal.

    Example::

        >>> sanitize("Retrieves a list of <b>products</b>.\\n")
        'Retrieves a list of products.'
    """
    if not text:
        return ""
    return _TAG_RE.sub("", text).strip("\n")


def _words(name: str) -> list[str]:
    """Split *name* on camelCase boundaries and non-alphanumeric delimiters."""
    result = _LOWER_UPPER_RE.sub(r"\1 \2", name)
    result = _ACRONYM_RE.sub(r"\1 \2", result)
    return [w for w in _DELIMITER_RE.split(result) if w]


def to_kebab(name: str | None) -> str:
    """Convert *name* to kebab-case.

    Example::

        >>> to_kebab("listProducts")
        'list-products'
        >>> to_kebab("XMLImport_job")
        'xml-import-job'
    """
    if not name:
        return ""
    return "-".join(w.lower() for w in _words(name))


def to_snake(name: str) -> str:
    """Convert *name* to snake_case (``productId`` becomes ``product_id``)."""
    return "_".join(w.lower() for w in _words(name))


def to_label(name: str) -> str:
    """Convert *name* to a title-cased label.

    Example::

        >>> to_label("first_name")
        'First Name'
        >>> to_label("lastName")
        'Last Name'
    """
    return " ".join(w[:1].upper() + w[1:].lower() for w in _words(name))
