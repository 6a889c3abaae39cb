"""Canonical Pydantic models shared across all specrun modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Configuration models** -- read from ``.specrun.yaml``:
    :class:`AuthConfig`, :class:`ProfileConfig`, and :class:`Config`.

**Operation models** -- produced by the parser once per loaded description
and consumed by the request builder:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Parameter`,
    :class:`Parameters`, :class:`Operation`, and :class:`Operations`.

Every parameter value the engine handles is a string until the moment it is
cast for a JSON body, so enum values, defaults, and examples are stored as
strings as well.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from specrun.strings import to_label


# --- Config ---


class AuthConfig(BaseModel):
    """Authentication configuration embedded in a :class:`ProfileConfig`.

    ``command`` takes precedence over ``credentials`` and is re-run for every
    request, since the credentials it prints may expire.

    Example::

        AuthConfig(type="api-key", command="pass show acme/key", api_key_header="X-Acme-Key")
    """

    credentials: str = Field(default="", description="Static credentials")
    command: str = Field(
        default="", description="Shell command that prints the credentials"
    )
    type: str = Field(default="", description="Auth type: bearer, basic, api-key")
    api_key_header: str = Field(
        default="", description="Header name for api-key auth (default X-API-Key)"
    )


class ProfileConfig(BaseModel):
    """A single profile: which description to load and which server to call."""

    model_config = ConfigDict(extra="allow")

    spec_file: str = Field(description="Path or URL of the OpenAPI description")
    server_url: str = Field(
        default="", description="Base URL; defaults to the first server in the description"
    )
    auth: AuthConfig = Field(default_factory=AuthConfig)


class Config(BaseModel):
    """All profiles declared in the configuration file, keyed by name."""

    profiles: dict[str, ProfileConfig] = Field(default_factory=dict)

    def names(self) -> list[str]:
        """Return the profile names, sorted alphabetically."""
        return sorted(self.profiles)


# --- Operation Models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI path-item objects.

    The declaration order is the order in which operations sharing a path
    are added to the catalog.
    """

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Where a parameter value ends up in the HTTP request."""

    HEADER = "header"
    PATH = "path"
    QUERY = "query"
    BODY = "body"


class Parameter(BaseModel):
    """A single declared input of an :class:`Operation`.

    Body parameters nested under object schemas carry a dotted ``name``
    (``meta.published``). ``schema_type`` is never ``object`` for a body
    parameter, because objects are flattened into their leaf properties.
    For arrays, ``items_type`` holds the primitive type of the elements.
    """

    model_config = ConfigDict(frozen=True)

    location: ParameterLocation
    name: str
    description: str = ""
    style: str = ""
    schema_type: str = Field(default="string", description="JSON Schema type")
    items_type: Optional[str] = None
    enum_values: tuple[str, ...] = ()
    default: str = ""
    example: str = ""
    required: bool = False
    deprecated: bool = False

    @property
    def is_array(self) -> bool:
        return self.schema_type == "array"

    @property
    def label(self) -> str:
        """Human-readable label, e.g. ``First Name`` for ``first_name``."""
        return to_label(self.name)

    @property
    def formatted_flags(self) -> str:
        """Return ``(deprecated, required)``, ``(required)``, or ``""``."""
        flags = []
        if self.deprecated:
            flags.append("deprecated")
        if self.required:
            flags.append("required")
        if not flags:
            return ""
        return f"({', '.join(flags)})"

    @property
    def name_with_flags(self) -> str:
        """Return the name followed by its flags, e.g. ``sku (required)``."""
        flags = self.formatted_flags
        return f"{self.name} {flags}" if flags else self.name


class Parameters(BaseModel):
    """The parameters of an operation, classified by location.

    Build it with :meth:`classify`. Each tuple keeps declaration order.
    """

    model_config = ConfigDict(frozen=True)

    header: tuple[Parameter, ...] = ()
    path: tuple[Parameter, ...] = ()
    query: tuple[Parameter, ...] = ()
    body: tuple[Parameter, ...] = ()

    @classmethod
    def classify(cls, *params: Parameter) -> Parameters:
        """Return *params* grouped by location, keeping their order."""
        grouped: dict[ParameterLocation, list[Parameter]] = {loc: [] for loc in ParameterLocation}
        for param in params:
            grouped[param.location].append(param)
        return cls(**{loc.value: tuple(group) for loc, group in grouped.items()})

    def in_location(self, location: ParameterLocation | str) -> tuple[Parameter, ...]:
        """Return the parameter list for *location*."""
        return getattr(self, ParameterLocation(location).value)

    def by_name(
        self, location: ParameterLocation | str, name: str
    ) -> Optional[Parameter]:
        """Return the parameter called *name* in *location*, or ``None``."""
        for param in self.in_location(location):
            if param.name == name:
                return param
        return None


class Operation(BaseModel):
    """One method + path pair of the API description.

    Built once when the description is loaded and not modified afterwards.
    ``body_format`` is the media type used to encode the request body, or
    ``""`` when the operation takes no body.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    method: HTTPMethod
    path: str
    tag: str = ""
    summary: str = ""
    description: str = ""
    deprecated: bool = False
    parameters: Parameters = Field(default_factory=Parameters)
    body_format: str = ""

    @property
    def has_body(self) -> bool:
        return self.body_format != ""

    @property
    def summary_with_flags(self) -> str:
        """Return the summary, suffixed with ``(deprecated)`` when applicable."""
        if self.deprecated:
            return f"{self.summary} (deprecated)"
        return self.summary


class Operations(list):
    """An ordered catalog of :class:`Operation` objects.

    Lookups are linear: the catalog is consulted once per invocation, and
    a list keeps the deterministic load order.
    """

    def by_id(self, operation_id: str) -> Optional[Operation]:
        """Return the operation with the given ID, or ``None``."""
        for op in self:
            if op.id == operation_id:
                return op
        return None

    def by_tag(self, tag: str) -> Operations:
        """Return the operations whose tag is *tag*, in catalog order."""
        return Operations(op for op in self if op.tag == tag)

    def tags(self) -> list[str]:
        """Return every distinct operation tag, sorted alphabetically."""
        return sorted({op.tag for op in self})
