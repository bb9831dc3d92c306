"""Canonical Pydantic models shared across all specmodel modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Contract-node models** -- the narrow read interface produced by a contract
parser and consumed by :mod:`specmodel.graph`:
    :class:`HTTPMethod`, :class:`ScalarType`, :class:`ParameterNode`,
    :class:`PayloadNode`, :class:`ResponseNode`, :class:`OperationNode`,
    :class:`EndpointNode`, and :class:`ContractDocument`.

**Validation models** -- :class:`ValidationIssue`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`CacheConfig`, :class:`OutputConfig`, :class:`ValidationConfig`,
    and :class:`GlobalConfig`.

All models use Pydantic v2. Node models keep the raw method token as a string
so that an unrecognised method only fails when the action map is built.
"""

from __future__ import annotations

import enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from specmodel.exceptions import UnknownMethodError


# --- Enumerations ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods an action can be declared with.

    Values are upper-case; :meth:`parse` upper-cases a raw token before the
    lookup so that ``"get"``, ``"Get"`` and ``"GET"`` all map to :attr:`GET`.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"

    @classmethod
    def parse(cls, token: Union[str, "HTTPMethod"]) -> "HTTPMethod":
        """Return the member for *token*, ignoring case.

        Raises:
            UnknownMethodError: If *token* is not a recognised method.
        """
        if isinstance(token, cls):
            return token
        try:
            return cls(str(token).strip().upper())
        except ValueError:
            raise UnknownMethodError(str(token)) from None


class ScalarType(str, enum.Enum):
    """Declared type of a parameter (JSON Schema ``type`` vocabulary)."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    FILE = "file"

    @classmethod
    def parse(cls, value: Any) -> "ScalarType":
        """Map a schema ``type`` value to a member, defaulting to :attr:`STRING`.

        OpenAPI 3.1 type arrays (e.g. ``["integer", "null"]``) resolve to the
        first non-null entry.
        """
        if isinstance(value, list):
            non_null = [t for t in value if t != "null"]
            value = non_null[0] if non_null else None
        if value is None:
            return cls.STRING
        try:
            return cls(str(value))
        except ValueError:
            return cls.STRING


# --- Contract-node models ---


class ParameterNode(BaseModel):
    """A named query, header or URI parameter as declared in the contract."""

    name: str
    type: ScalarType = ScalarType.STRING
    required: bool = False
    default: Optional[str] = None
    description: Optional[str] = None
    example: Any = None
    enum_values: Optional[list[str]] = None
    repeat: bool = False


class PayloadNode(BaseModel):
    """One body variant: a media type plus its opaque schema handle.

    ``schema_`` is whatever the contract parser attached to the payload --
    usually a JSON Schema dict, but possibly a boolean schema, a type name or
    ``None``. Schema validators decide what they can evaluate.
    """

    media_type: str
    schema_: Any = Field(default=None, alias="schema")
    example: Any = None

    model_config = ConfigDict(populate_by_name=True)


class ResponseNode(BaseModel):
    """A declared response, keyed by its status code string."""

    status_code: str
    description: Optional[str] = None
    payloads: list[PayloadNode] = Field(default_factory=list)
    headers: list[ParameterNode] = Field(default_factory=list)


class OperationNode(BaseModel):
    """A single operation (method) declared on an endpoint.

    ``method`` is the raw token from the contract. ``has_request`` is
    ``False`` when the contract declares no request at all, which makes
    every request-derived collection empty.
    """

    method: str
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    has_request: bool = True
    request_payloads: list[PayloadNode] = Field(default_factory=list)
    query_parameters: list[ParameterNode] = Field(default_factory=list)
    header_parameters: list[ParameterNode] = Field(default_factory=list)
    path_parameters: list[ParameterNode] = Field(default_factory=list)
    responses: list[ResponseNode] = Field(default_factory=list)


class EndpointNode(BaseModel):
    """A URI path with its URI parameters and declared operations."""

    path: str
    parameters: list[ParameterNode] = Field(default_factory=list)
    operations: list[OperationNode] = Field(default_factory=list)


class ContractDocument(BaseModel):
    """Everything a contract parser hands back for one API.

    ``components`` holds reusable definitions that schemas may still refer to
    through internal ``$ref`` pointers (e.g. recursive schemas).
    """

    title: str = "Untitled API"
    version: Optional[str] = None
    base_uri: Optional[str] = None
    endpoints: list[EndpointNode] = Field(default_factory=list)
    components: dict[str, Any] = Field(default_factory=dict)
    source_version: Optional[str] = Field(
        default=None, description="Contract format version (e.g. '3.0.3')"
    )


# --- Validation models ---


class ValidationIssue(BaseModel):
    """A single schema violation reported by a validator."""

    model_config = ConfigDict(frozen=True)

    message: str
    path: Optional[str] = None


# --- Configuration models ---


class CacheConfig(BaseModel):
    """Settings for the on-disk cache of remotely fetched contracts."""

    enabled: bool = True
    ttl_seconds: int = Field(default=3600, ge=0)


class OutputConfig(BaseModel):
    """Default output formatting for the CLI."""

    format: str = Field(default="auto", description="auto, json, plain or rich")


class ValidationConfig(BaseModel):
    """Request-body validation settings.

    ``form_media_types`` lists the content types routed through the
    URL-encoded form pipeline. ``version_placeholder`` is the literal token
    replaced by :meth:`~specmodel.graph.resource.ResourceModel.get_resolved_uri`.
    """

    form_media_types: list[str] = Field(
        default_factory=lambda: ["application/x-www-form-urlencoded"]
    )
    version_placeholder: str = "{version}"


class GlobalConfig(BaseModel):
    """Top-level configuration stored as ``config.json`` in the config directory."""

    default_spec: Optional[str] = Field(
        default=None, description="Contract used when --spec is not given"
    )
    log_level: str = "WARNING"
    cache: CacheConfig = Field(default_factory=CacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
