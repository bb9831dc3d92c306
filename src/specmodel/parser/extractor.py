"""Extract contract nodes from resolved OpenAPI documents.

This module walks a ``$ref``-resolved OpenAPI document and builds the
:class:`~specmodel.models.ContractDocument` consumed by
:class:`~specmodel.graph.specification.SpecificationModel`: one
:class:`~specmodel.models.EndpointNode` per path, one
:class:`~specmodel.models.OperationNode` per operation.

The single public entry point is :func:`extract_document`.

Notes on the mapping:

* Every path-item key that is not a reserved OpenAPI field (``summary``,
  ``description``, ``servers``, ``parameters``, ``$ref``) or an ``x-``
  extension is treated as an operation and keeps its raw method token.
  Unknown methods are not filtered here: building the action map rejects them.
* Path-level parameters provide defaults; operation-level parameters override
  them when they share the same ``name`` and ``in`` values.
* URI parameters are collected on the endpoint: path-level ones first, then
  any declared only on an operation.
* Cookie parameters have no counterpart in the model and are dropped.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specmodel.models import (
    ContractDocument,
    EndpointNode,
    OperationNode,
    ParameterNode,
    PayloadNode,
    ResponseNode,
    ScalarType,
)
from specmodel.parser.resolver import resolve_refs

logger = logging.getLogger(__name__)

_PATH_ITEM_FIELDS = frozenset({"summary", "description", "servers", "parameters", "$ref"})


def extract_document(raw_spec: dict[str, Any], openapi_version: str) -> ContractDocument:
    """Build a :class:`~specmodel.models.ContractDocument` from a raw OpenAPI dict.

    Resolves ``$ref`` pointers first, then walks ``info``, ``servers`` and
    ``paths``. ``components`` are kept unresolved so that schemas with cyclic
    references can still be evaluated by the schema validator.

    Args:
        raw_spec: The OpenAPI document as returned by
            :func:`~specmodel.parser.loader.load_spec`.
        openapi_version: The validated version string (e.g. ``"3.0.3"``).

    Example::

        raw = load_spec("orders.yaml")
        document = extract_document(raw, validate_openapi_version(raw))
        for endpoint in document.endpoints:
            print(endpoint.path, [op.method for op in endpoint.operations])
    """
    spec = resolve_refs(raw_spec)
    info = spec.get("info") or {}
    components = raw_spec.get("components") or {}

    return ContractDocument(
        title=info.get("title", "Untitled API"),
        version=_as_str(info.get("version")),
        base_uri=_extract_base_uri(spec),
        endpoints=_extract_endpoints(spec),
        components=components if isinstance(components, dict) else {},
        source_version=openapi_version,
    )


def _as_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _extract_base_uri(spec: dict[str, Any]) -> Optional[str]:
    servers = spec.get("servers") or []
    for server in servers:
        if isinstance(server, dict) and server.get("url"):
            return server["url"]
    return None


def _extract_endpoints(spec: dict[str, Any]) -> list[EndpointNode]:
    endpoints: list[EndpointNode] = []

    for path, path_item in (spec.get("paths") or {}).items():
        if not isinstance(path_item, dict):
            continue

        path_params = path_item.get("parameters") or []
        operations: list[OperationNode] = []
        uri_parameters: dict[str, ParameterNode] = {
            node.name: node
            for node in _to_parameter_nodes(path_params, location="path")
        }

        for key, operation in path_item.items():
            key = str(key)
            if key in _PATH_ITEM_FIELDS or key.startswith("x-"):
                continue
            if not isinstance(operation, dict):
                logger.debug("Skipping non-object operation %r on %s", key, path)
                continue

            merged = _merge_parameters(path_params, operation.get("parameters") or [])
            node = _extract_operation(key, operation, merged)
            for param in node.path_parameters:
                uri_parameters.setdefault(param.name, param)
            operations.append(node)

        endpoints.append(
            EndpointNode(
                path=path,
                parameters=list(uri_parameters.values()),
                operations=operations,
            )
        )

    return endpoints


def _extract_operation(
    method: str,
    operation: dict[str, Any],
    parameters: list[dict[str, Any]],
) -> OperationNode:
    request_body = operation.get("requestBody")
    query = _to_parameter_nodes(parameters, location="query")
    headers = _to_parameter_nodes(parameters, location="header")

    return OperationNode(
        method=method,
        operation_id=operation.get("operationId"),
        summary=operation.get("summary"),
        description=operation.get("description"),
        has_request=request_body is not None or bool(query) or bool(headers),
        request_payloads=_extract_payloads(request_body),
        query_parameters=query,
        header_parameters=headers,
        path_parameters=_to_parameter_nodes(parameters, location="path"),
        responses=_extract_responses(operation.get("responses") or {}),
    )


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    ``(name, in)`` pair, per the OpenAPI specification.
    """
    overridden = {
        (param.get("name", ""), param.get("in", ""))
        for param in op_params
        if isinstance(param, dict)
    }
    merged = [
        param
        for param in path_params
        if isinstance(param, dict)
        and (param.get("name", ""), param.get("in", "")) not in overridden
    ]
    merged.extend(param for param in op_params if isinstance(param, dict))
    return merged


def _to_parameter_nodes(params: list[Any], location: str) -> list[ParameterNode]:
    return [
        _to_parameter_node(param.get("name", ""), param, force_required=location == "path")
        for param in params
        if isinstance(param, dict) and param.get("in", "query") == location
    ]


def _to_parameter_node(name: str, param: dict[str, Any], force_required: bool = False) -> ParameterNode:
    """Convert a parameter or header object into a :class:`ParameterNode`.

    Path parameters are always required, whatever the document says.
    """
    schema = param.get("schema")
    schema = schema if isinstance(schema, dict) else {}
    scalar_type = ScalarType.parse(schema.get("type"))
    enum_values = schema.get("enum")
    example = param.get("example", schema.get("example"))

    return ParameterNode(
        name=name,
        type=scalar_type,
        required=True if force_required else bool(param.get("required", False)),
        default=_as_str(schema.get("default")),
        description=param.get("description"),
        example=example,
        enum_values=[str(v) for v in enum_values] if isinstance(enum_values, list) else None,
        repeat=scalar_type == ScalarType.ARRAY,
    )


def _extract_payloads(container: Any) -> list[PayloadNode]:
    """Read the ``content`` map of a request body or response."""
    if not isinstance(container, dict):
        return []
    payloads: list[PayloadNode] = []
    for media_type, media in (container.get("content") or {}).items():
        media = media if isinstance(media, dict) else {}
        payloads.append(
            PayloadNode(
                media_type=media_type,
                schema=media.get("schema"),
                example=media.get("example"),
            )
        )
    return payloads


def _extract_responses(responses: dict[str, Any]) -> list[ResponseNode]:
    result: list[ResponseNode] = []
    for status_code, response in responses.items():
        if not isinstance(response, dict):
            continue
        headers = response.get("headers") or {}
        result.append(
            ResponseNode(
                status_code=str(status_code),
                description=response.get("description"),
                payloads=_extract_payloads(response),
                headers=[
                    _to_parameter_node(name, header)
                    for name, header in headers.items()
                    if isinstance(header, dict)
                ],
            )
        )
    return result
