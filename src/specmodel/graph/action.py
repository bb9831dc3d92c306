"""One HTTP method on one resource."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, Optional

from specmodel.graph.capabilities import Capability, CapabilityMixin
from specmodel.graph.lazy import frozen_cached
from specmodel.graph.mime_type import MimeTypeModel, build_body_map
from specmodel.graph.parameter import ParameterModel, build_parameter_map
from specmodel.graph.response import ResponseModel
from specmodel.models import HTTPMethod, OperationNode
from specmodel.validation.schema import SchemaValidator

if TYPE_CHECKING:
    from specmodel.graph.resource import ResourceModel


class ActionModel(CapabilityMixin):
    """An action derives everything lazily from its operation node.

    ``bodies``, ``query_parameters``, ``headers`` and ``responses`` are each
    computed once, on first read, and the same read-only mapping is returned
    afterwards. An operation that declares no request has no bodies, query
    parameters or headers.

    Traits, security references and base-URI parameters are capability gaps:
    :meth:`supports` reports them as absent and the accessors raise
    :class:`~specmodel.exceptions.UnsupportedCapabilityError`.

    Args:
        resource: The owning resource (back-reference, not ownership).
        operation: The contract's operation node.
        validator: Schema validator bound to every body of this action.

    Raises:
        UnknownMethodError: If the operation's method token is not recognised.
    """

    def __init__(
        self,
        resource: "ResourceModel",
        operation: OperationNode,
        validator: SchemaValidator,
    ) -> None:
        self._resource = resource
        self._operation = operation
        self._validator = validator
        self._method = HTTPMethod.parse(operation.method)

    @property
    def method(self) -> HTTPMethod:
        return self._method

    @property
    def type(self) -> HTTPMethod:
        return self._method

    @property
    def resource(self) -> "ResourceModel":
        return self._resource

    @property
    def operation_id(self) -> Optional[str]:
        return self._operation.operation_id

    @property
    def summary(self) -> Optional[str]:
        return self._operation.summary

    @property
    def description(self) -> Optional[str]:
        return self._operation.description

    @frozen_cached
    def bodies(self) -> dict[str, MimeTypeModel]:
        if not self._operation.has_request:
            return {}
        return build_body_map(self._operation.request_payloads, self._validator)

    @frozen_cached
    def query_parameters(self) -> dict[str, ParameterModel]:
        if not self._operation.has_request:
            return {}
        return build_parameter_map(self._operation.query_parameters)

    @frozen_cached
    def headers(self) -> dict[str, ParameterModel]:
        if not self._operation.has_request:
            return {}
        return build_parameter_map(self._operation.header_parameters)

    @frozen_cached
    def responses(self) -> dict[str, ResponseModel]:
        return {
            response.status_code: ResponseModel(response, self._validator)
            for response in self._operation.responses
        }

    def has_body(self) -> bool:
        return bool(self.bodies)

    def get_body(self, media_type: str) -> Optional[MimeTypeModel]:
        return self.bodies.get(media_type)

    def get_response(self, status_code: str) -> Optional[ResponseModel]:
        return self.responses.get(str(status_code))

    # -- capability gaps --

    def get_is(self) -> NoReturn:
        self._unsupported(Capability.TRAITS, "get_is")

    def get_secured_by(self) -> NoReturn:
        self._unsupported(Capability.SECURITY_REFERENCES, "get_secured_by")

    def get_base_uri_parameters(self) -> NoReturn:
        self._unsupported(Capability.BASE_URI_PARAMETERS, "get_base_uri_parameters")

    # -- mutators (never valid on this representation) --

    def clean_base_uri_parameters(self) -> None:
        self._unsupported(Capability.BASE_URI_PARAMETERS, "clean_base_uri_parameters")

    def set_headers(self, headers: dict[str, ParameterModel]) -> None:
        self._unsupported(Capability.MUTATION, "set_headers")

    def set_query_parameters(self, query_parameters: dict[str, ParameterModel]) -> None:
        self._unsupported(Capability.MUTATION, "set_query_parameters")

    def set_body(self, body: dict[str, MimeTypeModel]) -> None:
        self._unsupported(Capability.MUTATION, "set_body")

    def add_response(self, key: str, response: ResponseModel) -> None:
        self._unsupported(Capability.MUTATION, "add_response")

    def add_security_reference(self, name: str) -> None:
        self._unsupported(Capability.SECURITY_REFERENCES, "add_security_reference")

    def add_is(self, trait: str) -> None:
        self._unsupported(Capability.TRAITS, "add_is")

    def __repr__(self) -> str:
        return f"ActionModel({self._method.value} {self._resource.uri})"
