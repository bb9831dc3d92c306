"""Declared responses, keyed by status code string."""

from __future__ import annotations

from typing import Optional

from specmodel.graph.capabilities import Capability, CapabilityMixin
from specmodel.graph.lazy import frozen_cached
from specmodel.graph.mime_type import MimeTypeModel, build_body_map
from specmodel.graph.parameter import ParameterModel, build_parameter_map
from specmodel.models import ResponseNode
from specmodel.validation.schema import SchemaValidator


class ResponseModel(CapabilityMixin):
    """A status code with its declared bodies and headers.

    The status code stays a string so contract values such as ``"4XX"`` or
    ``"default"`` survive unchanged.
    """

    def __init__(self, node: ResponseNode, validator: SchemaValidator) -> None:
        self._node = node
        self._validator = validator

    @property
    def status_code(self) -> str:
        return self._node.status_code

    @property
    def description(self) -> Optional[str]:
        return self._node.description

    @frozen_cached
    def bodies(self) -> dict[str, MimeTypeModel]:
        return build_body_map(self._node.payloads, self._validator)

    @frozen_cached
    def headers(self) -> dict[str, ParameterModel]:
        return build_parameter_map(self._node.headers)

    def has_body(self) -> bool:
        return bool(self.bodies)

    def get_examples(self) -> dict[str, object]:
        return {
            media_type: body.example
            for media_type, body in self.bodies.items()
            if body.example is not None
        }

    # -- mutators (never valid on this representation) --

    def set_body(self, body: dict[str, MimeTypeModel]) -> None:
        self._unsupported(Capability.MUTATION, "set_body")

    def set_headers(self, headers: dict[str, ParameterModel]) -> None:
        self._unsupported(Capability.MUTATION, "set_headers")

    def __repr__(self) -> str:
        return f"ResponseModel({self.status_code!r})"
