"""URI path nodes and their action maps."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import NoReturn, Optional, Union

from specmodel.graph.action import ActionModel
from specmodel.graph.capabilities import Capability, CapabilityMixin
from specmodel.graph.lazy import frozen_cached
from specmodel.graph.parameter import ParameterModel, build_parameter_map
from specmodel.models import EndpointNode, HTTPMethod
from specmodel.validation.schema import SchemaValidator

DEFAULT_VERSION_PLACEHOLDER = "{version}"

_NO_CHILDREN: Mapping[str, "ResourceModel"] = MappingProxyType({})


def resolve_version(uri: str, version: Optional[str], placeholder: str = DEFAULT_VERSION_PLACEHOLDER) -> str:
    """Substitute *version* for every *placeholder* in *uri*.

    A pure string operation: with no placeholder left in *uri* (or no
    *version* given) the URI comes back unchanged, so applying it twice is
    the same as applying it once.
    """
    if version is None or placeholder not in uri:
        return uri
    return uri.replace(placeholder, version)


class ResourceModel(CapabilityMixin):
    """One URI path of the contract.

    The parent link is captured once, when the
    :class:`~specmodel.graph.specification.SpecificationModel` is built: the
    parent is the closest declared ancestor path. :attr:`relative_uri` and
    :attr:`parent_uri` are derived from that link.

    Child enumeration is not exposed by this model; :meth:`get_resources`
    always returns an empty mapping.

    Args:
        endpoint: The contract's endpoint node.
        validator: Schema validator bound to every body below this resource.
        parent: The closest declared ancestor resource, if any.
        version_placeholder: Token replaced by :meth:`get_resolved_uri`.
    """

    def __init__(
        self,
        endpoint: EndpointNode,
        validator: SchemaValidator,
        parent: Optional["ResourceModel"] = None,
        version_placeholder: str = DEFAULT_VERSION_PLACEHOLDER,
    ) -> None:
        self._endpoint = endpoint
        self._validator = validator
        self._parent = parent
        self._version_placeholder = version_placeholder

    @property
    def uri(self) -> str:
        return self._endpoint.path

    @property
    def parent(self) -> Optional["ResourceModel"]:
        return self._parent

    @property
    def parent_uri(self) -> str:
        return self._parent.uri if self._parent is not None else ""

    @property
    def relative_uri(self) -> str:
        if self._parent is None:
            return self.uri
        return self.uri[len(self._parent.uri.rstrip("/")):]

    @property
    def display_name(self) -> str:
        return self.uri

    def get_resolved_uri(self, version: Optional[str]) -> str:
        return resolve_version(self.uri, version, self._version_placeholder)

    @frozen_cached
    def actions(self) -> dict[HTTPMethod, ActionModel]:
        """Actions keyed by method, in declaration order.

        Raises:
            UnknownMethodError: If any operation declares an unrecognised
                method. The whole map fails; no action is silently dropped.
        """
        result: dict[HTTPMethod, ActionModel] = {}
        for operation in self._endpoint.operations:
            action = ActionModel(self, operation, self._validator)
            result[action.method] = action
        return result

    def get_action(self, method: Union[str, HTTPMethod]) -> Optional[ActionModel]:
        """Look up an action by method, ignoring case.

        Returns ``None`` for a known method this resource does not declare.

        Raises:
            UnknownMethodError: If *method* is not a recognised method.
        """
        return self.actions.get(HTTPMethod.parse(method))

    @frozen_cached
    def resolved_uri_parameters(self) -> dict[str, ParameterModel]:
        return build_parameter_map(self._endpoint.parameters)

    def get_resources(self) -> Mapping[str, "ResourceModel"]:
        return _NO_CHILDREN

    # -- capability gaps --

    def get_base_uri_parameters(self) -> NoReturn:
        self._unsupported(Capability.BASE_URI_PARAMETERS, "get_base_uri_parameters")

    def clean_base_uri_parameters(self) -> None:
        self._unsupported(Capability.BASE_URI_PARAMETERS, "clean_base_uri_parameters")

    def set_parent_uri(self, parent_uri: str) -> None:
        self._unsupported(Capability.MUTATION, "set_parent_uri")

    def __str__(self) -> str:
        return self.uri

    def __repr__(self) -> str:
        return f"ResourceModel({self.uri!r})"
