"""Root of the model graph.

:class:`SpecificationModel` is built once per loaded contract and then shared,
read-only, by every request. Resources are created eagerly together with their
parent links; everything below a resource (actions, bodies, parameters,
responses) is materialised lazily on first read and cached for the lifetime of
the model.

:func:`load_specification` runs the whole chain -- load the contract text,
extract contract nodes, build the graph -- in one call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, NoReturn, Optional, Union

from specmodel.exceptions import ResourceNotFoundError
from specmodel.graph.action import ActionModel
from specmodel.graph.capabilities import Capability, CapabilityMixin
from specmodel.graph.resource import DEFAULT_VERSION_PLACEHOLDER, ResourceModel
from specmodel.models import ContractDocument, EndpointNode, GlobalConfig, HTTPMethod
from specmodel.validation.schema import JsonSchemaValidator, SchemaValidator

if TYPE_CHECKING:
    from specmodel.cache import SpecCache

logger = logging.getLogger(__name__)


def _segments(path: str) -> list[str]:
    return [segment for segment in path.split("/") if segment]


def _depth(endpoint: EndpointNode) -> int:
    return len(_segments(endpoint.path))


class SpecificationModel(CapabilityMixin):
    """The resource tree of one API contract.

    Args:
        document: The contract nodes handed back by a contract parser.
        validator: Schema validator bound to every body in the graph.
            Defaults to a :class:`~specmodel.validation.schema.JsonSchemaValidator`
            over the document's components.
        version_placeholder: Token substituted by
            :meth:`ResourceModel.get_resolved_uri`.
    """

    def __init__(
        self,
        document: ContractDocument,
        validator: Optional[SchemaValidator] = None,
        version_placeholder: str = DEFAULT_VERSION_PLACEHOLDER,
    ) -> None:
        self._document = document
        self._validator = validator or JsonSchemaValidator(document.components)
        self._version_placeholder = version_placeholder
        self._resources = MappingProxyType(self._build_resources(document.endpoints))
        logger.debug(
            "Built model for %r with %d resources", document.title, len(self._resources)
        )

    def _build_resources(self, endpoints: list[EndpointNode]) -> dict[str, ResourceModel]:
        # Ancestors have fewer segments, so building shallow paths first
        # guarantees every parent exists before its descendants.
        built: dict[str, ResourceModel] = {}
        for endpoint in sorted(endpoints, key=_depth):
            built[endpoint.path] = ResourceModel(
                endpoint,
                self._validator,
                parent=self._find_parent(endpoint.path, built),
                version_placeholder=self._version_placeholder,
            )
        # Publish in declaration order.
        return {endpoint.path: built[endpoint.path] for endpoint in endpoints}

    @staticmethod
    def _find_parent(path: str, built: Mapping[str, ResourceModel]) -> Optional[ResourceModel]:
        segments = _segments(path)
        for size in range(len(segments) - 1, -1, -1):
            candidate = "/" + "/".join(segments[:size])
            if candidate != path and candidate in built:
                return built[candidate]
        return None

    @property
    def title(self) -> str:
        return self._document.title

    @property
    def version(self) -> Optional[str]:
        return self._document.version

    @property
    def base_uri(self) -> Optional[str]:
        return self._document.base_uri

    @property
    def document(self) -> ContractDocument:
        return self._document

    @property
    def validator(self) -> SchemaValidator:
        return self._validator

    @property
    def resources(self) -> Mapping[str, ResourceModel]:
        return self._resources

    def get_resource(self, path: str) -> Optional[ResourceModel]:
        """Return the resource declared at exactly *path*, or ``None``."""
        return self._resources.get(path)

    def find_action(self, path: str, method: Union[str, HTTPMethod]) -> ActionModel:
        """Return the action for *method* on the resource at *path*.

        Raises:
            ResourceNotFoundError: If the resource or the action is not declared.
            UnknownMethodError: If *method* is not a recognised method.
        """
        resource = self.get_resource(path)
        if resource is None:
            raise ResourceNotFoundError(f"No resource declared at {path!r}")
        action = resource.get_action(method)
        if action is None:
            token = method.value if isinstance(method, HTTPMethod) else method.upper()
            raise ResourceNotFoundError(f"{token} is not declared on {path!r}")
        return action

    def iter_actions(self) -> Iterator[ActionModel]:
        """Yield every action of every resource, in declaration order."""
        for resource in self._resources.values():
            yield from resource.actions.values()

    def get_base_uri_parameters(self) -> NoReturn:
        self._unsupported(Capability.BASE_URI_PARAMETERS, "get_base_uri_parameters")

    def __len__(self) -> int:
        return len(self._resources)

    def __iter__(self) -> Iterator[ResourceModel]:
        return iter(self._resources.values())

    def __repr__(self) -> str:
        return f"SpecificationModel({self.title!r}, resources={len(self._resources)})"


def load_specification(
    source: str,
    config: Optional[GlobalConfig] = None,
    cache: Optional["SpecCache"] = None,
) -> SpecificationModel:
    """Load an OpenAPI contract and build its model.

    Args:
        source: A URL, file path, or ``-`` for stdin.
        config: Validation settings (form media types, version placeholder).
        cache: Optional cache for remotely fetched contracts.

    Raises:
        SpecParseError: If the contract cannot be loaded or parsed.
    """
    from specmodel.parser import extract_document, load_spec, validate_openapi_version

    config = config or GlobalConfig()
    raw = load_spec(source, cache=cache)
    version = validate_openapi_version(raw)
    document = extract_document(raw, version)
    validator = JsonSchemaValidator(
        document.components,
        form_media_types=config.validation.form_media_types,
    )
    return SpecificationModel(
        document,
        validator=validator,
        version_placeholder=config.validation.version_placeholder,
    )
