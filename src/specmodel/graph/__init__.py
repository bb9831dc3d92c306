"""Lazily materialised object graph over a parsed API contract.

The graph mirrors the contract: a :class:`SpecificationModel` holds
:class:`ResourceModel` instances keyed by path; each resource holds one
:class:`ActionModel` per HTTP method; actions and responses expose their
bodies as :class:`MimeTypeModel` instances keyed by media type and their
parameters as :class:`ParameterModel` instances keyed by name.

Sub-modules:

* :mod:`~specmodel.graph.lazy` -- compute-once, read-only collections.
* :mod:`~specmodel.graph.capabilities` -- ``supports()`` and capability gaps.
* :mod:`~specmodel.graph.specification` -- the root and :func:`load_specification`.
"""

from specmodel.graph.action import ActionModel
from specmodel.graph.capabilities import Capability
from specmodel.graph.mime_type import MimeTypeModel
from specmodel.graph.parameter import ParameterModel
from specmodel.graph.resource import ResourceModel, resolve_version
from specmodel.graph.response import ResponseModel
from specmodel.graph.specification import SpecificationModel, load_specification

__all__ = [
    "ActionModel",
    "Capability",
    "MimeTypeModel",
    "ParameterModel",
    "ResourceModel",
    "ResponseModel",
    "SpecificationModel",
    "load_specification",
    "resolve_version",
]
