"""Capability markers for the read-only model graph.

The abstract resource/action interface this model descends from includes
operations the contract representation cannot honour: traits, security
references, base-URI parameters, child-resource enumeration and every
mutator. Rather than leaving callers to discover the gaps through a thrown
error, each graph type declares the capabilities it supports and answers
``supports(capability)``. Invoking a missing capability still raises
:class:`~specmodel.exceptions.UnsupportedCapabilityError` so misuse is never
a silent no-op.
"""

from __future__ import annotations

import enum
from typing import ClassVar, NoReturn

from specmodel.exceptions import UnsupportedCapabilityError


class Capability(str, enum.Enum):
    """Optional capabilities of the model interface."""

    CHILD_RESOURCES = "child-resources"
    TRAITS = "traits"
    SECURITY_REFERENCES = "security-references"
    BASE_URI_PARAMETERS = "base-uri-parameters"
    MUTATION = "mutation"


class CapabilityMixin:
    """Adds ``supports()`` and a raising helper for missing capabilities."""

    capabilities: ClassVar[frozenset[Capability]] = frozenset()

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def _unsupported(self, capability: Capability, operation: str) -> NoReturn:
        raise UnsupportedCapabilityError(capability, operation)
