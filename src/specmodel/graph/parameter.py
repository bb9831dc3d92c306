"""Named query, header and URI parameters.

A :class:`ParameterModel` is an immutable snapshot of a
:class:`~specmodel.models.ParameterNode`. Parameters are identified by name
within their owning collection; query parameters, headers and URI parameters
are independent namespaces.

:meth:`ParameterModel.validate` checks a raw string value (as it arrives in a
query string or header) against the declared scalar type and enum.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

from specmodel.models import ParameterNode, ScalarType

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_BOOLEAN_VALUES = frozenset({"true", "false"})


@dataclass(frozen=True)
class ParameterModel:
    """A single declared parameter."""

    name: str
    type: ScalarType = ScalarType.STRING
    required: bool = False
    default: Optional[str] = None
    description: Optional[str] = None
    example: Any = None
    enum_values: Optional[tuple[str, ...]] = None
    repeat: bool = False

    @classmethod
    def from_node(cls, node: ParameterNode) -> "ParameterModel":
        return cls(
            name=node.name,
            type=node.type,
            required=node.required,
            default=node.default,
            description=node.description,
            example=node.example,
            enum_values=tuple(node.enum_values) if node.enum_values else None,
            repeat=node.repeat,
        )

    @property
    def display_name(self) -> str:
        return self.name

    def is_array(self) -> bool:
        return self.repeat or self.type == ScalarType.ARRAY

    def validate(self, value: str) -> bool:
        """Return ``True`` if the raw *value* conforms to this parameter.

        Integers, numbers and booleans are checked syntactically; strings and
        structured types accept anything. When an enum is declared the value
        must be one of its members.
        """
        if self.enum_values is not None and value not in self.enum_values:
            return False
        if self.type == ScalarType.INTEGER:
            return bool(_INTEGER_RE.match(value))
        if self.type == ScalarType.NUMBER:
            return bool(_NUMBER_RE.match(value))
        if self.type == ScalarType.BOOLEAN:
            return value in _BOOLEAN_VALUES
        return True


def build_parameter_map(nodes: list[ParameterNode]) -> dict[str, ParameterModel]:
    """Key parameters by name; a later declaration of the same name wins."""
    return {node.name: ParameterModel.from_node(node) for node in nodes}
