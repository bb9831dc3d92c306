"""Body definitions keyed by media type."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from specmodel.exceptions import SchemaUnsupportedError
from specmodel.graph.lazy import frozen_cached
from specmodel.graph.parameter import ParameterModel
from specmodel.models import PayloadNode, ScalarType, ValidationIssue
from specmodel.validation.result import ValidationResult
from specmodel.validation.schema import SchemaValidator, base_media_type

logger = logging.getLogger(__name__)

_FORM_TYPES = frozenset({"application/x-www-form-urlencoded", "multipart/form-data"})


class MimeTypeModel:
    """One body variant of an action or response.

    Holds no mutable state: :meth:`validate` and :meth:`check` are pure
    functions of the bound schema handle and the input text. The schema
    validator is bound at construction time.

    Args:
        payload: The contract's payload node (media type + schema handle).
        validator: Schema validator used by :meth:`check`.
    """

    def __init__(self, payload: PayloadNode, validator: SchemaValidator) -> None:
        self._payload = payload
        self._validator = validator

    @property
    def media_type(self) -> str:
        return self._payload.media_type

    @property
    def schema(self) -> Any:
        return self._payload.schema_

    @property
    def example(self) -> Any:
        return self._payload.example

    @property
    def payload(self) -> PayloadNode:
        return self._payload

    def check(self, text: str) -> ValidationResult:
        """Validate *text* and say whether validation actually ran.

        Returns a :class:`~specmodel.validation.result.ValidationResult`
        that is ``NOT_APPLICABLE`` when the validator does not support this
        schema/content pairing, ``INVALID`` with every issue when the schema is
        violated, and ``VALID`` otherwise.
        """
        try:
            issues = self._validator.validate(self._payload, text)
        except SchemaUnsupportedError as exc:
            logger.debug("Skipping validation of %s body: %s", self.media_type, exc)
            return ValidationResult.not_applicable(str(exc))
        return ValidationResult.from_issues(issues)

    def validate(self, text: str) -> list[ValidationIssue]:
        """Return the schema violations in *text*; empty when not applicable."""
        return list(self.check(text).issues)

    @frozen_cached
    def form_parameters(self) -> dict[str, tuple[ParameterModel, ...]]:
        """Form fields declared by an object schema on a form media type.

        Each field maps to a one-element tuple so that callers written against
        multi-declaration form parameters keep working.
        """
        if base_media_type(self.media_type) not in _FORM_TYPES:
            return {}
        schema = self.schema
        if not isinstance(schema, Mapping):
            return {}
        properties = schema.get("properties")
        if not isinstance(properties, Mapping):
            return {}

        required = set(schema.get("required") or ())
        result: dict[str, tuple[ParameterModel, ...]] = {}
        for name, prop in properties.items():
            prop = prop if isinstance(prop, Mapping) else {}
            scalar_type = ScalarType.parse(prop.get("type"))
            default = prop.get("default")
            enum_values = prop.get("enum")
            result[name] = (
                ParameterModel(
                    name=name,
                    type=scalar_type,
                    required=name in required,
                    default=None if default is None else str(default),
                    description=prop.get("description"),
                    example=prop.get("example"),
                    enum_values=tuple(str(v) for v in enum_values) if enum_values else None,
                    repeat=scalar_type == ScalarType.ARRAY,
                ),
            )
        return result

    def __repr__(self) -> str:
        return f"MimeTypeModel({self.media_type!r})"


def build_body_map(payloads: list[PayloadNode], validator: SchemaValidator) -> dict[str, MimeTypeModel]:
    """Key bodies by media type.

    Two payloads with the same media type collide: the later one overwrites
    the earlier one while keeping the first one's position.
    """
    result: dict[str, MimeTypeModel] = {}
    for payload in payloads:
        result[payload.media_type] = MimeTypeModel(payload, validator)
    return result
