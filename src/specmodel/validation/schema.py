"""Schema validator boundary.

The model never evaluates schemas itself. Each
:class:`~specmodel.graph.mime_type.MimeTypeModel` is bound at construction to
an object satisfying the :class:`SchemaValidator` protocol, and hands it the
body's :class:`~specmodel.models.PayloadNode` (the opaque schema handle) plus
the text to check.

A validator that cannot evaluate a given schema/content pairing raises
:class:`~specmodel.exceptions.SchemaUnsupportedError`; the model turns that
into "validation not applicable" so unsupported schema kinds never block a
request.

:class:`JsonSchemaValidator` is the default implementation, built on the
`jsonschema <https://python-jsonschema.readthedocs.io/>`_ library.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Protocol

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError, ValidationError
from jsonschema.validators import validator_for

from specmodel.exceptions import SchemaUnsupportedError
from specmodel.models import PayloadNode, ValidationIssue

DEFAULT_FORM_MEDIA_TYPES = frozenset({"application/x-www-form-urlencoded"})


class SchemaValidator(Protocol):
    """Anything that can check a text against a payload's schema."""

    def validate(self, handle: PayloadNode, text: str) -> list[ValidationIssue]:
        """Return every violation of *handle*'s schema found in *text*.

        Raises:
            SchemaUnsupportedError: If this schema/content pairing cannot be
                evaluated.
        """
        ...


def base_media_type(media_type: str) -> str:
    """Strip parameters and normalise case: ``Text/JSON; charset=x`` -> ``text/json``."""
    return media_type.split(";", 1)[0].strip().lower()


def is_json_media_type(media_type: str) -> bool:
    base = base_media_type(media_type)
    return base in ("application/json", "text/json") or base.endswith("+json")


class JsonSchemaValidator:
    """JSON Schema validation for JSON and form bodies.

    Form bodies reach this validator already restructured into a JSON
    document by the form pipeline, so both JSON and configured form media
    types are evaluated. Anything else (XML, plain text, binary) is reported
    as unsupported.

    Schemas whose internal ``#/components/...`` references were left in place
    by the resolver (recursive definitions) are evaluated with the contract's
    ``components`` attached, so those pointers still resolve.

    Compiled validators are cached per schema object; the cache is guarded by
    a lock and safe to share between threads.

    Args:
        components: The contract's reusable definitions.
        form_media_types: Media types treated as form bodies.
    """

    def __init__(
        self,
        components: Optional[Mapping[str, Any]] = None,
        form_media_types: Optional[Iterable[str]] = None,
    ) -> None:
        self._components = dict(components or {})
        if form_media_types is None:
            self._form_media_types = DEFAULT_FORM_MEDIA_TYPES
        else:
            self._form_media_types = frozenset(base_media_type(m) for m in form_media_types)
        self._lock = threading.Lock()
        self._compiled: dict[int, tuple[Any, Any]] = {}

    def supports_media_type(self, media_type: str) -> bool:
        return is_json_media_type(media_type) or base_media_type(media_type) in self._form_media_types

    def validate(self, handle: PayloadNode, text: str) -> list[ValidationIssue]:
        if not self.supports_media_type(handle.media_type):
            raise SchemaUnsupportedError(
                f"No structural validation for media type {handle.media_type!r}"
            )
        schema = handle.schema_
        if schema is None:
            raise SchemaUnsupportedError(f"No schema declared for {handle.media_type!r}")
        if not isinstance(schema, (Mapping, bool)):
            raise SchemaUnsupportedError(
                f"Schema of type {type(schema).__name__} is not a JSON Schema"
            )

        validator = self._validator_for(schema)

        try:
            instance = json.loads(text)
        except json.JSONDecodeError as exc:
            return [ValidationIssue(message=f"Body is not valid JSON: {exc}")]

        return [_to_issue(error) for error in validator.iter_errors(instance)]

    def _validator_for(self, schema: Any) -> Any:
        key = id(schema)
        with self._lock:
            entry = self._compiled.get(key)
            if entry is not None and entry[0] is schema:
                return entry[1]

        document = self._attach_components(schema)
        cls = validator_for(document, default=Draft202012Validator)
        try:
            cls.check_schema(document)
        except SchemaError as exc:
            raise SchemaUnsupportedError(f"Invalid schema: {exc.message}") from exc
        validator = cls(document)

        with self._lock:
            # Keep the schema alive alongside its id so the key stays unique.
            self._compiled[key] = (schema, validator)
        return validator

    def _attach_components(self, schema: Any) -> Any:
        if not self._components or not isinstance(schema, Mapping) or "components" in schema:
            return schema
        return {**schema, "components": self._components}


def _to_issue(error: ValidationError) -> ValidationIssue:
    path = error.json_path
    if path == "$":
        return ValidationIssue(message=error.message)
    return ValidationIssue(message=f"{path}: {error.message}", path=path)
