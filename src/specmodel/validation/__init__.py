"""Request-body validation.

Sub-modules:

* :mod:`~specmodel.validation.schema` -- the schema validator boundary and the
  default :class:`JsonSchemaValidator`.
* :mod:`~specmodel.validation.result` -- typed outcomes (valid / invalid /
  not applicable, and the form pipeline variants).
* :mod:`~specmodel.validation.multimap` -- ordered multimap of form fields.
* :mod:`~specmodel.validation.form` -- the URL-encoded form pipeline.
* :mod:`~specmodel.validation.body` -- per-action content-type dispatch.
"""

from specmodel.validation.body import RequestBodyValidator
from specmodel.validation.form import (
    FormPayload,
    FormValidationPipeline,
    encode_form,
    extract_form,
)
from specmodel.validation.multimap import MultiMap
from specmodel.validation.result import (
    FormOutcome,
    FormValidationResult,
    Outcome,
    ValidationResult,
)
from specmodel.validation.schema import JsonSchemaValidator, SchemaValidator

__all__ = [
    "FormOutcome",
    "FormPayload",
    "FormValidationPipeline",
    "FormValidationResult",
    "JsonSchemaValidator",
    "MultiMap",
    "Outcome",
    "RequestBodyValidator",
    "SchemaValidator",
    "ValidationResult",
    "encode_form",
    "extract_form",
]
