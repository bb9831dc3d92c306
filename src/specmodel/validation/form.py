"""Validation pipeline for URL-encoded form bodies.

A form body is a flat list of ``key=value`` pairs in which a key may repeat.
To check it against a JSON Schema the pipeline

1. **extracts** the body into an ordered :class:`~specmodel.validation.multimap.MultiMap`,
2. **restructures** it into a JSON document -- a scalar for keys seen once,
   an ordered list for repeated keys,
3. **validates** that document with the body's
   :class:`~specmodel.graph.mime_type.MimeTypeModel`, and
4. either **rejects** the request with every violation, newline-joined, or
   **re-encodes** the original multimap as a form body tagged with the
   original content type.

Steps 1-2 and an unsupported schema never reject a request: when the body
cannot be restructured, or the validator cannot evaluate the schema, the
original payload is passed through untouched. The extractor is pluggable so an
external expression evaluator can replace :func:`extract_form`.

Each run is independent; the pipeline keeps no state between requests.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Union
from urllib.parse import parse_qsl, urlencode

from specmodel.exceptions import InvalidFormParameterError
from specmodel.validation.multimap import MultiMap
from specmodel.validation.result import (
    FormOutcome,
    FormValidationResult,
    Outcome,
    Transformation,
    TransformationFailed,
    Transformed,
)

if TYPE_CHECKING:
    from specmodel.graph.mime_type import MimeTypeModel

logger = logging.getLogger(__name__)

FORM_URLENCODED = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class FormPayload:
    """An inbound body together with its declared content type.

    ``value`` is the raw body (``str`` or ``bytes``) or an already extracted
    representation (a :class:`MultiMap`, a mapping, or a sequence of pairs).
    """

    value: Any
    content_type: str = FORM_URLENCODED

    @property
    def charset(self) -> str:
        for param in self.content_type.split(";")[1:]:
            name, _, value = param.partition("=")
            if name.strip().lower() == "charset" and value.strip():
                return value.strip().strip('"')
        return "utf-8"


FormExtractor = Callable[[FormPayload], Union[MultiMap, TransformationFailed]]


def extract_form(payload: FormPayload) -> Union[MultiMap, TransformationFailed]:
    """Read *payload* into an ordered multimap.

    Text bodies are parsed with blank values kept, so ``a=`` yields an empty
    string for ``a``. Returns :class:`TransformationFailed` when the body
    cannot be read.
    """
    value = payload.value
    if isinstance(value, MultiMap):
        return MultiMap(value)
    if isinstance(value, (bytes, bytearray)):
        try:
            value = bytes(value).decode(payload.charset)
        except (UnicodeDecodeError, LookupError) as exc:
            return TransformationFailed(f"Cannot decode form body: {exc}")
    if isinstance(value, str):
        try:
            pairs = parse_qsl(value, keep_blank_values=True, encoding=payload.charset)
        except LookupError as exc:
            return TransformationFailed(f"Unknown form charset: {exc}")
        return MultiMap(pairs)
    if isinstance(value, Mapping):
        return MultiMap(value)
    if isinstance(value, (list, tuple)) and all(
        isinstance(item, (list, tuple)) and len(item) == 2 for item in value
    ):
        return MultiMap(value)
    return TransformationFailed(f"Cannot read form fields from {type(value).__name__}")


def to_structured_text(form: MultiMap) -> Transformation:
    """Render *form* as a JSON document for schema validation."""
    try:
        return Transformed(json.dumps(form.to_structured(), ensure_ascii=False))
    except (TypeError, ValueError) as exc:
        return TransformationFailed(f"Cannot serialise form fields: {exc}")


def encode_form(form: MultiMap, charset: str = "utf-8") -> str:
    """Encode every pair of *form*, in order, as ``application/x-www-form-urlencoded``.

    Field order, repeated keys and every decoded value are preserved, but the
    escaping is canonical rather than the sender's: spaces become ``+`` and
    unreserved characters are not percent-encoded, so ``note=hello%20world&x=%7e``
    comes back as ``note=hello+world&x=~``.
    """
    return urlencode(form.items(), encoding=charset)


class FormValidationPipeline:
    """Validate and re-encode form bodies declared by one media type.

    Args:
        mime_type: The action's declared body for the form media type.
        extractor: Turns a payload into a multimap. Defaults to
            :func:`extract_form`.

    Example::

        pipeline = FormValidationPipeline(action.bodies[FORM_URLENCODED])
        body = pipeline.validate(FormPayload("a=1&a=2&b=x"))
        assert body.value == "a=1&a=2&b=x"
    """

    def __init__(self, mime_type: "MimeTypeModel", extractor: FormExtractor = extract_form) -> None:
        self._mime_type = mime_type
        self._extractor = extractor

    @property
    def mime_type(self) -> "MimeTypeModel":
        return self._mime_type

    def evaluate(self, payload: FormPayload) -> FormValidationResult:
        """Run the pipeline and return its outcome without raising."""
        form = self._extractor(payload)
        if isinstance(form, TransformationFailed):
            return self._pass_through(payload, form.reason)

        transformation = to_structured_text(form)
        if isinstance(transformation, TransformationFailed):
            return self._pass_through(payload, transformation.reason)

        result = self._mime_type.check(transformation.text)
        if result.outcome == Outcome.NOT_APPLICABLE:
            return FormValidationResult(
                FormOutcome.PASSED_THROUGH, payload=payload, reason=result.reason
            )
        if result.outcome == Outcome.INVALID:
            return FormValidationResult(
                FormOutcome.REJECTED, message=result.message, issues=result.issues
            )

        encoded = encode_form(form, payload.charset)
        if isinstance(payload.value, (bytes, bytearray)):
            value: Any = encoded.encode("ascii")
        else:
            value = encoded
        return FormValidationResult(
            FormOutcome.VALIDATED,
            payload=FormPayload(value, payload.content_type),
        )

    def validate(self, payload: FormPayload) -> FormPayload:
        """Return the validated (re-encoded) body, or the original one if validation could not run.

        Raises:
            InvalidFormParameterError: If the schema reports any violation. The
                message lists every violation, newline-joined.
        """
        result = self.evaluate(payload)
        if result.outcome == FormOutcome.REJECTED:
            raise InvalidFormParameterError(result.message or "Invalid form parameters")
        assert result.payload is not None
        return result.payload

    def _pass_through(self, payload: FormPayload, reason: str) -> FormValidationResult:
        logger.warning("Cannot validate url-encoded form: %s", reason)
        return FormValidationResult(FormOutcome.PASSED_THROUGH, payload=payload, reason=reason)
