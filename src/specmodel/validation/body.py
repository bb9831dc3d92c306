"""Request-body validation for one action.

:class:`RequestBodyValidator` picks the body an action declares for the
request's content type and validates against it: form media types go through
the :class:`~specmodel.validation.form.FormValidationPipeline`, everything
else through :meth:`~specmodel.graph.mime_type.MimeTypeModel.check`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Optional

from specmodel.exceptions import BadRequestError, UnsupportedMediaTypeError
from specmodel.validation.form import FormExtractor, FormPayload, FormValidationPipeline, extract_form
from specmodel.validation.result import Outcome
from specmodel.validation.schema import DEFAULT_FORM_MEDIA_TYPES, base_media_type

if TYPE_CHECKING:
    from specmodel.graph.action import ActionModel
    from specmodel.graph.mime_type import MimeTypeModel

logger = logging.getLogger(__name__)


class RequestBodyValidator:
    """Validate inbound bodies against an action's declared bodies.

    Args:
        action: The action the request was routed to.
        form_media_types: Content types handled by the form pipeline.
        extractor: Extractor handed to the form pipeline.
    """

    def __init__(
        self,
        action: "ActionModel",
        form_media_types: Optional[Iterable[str]] = None,
        extractor: FormExtractor = extract_form,
    ) -> None:
        self._action = action
        if form_media_types is None:
            self._form_media_types = DEFAULT_FORM_MEDIA_TYPES
        else:
            self._form_media_types = frozenset(base_media_type(m) for m in form_media_types)
        self._extractor = extractor

    def find_body(self, content_type: str) -> Optional["MimeTypeModel"]:
        """Return the declared body matching *content_type*.

        An exact match wins; otherwise media types are compared without
        parameters and case.
        """
        bodies = self._action.bodies
        if content_type in bodies:
            return bodies[content_type]
        wanted = base_media_type(content_type)
        for media_type, body in bodies.items():
            if base_media_type(media_type) == wanted:
                return body
        return None

    def validate(self, payload: Any, content_type: str) -> Any:
        """Validate *payload* sent as *content_type* and return the body to forward.

        Form bodies come back re-encoded (or untouched when validation could
        not run); other bodies come back as given. Byte bodies are decoded
        with the ``charset`` of *content_type* (UTF-8 by default); a body that
        cannot be decoded is passed through with a logged warning.

        Raises:
            UnsupportedMediaTypeError: If the action declares bodies but none
                for *content_type*.
            InvalidFormParameterError: If a form body violates its schema.
            BadRequestError: If any other body violates its schema.
        """
        if not self._action.has_body():
            return payload

        body = self.find_body(content_type)
        if body is None:
            raise UnsupportedMediaTypeError(
                f"Unsupported media type {content_type!r}; expected one of: "
                + ", ".join(self._action.bodies)
            )

        if base_media_type(content_type) in self._form_media_types:
            pipeline = FormValidationPipeline(body, self._extractor)
            return pipeline.validate(FormPayload(payload, content_type)).value

        if isinstance(payload, (bytes, bytearray)):
            charset = FormPayload(payload, content_type).charset
            try:
                text = bytes(payload).decode(charset)
            except (UnicodeDecodeError, LookupError) as exc:
                logger.warning("Cannot validate %s body: %s", content_type, exc)
                return payload
        else:
            text = str(payload)
        result = body.check(text)
        if result.outcome == Outcome.INVALID:
            raise BadRequestError(result.message)
        if result.outcome == Outcome.NOT_APPLICABLE:
            logger.debug("Body of %s not validated: %s", content_type, result.reason)
        return payload
