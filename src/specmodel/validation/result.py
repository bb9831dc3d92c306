"""Typed outcomes for schema checks and the form validation pipeline.

Request-time validation has a two-tier policy: a proven violation rejects
the request, while anything that merely prevents validation from running
(an unsupported schema, a body that cannot be restructured) lets the request
through untouched. The outcomes below make each branch an explicit value
instead of an exception caught somewhere up the stack.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Union

from specmodel.models import ValidationIssue

if TYPE_CHECKING:
    from specmodel.validation.form import FormPayload


class Outcome(str, enum.Enum):
    """Result of checking one text against one schema."""

    VALID = "valid"
    INVALID = "invalid"
    NOT_APPLICABLE = "not-applicable"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of :meth:`~specmodel.graph.mime_type.MimeTypeModel.check`.

    ``issues`` is only populated for :attr:`Outcome.INVALID`; ``reason``
    explains a :attr:`Outcome.NOT_APPLICABLE` result.
    """

    outcome: Outcome
    issues: tuple[ValidationIssue, ...] = ()
    reason: Optional[str] = None

    @classmethod
    def from_issues(cls, issues: list[ValidationIssue]) -> "ValidationResult":
        if issues:
            return cls(Outcome.INVALID, tuple(issues))
        return cls(Outcome.VALID)

    @classmethod
    def not_applicable(cls, reason: str) -> "ValidationResult":
        return cls(Outcome.NOT_APPLICABLE, reason=reason)

    @property
    def ok(self) -> bool:
        """``True`` unless the text was proven invalid."""
        return self.outcome != Outcome.INVALID

    @property
    def message(self) -> str:
        """Issue messages joined by newlines, in validator order."""
        return "\n".join(issue.message for issue in self.issues)


# --- Form restructuring step ---


@dataclass(frozen=True)
class Transformed:
    """The multimap was rendered into a structured text document."""

    text: str


@dataclass(frozen=True)
class TransformationFailed:
    """The body could not be restructured; validation cannot run."""

    reason: str


Transformation = Union[Transformed, TransformationFailed]


# --- Form pipeline ---


class FormOutcome(str, enum.Enum):
    VALIDATED = "validated"
    REJECTED = "rejected"
    PASSED_THROUGH = "passed-through"


@dataclass(frozen=True)
class FormValidationResult:
    """Outcome of one run of the form validation pipeline.

    * ``VALIDATED`` -- ``payload`` is the re-encoded form body.
    * ``REJECTED`` -- ``message`` holds the newline-joined violations and
      ``issues`` the individual ones.
    * ``PASSED_THROUGH`` -- ``payload`` is the original body, unchanged;
      ``reason`` says why validation did not run.
    """

    outcome: FormOutcome
    payload: Optional["FormPayload"] = None
    message: Optional[str] = None
    issues: tuple[ValidationIssue, ...] = field(default=())
    reason: Optional[str] = None
