"""Exception hierarchy for specmodel.

All public exceptions inherit from :class:`SpecModelError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specmodel.exit_codes`.
The top-level error handler in :func:`specmodel.app.main` catches
``SpecModelError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Only two families ever change the outcome seen by a caller of the model:
:class:`UnknownMethodError` (raised while building the model from a malformed
contract) and :class:`BadRequestError` (raised when a request body is
rejected). Everything else degrades to a permissive, logged fallback.

Subclass hierarchy::

    SpecModelError (exit 1)
    +-- InvalidUsageError             (exit 2)
    +-- SpecParseError                (exit 3)
    +-- ResourceNotFoundError         (exit 4)
    +-- UnknownMethodError            (exit 5)
    +-- UnsupportedCapabilityError    (exit 6)
    +-- BadRequestError               (exit 7)
    |   +-- InvalidFormParameterError
    |   +-- UnsupportedMediaTypeError
    +-- ConfigError                   (exit 1)

    SchemaUnsupportedError  (internal validator signal, not a SpecModelError)
"""

from __future__ import annotations

from typing import Any

from specmodel.exit_codes import (
    EXIT_BAD_REQUEST,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_UNKNOWN_METHOD,
    EXIT_UNSUPPORTED,
)


class SpecModelError(Exception):
    """Base exception for all specmodel errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specmodel.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecModelError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(SpecModelError):
    """Raised when the API contract cannot be loaded or parsed."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class ResourceNotFoundError(SpecModelError):
    """Raised when no resource (or no action on it) exists at a path."""

    exit_code = EXIT_NOT_FOUND


class UnknownMethodError(SpecModelError):
    """Raised when an HTTP method token is not recognised.

    Building an action map from a contract that declares such a method fails
    with this error instead of silently dropping the operation.

    Args:
        method: The offending method token as written in the contract.
    """

    exit_code = EXIT_UNKNOWN_METHOD

    def __init__(self, method: str):
        super().__init__(f"Unknown HTTP method: {method!r}")
        self.method = method


class UnsupportedCapabilityError(SpecModelError):
    """Raised when a mutator or an unimplemented accessor is invoked.

    The model is read-only and deliberately leaves some capabilities out
    (traits, security references, base-URI parameters). Callers can check
    ``model.supports(capability)`` up front instead of catching this error.

    Args:
        capability: The :class:`~specmodel.graph.capabilities.Capability`
            that is missing.
        operation: Name of the operation that was attempted.
    """

    exit_code = EXIT_UNSUPPORTED

    def __init__(self, capability: Any, operation: str):
        name = getattr(capability, "value", capability)
        super().__init__(f"{operation}() is not supported (capability: {name})")
        self.capability = capability
        self.operation = operation


class BadRequestError(SpecModelError):
    """Raised when a request body is rejected."""

    exit_code = EXIT_BAD_REQUEST


class InvalidFormParameterError(BadRequestError):
    """Raised when a URL-encoded form body violates its declared schema.

    The message is the newline-joined list of every violation, in the order
    the schema validator reported them.
    """


class UnsupportedMediaTypeError(BadRequestError):
    """Raised when a body's content type is not declared on the action."""


class ConfigError(SpecModelError):
    """Raised for configuration problems (invalid JSON, unreadable files)."""

    exit_code = EXIT_GENERIC_FAILURE


class SchemaUnsupportedError(Exception):
    """Signal from a schema validator that it cannot evaluate a schema/content pair.

    Never surfaced to callers: the model treats it as "validation not
    applicable" and lets the body through.
    """
