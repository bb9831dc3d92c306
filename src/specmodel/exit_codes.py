"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specmodel.exceptions.SpecModelError` subclass.
Shell wrappers and CI jobs can inspect the exit code to tell a malformed
contract apart from a rejected request body without parsing stderr.

Example::

    $ specmodel validate form /orders post --body 'a=1'
    $ echo $?
    7   # EXIT_BAD_REQUEST -- the form body failed schema validation
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_SPEC_PARSE_ERROR = 3
"""The API contract could not be loaded or parsed."""

EXIT_NOT_FOUND = 4
"""No resource or action exists at the requested path."""

EXIT_UNKNOWN_METHOD = 5
"""The contract declares an HTTP method token that is not recognised."""

EXIT_UNSUPPORTED = 6
"""An operation outside the model's supported capability set was invoked."""

EXIT_BAD_REQUEST = 7
"""A request body was rejected by schema validation."""
