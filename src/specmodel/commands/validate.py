"""Validate commands -- check request bodies against an action's declared bodies.

``specmodel validate form`` runs the url-encoded form pipeline and prints the
re-encoded body; ``specmodel validate body`` dispatches on the content type
the way a server would. Violations go to stderr and exit with code 7.
"""

from __future__ import annotations

import sys
from typing import Optional

import typer

from specmodel.commands.common import SPEC_OPTION_HELP, fail, load_model
from specmodel.exceptions import SpecModelError, UnsupportedMediaTypeError
from specmodel.exit_codes import EXIT_BAD_REQUEST
from specmodel.output import debug, error, print_data, success, warning
from specmodel.validation import FormOutcome, FormPayload, FormValidationPipeline, RequestBodyValidator
from specmodel.validation.form import FORM_URLENCODED


validate_app = typer.Typer(no_args_is_help=True)


def _read_body(body: str) -> str:
    if body == "-":
        return sys.stdin.read()
    return body


@validate_app.command("form")
def validate_form(
    path: str = typer.Argument(..., help="Resource path, exactly as declared."),
    method: str = typer.Argument(..., help="HTTP method (case-insensitive)."),
    body: str = typer.Option(..., "--body", "-b", help="Url-encoded body, or '-' to read stdin."),
    content_type: str = typer.Option(
        FORM_URLENCODED, "--content-type", "-t", help="Content type the body is sent as."
    ),
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help=SPEC_OPTION_HELP),
) -> None:
    """Validate a url-encoded form body and print it re-encoded.

    Example::

        specmodel validate form /orders post --body 'a=1&a=2&b=x' --spec orders.yaml
    """
    model, _ = load_model(spec)
    try:
        action = model.find_action(path, method)
        mime_type = RequestBodyValidator(action).find_body(content_type)
        if mime_type is None:
            raise UnsupportedMediaTypeError(
                f"{action.method.value} {path} declares no body for {content_type!r}"
            )
        result = FormValidationPipeline(mime_type).evaluate(
            FormPayload(_read_body(body), content_type)
        )
    except SpecModelError as exc:
        raise fail(exc) from None

    if result.outcome == FormOutcome.REJECTED:
        for issue in result.issues:
            error(issue.message)
        raise typer.Exit(code=EXIT_BAD_REQUEST)

    assert result.payload is not None
    if result.outcome == FormOutcome.PASSED_THROUGH:
        warning(f"Body passed through unvalidated: {result.reason}")
    else:
        success("Form body is valid")
    print_data(str(result.payload.value))


@validate_app.command("body")
def validate_body(
    path: str = typer.Argument(..., help="Resource path, exactly as declared."),
    method: str = typer.Argument(..., help="HTTP method (case-insensitive)."),
    body: str = typer.Option(..., "--body", "-b", help="Request body, or '-' to read stdin."),
    content_type: str = typer.Option(
        "application/json", "--content-type", "-t", help="Content type the body is sent as."
    ),
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help=SPEC_OPTION_HELP),
) -> None:
    """Validate a request body against the body declared for its content type.

    Example::

        specmodel validate body /orders post --body '{"id": 1}' --spec orders.yaml
    """
    model, config = load_model(spec)
    try:
        action = model.find_action(path, method)
        validator = RequestBodyValidator(action, config.validation.form_media_types)
        forwarded = validator.validate(_read_body(body), content_type)
    except SpecModelError as exc:
        raise fail(exc) from None

    if not action.has_body():
        debug(f"{action.method.value} {path} declares no body; nothing to check")
    success("Body is valid")
    print_data(str(forwarded))
