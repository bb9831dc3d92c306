"""Inspect commands -- examine the model built from a contract.

Provides the ``specmodel inspect`` sub-command group with read-only views of
the graph: API info, the resource tree, and everything declared on a single
action.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from specmodel.commands.common import SPEC_OPTION_HELP, fail, load_model
from specmodel.exceptions import SpecModelError
from specmodel.graph import ParameterModel
from specmodel.output import format_data, get_output


inspect_app = typer.Typer(no_args_is_help=True)


def _describe_parameters(parameters: dict[str, ParameterModel]) -> list[dict[str, Any]]:
    return [
        {"name": p.name, "type": p.type.value, "required": p.required}
        for p in parameters.values()
    ]


@inspect_app.command("info")
def inspect_info(
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help=SPEC_OPTION_HELP),
) -> None:
    """Show API info: title, version, base URI, resource and action counts.

    Example::

        specmodel inspect info --spec orders.yaml
    """
    model, _ = load_model(spec)
    try:
        action_count = sum(1 for _ in model.iter_actions())
    except SpecModelError as exc:
        raise fail(exc) from None

    format_data({
        "title": model.title,
        "version": model.version or "-",
        "base_uri": model.base_uri or "-",
        "openapi_version": model.document.source_version or "-",
        "resources": len(model),
        "actions": action_count,
    })


@inspect_app.command("resources")
def inspect_resources(
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help=SPEC_OPTION_HELP),
) -> None:
    """List every resource with its parent, methods and URI parameters.

    Example::

        specmodel inspect resources --spec orders.yaml
    """
    model, _ = load_model(spec)

    rows: list[list[str]] = []
    try:
        for resource in model:
            rows.append([
                resource.uri,
                resource.parent_uri or "-",
                ", ".join(method.value for method in resource.actions) or "-",
                ", ".join(resource.resolved_uri_parameters) or "-",
            ])
    except SpecModelError as exc:
        raise fail(exc) from None

    get_output().print_table(
        ["Path", "Parent", "Methods", "URI Parameters"],
        rows,
        title=f"{model.title} -- Resources ({len(rows)})",
    )


@inspect_app.command("action")
def inspect_action(
    path: str = typer.Argument(..., help="Resource path, exactly as declared."),
    method: str = typer.Argument(..., help="HTTP method (case-insensitive)."),
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help=SPEC_OPTION_HELP),
) -> None:
    """Show bodies, parameters and responses declared on one action.

    Example::

        specmodel inspect action /orders post --spec orders.yaml
    """
    model, _ = load_model(spec)
    try:
        action = model.find_action(path, method)
        data = {
            "method": action.method.value,
            "path": action.resource.uri,
            "has_body": action.has_body(),
            "bodies": list(action.bodies),
            "query_parameters": _describe_parameters(action.query_parameters),
            "headers": _describe_parameters(action.headers),
            "uri_parameters": _describe_parameters(action.resource.resolved_uri_parameters),
            "responses": {
                code: list(response.bodies) for code, response in action.responses.items()
            },
        }
    except SpecModelError as exc:
        raise fail(exc) from None

    format_data(data)
