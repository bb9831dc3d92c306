"""specmodel -- A lazily built, queryable model over parsed API contracts.

This package normalises a parsed API contract (resources, HTTP actions,
parameters, request/response bodies) into a stable object graph and validates
inbound request bodies against the schema declared for their media type,
including a lossless pipeline for URL-encoded forms.

Typical usage::

    from specmodel.graph import load_specification

    spec = load_specification("orders.yaml")
    action = spec.find_action("/orders", "post")
    body = action.bodies["application/x-www-form-urlencoded"]

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    graph: Resource / action / body / response object graph.
    validation: Schema validator boundary and the form validation pipeline.
    parser: OpenAPI loader and contract-node extraction.
    config: XDG-aware configuration management.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
