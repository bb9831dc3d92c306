"""Helpers shared by the CLI sub-commands."""

from __future__ import annotations

from typing import Optional

import typer

from specmodel.exceptions import SpecModelError
from specmodel.exit_codes import EXIT_INVALID_USAGE
from specmodel.graph import SpecificationModel
from specmodel.models import GlobalConfig
from specmodel.output import configure_logging, debug, error, get_output

SPEC_OPTION_HELP = "Contract URL or file path (defaults to SPECMODEL_SPEC or config)."


def load_model(spec: Optional[str]) -> tuple[SpecificationModel, GlobalConfig]:
    """Resolve the contract source, load it and build its model.

    Raises:
        typer.Exit: With ``EXIT_INVALID_USAGE`` when no contract is configured, or with the
            error's exit code when the contract cannot be loaded.
    """
    from specmodel.cache import SpecCache
    from specmodel.config import get_cache_dir, resolve_config
    from specmodel.graph import load_specification

    try:
        config, source = resolve_config(cli_spec=spec)
    except SpecModelError as exc:
        error(f"Config error: {exc}")
        raise typer.Exit(code=exc.exit_code) from None

    if source is None:
        error("No contract given. Pass --spec or set SPECMODEL_SPEC.")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    configure_logging(config.log_level, verbose=get_output().is_verbose)
    debug(f"Loading contract from {source}")
    cache = SpecCache(get_cache_dir(), config.cache)
    try:
        model = load_specification(source, config=config, cache=cache)
    except SpecModelError as exc:
        error(f"Failed to load contract: {exc}")
        raise typer.Exit(code=exc.exit_code) from None
    finally:
        cache.close()
    return model, config


def fail(exc: SpecModelError) -> typer.Exit:
    """Report *exc* on stderr and return the matching :class:`typer.Exit`."""
    error(str(exc))
    return typer.Exit(code=exc.exit_code)
