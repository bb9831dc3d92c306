"""Shared test fixtures for specmodel.

Provides reusable fixtures for loading contract fixtures, building models,
creating isolated config environments, managing output state, and running
CLI commands. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest
import yaml

from specmodel.models import ContractDocument
from specmodel.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use. Log handlers bound to those streams are
    removed for the same reason.
    """
    yield
    reset_output()
    logger = logging.getLogger("specmodel")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Raw contract fixtures (plain dicts loaded from fixture files)
# ---------------------------------------------------------------------------


@pytest.fixture
def orders_path() -> Path:
    return FIXTURES_DIR / "orders.yaml"


@pytest.fixture
def orders_raw(orders_path: Path) -> dict[str, Any]:
    """Load the raw orders contract dict."""
    with open(orders_path) as f:
        return yaml.safe_load(f)


@pytest.fixture
def minimal_raw() -> dict[str, Any]:
    """Load the raw minimal 3.1 contract dict."""
    with open(FIXTURES_DIR / "minimal.json") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Parsed contract and model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def orders_document(orders_raw: dict[str, Any]) -> ContractDocument:
    """Contract nodes extracted from the orders fixture."""
    from specmodel.parser.extractor import extract_document

    return extract_document(orders_raw, "3.0.3")


@pytest.fixture
def orders_model(orders_document: ContractDocument):
    """A fully built model of the orders fixture."""
    from specmodel.graph import SpecificationModel

    return SpecificationModel(orders_document)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config. Clears all SPECMODEL_* environment variables and changes
    the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("specmodel.config._is_xdg_platform", lambda: True)

    for var in ["SPECMODEL_SPEC", "SPECMODEL_LOG_LEVEL"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for tests that ignore output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager for tests that check JSON output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
