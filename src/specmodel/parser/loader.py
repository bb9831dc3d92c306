"""Load API contracts from a URL, local file, or stdin.

This module handles all I/O for fetching raw contract documents and turning
them into Python dictionaries. JSON and YAML are both accepted with automatic
format detection; remote documents can be cached on disk through a
:class:`~specmodel.cache.SpecCache`.

The two public functions are:

* :func:`load_spec` -- Load and parse a contract from any supported source.
* :func:`validate_openapi_version` -- Check and return the ``openapi``
  version string, rejecting Swagger 2.x and unsupported versions.

The loaded dict is then handed to
:func:`~specmodel.parser.extractor.extract_document`.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import httpx
import yaml

from specmodel.exceptions import SpecParseError

if TYPE_CHECKING:
    from specmodel.cache import SpecCache

logger = logging.getLogger(__name__)

_FETCH_TIMEOUT = 30.0


def load_spec(source: str, cache: Optional["SpecCache"] = None) -> dict[str, Any]:
    """Load a contract from URL, file path, or stdin (``-``).

    Args:
        source: A URL (http/https), file path, or ``-`` for stdin.
        cache: Optional cache consulted (and filled) for URL sources.

    Returns:
        The parsed contract as a dictionary.

    Raises:
        SpecParseError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    if source.startswith(("http://", "https://")):
        return _load_from_url(source, cache)
    return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str, cache: Optional["SpecCache"] = None) -> dict[str, Any]:
    """Fetch a contract over HTTP(S), serving it from *cache* when possible.

    Raises:
        SpecParseError: If the URL cannot be fetched or content cannot be parsed.
    """
    if cache is not None:
        hit = cache.get(url)
        if hit is not None:
            logger.debug("Contract cache hit for %s", url)
            return _parse_content(hit["text"], hint=_hint_from_content_type(hit["content_type"]))

    try:
        response = httpx.get(url, timeout=_FETCH_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching contract from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch contract from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    result = _parse_content(response.text, hint=_hint_from_content_type(content_type))

    # Only cache what parsed.
    if cache is not None:
        cache.set(url, response.text, content_type)
    return result


def _hint_from_content_type(content_type: str) -> str:
    if "json" in content_type:
        return "json"
    if "yaml" in content_type or "yml" in content_type:
        return "yaml"
    return ""


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a contract from a local ``.json``, ``.yaml`` or ``.yml`` file.

    Falls back to content-based detection for other extensions.

    Raises:
        SpecParseError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Contract file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read contract file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Contract file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hinted as YAML), then falls back to YAML. Valid
    JSON is also valid YAML, but JSON parsing is stricter and faster.

    Raises:
        SpecParseError: If the content cannot be parsed as either format, or
            does not contain a mapping at the top level.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
        else:
            return _require_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        return _require_mapping(result)

    msg = "Failed to parse contract as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SpecParseError(msg)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Contract must be a JSON/YAML object (got {kind})")
    return result


def validate_openapi_version(spec: dict[str, Any]) -> str:
    """Validate and return the OpenAPI version string.

    Accepts any OpenAPI 3.x version. Swagger 2.x and other versions are
    rejected.

    Raises:
        SpecParseError: If the version is missing, unsupported, or indicates
            Swagger 2.x.
    """
    if "swagger" in spec:
        raise SpecParseError(
            f"Swagger {spec['swagger']} is not supported. "
            "Only OpenAPI 3.x contracts are supported."
        )

    openapi_version = spec.get("openapi")
    if openapi_version is None:
        raise SpecParseError("Missing 'openapi' field. Is this an OpenAPI 3.x document?")

    version_str = str(openapi_version)
    if version_str.startswith("3."):
        return version_str

    raise SpecParseError(
        f"Unsupported OpenAPI version: {version_str}. Only OpenAPI 3.x is supported."
    )
