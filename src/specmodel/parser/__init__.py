"""OpenAPI contract-node source -- load, resolve ``$ref`` pointers, extract nodes.

The model graph only consumes :class:`~specmodel.models.ContractDocument`
nodes; this sub-package produces them from an OpenAPI 3.x document (JSON or
YAML, local file or remote URL).

Typical usage::

    from specmodel.parser import extract_document, load_spec, validate_openapi_version

    raw = load_spec("orders.yaml")
    version = validate_openapi_version(raw)
    document = extract_document(raw, version)

Sub-modules:

* :mod:`~specmodel.parser.loader` -- I/O layer (URL, file, stdin), format
  detection and OpenAPI version validation.
* :mod:`~specmodel.parser.resolver` -- internal ``$ref`` inlining with cycle
  detection.
* :mod:`~specmodel.parser.extractor` -- builds endpoint and operation nodes.
"""

from specmodel.parser.extractor import extract_document
from specmodel.parser.loader import load_spec, validate_openapi_version

__all__ = ["load_spec", "validate_openapi_version", "extract_document"]
