"""Inline internal ``$ref`` pointers of an OpenAPI document.

Parameters, request bodies, responses and schemas are often shared through
``{"$ref": "#/components/..."}`` pointers. :class:`RefResolver` walks a deep
copy of the document and replaces each pointer with its target, so the
extractor only ever sees concrete objects.

Only internal references (``#/...``) are supported; anything else raises
:class:`~specmodel.exceptions.SpecParseError`.

A pointer that is already being resolved further up the same branch is a
cycle (a tree schema that contains itself). It is left in place; the schema
validator resolves it later against the document's ``components``.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

from specmodel.exceptions import SpecParseError

logger = logging.getLogger(__name__)


def _unescape(segment: str) -> str:
    # RFC 6901: "~1" is "/", "~0" is "~" (in that order).
    return segment.replace("~1", "/").replace("~0", "~")


class RefResolver:
    """Resolve internal JSON References against one root document.

    Args:
        root: The document pointers are resolved against.
    """

    def __init__(self, root: dict[str, Any]) -> None:
        self._root = root
        self.cyclic_refs: set[str] = set()

    def lookup(self, ref: str) -> Any:
        """Return the value *ref* points at.

        Raises:
            SpecParseError: If *ref* is external or does not resolve.
        """
        if not ref.startswith("#/"):
            raise SpecParseError(
                f"External $ref not supported: {ref}. Only internal references (#/...) are handled."
            )

        current: Any = self._root
        for raw_segment in ref[2:].split("/"):
            segment = _unescape(raw_segment)
            if isinstance(current, dict):
                if segment not in current:
                    raise SpecParseError(f"Cannot resolve $ref '{ref}': key '{segment}' not found")
                current = current[segment]
            elif isinstance(current, list):
                try:
                    current = current[int(segment)]
                except (ValueError, IndexError) as exc:
                    raise SpecParseError(
                        f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                    ) from exc
            else:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': cannot navigate into {type(current).__name__}"
                )
        return current

    def resolve(self, obj: Any, active: Optional[frozenset[str]] = None) -> Any:
        """Return *obj* with every resolvable pointer inlined.

        ``active`` holds the pointers being resolved on the current branch;
        each branch gets its own set so siblings pointing at the same target
        are both inlined.
        """
        active = active or frozenset()

        if isinstance(obj, dict):
            ref = obj.get("$ref")
            if isinstance(ref, str):
                if ref in active:
                    self.cyclic_refs.add(ref)
                    return obj
                return self.resolve(self.lookup(ref), active | {ref})
            return {key: self.resolve(value, active) for key, value in obj.items()}

        if isinstance(obj, list):
            return [self.resolve(item, active) for item in obj]

        return obj


def resolve_refs(spec: dict[str, Any]) -> dict[str, Any]:
    """Return a deep copy of *spec* with internal ``$ref`` pointers inlined.

    Raises:
        SpecParseError: If a pointer is external or does not resolve.

    Example::

        resolved = resolve_refs(load_spec("orders.yaml"))
        # resolved["paths"]["/orders"]["post"]["requestBody"] is now a
        # concrete object instead of a $ref pointer.
    """
    root = copy.deepcopy(spec)
    resolver = RefResolver(root)
    resolved = resolver.resolve(root)
    if resolver.cyclic_refs:
        logger.debug("Left cyclic references in place: %s", sorted(resolver.cyclic_refs))
    return resolved
