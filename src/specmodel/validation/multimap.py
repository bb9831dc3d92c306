"""Ordered multimap of form fields.

A :class:`MultiMap` keeps every ``(key, value)`` pair in arrival order, so a
field that appears several times keeps all of its values, in order, and the
interleaving of distinct fields is preserved too. Keys are case-sensitive and
an empty-string value is a value, distinct from an absent key.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Optional, Union

_MISSING = object()


class MultiMap:
    """Ordered mapping from key to a sequence of values, duplicates allowed.

    Example::

        >>> form = MultiMap([("a", "1"), ("b", "x"), ("a", "2")])
        >>> form.getall("a")
        ['1', '2']
        >>> list(form.keys())
        ['a', 'b']
        >>> form.to_structured()
        {'a': ['1', '2'], 'b': 'x'}
    """

    __slots__ = ("_items",)

    def __init__(
        self,
        items: Union[Iterable[tuple[str, str]], Mapping[str, Any], None] = None,
    ) -> None:
        self._items: list[tuple[str, str]] = []
        if items is None:
            return
        if isinstance(items, MultiMap):
            self._items.extend(items.items())
        elif isinstance(items, Mapping):
            for key, value in items.items():
                if isinstance(value, (list, tuple)):
                    for item in value:
                        self.add(key, item)
                else:
                    self.add(key, value)
        else:
            for key, value in items:
                self.add(key, value)

    def add(self, key: str, value: Any) -> None:
        self._items.append((key, value))

    def getall(self, key: str) -> list[Any]:
        return [value for k, value in self._items if k == key]

    def getone(self, key: str, default: Any = _MISSING) -> Any:
        """Return the first value for *key*.

        Raises:
            KeyError: If *key* is absent and no default is given.
        """
        for k, value in self._items:
            if k == key:
                return value
        if default is _MISSING:
            raise KeyError(key)
        return default

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self.getone(key, default)

    def keys(self) -> list[str]:
        """Distinct keys in first-seen order."""
        return list(dict.fromkeys(k for k, _ in self._items))

    def items(self) -> list[tuple[str, Any]]:
        """Every pair, in arrival order."""
        return list(self._items)

    def to_structured(self) -> dict[str, Any]:
        """Render as a dict: a scalar for single keys, a list for repeated ones."""
        grouped: dict[str, list[Any]] = {}
        for key, value in self._items:
            grouped.setdefault(key, []).append(value)
        return {
            key: values[0] if len(values) == 1 else values
            for key, values in grouped.items()
        }

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MultiMap):
            return self._items == other._items
        return NotImplemented

    def __repr__(self) -> str:
        return f"MultiMap({self._items!r})"
