"""Compute-once, publish-once collections for the model graph.

Every derived collection on a graph object (bodies, responses, headers, ...)
is a pure function of the immutable contract nodes the object was built from.
:class:`frozen_cached` turns a loader method into an attribute that

* runs the loader at most once per instance,
* serialises concurrent first reads behind a per-instance lock so that every
  caller blocks until the first computation has been published, and
* publishes mappings as read-only :class:`types.MappingProxyType` views, so
  the same object is returned on every later read and nobody can mutate it.

Example::

    class ActionModel:
        @frozen_cached
        def headers(self) -> dict[str, ParameterModel]:
            return {p.name: ParameterModel.from_node(p) for p in ...}
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable, Generic, Optional, TypeVar, overload

T = TypeVar("T")

_LOCK_ATTR = "_frozen_cache_lock"

# Guards creation of the per-instance locks themselves.
_lock_creation = threading.Lock()


def _instance_lock(instance: Any) -> threading.RLock:
    lock = instance.__dict__.get(_LOCK_ATTR)
    if lock is None:
        with _lock_creation:
            lock = instance.__dict__.get(_LOCK_ATTR)
            if lock is None:
                lock = threading.RLock()
                instance.__dict__[_LOCK_ATTR] = lock
    return lock


def freeze(value: Any) -> Any:
    """Return a read-only view of *value* when it is a mapping."""
    if isinstance(value, MappingProxyType):
        return value
    if isinstance(value, Mapping):
        return MappingProxyType(dict(value))
    if isinstance(value, list):
        return tuple(value)
    return value


class frozen_cached(Generic[T]):
    """Descriptor that memoises a loader method per instance.

    The computed value is stored in the instance ``__dict__`` under the
    method name; later reads find it there without taking the lock again.
    Assignment is refused, so a published collection can never be swapped.

    An ``RLock`` is used so that a loader may read another lazy collection of
    the same instance (e.g. ``has_body`` reading ``bodies``).
    """

    def __init__(self, func: Callable[[Any], T]) -> None:
        self.func = func
        self.attrname: Optional[str] = None
        self.__doc__ = func.__doc__

    def __set_name__(self, owner: type, name: str) -> None:
        self.attrname = name

    @overload
    def __get__(self, instance: None, owner: type) -> "frozen_cached[T]": ...

    @overload
    def __get__(self, instance: Any, owner: type) -> T: ...

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        name = self.attrname
        assert name is not None
        cache = instance.__dict__
        if name in cache:
            return cache[name]
        with _instance_lock(instance):
            # Another reader may have published while we waited.
            if name in cache:
                return cache[name]
            value = freeze(self.func(instance))
            cache[name] = value
            return value

    def __set__(self, instance: Any, value: Any) -> None:
        raise AttributeError(f"{self.attrname} is read-only")
