"""Disk-based contract caching for specmodel.

This package provides :class:`SpecCache`, which stores the text of contracts
fetched over HTTP using :mod:`diskcache`, keyed by URL with a configurable TTL.
It is consumed by :func:`~specmodel.parser.loader.load_spec` and controlled by
the ``cache`` section of :class:`~specmodel.models.GlobalConfig`.
"""

from specmodel.cache.cache import SpecCache

__all__ = ["SpecCache"]
