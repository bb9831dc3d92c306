"""Disk-based cache for remotely fetched contracts.

Uses :mod:`diskcache` to keep the raw text of contracts loaded over HTTP, with
a configurable time-to-live (TTL), so repeated CLI runs against the same URL do
not refetch it. Local files and stdin are never cached.

Cache keys are SHA-256 hashes of the URL. Each entry stores the response body
together with its ``Content-Type`` so the loader can keep using it as a
format hint.

See Also:
    :class:`~specmodel.models.CacheConfig` -- the Pydantic model that
    controls ``enabled`` and ``ttl_seconds``.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Optional

import diskcache

from specmodel.models import CacheConfig


class SpecCache:
    """Disk-backed cache of contract text keyed by URL.

    Args:
        cache_dir: Root directory for the cache. A ``contracts/``
            subdirectory is created inside it.
        config: Cache configuration (``enabled`` flag and ``ttl_seconds``).

    Example::

        cache = SpecCache("/tmp/specmodel-cache", CacheConfig(ttl_seconds=300))
        cache.set("https://api.example.com/openapi.yaml", text, "application/yaml")
        hit = cache.get("https://api.example.com/openapi.yaml")
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig) -> None:
        self._config = config
        self._cache: Optional[diskcache.Cache] = None
        self._cache_dir = Path(cache_dir)
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "contracts"))

    @property
    def enabled(self) -> bool:
        return self._cache is not None

    def get(self, url: str) -> Optional[dict[str, str]]:
        """Look up a cached contract.

        Returns:
            A ``dict`` with ``text`` and ``content_type`` keys on a hit, or
            ``None`` on a miss or when caching is disabled.
        """
        if self._cache is None:
            return None
        return self._cache.get(self._make_key(url))

    def set(self, url: str, text: str, content_type: str = "") -> None:
        """Store the text fetched from *url*. No-op when caching is disabled."""
        if self._cache is None:
            return
        self._cache.set(
            self._make_key(url),
            {"text": text, "content_type": content_type},
            expire=self._config.ttl_seconds or None,
        )

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()

    @staticmethod
    def _make_key(url: str) -> str:
        return hashlib.sha256(url.encode()).hexdigest()
