"""Tests for the SpecCache module."""

from __future__ import annotations

import time

import pytest

from specmodel.cache import SpecCache
from specmodel.models import CacheConfig

URL = "https://api.example.com/openapi.yaml"


@pytest.fixture()
def cache(tmp_path):
    c = SpecCache(tmp_path, CacheConfig(enabled=True, ttl_seconds=300))
    yield c
    c.close()


@pytest.fixture()
def disabled_cache(tmp_path):
    c = SpecCache(tmp_path, CacheConfig(enabled=False))
    yield c
    c.close()


class TestGetSet:
    def test_miss(self, cache: SpecCache) -> None:
        assert cache.get(URL) is None

    def test_hit_keeps_content_type(self, cache: SpecCache) -> None:
        cache.set(URL, "openapi: 3.0.0", "application/yaml")
        assert cache.get(URL) == {"text": "openapi: 3.0.0", "content_type": "application/yaml"}

    def test_keys_are_per_url(self, cache: SpecCache) -> None:
        cache.set(URL, "one")
        assert cache.get(URL + "?v=2") is None

    def test_entries_survive_reopen(self, tmp_path) -> None:
        first = SpecCache(tmp_path, CacheConfig())
        first.set(URL, "persisted")
        first.close()
        second = SpecCache(tmp_path, CacheConfig())
        try:
            assert second.get(URL)["text"] == "persisted"
        finally:
            second.close()


class TestExpiry:
    def test_entry_expires(self, tmp_path) -> None:
        c = SpecCache(tmp_path, CacheConfig(ttl_seconds=1))
        try:
            c.set(URL, "short-lived")
            time.sleep(1.2)
            assert c.get(URL) is None
        finally:
            c.close()

    def test_zero_ttl_never_expires(self, tmp_path) -> None:
        c = SpecCache(tmp_path, CacheConfig(ttl_seconds=0))
        try:
            c.set(URL, "kept")
            assert c.get(URL)["text"] == "kept"
        finally:
            c.close()


class TestDisabled:
    def test_everything_is_a_no_op(self, disabled_cache: SpecCache, tmp_path) -> None:
        assert not disabled_cache.enabled
        disabled_cache.set(URL, "x")
        assert disabled_cache.get(URL) is None
        assert not (tmp_path / "contracts").exists()
