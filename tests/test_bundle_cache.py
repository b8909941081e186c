"""Tests for BundleCache loading, freshness and concurrency.

Python 3.13+.
"""

from __future__ import annotations

import os
import threading
import time
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import httpx
import pytest

from msgsource.diagnostics import BundleParseError, ResourceAccessError
from msgsource.locale_utils import ROOT, Locale
from msgsource.parsing import PropertiesParser
from msgsource.resources import ResourceLocator
from msgsource.runtime import BundleCache, CacheConfig, bundle_name

EN = Locale.parse("en")
EN_GB = Locale.parse("en_GB")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class CountingParser:
    """PropertiesParser that counts calls and can stall inside parse()."""

    def __init__(self, delay: float = 0.0) -> None:
        self.calls = 0
        self.delay = delay
        self.gate: threading.Event | None = None
        self.entered = threading.Event()
        self._lock = threading.Lock()
        self._inner = PropertiesParser()

    def parse(self, data: bytes, encoding: str, source: str) -> Mapping[str, str]:
        with self._lock:
            self.calls += 1
        if self.gate is not None:
            self.entered.set()
            self.gate.wait(timeout=5)
        if self.delay:
            time.sleep(self.delay)
        return self._inner.parse(data, encoding, source)


def _rewrite(path: Path, content: str, mtime: float) -> None:
    path.write_text(content, encoding="utf-8")
    os.utime(path, (mtime, mtime))


@pytest.fixture
def clock() -> FakeClock:
    """Fake monotonic clock starting at 0."""
    return FakeClock()


class TestBundleName:
    """Test bundle_name."""

    def test_root(self) -> None:
        """The root locale adds no suffix."""
        assert bundle_name("i18n/messages", ROOT) == "i18n/messages"

    def test_locale_suffix(self) -> None:
        """Other locales append _<tag>."""
        assert bundle_name("i18n/messages", EN_GB) == "i18n/messages_en_GB"


class TestLoading:
    """First loads, hits and misses."""

    def test_load_then_hit(self, tmp_path: Path) -> None:
        """The first get parses; the second is served from the cache."""
        (tmp_path / "messages_en.properties").write_text("a=1\n", encoding="utf-8")
        parser = CountingParser()
        cache = BundleCache(ResourceLocator(tmp_path), parser=parser)
        first = cache.get("messages", EN)
        second = cache.get("messages", EN)
        assert first == {"a": "1"}
        assert second is first
        assert parser.calls == 1
        stats = cache.get_stats()
        assert stats["loads"] == 1
        assert stats["misses"] == 1
        assert stats["hits"] == 1
        assert stats["hit_rate"] == 50.0

    def test_root_bundle(self, tmp_path: Path) -> None:
        """The root locale loads the unsuffixed resource."""
        (tmp_path / "messages.properties").write_text("a=root\n", encoding="utf-8")
        cache = BundleCache(ResourceLocator(tmp_path))
        assert cache.get("messages", ROOT) == {"a": "root"}

    def test_negative_entry(self, tmp_path: Path) -> None:
        """A missing resource is recorded once and not searched again."""
        cache = BundleCache(ResourceLocator(tmp_path))
        assert cache.get("messages", EN) is None
        (tmp_path / "messages_en.properties").write_text("a=1\n", encoding="utf-8")
        assert cache.get("messages", EN) is None
        entry = cache.peek("messages", EN)
        assert entry is not None
        assert not entry.found
        assert cache.get_stats()["negative_entries"] == 1

    def test_extensions_in_order(self, tmp_path: Path) -> None:
        """Later extensions are tried when earlier ones are missing."""
        (tmp_path / "messages_en.txt").write_text("a=txt\n", encoding="utf-8")
        cache = BundleCache(ResourceLocator(tmp_path), file_extensions=(".properties", ".txt"))
        assert cache.get("messages", EN) == {"a": "txt"}

    def test_encoding(self, tmp_path: Path) -> None:
        """Resources are decoded with the configured encoding."""
        (tmp_path / "messages_en.properties").write_bytes("a=é\n".encode("latin-1"))
        cache = BundleCache(ResourceLocator(tmp_path), encoding="latin-1")
        assert cache.get("messages", EN) == {"a": "é"}

    def test_unlocatable_basename(self) -> None:
        """A locator that cannot place the name yields a miss."""
        cache = BundleCache(ResourceLocator())
        assert cache.get("messages", EN) is None


class TestErrors:
    """Parse and access errors propagate without poisoning the cache."""

    def test_parse_error_on_first_load(self, tmp_path: Path) -> None:
        """A malformed bundle raises and leaves no entry behind."""
        (tmp_path / "messages_en.properties").write_text("bad=\\u12\n", encoding="utf-8")
        cache = BundleCache(ResourceLocator(tmp_path))
        with pytest.raises(BundleParseError):
            cache.get("messages", EN)
        assert cache.peek("messages", EN) is None

    def test_parse_error_keeps_previous_bundle(self, tmp_path: Path, clock: FakeClock) -> None:
        """A failed refresh keeps the last good bundle in the cache."""
        path = tmp_path / "messages_en.properties"
        _rewrite(path, "a=1\n", 1000)
        cache = BundleCache(ResourceLocator(tmp_path), config=CacheConfig.ttl(10), clock=clock)
        good = cache.get("messages", EN)
        _rewrite(path, "bad=\\u12\n", 2000)
        clock.now = 11
        with pytest.raises(BundleParseError):
            cache.get("messages", EN)
        entry = cache.peek("messages", EN)
        assert entry is not None
        assert entry.bundle is good
        with pytest.raises(BundleParseError):
            cache.get("messages", EN)

    def test_access_error_propagates(self) -> None:
        """A resource that exists but cannot be read is not treated as absent."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200 if request.method == "HEAD" else 403)

        locator = ResourceLocator(http_client=httpx.Client(transport=httpx.MockTransport(handler)))
        cache = BundleCache(locator)
        with pytest.raises(ResourceAccessError):
            cache.get("https://example.com/i18n/messages", EN)
        assert cache.peek("https://example.com/i18n/messages", EN) is None

    def test_forbidden_url_is_not_a_miss(self) -> None:
        """HTTP 403 on every request raises instead of recording a negative entry."""
        client = httpx.Client(transport=httpx.MockTransport(lambda _: httpx.Response(403)))
        cache = BundleCache(ResourceLocator(http_client=client))
        with pytest.raises(ResourceAccessError):
            cache.get("https://example.com/i18n/messages", EN)
        assert cache.peek("https://example.com/i18n/messages", EN) is None
        assert cache.get_stats()["negative_entries"] == 0

    def test_unreachable_url_is_not_a_miss(self) -> None:
        """Transport failures raise instead of recording a negative entry."""

        def handler(request: httpx.Request) -> httpx.Response:
            msg = "connection refused"
            raise httpx.ConnectError(msg, request=request)

        cache = BundleCache(
            ResourceLocator(http_client=httpx.Client(transport=httpx.MockTransport(handler)))
        )
        with pytest.raises(ResourceAccessError):
            cache.get("https://example.com/i18n/messages", EN)
        assert cache.peek("https://example.com/i18n/messages", EN) is None


class TestFreshness:
    """PERMANENT and TTL_CHECKED policies."""

    def test_permanent_ignores_changes(self, tmp_path: Path, clock: FakeClock) -> None:
        """Permanent entries are never re-checked."""
        path = tmp_path / "messages_en.properties"
        _rewrite(path, "a=1\n", 1000)
        cache = BundleCache(ResourceLocator(tmp_path), clock=clock)
        cache.get("messages", EN)
        _rewrite(path, "a=2\n", 2000)
        clock.now = 1_000_000
        assert cache.get("messages", EN) == {"a": "1"}

    def test_ttl_refreshes_changed_resource(self, tmp_path: Path, clock: FakeClock) -> None:
        """After the TTL a changed resource is reparsed."""
        path = tmp_path / "messages_en.properties"
        _rewrite(path, "a=1\n", 1000)
        cache = BundleCache(ResourceLocator(tmp_path), config=CacheConfig.ttl(10), clock=clock)
        assert cache.get("messages", EN) == {"a": "1"}
        _rewrite(path, "a=2\n", 2000)
        clock.now = 5
        assert cache.get("messages", EN) == {"a": "1"}
        clock.now = 11
        assert cache.get("messages", EN) == {"a": "2"}
        assert cache.get_stats()["refreshes"] == 1

    def test_ttl_unchanged_resource_not_reparsed(self, tmp_path: Path, clock: FakeClock) -> None:
        """An unchanged resource only has its check time renewed."""
        _rewrite(tmp_path / "messages_en.properties", "a=1\n", 1000)
        parser = CountingParser()
        cache = BundleCache(
            ResourceLocator(tmp_path), parser=parser, config=CacheConfig.ttl(10), clock=clock
        )
        first = cache.get("messages", EN)
        clock.now = 11
        assert cache.get("messages", EN) is first
        entry = cache.peek("messages", EN)
        assert entry is not None
        assert entry.checked_at == 11
        assert parser.calls == 1
        assert cache.get_stats()["unchanged"] == 1

    def test_ttl_zero_checks_every_access(self, tmp_path: Path, clock: FakeClock) -> None:
        """TTL 0 re-checks the resource on every get."""
        _rewrite(tmp_path / "messages_en.properties", "a=1\n", 1000)
        cache = BundleCache(ResourceLocator(tmp_path), config=CacheConfig.ttl(0), clock=clock)
        for _ in range(3):
            cache.get("messages", EN)
        stats = cache.get_stats()
        assert stats["loads"] == 1
        assert stats["unchanged"] == 2

    def test_ttl_negative_entry_expires(self, tmp_path: Path, clock: FakeClock) -> None:
        """A resource created after a recorded miss appears after the TTL."""
        cache = BundleCache(ResourceLocator(tmp_path), config=CacheConfig.ttl(10), clock=clock)
        assert cache.get("messages", EN) is None
        (tmp_path / "messages_en.properties").write_text("a=1\n", encoding="utf-8")
        clock.now = 5
        assert cache.get("messages", EN) is None
        clock.now = 11
        assert cache.get("messages", EN) == {"a": "1"}

    def test_ttl_deleted_resource(self, tmp_path: Path, clock: FakeClock) -> None:
        """A resource deleted after loading becomes a miss after the TTL."""
        path = tmp_path / "messages_en.properties"
        _rewrite(path, "a=1\n", 1000)
        cache = BundleCache(ResourceLocator(tmp_path), config=CacheConfig.ttl(10), clock=clock)
        cache.get("messages", EN)
        path.unlink()
        clock.now = 11
        assert cache.get("messages", EN) is None
        assert cache.get_stats()["negative_entries"] == 1


class TestEvictionAndClear:
    """evict() and clear()."""

    def test_evict_basename(self, tmp_path: Path) -> None:
        """evict drops every locale of one basename only."""
        for name in ("messages.properties", "messages_en.properties", "errors.properties"):
            (tmp_path / name).write_text("a=1\n", encoding="utf-8")
        cache = BundleCache(ResourceLocator(tmp_path))
        cache.get("messages", ROOT)
        cache.get("messages", EN)
        cache.get("errors", ROOT)
        assert cache.evict("messages") == 2
        assert len(cache) == 1
        assert cache.evict("messages") == 0

    def test_clear(self, tmp_path: Path) -> None:
        """clear drops entries and resets statistics; the next get reloads."""
        path = tmp_path / "messages_en.properties"
        path.write_text("a=1\n", encoding="utf-8")
        cache = BundleCache(ResourceLocator(tmp_path))
        cache.get("messages", EN)
        path.write_text("a=2\n", encoding="utf-8")
        cache.clear()
        assert len(cache) == 0
        assert cache.get_stats()["loads"] == 0
        assert cache.get("messages", EN) == {"a": "2"}

    def test_key_locks_pruned(self, tmp_path: Path) -> None:
        """evict and clear release the per-key load locks of dropped entries."""
        for name in ("messages.properties", "errors.properties"):
            (tmp_path / name).write_text("a=1\n", encoding="utf-8")
        cache = BundleCache(ResourceLocator(tmp_path))
        cache.get("messages", ROOT)
        cache.get("errors", ROOT)
        assert set(cache._key_locks) == {("messages", ROOT), ("errors", ROOT)}
        cache.evict("messages")
        assert set(cache._key_locks) == {("errors", ROOT)}
        cache.clear()
        assert cache._key_locks == {}


class TestConcurrency:
    """Single-flight loading and stale serving."""

    def test_concurrent_first_load_parses_once(self, tmp_path: Path) -> None:
        """Concurrent callers for one new key share a single parse."""
        (tmp_path / "messages_en.properties").write_text("a=1\nb=2\n", encoding="utf-8")
        parser = CountingParser(delay=0.05)
        cache = BundleCache(ResourceLocator(tmp_path), parser=parser)
        workers = 16
        barrier = threading.Barrier(workers)

        def load() -> Mapping[str, str] | None:
            barrier.wait()
            return cache.get("messages", EN)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda _: load(), range(workers)))

        assert parser.calls == 1
        assert all(result is results[0] for result in results)
        assert results[0] == {"a": "1", "b": "2"}

    def test_distinct_keys_load_independently(self, tmp_path: Path) -> None:
        """Different keys are loaded once each."""
        for tag in ("en", "de", "fr"):
            (tmp_path / f"messages_{tag}.properties").write_text(f"lang={tag}\n", encoding="utf-8")
        parser = CountingParser(delay=0.01)
        cache = BundleCache(ResourceLocator(tmp_path), parser=parser)
        locales = [Locale.parse(tag) for tag in ("en", "de", "fr")] * 8
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda loc: cache.get("messages", loc), locales))
        assert parser.calls == 3
        assert [bundle["lang"] for bundle in results if bundle] == [
            loc.tag for loc in locales
        ]

    def test_concurrent_refresh_serves_stale(self, tmp_path: Path, clock: FakeClock) -> None:
        """With concurrent_refresh, readers get the stale bundle during a refresh."""
        path = tmp_path / "messages_en.properties"
        _rewrite(path, "a=1\n", 1000)
        parser = CountingParser()
        cache = BundleCache(
            ResourceLocator(tmp_path),
            parser=parser,
            config=CacheConfig.ttl(10, concurrent_refresh=True),
            clock=clock,
        )
        stale = cache.get("messages", EN)
        _rewrite(path, "a=2\n", 2000)
        clock.now = 11
        parser.gate = threading.Event()

        with ThreadPoolExecutor(max_workers=1) as pool:
            refreshing = pool.submit(cache.get, "messages", EN)
            assert parser.entered.wait(timeout=5)
            assert cache.get("messages", EN) is stale
            parser.gate.set()
            assert refreshing.result(timeout=5) == {"a": "2"}

        assert cache.get_stats()["stale_served"] == 1
        assert cache.get("messages", EN) == {"a": "2"}
