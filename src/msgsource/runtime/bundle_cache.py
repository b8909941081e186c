"""Thread-safe cache of parsed bundles keyed by (basename, locale).

Each entry holds an immutable Bundle (or None for a recorded miss), the
handle it came from, its freshness token and the monotonic time of the
last freshness check.

Architecture:
    - Reads are lock-free dict lookups of immutable BundleEntry objects;
      writers replace entries wholesale, so readers see either the old or
      the new complete Bundle
    - Loads and refreshes are single-flight per key: a per-key Lock makes
      concurrent callers for the same key wait for one parse
    - Freshness policy comes from CacheConfig: PERMANENT never re-checks,
      TTL_CHECKED compares the resource's last_modified() with the stored
      token once the entry is older than the TTL
    - Negative entries obey the same policy, so a resource created after a
      recorded miss becomes visible once the TTL elapses
    - A parse failure propagates and leaves the previous entry in place

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from msgsource.constants import DEFAULT_ENCODING, DEFAULT_FILE_EXTENSIONS, LOCALE_SEPARATOR
from msgsource.diagnostics import ResourceNotFoundError
from msgsource.enums import LoadStatus
from msgsource.parsing import PropertiesParser
from msgsource.runtime.cache_config import CacheConfig

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from msgsource.locale_utils import Locale
    from msgsource.parsing import BundleParser
    from msgsource.resources import ResourceHandle, ResourceLocator

__all__ = ["Bundle", "BundleCache", "BundleEntry", "bundle_name"]

logger = logging.getLogger(__name__)

type Bundle = Mapping[str, str]
type _BundleKey = tuple[str, Locale]


def bundle_name(basename: str, locale: Locale) -> str:
    """Resource name (without extension) for basename at locale.

    Example:
        >>> bundle_name("i18n/messages", Locale.parse("en_GB"))
        'i18n/messages_en_GB'
        >>> bundle_name("i18n/messages", ROOT)
        'i18n/messages'
    """
    if locale.is_root:
        return basename
    return f"{basename}{LOCALE_SEPARATOR}{locale.tag}"


@dataclass(frozen=True, slots=True)
class BundleEntry:
    """Immutable cache entry.

    Attributes:
        bundle: Parsed bundle, or None for a recorded miss
        handle: Resource the bundle was parsed from (None for a miss)
        token: Freshness token (last_modified() value; None = unknown)
        checked_at: Monotonic time of the last load or freshness check
    """

    bundle: Bundle | None
    handle: ResourceHandle | None
    token: float | None
    checked_at: float

    @property
    def found(self) -> bool:
        """True when the entry holds a bundle."""
        return self.bundle is not None


class BundleCache:
    """Per-(basename, locale) cache of parsed bundles.

    Args:
        locator: Turns bundle resource names into handles
        parser: Bundle-format parser (default: PropertiesParser)
        config: Freshness policy (default: permanent)
        encoding: Character encoding of bundle resources
        file_extensions: Extensions tried in order for each bundle name
        clock: Monotonic clock, injectable for tests

    Thread Safety:
        All methods are safe to call concurrently.
    """

    __slots__ = (
        "_clock",
        "_config",
        "_encoding",
        "_entries",
        "_extensions",
        "_key_locks",
        "_lock",
        "_locator",
        "_parser",
        "_stats",
    )

    def __init__(
        self,
        locator: ResourceLocator,
        *,
        parser: BundleParser | None = None,
        config: CacheConfig | None = None,
        encoding: str = DEFAULT_ENCODING,
        file_extensions: tuple[str, ...] = DEFAULT_FILE_EXTENSIONS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._locator = locator
        self._parser: BundleParser = parser if parser is not None else PropertiesParser()
        self._config = config if config is not None else CacheConfig()
        self._encoding = encoding
        self._extensions = tuple(file_extensions)
        self._clock = clock
        self._entries: dict[_BundleKey, BundleEntry] = {}
        self._key_locks: dict[_BundleKey, threading.Lock] = {}
        self._lock = threading.RLock()
        self._stats = dict.fromkeys(
            ("hits", "misses", "loads", "refreshes", "unchanged", "stale_served"), 0
        )

    @property
    def config(self) -> CacheConfig:
        """Freshness policy in effect."""
        return self._config

    @property
    def locator(self) -> ResourceLocator:
        """Locator used to find bundle resources."""
        return self._locator

    def get(self, basename: str, locale: Locale) -> Bundle | None:
        """Return the current bundle for basename at locale, or None.

        Loads on first access; in TTL mode re-checks the backing resource
        once the entry is older than the TTL and reparses if it changed.

        Raises:
            BundleParseError: If the resource exists but cannot be parsed
            ResourceAccessError: If the resource exists but cannot be read
            MalformedLocationError: If the bundle location is malformed
        """
        key = (basename, locale)
        entry = self._entries.get(key)
        if entry is not None and self._is_fresh(entry):
            self._count("hits")
            return entry.bundle
        if entry is None:
            self._count("misses")
        return self._load(key, entry)

    def peek(self, basename: str, locale: Locale) -> BundleEntry | None:
        """Return the cached entry without loading or freshness checks."""
        return self._entries.get((basename, locale))

    def evict(self, basename: str) -> int:
        """Drop every entry of basename; returns the number removed."""
        with self._lock:
            doomed = [key for key in self._entries if key[0] == basename]
            for key in doomed:
                del self._entries[key]
                self._key_locks.pop(key, None)
        if doomed:
            logger.debug("Evicted %d cached bundle(s) of %s", len(doomed), basename)
        return len(doomed)

    def clear(self) -> None:
        """Drop all entries, their key locks and reset statistics.

        A load already in flight keeps its own lock and publishes its entry
        after the clear.
        """
        with self._lock:
            self._entries.clear()
            self._key_locks.clear()
            for name in self._stats:
                self._stats[name] = 0

    def get_stats(self) -> dict[str, int | float]:
        """Get cache statistics.

        Returns:
            Dict with keys:
            - size (int): Current number of entries (including misses)
            - negative_entries (int): Entries recording a missing resource
            - hits (int): Lookups answered from a fresh entry
            - misses (int): Lookups with no entry at all
            - loads (int): Resources parsed for the first time
            - refreshes (int): Resources reparsed after a change
            - unchanged (int): Freshness checks that found no change
            - stale_served (int): Stale bundles served during a concurrent refresh
            - hit_rate (float): Hit rate as percentage (0.0-100.0)
        """
        with self._lock:
            stats: dict[str, int | float] = dict(self._stats)
            lookups = self._stats["hits"] + self._stats["misses"]
            stats["size"] = len(self._entries)
            stats["negative_entries"] = sum(
                1 for entry in self._entries.values() if entry.bundle is None
            )
            stats["hit_rate"] = round(self._stats["hits"] / lookups * 100, 2) if lookups else 0.0
            return stats

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _count(self, name: str) -> None:
        with self._lock:
            self._stats[name] += 1

    def _is_fresh(self, entry: BundleEntry) -> bool:
        if self._config.is_permanent:
            return True
        ttl = self._config.ttl_seconds or 0.0
        return ttl > 0 and self._clock() - entry.checked_at < ttl

    def _key_lock(self, key: _BundleKey) -> threading.Lock:
        lock = self._key_locks.get(key)
        if lock is None:
            with self._lock:
                lock = self._key_locks.setdefault(key, threading.Lock())
        return lock

    def _load(self, key: _BundleKey, stale: BundleEntry | None) -> Bundle | None:
        lock = self._key_lock(key)
        if stale is not None and stale.found and self._config.concurrent_refresh:
            if not lock.acquire(blocking=False):
                logger.debug("Serving stale bundle %s/%s during concurrent refresh", *key)
                self._count("stale_served")
                return stale.bundle
        else:
            lock.acquire()
        try:
            current = self._entries.get(key)
            if current is not None and current is not stale and self._is_fresh(current):
                # Another thread finished the load while we waited
                return current.bundle
            if current is None:
                return self._store(key, *self._locate_and_parse(key)).bundle
            return self._refresh(key, current)
        finally:
            lock.release()

    def _refresh(self, key: _BundleKey, current: BundleEntry) -> Bundle | None:
        handle = current.handle
        if handle is None:
            logger.debug("Re-checking missing bundle %s/%s", *key)
            return self._store(key, *self._locate_and_parse(key)).bundle

        if not handle.exists():
            logger.info("Bundle resource %s disappeared; recording a miss", handle.description)
            return self._store(key, None, None, None, LoadStatus.NOT_FOUND).bundle

        token = handle.last_modified()
        if token is None or token == current.token:
            logger.debug("Bundle %s unchanged", handle.description)
            self._count("unchanged")
            return self._publish(key, replace(current, checked_at=self._clock())).bundle

        bundle = self._parse(handle)
        logger.info("Refreshed bundle %s (%d keys)", handle.description, len(bundle))
        return self._store(key, bundle, handle, token, LoadStatus.REFRESHED).bundle

    def _locate_and_parse(
        self, key: _BundleKey
    ) -> tuple[Bundle | None, ResourceHandle | None, float | None, LoadStatus]:
        basename, locale = key
        name = bundle_name(basename, locale)
        for extension in self._extensions:
            handle = self._locator.resolve(f"{name}{extension}")
            if handle is None or not handle.exists():
                continue
            token = None if self._config.is_permanent else handle.last_modified()
            try:
                bundle = self._parse(handle)
            except ResourceNotFoundError:
                # Vanished between exists() and open()
                logger.debug("Bundle resource %s vanished while loading", handle.description)
                continue
            logger.debug(
                "Loaded bundle %s for %s (%s, %d keys)",
                basename,
                locale,
                handle.description,
                len(bundle),
            )
            return bundle, handle, token, LoadStatus.LOADED
        logger.debug("No bundle resource for %s at locale %s", basename, locale)
        return None, None, None, LoadStatus.NOT_FOUND

    def _parse(self, handle: ResourceHandle) -> Bundle:
        return self._parser.parse(handle.read_bytes(), self._encoding, handle.description)

    def _store(
        self,
        key: _BundleKey,
        bundle: Bundle | None,
        handle: ResourceHandle | None,
        token: float | None,
        status: LoadStatus,
    ) -> BundleEntry:
        match status:
            case LoadStatus.LOADED:
                self._count("loads")
            case LoadStatus.REFRESHED:
                self._count("refreshes")
            case LoadStatus.NOT_FOUND:
                logger.debug("Recorded negative entry for %s/%s", *key)
        return self._publish(key, BundleEntry(bundle, handle, token, self._clock()))

    def _publish(self, key: _BundleKey, entry: BundleEntry) -> BundleEntry:
        with self._lock:
            self._entries[key] = entry
        return entry

    def __repr__(self) -> str:
        return (
            f"BundleCache(entries={len(self._entries)}, mode={self._config.mode}, "
            f"encoding={self._encoding!r})"
        )
