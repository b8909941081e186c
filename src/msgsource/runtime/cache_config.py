"""Cache configuration for BundleCache.

Provides a single frozen dataclass that encapsulates the bundle freshness
policy: never re-check (permanent) or re-check the backing resource once a
cached entry is older than a time-to-live.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from msgsource.diagnostics import ConfigurationError, ErrorTemplate
from msgsource.enums import CacheMode

__all__ = ["CacheConfig"]


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Immutable freshness policy for cached bundles.

    Constructing ``CacheConfig()`` with no arguments produces the permanent
    policy: bundles are parsed once and kept for the cache's lifetime.

    Attributes:
        mode: PERMANENT (never re-check) or TTL_CHECKED
        ttl_seconds: Age after which an entry's backing resource is checked
            again. Required for TTL_CHECKED, must be None for PERMANENT.
            0 re-checks on every access.
        concurrent_refresh: In TTL_CHECKED mode, let other threads keep
            reading the stale bundle while one thread refreshes it instead
            of waiting for the refresh (default: False).

    Example:
        >>> CacheConfig.ttl(30).is_permanent
        False
        >>> CacheConfig.from_seconds(-1) == CacheConfig.permanent()
        True
    """

    mode: CacheMode = CacheMode.PERMANENT
    ttl_seconds: float | None = None
    concurrent_refresh: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ConfigurationError: If ttl_seconds is missing, negative or not
                finite for TTL_CHECKED, or given for PERMANENT.
        """
        if not isinstance(self.mode, CacheMode):
            try:
                object.__setattr__(self, "mode", CacheMode(self.mode))
            except ValueError:
                raise ConfigurationError(
                    ErrorTemplate.config_invalid("mode", f"unknown cache mode {self.mode!r}")
                ) from None
        match self.mode:
            case CacheMode.PERMANENT:
                if self.ttl_seconds is not None:
                    raise ConfigurationError(
                        ErrorTemplate.config_invalid(
                            "ttl_seconds", "must be None for the permanent cache mode"
                        )
                    )
            case CacheMode.TTL_CHECKED:
                ttl = self.ttl_seconds
                if ttl is None or isinstance(ttl, bool) or not isinstance(ttl, int | float):
                    raise ConfigurationError(
                        ErrorTemplate.config_invalid(
                            "ttl_seconds", f"a number of seconds is required, got {ttl!r}"
                        )
                    )
                if ttl < 0 or not math.isfinite(ttl):
                    raise ConfigurationError(
                        ErrorTemplate.config_invalid(
                            "ttl_seconds", f"must be finite and non-negative, got {ttl!r}"
                        )
                    )

    @classmethod
    def permanent(cls) -> CacheConfig:
        """Parse each bundle once; never re-check its resource."""
        return cls()

    @classmethod
    def ttl(cls, seconds: float, *, concurrent_refresh: bool = False) -> CacheConfig:
        """Re-check each bundle's resource once it is older than seconds."""
        return cls(CacheMode.TTL_CHECKED, seconds, concurrent_refresh)

    @classmethod
    def from_seconds(cls, cache_seconds: float, *, concurrent_refresh: bool = False) -> CacheConfig:
        """Build from a single number: negative means permanent.

        0 re-checks the backing resource on every access; a positive value
        is the time-to-live in seconds.
        """
        if cache_seconds < 0:
            return cls(concurrent_refresh=concurrent_refresh)
        return cls.ttl(cache_seconds, concurrent_refresh=concurrent_refresh)

    @property
    def is_permanent(self) -> bool:
        """True when cached bundles are never re-checked."""
        return self.mode is CacheMode.PERMANENT
