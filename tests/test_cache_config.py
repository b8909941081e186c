"""Tests for CacheConfig validation and factories.

Python 3.13+.
"""

import math

import pytest

from msgsource.diagnostics import ConfigurationError
from msgsource.enums import CacheMode
from msgsource.runtime import CacheConfig


class TestCacheConfigDefaults:
    """Default construction."""

    def test_default_is_permanent(self) -> None:
        """CacheConfig() never re-checks."""
        config = CacheConfig()
        assert config.mode is CacheMode.PERMANENT
        assert config.ttl_seconds is None
        assert config.is_permanent
        assert not config.concurrent_refresh

    def test_frozen(self) -> None:
        """Instances are immutable."""
        config = CacheConfig()
        with pytest.raises(AttributeError):
            config.ttl_seconds = 5  # type: ignore[misc]


class TestCacheConfigValidation:
    """Invalid combinations raise ConfigurationError."""

    def test_ttl_required(self) -> None:
        """TTL mode needs a number of seconds."""
        with pytest.raises(ConfigurationError, match="ttl_seconds"):
            CacheConfig(CacheMode.TTL_CHECKED)

    @pytest.mark.parametrize("ttl", [-1, math.inf, math.nan])
    def test_ttl_range(self, ttl: float) -> None:
        """Negative and non-finite TTLs are rejected."""
        with pytest.raises(ConfigurationError, match="finite and non-negative"):
            CacheConfig(CacheMode.TTL_CHECKED, ttl)

    def test_bool_ttl_rejected(self) -> None:
        """True is not a number of seconds."""
        with pytest.raises(ConfigurationError):
            CacheConfig(CacheMode.TTL_CHECKED, True)

    def test_permanent_with_ttl_rejected(self) -> None:
        """The permanent mode takes no TTL."""
        with pytest.raises(ConfigurationError, match="must be None"):
            CacheConfig(CacheMode.PERMANENT, 10)

    def test_mode_from_string(self) -> None:
        """A mode string is coerced to CacheMode."""
        assert CacheConfig("ttl_checked", 5).mode is CacheMode.TTL_CHECKED  # type: ignore[arg-type]

    def test_unknown_mode(self) -> None:
        """Unknown mode strings are rejected."""
        with pytest.raises(ConfigurationError, match="unknown cache mode"):
            CacheConfig("sometimes")  # type: ignore[arg-type]

    def test_configuration_error_is_value_error(self) -> None:
        """ConfigurationError is also a ValueError."""
        with pytest.raises(ValueError):
            CacheConfig(CacheMode.TTL_CHECKED, -5)


class TestCacheConfigFactories:
    """permanent(), ttl() and from_seconds()."""

    def test_ttl(self) -> None:
        """ttl() builds a TTL-checked policy."""
        config = CacheConfig.ttl(30, concurrent_refresh=True)
        assert config.mode is CacheMode.TTL_CHECKED
        assert config.ttl_seconds == 30
        assert config.concurrent_refresh
        assert not config.is_permanent

    def test_from_seconds_negative_is_permanent(self) -> None:
        """Negative seconds mean cache forever."""
        assert CacheConfig.from_seconds(-1) == CacheConfig.permanent()

    def test_from_seconds_zero(self) -> None:
        """Zero re-checks on every access."""
        assert CacheConfig.from_seconds(0) == CacheConfig.ttl(0)

    def test_from_seconds_positive(self) -> None:
        """Positive seconds are the TTL."""
        assert CacheConfig.from_seconds(2.5).ttl_seconds == 2.5
