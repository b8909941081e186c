"""Tests for MessageSourceConfig.

Python 3.13+.
"""

import pytest

from msgsource import MessageSourceConfig
from msgsource.diagnostics import ConfigurationError
from msgsource.locale_utils import Locale
from msgsource.runtime import CacheConfig


class TestMessageSourceConfig:
    """Construction-time normalization and validation."""

    def test_defaults(self) -> None:
        """Defaults match the documented configuration surface."""
        config = MessageSourceConfig()
        assert config.basenames == ()
        assert config.default_encoding == "utf-8"
        assert config.default_locale is None
        assert config.fallback_to_system_locale
        assert not config.use_code_as_default_message
        assert not config.always_use_message_format
        assert not config.locale_aware_arguments
        assert config.file_extensions == (".properties",)
        assert config.cache == CacheConfig.permanent()

    def test_basenames_trimmed_and_deduplicated(self) -> None:
        """Whitespace is trimmed; the first occurrence of a duplicate wins."""
        config = MessageSourceConfig(basenames=("  messages  ", "errors", "messages"))
        assert config.basenames == ("messages", "errors")

    def test_single_string_basename(self) -> None:
        """A lone string is one basename, not a sequence of characters."""
        config = MessageSourceConfig(basenames="messages")  # type: ignore[arg-type]
        assert config.basenames == ("messages",)

    @pytest.mark.parametrize("basenames", [("",), ("messages", "   ")])
    def test_empty_basename_rejected(self, basenames: tuple[str, ...]) -> None:
        """Blank basename entries are configuration errors."""
        with pytest.raises(ConfigurationError, match="basenames"):
            MessageSourceConfig(basenames=basenames)

    def test_none_basenames_rejected(self) -> None:
        """None is not a basename list."""
        with pytest.raises(ConfigurationError, match="basenames"):
            MessageSourceConfig(basenames=None)  # type: ignore[arg-type]

    def test_non_string_basename_rejected(self) -> None:
        """Basename entries must be strings."""
        with pytest.raises(ConfigurationError, match="must be str"):
            MessageSourceConfig(basenames=("messages", 3))  # type: ignore[arg-type]

    def test_unknown_encoding_rejected(self) -> None:
        """Unknown encodings fail at construction, not at lookup."""
        with pytest.raises(ConfigurationError, match="unknown encoding 'argh'"):
            MessageSourceConfig(basenames=("messages",), default_encoding="argh")

    def test_default_locale_coerced(self) -> None:
        """A locale code string is parsed."""
        config = MessageSourceConfig(default_locale="en-GB")  # type: ignore[arg-type]
        assert config.default_locale == Locale(("en", "GB"))

    def test_default_locale_invalid(self) -> None:
        """A malformed locale code is a configuration error."""
        with pytest.raises(ConfigurationError, match="default_locale"):
            MessageSourceConfig(default_locale="en GB")  # type: ignore[arg-type]

    @pytest.mark.parametrize("extensions", [(), ("properties",)])
    def test_bad_extensions(self, extensions: tuple[str, ...]) -> None:
        """Extensions must be non-empty and start with a dot."""
        with pytest.raises(ConfigurationError, match="file_extensions"):
            MessageSourceConfig(file_extensions=extensions)

    def test_with_basenames(self) -> None:
        """with_basenames copies the config with new, normalized basenames."""
        config = MessageSourceConfig(basenames=("a",), default_encoding="latin-1")
        updated = config.with_basenames(" b ", "c")
        assert updated.basenames == ("b", "c")
        assert updated.default_encoding == "latin-1"
        assert config.basenames == ("a",)


class TestFromMapping:
    """MessageSourceConfig.from_mapping."""

    def test_full_mapping(self) -> None:
        """Kebab-case keys, comma lists and boolean strings are understood."""
        config = MessageSourceConfig.from_mapping(
            {
                "basenames": "messages, errors,,",
                "default-encoding": " ISO-8859-1 ",
                "default-locale": "de_DE",
                "fallback-to-system-locale": "false",
                "use-code-as-default-message": "TRUE",
                "always-use-message-format": True,
                "locale-aware-arguments": "no",
                "file-extensions": [".properties", ".txt"],
                "cache-seconds": "30",
                "concurrent-refresh": "on",
            }
        )
        assert config.basenames == ("messages", "errors")
        assert config.default_encoding == "ISO-8859-1"
        assert config.default_locale == Locale(("de", "DE"))
        assert not config.fallback_to_system_locale
        assert config.use_code_as_default_message
        assert config.always_use_message_format
        assert not config.locale_aware_arguments
        assert config.file_extensions == (".properties", ".txt")
        assert config.cache == CacheConfig.ttl(30, concurrent_refresh=True)

    def test_negative_cache_seconds(self) -> None:
        """Negative cache-seconds keeps bundles forever."""
        config = MessageSourceConfig.from_mapping({"cache-seconds": -1})
        assert config.cache.is_permanent

    def test_empty_default_locale_ignored(self) -> None:
        """An empty default-locale means no default locale."""
        assert MessageSourceConfig.from_mapping({"default-locale": ""}).default_locale is None

    def test_unknown_key(self) -> None:
        """Unknown keys are rejected."""
        with pytest.raises(ConfigurationError, match="unknown configuration keys"):
            MessageSourceConfig.from_mapping({"basename": "messages"})

    def test_bad_boolean(self) -> None:
        """Unparseable booleans are rejected."""
        with pytest.raises(ConfigurationError, match="expected true/false"):
            MessageSourceConfig.from_mapping({"fallback-to-system-locale": "maybe"})

    def test_bad_seconds(self) -> None:
        """Unparseable cache-seconds are rejected."""
        with pytest.raises(ConfigurationError, match="expected a number"):
            MessageSourceConfig.from_mapping({"cache-seconds": "soon"})

    def test_concurrent_refresh_needs_ttl(self) -> None:
        """concurrent-refresh without cache-seconds is rejected."""
        with pytest.raises(ConfigurationError, match="requires cache-seconds"):
            MessageSourceConfig.from_mapping({"concurrent-refresh": "true"})
