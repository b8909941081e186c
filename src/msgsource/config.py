"""Message source configuration.

MessageSourceConfig is a frozen, validated snapshot of everything a
ResourceBundleMessageSource needs besides its collaborators. Invalid
settings raise ConfigurationError at construction, never later from a
resolve call.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from msgsource.constants import DEFAULT_ENCODING, DEFAULT_FILE_EXTENSIONS
from msgsource.diagnostics import ConfigurationError, ErrorTemplate
from msgsource.locale_utils import Locale, to_locale
from msgsource.runtime.cache_config import CacheConfig

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

__all__ = ["MessageSourceConfig"]

_TRUE = frozenset({"true", "yes", "on", "1"})
_FALSE = frozenset({"false", "no", "off", "0"})


def _normalize_basenames(basenames: Iterable[str]) -> tuple[str, ...]:
    if isinstance(basenames, str):
        basenames = (basenames,)
    cleaned: dict[str, None] = {}
    for basename in basenames:
        if not isinstance(basename, str):
            raise ConfigurationError(
                ErrorTemplate.config_invalid(
                    "basenames", f"entries must be str, got {type(basename).__name__}"
                )
            )
        stripped = basename.strip()
        if not stripped:
            raise ConfigurationError(
                ErrorTemplate.config_invalid("basenames", "entries must not be empty")
            )
        cleaned.setdefault(stripped)
    return tuple(cleaned)


@dataclass(frozen=True, slots=True)
class MessageSourceConfig:
    """Immutable message source configuration.

    Attributes:
        basenames: Bundle families in precedence order. Entries are
            whitespace-trimmed and de-duplicated (first occurrence kept).
        default_encoding: Encoding of bundle resources
        default_locale: Locale for locale=None calls, appended to every
            fallback chain
        fallback_to_system_locale: Use the host locale when no default
            locale is configured
        use_code_as_default_message: Unresolved codes render as the code
            itself instead of raising NoSuchMessageError
        always_use_message_format: Apply MessageFormat quoting rules even to
            messages rendered without arguments
        locale_aware_arguments: Format numbers and dates in plain {n}
            placeholders with the resolution locale's conventions
        file_extensions: Resource extensions tried in order
        cache: Bundle freshness policy

    Example:
        >>> config = MessageSourceConfig(basenames=("  messages  ", "errors"))
        >>> config.basenames
        ('messages', 'errors')
    """

    basenames: tuple[str, ...] = ()
    default_encoding: str = DEFAULT_ENCODING
    default_locale: Locale | None = None
    fallback_to_system_locale: bool = True
    use_code_as_default_message: bool = False
    always_use_message_format: bool = False
    locale_aware_arguments: bool = False
    file_extensions: tuple[str, ...] = DEFAULT_FILE_EXTENSIONS
    cache: CacheConfig = field(default_factory=CacheConfig)

    def __post_init__(self) -> None:
        """Normalize and validate.

        Raises:
            ConfigurationError: On empty basename entries, an unknown
                encoding, a malformed default locale or bad extensions
        """
        if self.basenames is None:
            raise ConfigurationError(
                ErrorTemplate.config_invalid("basenames", "must not be None")
            )
        object.__setattr__(self, "basenames", _normalize_basenames(self.basenames))

        if not isinstance(self.default_encoding, str) or not self.default_encoding.strip():
            raise ConfigurationError(
                ErrorTemplate.config_invalid("default_encoding", "must be a non-empty string")
            )
        try:
            codecs.lookup(self.default_encoding)
        except LookupError:
            raise ConfigurationError(
                ErrorTemplate.config_invalid(
                    "default_encoding", f"unknown encoding {self.default_encoding!r}"
                )
            ) from None

        if self.default_locale is not None and not isinstance(self.default_locale, Locale):
            try:
                object.__setattr__(self, "default_locale", to_locale(self.default_locale))
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    ErrorTemplate.config_invalid("default_locale", str(e))
                ) from e

        extensions = (
            (self.file_extensions,)
            if isinstance(self.file_extensions, str)
            else tuple(self.file_extensions)
        )
        if not extensions:
            raise ConfigurationError(
                ErrorTemplate.config_invalid(
                    "file_extensions", "at least one extension is required"
                )
            )
        for extension in extensions:
            if not isinstance(extension, str) or not extension.startswith("."):
                raise ConfigurationError(
                    ErrorTemplate.config_invalid(
                        "file_extensions", f"extensions must start with '.', got {extension!r}"
                    )
                )
        object.__setattr__(self, "file_extensions", extensions)

        if not isinstance(self.cache, CacheConfig):
            raise ConfigurationError(
                ErrorTemplate.config_invalid("cache", f"expected CacheConfig, got {self.cache!r}")
            )

    def with_basenames(self, *basenames: str) -> MessageSourceConfig:
        """Copy with basenames replaced."""
        return replace(self, basenames=basenames)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> MessageSourceConfig:
        """Build a config from flat, kebab-case keys.

        Recognized keys: basenames, default-encoding, default-locale,
        fallback-to-system-locale, use-code-as-default-message,
        always-use-message-format, locale-aware-arguments, file-extensions,
        cache-seconds, concurrent-refresh. List values may be given as
        comma-separated strings, booleans as "true"/"false" strings.

        Example:
            >>> MessageSourceConfig.from_mapping({
            ...     "basenames": "messages, errors",
            ...     "cache-seconds": "30",
            ...     "fallback-to-system-locale": "false",
            ... }).cache.ttl_seconds
            30.0

        Raises:
            ConfigurationError: On unknown keys or unparseable values
        """
        known = {
            "basenames",
            "default-encoding",
            "default-locale",
            "fallback-to-system-locale",
            "use-code-as-default-message",
            "always-use-message-format",
            "locale-aware-arguments",
            "file-extensions",
            "cache-seconds",
            "concurrent-refresh",
        }
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise ConfigurationError(
                ErrorTemplate.config_invalid(unknown[0], f"unknown configuration keys {unknown}")
            )

        kwargs: dict[str, Any] = {}
        if "basenames" in mapping:
            kwargs["basenames"] = _as_list("basenames", mapping["basenames"])
        if "default-encoding" in mapping:
            kwargs["default_encoding"] = str(mapping["default-encoding"]).strip()
        if mapping.get("default-locale") not in (None, ""):
            kwargs["default_locale"] = mapping["default-locale"]
        for key in (
            "fallback-to-system-locale",
            "use-code-as-default-message",
            "always-use-message-format",
            "locale-aware-arguments",
        ):
            if key in mapping:
                kwargs[key.replace("-", "_")] = _as_bool(key, mapping[key])
        if "file-extensions" in mapping:
            kwargs["file_extensions"] = _as_list("file-extensions", mapping["file-extensions"])

        concurrent = _as_bool("concurrent-refresh", mapping.get("concurrent-refresh", False))
        if "cache-seconds" in mapping:
            seconds = _as_float("cache-seconds", mapping["cache-seconds"])
            kwargs["cache"] = CacheConfig.from_seconds(seconds, concurrent_refresh=concurrent)
        elif concurrent:
            raise ConfigurationError(
                ErrorTemplate.config_invalid(
                    "concurrent-refresh", "requires cache-seconds (a TTL-checked cache)"
                )
            )
        return cls(**kwargs)


def _as_list(key: str, value: Any) -> tuple[str, ...]:
    match value:
        case str():
            return tuple(part for part in (p.strip() for p in value.split(",")) if part)
        case list() | tuple():
            return tuple(str(item) for item in value)
        case _:
            raise ConfigurationError(
                ErrorTemplate.config_invalid(
                    key, f"expected a list or comma-separated string, got {value!r}"
                )
            )


def _as_bool(key: str, value: Any) -> bool:
    match value:
        case bool():
            return value
        case str() if value.strip().lower() in _TRUE:
            return True
        case str() if value.strip().lower() in _FALSE:
            return False
        case _:
            raise ConfigurationError(
                ErrorTemplate.config_invalid(key, f"expected true/false, got {value!r}")
            )


def _as_float(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(
            ErrorTemplate.config_invalid(key, f"expected a number, got {value!r}")
        )
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            ErrorTemplate.config_invalid(key, f"expected a number, got {value!r}")
        ) from None
