"""Resource-bundle backed message source.

ResourceBundleMessageSource answers message lookups from bundle resources
named ``<basename>[_<locale>]<extension>``, located through a
ResourceLocator and cached by a BundleCache.

Lookup order for one code:
    for basename in basenames (configured order):
        for locale in fallback candidates (most specific first):
            first bundle defining the code wins
    then common messages, then the parent source

Basename order outranks locale specificity: a root-locale entry in an
earlier basename shadows an exact-locale entry in a later basename.

Architecture:
    - Composition: BundleCache (loading and freshness), LocaleFallbackResolver
      (candidate locales), MessageFormatter (rendering) and MessageResolver
      (the three lookup contracts, parent delegation)
    - Bundles are loaded lazily on first lookup; nothing is read at
      construction
    - Parse and access errors from a bundle abort the call in progress

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING

from msgsource.config import MessageSourceConfig
from msgsource.diagnostics import ConfigurationError, ErrorTemplate
from msgsource.locale_utils import to_locale
from msgsource.localization.fallback import LocaleFallbackResolver
from msgsource.localization.resolver import MessageResolver
from msgsource.resources import ResourceLocator
from msgsource.runtime.bundle_cache import BundleCache
from msgsource.runtime.formatter import MessageFormatter

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from msgsource.locale_utils import Locale
    from msgsource.localization.resolvable import Resolvable
    from msgsource.localization.source import SupportsResolveOrDefault
    from msgsource.localization.types import Basename, LocaleLike, MessageArgs, MessageCode
    from msgsource.parsing import BundleParser
    from msgsource.runtime.bundle_cache import Bundle

__all__ = ["ResourceBundleMessageSource"]

logger = logging.getLogger(__name__)


class ResourceBundleMessageSource:
    """Hierarchical message source over bundle resources.

    Args:
        *basenames: Bundle families in precedence order. Override
            config.basenames when given.
        config: Settings snapshot (encoding, locales, cache policy, flags)
        locator: Resolves bundle locations. Defaults to a locator rooted at
            the current working directory.
        parser: Bundle-format parser (default: .properties)
        parent: Source consulted for codes this source cannot resolve
        common_messages: Locale-independent fallback templates
        system_locale: Host locale override (detected when needed otherwise)
        clock: Monotonic clock for TTL checks, injectable for tests

    Raises:
        ConfigurationError: If no basename is configured or a setting is invalid

    Example:
        >>> source = ResourceBundleMessageSource(
        ...     "classpath:i18n/messages",
        ...     locator=ResourceLocator(classpath=ClassPath.from_packages("myapp")),
        ...     config=MessageSourceConfig(fallback_to_system_locale=False),
        ... )
        >>> source.resolve_or_throw("welcome", ["Ryan", "EasyI18n", "!"], "en_US")
        'Welcome Ryan to EasyI18n, !'

    Thread Safety:
        All methods are safe to call concurrently. Reconfiguration
        (basenames, parent, common messages) swaps immutable snapshots.
    """

    __slots__ = ("_cache", "_config", "_lock", "_locator", "_resolver")

    def __init__(
        self,
        *basenames: Basename,
        config: MessageSourceConfig | None = None,
        locator: ResourceLocator | None = None,
        parser: BundleParser | None = None,
        parent: SupportsResolveOrDefault | None = None,
        common_messages: Mapping[str, str] | None = None,
        system_locale: LocaleLike | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if config is None:
            config = MessageSourceConfig()
        if basenames:
            config = config.with_basenames(*basenames)
        if not config.basenames:
            raise ConfigurationError(
                ErrorTemplate.config_invalid("basenames", "at least one basename is required")
            )

        self._config = config
        self._locator = locator if locator is not None else ResourceLocator(Path.cwd())
        self._lock = threading.Lock()
        self._cache = BundleCache(
            self._locator,
            parser=parser,
            config=config.cache,
            encoding=config.default_encoding,
            file_extensions=config.file_extensions,
            clock=clock,
        )
        self._resolver = MessageResolver(
            self._find_template,
            locales=LocaleFallbackResolver(
                default_locale=config.default_locale,
                fallback_to_system_locale=config.fallback_to_system_locale,
                system_locale=to_locale(system_locale) if system_locale is not None else None,
            ),
            formatter=MessageFormatter(
                always_use_message_format=config.always_use_message_format,
                locale_aware_arguments=config.locale_aware_arguments,
            ),
            use_code_as_default_message=config.use_code_as_default_message,
            common_messages=common_messages,
        )
        if parent is not None:
            self._resolver.parent = parent

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> MessageSourceConfig:
        """Current settings snapshot."""
        return self._config

    @property
    def basenames(self) -> tuple[Basename, ...]:
        """Bundle families in precedence order."""
        return self._config.basenames

    def set_basenames(self, *basenames: Basename) -> None:
        """Replace the basenames; cached bundles of dropped basenames are evicted.

        Raises:
            ConfigurationError: If no basename is given or an entry is empty
        """
        new_config = self._config.with_basenames(*basenames)
        if not new_config.basenames:
            raise ConfigurationError(
                ErrorTemplate.config_invalid("basenames", "at least one basename is required")
            )
        with self._lock:
            dropped = set(self._config.basenames) - set(new_config.basenames)
            self._config = new_config
        for basename in dropped:
            self._cache.evict(basename)

    def add_basenames(self, *basenames: Basename) -> None:
        """Append basenames after the existing ones (duplicates ignored)."""
        with self._lock:
            self._config = self._config.with_basenames(*self._config.basenames, *basenames)

    @property
    def parent(self) -> SupportsResolveOrDefault | None:
        """Parent source, if any."""
        return self._resolver.parent

    @parent.setter
    def parent(self, parent: SupportsResolveOrDefault | None) -> None:
        self._resolver.parent = parent

    @property
    def common_messages(self) -> Mapping[str, str]:
        """Locale-independent fallback templates."""
        return self._resolver.common_messages

    @common_messages.setter
    def common_messages(self, messages: Mapping[str, str] | None) -> None:
        self._resolver.common_messages = messages

    @property
    def locales(self) -> LocaleFallbackResolver:
        """Locale policy (default locale and fallback candidates)."""
        return self._resolver.locales

    @property
    def locator(self) -> ResourceLocator:
        """Locator used to find bundle resources."""
        return self._locator

    @property
    def bundle_cache(self) -> BundleCache:
        """Underlying bundle cache."""
        return self._cache

    # ------------------------------------------------------------------
    # Lookup contracts
    # ------------------------------------------------------------------

    def resolve_or_default(
        self,
        code: MessageCode,
        args: MessageArgs | None = None,
        default_message: str | None = None,
        locale: LocaleLike | None = None,
    ) -> str | None:
        """Resolve code, else render default_message; None if both absent.

        Raises:
            BundleParseError: If a bundle consulted on the way is malformed
            ResourceAccessError: If a bundle exists but cannot be read
        """
        return self._resolver.resolve_or_default(code, args, default_message, locale)

    def resolve_or_throw(
        self,
        code: MessageCode,
        args: MessageArgs | None = None,
        locale: LocaleLike | None = None,
    ) -> str:
        """Resolve code or raise NoSuchMessageError.

        Raises:
            NoSuchMessageError: If no basename, locale or parent yields code
        """
        return self._resolver.resolve_or_throw(code, args, locale)

    def resolve_resolvable(self, resolvable: Resolvable, locale: LocaleLike | None = None) -> str:
        """Resolve the first resolvable code, else the resolvable's default."""
        return self._resolver.resolve_resolvable(resolvable, locale)

    def get_bundle(self, basename: Basename, locale: LocaleLike) -> Bundle | None:
        """Bundle for exactly basename at locale (no fallback), or None."""
        return self._cache.get(basename, to_locale(locale))

    def _find_template(self, code: MessageCode, candidates: tuple[Locale, ...]) -> str | None:
        for basename in self._config.basenames:
            for candidate in candidates:
                bundle = self._cache.get(basename, candidate)
                if bundle is None:
                    continue
                template = bundle.get(code)
                if template is not None:
                    return template
        return None

    # ------------------------------------------------------------------
    # Cache control
    # ------------------------------------------------------------------

    def clear_cache(self) -> None:
        """Drop every cached bundle and the locator's resource caches."""
        logger.debug("Clearing bundle cache of %r", self)
        self._cache.clear()
        self._locator.clear_resource_caches()

    def clear_cache_including_ancestors(self) -> None:
        """Clear this cache and, recursively, those of cache-owning parents."""
        self.clear_cache()
        clear = getattr(self.parent, "clear_cache_including_ancestors", None)
        if callable(clear):
            clear()

    def get_cache_stats(self) -> dict[str, int | float]:
        """Bundle cache statistics (see BundleCache.get_stats)."""
        return self._cache.get_stats()

    def __repr__(self) -> str:
        return (
            f"ResourceBundleMessageSource(basenames={list(self._config.basenames)}, "
            f"cache={self._config.cache.mode})"
        )
