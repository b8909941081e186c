"""Locale fallback chains.

For a requested locale the candidate sequence is the locale itself, then
the locale with its least significant subtag dropped, repeatedly, down to
the bare language; then the same chain for the configured fallback locale
(default locale, or the host's locale when enabled); and always the root
locale last. Duplicates keep their first position.

Example:
    en_GB with fallback de_DE -> [en_GB, en, de_DE, de, root]

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field

from msgsource.locale_utils import ROOT, Locale, get_system_locale, to_locale

__all__ = ["LocaleFallbackResolver", "fallback_chain"]


@functools.lru_cache(maxsize=256)
def fallback_chain(locale: Locale, fallback: Locale | None = None) -> tuple[Locale, ...]:
    """Ordered candidate locales, most specific first, ending with root.

    Pure and cached: the result depends only on the arguments.

    Example:
        >>> [str(loc) for loc in fallback_chain(Locale.parse("en_GB"))]
        ['en_GB', 'en', 'root']
    """
    chain: dict[Locale, None] = {}
    for start in (locale, fallback):
        current = start
        while current is not None and not current.is_root:
            chain.setdefault(current)
            current = current.parent()
    chain.setdefault(ROOT)
    return tuple(chain)


@dataclass(frozen=True, slots=True)
class LocaleFallbackResolver:
    """Static locale policy of a message source.

    Attributes:
        default_locale: Locale used for locale=None calls and appended to
            every fallback chain
        fallback_to_system_locale: Use the host locale when no
            default_locale is configured
        system_locale: Host locale; detected once at construction when
            needed and not given
    """

    default_locale: Locale | None = None
    fallback_to_system_locale: bool = True
    system_locale: Locale | None = field(default=None)

    def __post_init__(self) -> None:
        if self.default_locale is not None and not isinstance(self.default_locale, Locale):
            object.__setattr__(self, "default_locale", to_locale(self.default_locale))
        if (
            self.system_locale is None
            and self.default_locale is None
            and self.fallback_to_system_locale
        ):
            object.__setattr__(self, "system_locale", get_system_locale())

    @property
    def fallback_locale(self) -> Locale | None:
        """Locale whose chain follows the requested one, if any."""
        if self.default_locale is not None:
            return self.default_locale
        if self.fallback_to_system_locale:
            return self.system_locale
        return None

    def effective_locale(self, locale: Locale | str | None) -> Locale:
        """Locale a call runs in: the given one, else the fallback, else root."""
        if locale is not None:
            return to_locale(locale)
        return self.fallback_locale or ROOT

    def candidates(self, locale: Locale | str | None) -> tuple[Locale, ...]:
        """Candidate locales for a lookup in locale."""
        return fallback_chain(self.effective_locale(locale), self.fallback_locale)
