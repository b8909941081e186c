"""Locale value type and locale utilities.

Centralizes locale parsing and normalization used throughout the codebase.
A Locale is an immutable, ordered tuple of subtags (language, region,
variant, ...). Equality is exact subtag-sequence equality, which makes
Locale usable directly as a cache key.

Python 3.13+.
"""

from __future__ import annotations

import functools
import os
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from msgsource.constants import LOCALE_SEPARATOR

if TYPE_CHECKING:
    from babel import Locale as BabelLocale

__all__ = [
    "ROOT",
    "Locale",
    "get_babel_locale",
    "get_system_locale",
    "normalize_locale",
    "to_locale",
]

_SUBTAG_SPLIT = re.compile(r"[-_]")
_SUBTAG_CHARS = re.compile(r"^[A-Za-z0-9]+$")


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format.

    BCP-47 uses hyphens (en-GB), while bundle file names and Babel use
    underscores (en_GB).

    Example:
        >>> normalize_locale("en-GB")
        'en_GB'
        >>> normalize_locale("en")
        'en'
    """
    return locale_code.replace("-", "_")


@dataclass(frozen=True, slots=True)
class Locale:
    """Immutable locale identifier made of ordered subtags.

    The empty subtag tuple is the root locale: the locale-neutral bundle
    without any suffix.

    Example:
        >>> loc = Locale.parse("en-GB")
        >>> loc.subtags
        ('en', 'GB')
        >>> loc.tag
        'en_GB'
        >>> loc.parent()
        Locale(subtags=('en',))
    """

    subtags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for subtag in self.subtags:
            if not _SUBTAG_CHARS.match(subtag):
                msg = f"Invalid locale subtag {subtag!r} in {self.subtags!r}"
                raise ValueError(msg)

    @classmethod
    def parse(cls, code: str) -> Locale:
        """Parse a BCP-47 or POSIX locale code.

        Language is lowercased and a two-letter region uppercased, so
        "EN-gb" and "en_GB" produce equal locales. Remaining subtags are
        kept as given. The empty string parses to the root locale.

        Raises:
            ValueError: If the code contains characters other than letters,
                digits, '-' and '_', or surrounding whitespace
        """
        if code != code.strip():
            msg = f"Locale code contains leading/trailing whitespace: {code!r}"
            raise ValueError(msg)
        if not code:
            return ROOT

        parts = [part for part in _SUBTAG_SPLIT.split(code) if part]
        if not parts:
            msg = f"Locale code has no subtags: {code!r}"
            raise ValueError(msg)

        subtags = [parts[0].lower()]
        for index, part in enumerate(parts[1:], start=1):
            if index == 1 and len(part) == 2 and part.isalpha():
                subtags.append(part.upper())
            else:
                subtags.append(part)
        return cls(tuple(subtags))

    @property
    def language(self) -> str:
        """Language subtag, or "" for the root locale."""
        return self.subtags[0] if self.subtags else ""

    @property
    def region(self) -> str:
        """Second subtag, or "" when absent."""
        return self.subtags[1] if len(self.subtags) > 1 else ""

    @property
    def variant(self) -> str:
        """Everything after the region, joined with '_'."""
        return LOCALE_SEPARATOR.join(self.subtags[2:])

    @property
    def tag(self) -> str:
        """POSIX-style tag used in bundle file names ("" for root)."""
        return LOCALE_SEPARATOR.join(self.subtags)

    @property
    def is_root(self) -> bool:
        """True for the locale-neutral root locale."""
        return not self.subtags

    def parent(self) -> Locale | None:
        """Drop the least significant subtag; None for the root locale."""
        if not self.subtags:
            return None
        return Locale(self.subtags[:-1])

    def to_babel(self) -> BabelLocale:
        """Return the Babel Locale used for number/date formatting.

        Raises:
            babel.core.UnknownLocaleError: If Babel has no CLDR data for it
            ValueError: If the tag cannot be parsed by Babel
        """
        return get_babel_locale(self.tag or "und")

    def __str__(self) -> str:
        return self.tag or "root"


ROOT = Locale()
"""The locale-neutral root locale (bundle resource without locale suffix)."""


def to_locale(value: Locale | str) -> Locale:
    """Coerce a locale code or Locale into a Locale.

    Raises:
        TypeError: If value is neither str nor Locale
        ValueError: If value is a malformed locale code
    """
    match value:
        case Locale():
            return value
        case str():
            return Locale.parse(value)
        case _:
            msg = f"Expected Locale or str, got {type(value).__name__}"
            raise TypeError(msg)


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> BabelLocale:
    """Get a Babel Locale object with caching.

    Parses the locale code once and caches the result.
    Thread-safe via lru_cache internal locking.

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid

    Example:
        >>> get_babel_locale("en-GB").territory
        'GB'
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale as BabelLocale  # noqa: PLC0415

    return BabelLocale.parse(normalize_locale(locale_code))


def get_system_locale() -> Locale:
    """Detect the host environment's locale.

    Detection order:
    1. Python locale.getlocale() (OS-level locale)
    2. LC_ALL environment variable (overrides all)
    3. LC_MESSAGES environment variable (for message catalogs)
    4. LANG environment variable (default locale)

    Filters out "C" and "POSIX" pseudo-locales and strips encoding and
    modifier suffixes ("de_DE.UTF-8@euro" -> de_DE). Returns en_US when no
    usable locale is set.
    """
    import locale as locale_module  # noqa: PLC0415

    candidates: list[str | None] = []
    try:
        system_locale, _ = locale_module.getlocale()
        candidates.append(system_locale)
    except (ValueError, AttributeError):
        pass
    candidates.extend(os.environ.get(var) for var in ("LC_ALL", "LC_MESSAGES", "LANG"))

    for value in candidates:
        if not value or value in ("C", "POSIX"):
            continue
        code = value.split(".")[0].split("@")[0]
        if not code or code in ("C", "POSIX"):
            continue
        try:
            return Locale.parse(normalize_locale(code))
        except ValueError:
            continue

    return Locale(("en", "US"))
