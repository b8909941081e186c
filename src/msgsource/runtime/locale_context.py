"""Locale context for thread-safe, locale-scoped argument formatting.

Formats message arguments carrying numeric or date/time semantics using
Babel for CLDR-compliant number, percent, currency, date and time output.

Architecture:
    - LocaleContext: Immutable per-locale formatting container
    - Instances are cached per Locale (LRU, RLock-protected)
    - No dependency on Python's locale module (avoids global state)

Python 3.13+. Uses Babel for i18n.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from threading import RLock
from typing import ClassVar

from babel import Locale as BabelLocale
from babel import UnknownLocaleError
from babel import dates as babel_dates
from babel import numbers as babel_numbers

from msgsource.constants import MAX_LOCALE_CACHE_SIZE
from msgsource.diagnostics import ArgumentFormattingError, ErrorTemplate
from msgsource.enums import ArgumentType
from msgsource.locale_utils import Locale, get_babel_locale

__all__ = ["LocaleContext"]

logger = logging.getLogger(__name__)

_FALLBACK_LOCALE = "en_US"

type Number = int | float | Decimal


@dataclass(frozen=True, slots=True)
class LocaleContext:
    """Immutable locale configuration for formatting operations.

    Use LocaleContext.create() to construct instances; it caches one
    context per Locale. The root locale and locales Babel does not know
    format with en_US rules (is_fallback is True for the latter).

    Examples:
        >>> ctx = LocaleContext.create(Locale.parse("en-US"))
        >>> ctx.format_number(1234.5)
        '1,234.5'

        >>> ctx = LocaleContext.create(Locale.parse("de-DE"))
        >>> ctx.format_number(1234.5)
        '1.234,5'

    Thread Safety:
        LocaleContext is immutable and thread-safe. Cache operations are
        protected by RLock.
    """

    _cache: ClassVar[OrderedDict[Locale, LocaleContext]] = OrderedDict()
    _cache_lock: ClassVar[RLock] = RLock()

    locale: Locale
    _babel_locale: BabelLocale
    is_fallback: bool = False

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the locale context cache."""
        with cls._cache_lock:
            cls._cache.clear()

    @classmethod
    def cache_size(cls) -> int:
        """Get current number of cached LocaleContext instances."""
        with cls._cache_lock:
            return len(cls._cache)

    @classmethod
    def create(cls, locale: Locale) -> LocaleContext:
        """Create (or reuse) the LocaleContext for locale.

        Unknown or invalid locales log a warning and fall back to en_US
        rules; this method always succeeds.

        Args:
            locale: Resolution locale

        Returns:
            Cached LocaleContext for locale
        """
        with cls._cache_lock:
            if locale in cls._cache:
                cls._cache.move_to_end(locale)
                return cls._cache[locale]

        used_fallback = False
        if locale.is_root:
            babel_locale = get_babel_locale(_FALLBACK_LOCALE)
        else:
            try:
                babel_locale = locale.to_babel()
            except UnknownLocaleError as e:
                logger.warning("Unknown locale '%s': %s. Falling back to en_US", locale, e)
                babel_locale = get_babel_locale(_FALLBACK_LOCALE)
                used_fallback = True
            except ValueError as e:
                logger.warning("Invalid locale format '%s': %s. Falling back to en_US", locale, e)
                babel_locale = get_babel_locale(_FALLBACK_LOCALE)
                used_fallback = True

        ctx = cls(locale=locale, _babel_locale=babel_locale, is_fallback=used_fallback)

        with cls._cache_lock:
            if locale in cls._cache:
                return cls._cache[locale]
            if len(cls._cache) >= MAX_LOCALE_CACHE_SIZE:
                cls._cache.popitem(last=False)
            cls._cache[locale] = ctx
            return ctx

    @property
    def babel_locale(self) -> BabelLocale:
        """Babel Locale used for formatting."""
        return self._babel_locale

    # ------------------------------------------------------------------
    # Typed placeholders
    # ------------------------------------------------------------------

    def format_typed(
        self, index: int, value: object, format_type: ArgumentType, style: str | None
    ) -> str:
        """Format value for a typed placeholder such as ``{0,number,percent}``.

        Raises:
            ArgumentFormattingError: If the value does not fit format_type or
                Babel rejects the style/pattern
        """
        try:
            match format_type:
                case ArgumentType.NUMBER:
                    return self.format_number(_as_number(value), style)
                case ArgumentType.DATE:
                    return self.format_date(_as_date(value), style)
                case ArgumentType.TIME:
                    return self.format_time(_as_time(value), style)
                case ArgumentType.DATETIME:
                    return self.format_datetime(_as_datetime(value), style)
        except (ValueError, TypeError, InvalidOperation, AttributeError, KeyError) as e:
            raise ArgumentFormattingError(
                ErrorTemplate.argument_format_invalid(index, str(format_type), style or "", str(e))
            ) from e
        msg = f"Unhandled argument type {format_type!r}"
        raise AssertionError(msg)

    def format_natural(self, value: object) -> str:
        """Locale-aware string form for plain ``{n}`` placeholders.

        Numbers use the locale's decimal pattern, dates and times the
        medium style; everything else its str() form.
        """
        match value:
            case bool():
                return str(value)
            case int() | float() | Decimal():
                return self.format_number(value, None)
            case datetime():
                return self.format_datetime(value, None)
            case date():
                return self.format_date(value, None)
            case time():
                return self.format_time(value, None)
            case _:
                return str(value)

    # ------------------------------------------------------------------
    # Babel wrappers
    # ------------------------------------------------------------------

    def format_number(self, value: Number, style: str | None) -> str:
        """Format a number in one of the named styles or a CLDR pattern.

        Styles: None (locale decimal format), "integer", "percent",
        "currency" (the locale territory's currency); anything else is a
        CLDR decimal pattern such as "#,##0.00".

        Examples:
            >>> ctx = LocaleContext.create(Locale.parse("en-US"))
            >>> ctx.format_number(0.25, "percent")
            '25%'
            >>> ctx.format_number(1234.567, "#,##0.0")
            '1,234.6'
        """
        match style:
            case None | "":
                return str(babel_numbers.format_decimal(value, locale=self._babel_locale))
            case "integer":
                return str(
                    babel_numbers.format_decimal(
                        round(value), format="#,##0", locale=self._babel_locale
                    )
                )
            case "percent":
                return str(babel_numbers.format_percent(value, locale=self._babel_locale))
            case "currency":
                return str(
                    babel_numbers.format_currency(
                        value,
                        self._currency_code(),
                        locale=self._babel_locale,
                        currency_digits=True,
                    )
                )
            case _:
                return str(
                    babel_numbers.format_decimal(value, format=style, locale=self._babel_locale)
                )

    def format_date(self, value: date, style: str | None) -> str:
        """Format a date with a CLDR style name or pattern (default: medium)."""
        return str(
            babel_dates.format_date(value, format=_date_style(style), locale=self._babel_locale)
        )

    def format_time(self, value: time | datetime, style: str | None) -> str:
        """Format a time with a CLDR style name or pattern (default: medium)."""
        return str(
            babel_dates.format_time(value, format=_date_style(style), locale=self._babel_locale)
        )

    def format_datetime(self, value: datetime, style: str | None) -> str:
        """Format a datetime with a CLDR style name or pattern (default: medium)."""
        return str(
            babel_dates.format_datetime(
                value, format=_date_style(style), locale=self._babel_locale
            )
        )

    def _currency_code(self) -> str:
        territory = self._babel_locale.territory
        if territory:
            currencies = babel_numbers.get_territory_currencies(territory)
            if currencies:
                return str(currencies[0])
        msg = f"Locale '{self.locale}' has no territory currency"
        raise ValueError(msg)


def _date_style(style: str | None) -> str:
    return style or "medium"


def _as_number(value: object) -> Number:
    if isinstance(value, bool) or not isinstance(value, int | float | Decimal):
        msg = f"expected a number, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def _as_date(value: object) -> date:
    if not isinstance(value, date):
        msg = f"expected a date, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def _as_time(value: object) -> time | datetime:
    if not isinstance(value, time | datetime):
        msg = f"expected a time or datetime, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def _as_datetime(value: object) -> datetime:
    match value:
        case datetime():
            return value
        case date():
            return datetime.combine(value, time())
        case _:
            msg = f"expected a datetime, got {type(value).__name__}"
            raise TypeError(msg)
