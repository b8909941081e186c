"""Convenience wrapper around a MessageSource with a fixed default locale.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from msgsource.locale_utils import to_locale

if TYPE_CHECKING:
    from msgsource.locale_utils import Locale
    from msgsource.localization.resolvable import Resolvable
    from msgsource.localization.source import MessageSource
    from msgsource.localization.types import LocaleLike, MessageArgs, MessageCode

__all__ = ["MessageSourceAccessor"]


class MessageSourceAccessor:
    """Resolve messages without passing a locale on every call.

    Calls without an explicit locale use default_locale; when that is None
    the wrapped source's own default applies.

    Example:
        >>> messages = MessageSourceAccessor(source, "de_DE")
        >>> messages.get("code2")
        'nachricht2'
    """

    __slots__ = ("_default_locale", "_source")

    def __init__(self, source: MessageSource, default_locale: LocaleLike | None = None) -> None:
        if source is None:
            msg = "MessageSourceAccessor requires a message source"
            raise TypeError(msg)
        self._source = source
        self._default_locale = to_locale(default_locale) if default_locale is not None else None

    @property
    def source(self) -> MessageSource:
        """Wrapped message source."""
        return self._source

    @property
    def default_locale(self) -> Locale | None:
        """Locale used when a call passes none."""
        return self._default_locale

    def _locale(self, locale: LocaleLike | None) -> LocaleLike | None:
        return locale if locale is not None else self._default_locale

    def get(
        self,
        code: MessageCode,
        args: MessageArgs | None = None,
        locale: LocaleLike | None = None,
    ) -> str:
        """Resolve code or raise NoSuchMessageError."""
        return self._source.resolve_or_throw(code, args, self._locale(locale))

    def get_or_default(
        self,
        code: MessageCode,
        default_message: str,
        args: MessageArgs | None = None,
        locale: LocaleLike | None = None,
    ) -> str:
        """Resolve code, else render default_message; never None."""
        message = self._source.resolve_or_default(code, args, default_message, self._locale(locale))
        return message if message is not None else ""

    def get_resolvable(self, resolvable: Resolvable, locale: LocaleLike | None = None) -> str:
        """Resolve a Resolvable or raise NoSuchMessageError."""
        return self._source.resolve_resolvable(resolvable, self._locale(locale))

    def __repr__(self) -> str:
        return f"MessageSourceAccessor({self._source!r}, default_locale={self._default_locale})"
