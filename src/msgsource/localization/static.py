"""In-memory message source.

StaticMessageSource holds templates registered in code. It implements the
same lookup contracts and locale fallback as the resource-bundle source and
can serve as its parent (e.g. for framework-provided defaults) or stand
alone in tests.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import TYPE_CHECKING

from msgsource.config import MessageSourceConfig
from msgsource.locale_utils import ROOT, to_locale
from msgsource.localization.fallback import LocaleFallbackResolver
from msgsource.localization.resolver import MessageResolver
from msgsource.runtime.formatter import MessageFormatter

if TYPE_CHECKING:
    from collections.abc import Mapping

    from msgsource.locale_utils import Locale
    from msgsource.localization.resolvable import Resolvable
    from msgsource.localization.source import SupportsResolveOrDefault
    from msgsource.localization.types import LocaleLike, MessageArgs, MessageCode

__all__ = ["StaticMessageSource"]

type _MessageKey = tuple[MessageCode, Locale]


class StaticMessageSource:
    """Message source over programmatically registered templates.

    Args:
        config: Locale policy and formatting flags (basenames are ignored)
        parent: Source consulted for codes this source cannot resolve
        common_messages: Locale-independent fallback templates
        system_locale: Host locale override

    Example:
        >>> source = StaticMessageSource()
        >>> source.add_message("greeting", "en", "Hello {0}")
        >>> source.add_message("greeting", "de", "Hallo {0}")
        >>> source.resolve_or_throw("greeting", ["Anna"], "de_AT")
        'Hallo Anna'

    Thread Safety:
        Registration swaps an immutable snapshot under a lock; lookups read
        the current snapshot without locking.
    """

    __slots__ = ("_lock", "_messages", "_resolver")

    def __init__(
        self,
        *,
        config: MessageSourceConfig | None = None,
        parent: SupportsResolveOrDefault | None = None,
        common_messages: Mapping[str, str] | None = None,
        system_locale: LocaleLike | None = None,
    ) -> None:
        if config is None:
            config = MessageSourceConfig()
        self._lock = threading.Lock()
        self._messages: Mapping[_MessageKey, str] = MappingProxyType({})
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

    def add_message(self, code: MessageCode, locale: LocaleLike | None, template: str) -> None:
        """Register template for code at locale (None = root locale).

        Raises:
            TypeError: If code or template is not a str
            ValueError: If code is empty
        """
        self.add_messages({code: template}, locale)

    def add_messages(self, messages: Mapping[MessageCode, str], locale: LocaleLike | None) -> None:
        """Register every code -> template pair of messages at locale."""
        target = to_locale(locale) if locale is not None else ROOT
        staged: dict[_MessageKey, str] = {}
        for code, template in messages.items():
            if not isinstance(code, str) or not isinstance(template, str):
                msg = (
                    f"Message code and template must be str, got "
                    f"{type(code).__name__} and {type(template).__name__}"
                )
                raise TypeError(msg)
            if not code:
                msg = "Message code must not be empty"
                raise ValueError(msg)
            staged[(code, target)] = template
        with self._lock:
            self._messages = MappingProxyType({**self._messages, **staged})

    def remove_message(self, code: MessageCode, locale: LocaleLike | None) -> bool:
        """Unregister code at locale; returns False if it was not registered."""
        key = (code, to_locale(locale) if locale is not None else ROOT)
        with self._lock:
            if key not in self._messages:
                return False
            remaining = dict(self._messages)
            del remaining[key]
            self._messages = MappingProxyType(remaining)
        return True

    def __len__(self) -> int:
        return len(self._messages)

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

    def resolve_or_default(
        self,
        code: MessageCode,
        args: MessageArgs | None = None,
        default_message: str | None = None,
        locale: LocaleLike | None = None,
    ) -> str | None:
        """Resolve code, else render default_message; None if both absent."""
        return self._resolver.resolve_or_default(code, args, default_message, locale)

    def resolve_or_throw(
        self,
        code: MessageCode,
        args: MessageArgs | None = None,
        locale: LocaleLike | None = None,
    ) -> str:
        """Resolve code or raise NoSuchMessageError."""
        return self._resolver.resolve_or_throw(code, args, locale)

    def resolve_resolvable(self, resolvable: Resolvable, locale: LocaleLike | None = None) -> str:
        """Resolve the first resolvable code, else the resolvable's default."""
        return self._resolver.resolve_resolvable(resolvable, locale)

    def _find_template(self, code: MessageCode, candidates: tuple[Locale, ...]) -> str | None:
        messages = self._messages
        for candidate in candidates:
            template = messages.get((code, candidate))
            if template is not None:
                return template
        return None

    def __repr__(self) -> str:
        return f"StaticMessageSource(messages={len(self._messages)})"
