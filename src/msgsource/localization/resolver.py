"""Shared implementation of the three lookup contracts.

MessageResolver is composed into every concrete message source. The source
supplies a lookup function (code + candidate locales -> template or None);
the resolver adds argument resolution, common messages, parent delegation,
default messages and the NotFound contract.

Lookup order for one code:
    1. The source's own templates (lookup function)
    2. Common messages (locale-independent)
    3. parent.resolve_or_default(code, args, None, locale)

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import TYPE_CHECKING

from msgsource.diagnostics import ErrorTemplate, NoSuchMessageError
from msgsource.localization.resolvable import Resolvable

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from msgsource.locale_utils import Locale
    from msgsource.localization.fallback import LocaleFallbackResolver
    from msgsource.localization.source import SupportsResolveOrDefault
    from msgsource.localization.types import LocaleLike, MessageArgs, MessageCode
    from msgsource.runtime.formatter import MessageFormatter

__all__ = ["MessageLookup", "MessageResolver"]

logger = logging.getLogger(__name__)

type MessageLookup = Callable[[MessageCode, tuple[Locale, ...]], str | None]
"""Source-specific lookup: first template for code across candidate locales."""


class MessageResolver:
    """Lookup contracts shared by all message sources.

    Args:
        lookup: Source-specific template lookup
        locales: Locale policy (effective locale and fallback candidates)
        formatter: Template renderer
        use_code_as_default_message: Return the code instead of raising
            NoSuchMessageError
        common_messages: Locale-independent fallback templates
        parent: Non-owning reference to the parent source

    Thread Safety:
        Resolution is safe to run concurrently. The parent and common
        messages are swapped atomically under a lock.
    """

    __slots__ = (
        "_common_messages",
        "_formatter",
        "_locales",
        "_lock",
        "_lookup",
        "_parent",
        "_use_code_as_default_message",
    )

    def __init__(
        self,
        lookup: MessageLookup,
        *,
        locales: LocaleFallbackResolver,
        formatter: MessageFormatter,
        use_code_as_default_message: bool = False,
        common_messages: Mapping[str, str] | None = None,
        parent: SupportsResolveOrDefault | None = None,
    ) -> None:
        self._lookup = lookup
        self._locales = locales
        self._formatter = formatter
        self._use_code_as_default_message = use_code_as_default_message
        self._common_messages: Mapping[str, str] = MappingProxyType(dict(common_messages or {}))
        self._parent = parent
        self._lock = threading.Lock()

    @property
    def locales(self) -> LocaleFallbackResolver:
        """Locale policy."""
        return self._locales

    @property
    def formatter(self) -> MessageFormatter:
        """Template renderer."""
        return self._formatter

    @property
    def use_code_as_default_message(self) -> bool:
        """True when unresolved codes render as the code itself."""
        return self._use_code_as_default_message

    @property
    def parent(self) -> SupportsResolveOrDefault | None:
        """Parent source, if any."""
        return self._parent

    @parent.setter
    def parent(self, parent: SupportsResolveOrDefault | None) -> None:
        if parent is not None and not callable(getattr(parent, "resolve_or_default", None)):
            msg = f"Parent must provide resolve_or_default(), got {type(parent).__name__}"
            raise TypeError(msg)
        with self._lock:
            self._parent = parent

    @property
    def common_messages(self) -> Mapping[str, str]:
        """Read-only view of the common messages."""
        return self._common_messages

    @common_messages.setter
    def common_messages(self, messages: Mapping[str, str] | None) -> None:
        snapshot = MappingProxyType(dict(messages or {}))
        with self._lock:
            self._common_messages = snapshot

    # ------------------------------------------------------------------
    # Contracts
    # ------------------------------------------------------------------

    def resolve_or_default(
        self,
        code: MessageCode,
        args: MessageArgs | None = None,
        default_message: str | None = None,
        locale: LocaleLike | None = None,
    ) -> str | None:
        """Resolve code, else render default_message; None if both absent."""
        target = self._locales.effective_locale(locale)
        resolved_args = self.resolve_arguments(args, target)
        message = self._resolve_code(code, resolved_args, target)
        if message is not None:
            return message
        if default_message is not None:
            return self._formatter.format(default_message, resolved_args, target)
        return None

    def resolve_or_throw(
        self,
        code: MessageCode,
        args: MessageArgs | None = None,
        locale: LocaleLike | None = None,
    ) -> str:
        """Resolve code or raise NoSuchMessageError.

        Raises:
            NoSuchMessageError: If code is unresolved everywhere (unless
                use_code_as_default_message is set)
        """
        target = self._locales.effective_locale(locale)
        message = self._resolve_code(code, self.resolve_arguments(args, target), target)
        if message is not None:
            return message
        if self._use_code_as_default_message:
            return code
        raise NoSuchMessageError(
            ErrorTemplate.message_not_found(code, str(target)), code=code, locale=str(target)
        )

    def resolve_resolvable(self, resolvable: Resolvable, locale: LocaleLike | None = None) -> str:
        """Resolve the first resolvable code, else the resolvable's default.

        Raises:
            NoSuchMessageError: If no code resolves and there is no default
                (unless use_code_as_default_message is set and the
                resolvable has codes)
        """
        target = self._locales.effective_locale(locale)
        codes = tuple(resolvable.codes or ())
        resolved_args = self.resolve_arguments(resolvable.arguments, target)
        for code in codes:
            message = self._resolve_code(code, resolved_args, target)
            if message is not None:
                return message

        default_message = resolvable.default_message
        if default_message is not None:
            if codes and default_message == codes[0]:
                return default_message
            return self._formatter.format(default_message, resolved_args, target)
        if self._use_code_as_default_message and codes:
            return codes[0]

        failed = codes[-1] if codes else ""
        raise NoSuchMessageError(
            ErrorTemplate.resolvable_not_found(codes, str(target)), code=failed, locale=str(target)
        )

    def resolve_arguments(self, args: MessageArgs | None, locale: Locale) -> tuple[object, ...]:
        """Resolve Resolvable arguments in locale; other values pass through."""
        if not args:
            return ()
        return tuple(
            self.resolve_resolvable(arg, locale) if isinstance(arg, Resolvable) else arg
            for arg in args
        )

    def _resolve_code(
        self, code: MessageCode, args: tuple[object, ...], locale: Locale
    ) -> str | None:
        if not isinstance(code, str):
            msg = f"Message code must be str, got {type(code).__name__}"
            raise TypeError(msg)

        template = self._lookup(code, self._locales.candidates(locale))
        if template is None:
            template = self._common_messages.get(code)
        if template is not None:
            return self._formatter.format(template, args, locale)

        parent = self._parent
        if parent is not None:
            logger.debug("Code %r unresolved for %s; delegating to parent", code, locale)
            return parent.resolve_or_default(code, args, None, locale)
        return None
