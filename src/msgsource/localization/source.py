"""Message source protocols.

MessageSource is the lookup capability callers program against; any object
exposing resolve_or_default (SupportsResolveOrDefault) can serve as the
parent of a hierarchical source. Parents are plain, non-owning references:
the same parent may be shared by several children, and cycles are a
configuration error that is not detected.

This is a Protocol (structural typing) rather than ABC so that adapters
around other i18n systems can act as parents without inheriting anything.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from msgsource.localization.resolvable import Resolvable
    from msgsource.localization.types import LocaleLike, MessageArgs, MessageCode

__all__ = [
    "HierarchicalMessageSource",
    "MessageSource",
    "SupportsResolveOrDefault",
]


@runtime_checkable
class SupportsResolveOrDefault(Protocol):
    """Minimal capability required of a parent message source."""

    def resolve_or_default(
        self,
        code: MessageCode,
        args: MessageArgs | None = None,
        default_message: str | None = None,
        locale: LocaleLike | None = None,
    ) -> str | None:
        """Resolve code, else render default_message; None if both absent."""
        ...


@runtime_checkable
class MessageSource(SupportsResolveOrDefault, Protocol):
    """The three lookup contracts.

    Example:
        >>> def greet(source: MessageSource, name: str) -> str:
        ...     return source.resolve_or_throw("greeting", [name], "en_GB")
    """

    def resolve_or_throw(
        self,
        code: MessageCode,
        args: MessageArgs | None = None,
        locale: LocaleLike | None = None,
    ) -> str:
        """Resolve code or raise NoSuchMessageError."""
        ...

    def resolve_resolvable(self, resolvable: Resolvable, locale: LocaleLike | None = None) -> str:
        """Resolve the first resolvable code, else the resolvable's default.

        Raises:
            NoSuchMessageError: If nothing resolves and there is no default
        """
        ...


@runtime_checkable
class HierarchicalMessageSource(MessageSource, Protocol):
    """MessageSource that delegates unresolved codes to a parent."""

    @property
    def parent(self) -> SupportsResolveOrDefault | None:
        """Parent consulted after this source's own messages."""
        ...

    @parent.setter
    def parent(self, parent: SupportsResolveOrDefault | None) -> None: ...
