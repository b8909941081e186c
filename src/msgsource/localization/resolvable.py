"""Resolvable: "try these codes in order, else this default".

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from msgsource.localization.types import MessageArgs, MessageCode

__all__ = ["MessageResolvable", "Resolvable"]


@runtime_checkable
class Resolvable(Protocol):
    """Anything carrying candidate codes, arguments and a default message.

    Validation errors in form handling are a typical implementation: the
    codes run from most to least specific.
    """

    @property
    def codes(self) -> tuple[MessageCode, ...]:
        """Candidate codes, first resolvable one wins."""
        ...

    @property
    def arguments(self) -> MessageArgs:
        """Arguments for whichever code resolves (and the default)."""
        ...

    @property
    def default_message(self) -> str | None:
        """Message used when no code resolves (None = no default)."""
        ...


@dataclass(frozen=True, slots=True, init=False)
class MessageResolvable:
    """Default Resolvable implementation.

    Arguments may themselves be Resolvables; they are resolved in the same
    locale before substitution.

    Example:
        >>> error = MessageResolvable(
        ...     ["typeMismatch.user.age", "typeMismatch"],
        ...     arguments=["age"],
        ...     default_message="Invalid value for {0}",
        ... )
        >>> error.codes
        ('typeMismatch.user.age', 'typeMismatch')
    """

    codes: tuple[MessageCode, ...]
    arguments: tuple[object, ...]
    default_message: str | None

    def __init__(
        self,
        codes: MessageCode | Iterable[MessageCode],
        arguments: Iterable[object] | None = None,
        default_message: str | None = None,
    ) -> None:
        code_tuple = (codes,) if isinstance(codes, str) else tuple(codes)
        for code in code_tuple:
            if not isinstance(code, str) or not code:
                msg = f"Resolvable codes must be non-empty strings, got {code!r}"
                raise ValueError(msg)
        object.__setattr__(self, "codes", code_tuple)
        object.__setattr__(self, "arguments", tuple(arguments) if arguments is not None else ())
        object.__setattr__(self, "default_message", default_message)

    @property
    def code(self) -> MessageCode | None:
        """Last (least specific) code, or None without codes."""
        return self.codes[-1] if self.codes else None

    def __str__(self) -> str:
        return (
            f"codes [{','.join(self.codes)}]; arguments [{', '.join(map(str, self.arguments))}]; "
            f"default message [{self.default_message}]"
        )
