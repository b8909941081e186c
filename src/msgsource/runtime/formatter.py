"""Positional message formatting ({0}, {1,number}, {2,date,short}).

Templates are compiled once into a tuple of literal strings and Placeholder
parts (LRU-cached per template string) and rendered against an argument
sequence.

Quoting follows MessageFormat conventions: ``''`` is a literal single
quote and text between single quotes is literal (``'{0}'`` renders as
``{0}``). Quoting only applies when a template is actually formatted,
i.e. when arguments are given or always_use_message_format is set;
otherwise the template is returned verbatim.

Placeholder syntax: ``{index}``, ``{index,type}``, ``{index,type,style}``
with type one of number/date/time/datetime. A placeholder whose index has
no argument renders verbatim as ``{index}``.

Python 3.13+.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import TYPE_CHECKING

from msgsource.constants import MAX_TEMPLATE_CACHE_SIZE
from msgsource.diagnostics import ArgumentFormattingError, ErrorTemplate
from msgsource.enums import ArgumentType
from msgsource.runtime.locale_context import LocaleContext

if TYPE_CHECKING:
    from collections.abc import Sequence

    from msgsource.locale_utils import Locale

__all__ = [
    "CompiledTemplate",
    "MessageFormatter",
    "Placeholder",
    "compile_template",
]

_QUOTE = "'"


@dataclass(frozen=True, slots=True)
class Placeholder:
    """One ``{index[,type[,style]]}`` argument slot.

    Attributes:
        index: Zero-based argument position
        format_type: Typed formatting, or None for the natural string form
        style: Style name or CLDR pattern, None for the type's default
    """

    index: int
    format_type: ArgumentType | None = None
    style: str | None = None

    def __str__(self) -> str:
        return f"{{{self.index}}}"


type TemplatePart = str | Placeholder
type CompiledTemplate = tuple[TemplatePart, ...]


def _parse_placeholder(template: str, body: str) -> Placeholder:
    index_text, _, rest = body.partition(",")
    index_text = index_text.strip()
    if not index_text.isdecimal() or not index_text.isascii():
        raise ArgumentFormattingError(
            ErrorTemplate.placeholder_invalid(
                template, f"argument index {index_text!r} is not a number"
            )
        )
    index = int(index_text)
    if not rest:
        return Placeholder(index)

    type_text, _, style = rest.partition(",")
    try:
        format_type = ArgumentType(type_text.strip().lower())
    except ValueError:
        raise ArgumentFormattingError(
            ErrorTemplate.placeholder_invalid(
                template, f"unknown format type {type_text.strip()!r}"
            )
        ) from None
    style = style.strip()
    return Placeholder(index, format_type, style or None)


@functools.lru_cache(maxsize=MAX_TEMPLATE_CACHE_SIZE)
def compile_template(template: str) -> CompiledTemplate:
    """Compile a template into literal and Placeholder parts.

    Thread-safe via lru_cache internal locking.

    Example:
        >>> compile_template("It''s {0}, '{1}' is literal")
        ("It's ", Placeholder(index=0, format_type=None, style=None), ', {1} is literal')

    Raises:
        ArgumentFormattingError: On an unterminated or malformed placeholder
    """
    parts: list[TemplatePart] = []
    literal: list[str] = []
    position = 0
    length = len(template)
    in_quote = False

    while position < length:
        char = template[position]
        if char == _QUOTE:
            if position + 1 < length and template[position + 1] == _QUOTE:
                literal.append(_QUOTE)
                position += 2
                continue
            in_quote = not in_quote
            position += 1
            continue
        if in_quote or char != "{":
            literal.append(char)
            position += 1
            continue

        # Placeholder: find the matching brace, honouring nested braces in styles
        depth = 1
        end = position + 1
        while end < length and depth:
            if template[end] == "{":
                depth += 1
            elif template[end] == "}":
                depth -= 1
            end += 1
        if depth:
            raise ArgumentFormattingError(
                ErrorTemplate.placeholder_invalid(template, "unmatched '{'")
            )
        if literal:
            parts.append("".join(literal))
            literal.clear()
        parts.append(_parse_placeholder(template, template[position + 1 : end - 1]))
        position = end

    if literal:
        parts.append("".join(literal))
    return tuple(parts)


class MessageFormatter:
    """Renders templates against positional arguments for a locale.

    Args:
        always_use_message_format: Apply quoting rules even without arguments
        locale_aware_arguments: Format numbers/dates in plain ``{n}``
            placeholders with Babel instead of str()

    Thread Safety:
        Stateless apart from the shared compiled-template cache.
    """

    __slots__ = ("_always_use_message_format", "_locale_aware_arguments")

    def __init__(
        self,
        *,
        always_use_message_format: bool = False,
        locale_aware_arguments: bool = False,
    ) -> None:
        self._always_use_message_format = always_use_message_format
        self._locale_aware_arguments = locale_aware_arguments

    @property
    def always_use_message_format(self) -> bool:
        """True when templates are parsed even without arguments."""
        return self._always_use_message_format

    @property
    def locale_aware_arguments(self) -> bool:
        """True when plain placeholders use locale-aware formatting."""
        return self._locale_aware_arguments

    def format(self, template: str, args: Sequence[object] | None, locale: Locale) -> str:
        """Substitute args into template using locale for typed values.

        Example:
            >>> MessageFormatter().format("Welcome {0} to {1}", ["Ada", "Paris"], ROOT)
            'Welcome Ada to Paris'

        Raises:
            ArgumentFormattingError: On malformed placeholders or values a
                typed placeholder cannot format
        """
        if not args and not self._always_use_message_format:
            return template

        values: Sequence[object] = args or ()
        context: LocaleContext | None = None
        out: list[str] = []
        for part in compile_template(template):
            if isinstance(part, str):
                out.append(part)
                continue
            if part.index >= len(values):
                out.append(str(part))
                continue
            value = values[part.index]
            if part.format_type is not None:
                context = context or LocaleContext.create(locale)
                out.append(context.format_typed(part.index, value, part.format_type, part.style))
            elif self._locale_aware_arguments:
                context = context or LocaleContext.create(locale)
                out.append(context.format_natural(value))
            else:
                out.append(str(value))
        return "".join(out)

    def __repr__(self) -> str:
        return (
            f"MessageFormatter(always_use_message_format={self._always_use_message_format}, "
            f"locale_aware_arguments={self._locale_aware_arguments})"
        )
