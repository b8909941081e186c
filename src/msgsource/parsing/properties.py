"""Line-oriented key=value bundle parser (.properties format).

Format rules:
    - '#' or '!' as first non-blank character starts a comment line
    - Key ends at the first unescaped '=', ':' or whitespace; one separator
      and surrounding blanks are skipped before the value
    - A line ending in an odd number of backslashes continues on the next
      line (leading blanks of the continuation are dropped)
    - Escapes: \\t \\n \\r \\f \\uXXXX; any other escaped character stands for
      itself (so "\\=" and "\\:" put separators into keys)
    - Duplicate keys: the last definition wins

Decoding uses the configured encoding; a leading BOM is dropped. Invalid
bytes and malformed \\u escapes raise BundleParseError.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol

from msgsource.diagnostics import BundleParseError, ErrorTemplate

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

__all__ = [
    "BundleParser",
    "PropertiesParser",
    "decode_bundle",
    "parse_properties",
]

logger = logging.getLogger(__name__)

_BLANKS = " \t\f"
_SEPARATORS = "=:"
_COMMENT_MARKERS = "#!"
_SIMPLE_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_BOM = "\ufeff"


class BundleParser(Protocol):
    """Protocol for bundle-format parsers used by BundleCache.

    A parser turns one resource's bytes into an immutable code -> template
    mapping, raising BundleParseError for anything it cannot interpret.
    """

    def parse(self, data: bytes, encoding: str, source: str) -> Mapping[str, str]:
        """Decode and parse one bundle resource.

        Args:
            data: Raw resource bytes
            encoding: Character encoding to decode with
            source: Resource description for diagnostics

        Returns:
            Read-only mapping of message code to template

        Raises:
            BundleParseError: If data cannot be decoded or parsed
        """
        ...


def decode_bundle(data: bytes, encoding: str, source: str) -> str:
    """Decode bundle bytes, mapping codec failures to BundleParseError.

    Raises:
        BundleParseError: If data is invalid in encoding
        LookupError: If encoding is not a known codec
    """
    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as exc:
        raise BundleParseError(
            ErrorTemplate.bundle_decode_failed(source, encoding, str(exc)),
            source=source,
        ) from exc
    return text.removeprefix(_BOM)


def _logical_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield (first_line_number, logical_line) pairs, comments removed."""
    lines = _LINE_BREAK.split(text)
    index = 0
    while index < len(lines):
        start = index + 1
        line = lines[index].lstrip(_BLANKS)
        index += 1
        if not line or line[0] in _COMMENT_MARKERS:
            continue
        parts: list[str] = []
        while _continues(line):
            parts.append(line[:-1])
            if index >= len(lines):
                line = ""
                break
            line = lines[index].lstrip(_BLANKS)
            index += 1
        parts.append(line)
        yield start, "".join(parts)


def _continues(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _split_entry(line: str) -> tuple[str, str]:
    """Split a logical line into raw (still escaped) key and value."""
    position = 0
    length = len(line)
    while position < length:
        char = line[position]
        if char == "\\":
            position += 2
            continue
        if char in _SEPARATORS or char in _BLANKS:
            break
        position += 1
    key = line[: min(position, length)]

    position = min(position, length)
    while position < length and line[position] in _BLANKS:
        position += 1
    if position < length and line[position] in _SEPARATORS:
        position += 1
        while position < length and line[position] in _BLANKS:
            position += 1
    return key, line[position:]


def _unescape(raw: str, source: str, line_number: int) -> str:
    if "\\" not in raw:
        return raw
    out: list[str] = []
    position = 0
    length = len(raw)
    while position < length:
        char = raw[position]
        position += 1
        if char != "\\":
            out.append(char)
            continue
        if position >= length:
            # Lone trailing backslash of the final line
            break
        escaped = raw[position]
        position += 1
        if escaped == "u":
            digits = raw[position : position + 4]
            if len(digits) != 4 or any(c not in "0123456789abcdefABCDEF" for c in digits):
                raise BundleParseError(
                    ErrorTemplate.bundle_syntax_error(
                        source,
                        line_number,
                        f"malformed \\uXXXX escape near {raw[position - 2 :][:6]!r}",
                    ),
                    source=source,
                    line=line_number,
                )
            out.append(chr(int(digits, 16)))
            position += 4
        else:
            out.append(_SIMPLE_ESCAPES.get(escaped, escaped))
    return "".join(out)


def parse_properties(text: str, source: str = "<string>") -> dict[str, str]:
    """Parse .properties text into a code -> template dict.

    Example:
        >>> parse_properties("greeting = Hello {0}\\n# note\\nempty=")
        {'greeting': 'Hello {0}', 'empty': ''}

    Raises:
        BundleParseError: On a malformed \\uXXXX escape
    """
    entries: dict[str, str] = {}
    for line_number, line in _logical_lines(text):
        raw_key, raw_value = _split_entry(line)
        key = _unescape(raw_key, source, line_number)
        if key in entries:
            logger.debug(
                "Duplicate key %r in %s (line %d); last definition wins", key, source, line_number
            )
        entries[key] = _unescape(raw_value, source, line_number)
    return entries


class PropertiesParser:
    """BundleParser for the .properties format."""

    __slots__ = ()

    def parse(self, data: bytes, encoding: str, source: str) -> Mapping[str, str]:
        """Decode and parse; returns a read-only view of a private dict."""
        return MappingProxyType(parse_properties(decode_bundle(data, encoding, source), source))

    def __repr__(self) -> str:
        return "PropertiesParser()"
