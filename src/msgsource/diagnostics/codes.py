"""Diagnostic codes and data structures.

Defines error codes and structured diagnostic messages shared by every
msgsource exception.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Lookup errors (unresolved message codes)
        2000-2999: Resource errors (location, access, I/O)
        3000-3999: Bundle errors (decoding, parsing)
        4000-4999: Formatting errors (argument substitution)
        5000-5999: Configuration errors
    """

    # Lookup errors (1000-1999)
    MESSAGE_NOT_FOUND = 1001
    RESOLVABLE_NOT_FOUND = 1002

    # Resource errors (2000-2999)
    MALFORMED_LOCATION = 2001
    RESOURCE_NOT_FOUND = 2002
    RESOURCE_ACCESS_DENIED = 2003
    RESOURCE_IO_FAILURE = 2004
    RELATIVE_RESOURCE_UNSUPPORTED = 2005

    # Bundle errors (3000-3999)
    BUNDLE_DECODE_FAILED = 3001
    BUNDLE_SYNTAX_ERROR = 3002

    # Formatting errors (4000-4999)
    ARGUMENT_FORMAT_INVALID = 4001
    PLACEHOLDER_INVALID = 4002

    # Configuration errors (5000-5999)
    CONFIG_INVALID = 5001


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Carries enough context for both
    log lines and programmatic inspection.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        location: Resource description or location string involved
        line: 1-based line number inside the resource (bundle errors)
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    location: str | None = None
    line: int | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Example output:
            error[MESSAGE_NOT_FOUND]: No message found under code 'greeting' for locale 'en_GB'
              = help: Define the code in one of the configured basenames

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
