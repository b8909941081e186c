"""msgsource exception hierarchy with structured diagnostics.

All exceptions optionally store a Diagnostic object for rich error
information. Lookup failures (NoSuchMessageError) are deliberately disjoint
from configuration failures (ConfigurationError) so callers can tell
"message absent" apart from "misconfigured".

Hierarchy:
    MessageSourceError
    ├─ NoSuchMessageError
    ├─ MalformedLocationError (also ValueError)
    ├─ ResourceNotFoundError (also FileNotFoundError)
    ├─ ResourceAccessError (also OSError)
    ├─ BundleParseError
    ├─ ArgumentFormattingError
    └─ ConfigurationError (also ValueError)

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic

__all__ = [
    "ArgumentFormattingError",
    "BundleParseError",
    "ConfigurationError",
    "MalformedLocationError",
    "MessageSourceError",
    "NoSuchMessageError",
    "ResourceAccessError",
    "ResourceNotFoundError",
]


class MessageSourceError(Exception):
    """Base exception for all msgsource errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize MessageSourceError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.message)
        else:
            self.diagnostic = None
            super().__init__(message)


class NoSuchMessageError(MessageSourceError):
    """Message code unresolved and no default supplied.

    Raised after every basename, every fallback locale, the common messages
    and the parent chain have been exhausted. Recoverable by the caller.

    Attributes:
        code: The code (or first candidate code) that failed to resolve
        locale: Locale tag of the failed lookup
    """

    def __init__(self, message: str | Diagnostic, *, code: str, locale: str) -> None:
        super().__init__(message)
        self.code = code
        self.locale = locale


class MalformedLocationError(MessageSourceError, ValueError):
    """Location string is structurally invalid for every strategy."""

    def __init__(self, message: str | Diagnostic, *, location: str) -> None:
        super().__init__(message)
        self.location = location


class ResourceNotFoundError(MessageSourceError, FileNotFoundError):
    """A resource handle was opened but nothing exists behind it."""


class ResourceAccessError(MessageSourceError, OSError):
    """Resource exists but cannot be read (access denied or I/O failure).

    Always propagated to the caller of the resolve operation; never
    downgraded to "message absent".
    """


class BundleParseError(MessageSourceError):
    """Backing resource exists but cannot be decoded or parsed.

    Attributes:
        source: Description of the offending resource
        line: 1-based line number, when known
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        source: str = "",
        line: int | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.line = line


class ArgumentFormattingError(MessageSourceError):
    """Typed placeholder could not be formatted for the locale."""


class ConfigurationError(MessageSourceError, ValueError):
    """Invalid construction-time configuration.

    Raised from constructors and setters, never from resolve calls.
    """
