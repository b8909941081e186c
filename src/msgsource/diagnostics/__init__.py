"""Diagnostic system for msgsource errors.

Provides structured error diagnostics with codes, hints and resource
locations, and the exception hierarchy that carries them.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import (
    ArgumentFormattingError,
    BundleParseError,
    ConfigurationError,
    MalformedLocationError,
    MessageSourceError,
    NoSuchMessageError,
    ResourceAccessError,
    ResourceNotFoundError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "ArgumentFormattingError",
    "BundleParseError",
    "ConfigurationError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "MalformedLocationError",
    "MessageSourceError",
    "NoSuchMessageError",
    "OutputFormat",
    "ResourceAccessError",
    "ResourceNotFoundError",
]
