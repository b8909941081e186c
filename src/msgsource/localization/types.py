"""Type aliases for the localization domain.

Provides semantic type aliases used throughout the localization package
and by user code when annotating message source call sites.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Sequence

from msgsource.locale_utils import Locale

__all__ = [
    "Basename",
    "LocaleLike",
    "MessageArgs",
    "MessageCode",
]

type MessageCode = str
"""Identifier for a message (e.g., 'user.name', 'error.not-found')."""

type Basename = str
"""Logical name of a bundle family (e.g., 'messages', 'classpath:i18n/errors')."""

type MessageArgs = Sequence[object]
"""Positional arguments substituted into {0}, {1}, ... placeholders."""

type LocaleLike = Locale | str
"""A Locale or a locale code such as 'en_GB' / 'en-GB'."""
