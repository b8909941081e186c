"""Enumerations for msgsource type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class CacheMode(StrEnum):
    """Freshness policy for cached bundles.

    StrEnum provides automatic string conversion: str(CacheMode.PERMANENT) == "permanent"
    """

    PERMANENT = "permanent"
    """Never re-check a cached bundle (packaged or immutable resources)."""

    TTL_CHECKED = "ttl_checked"
    """Re-check the backing resource once the entry is older than the TTL."""


class ArgumentType(StrEnum):
    """Format type of a typed placeholder such as ``{0,number}``.

    StrEnum provides automatic string conversion: str(ArgumentType.NUMBER) == "number"
    """

    NUMBER = "number"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"


class LoadStatus(StrEnum):
    """Outcome of a bundle load attempt.

    StrEnum provides automatic string conversion: str(LoadStatus.LOADED) == "loaded"
    """

    LOADED = "loaded"
    """Resource found and parsed."""

    NOT_FOUND = "not_found"
    """No resource exists for this basename/locale pair (negative entry)."""

    REFRESHED = "refreshed"
    """Resource changed since the last load and was parsed again."""


__all__ = [
    "ArgumentType",
    "CacheMode",
    "LoadStatus",
]
