"""Shared constants for msgsource.

Centralized configuration constants used across the resources, runtime and
localization packages. Placing constants here avoids circular imports and
provides a single source of truth.

Constants are grouped by domain:
- Location prefixes: Symbolic location schemes understood by ResourceLocator
- Bundle naming: Resource naming convention for basename/locale pairs
- Cache limits: Memory bounds for caching subsystems

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Location prefixes
    "CLASSPATH_URL_PREFIX",
    "FOLDER_SEPARATOR",
    "ARCHIVE_URL_SEPARATOR",
    "URL_PROTOCOL_FILE",
    "ARCHIVE_PROTOCOLS",
    "NETWORK_PROTOCOLS",
    # Bundle naming
    "LOCALE_SEPARATOR",
    "DEFAULT_FILE_EXTENSIONS",
    "DEFAULT_ENCODING",
    # Cache limits
    "MAX_LOCALE_CACHE_SIZE",
    "MAX_TEMPLATE_CACHE_SIZE",
    "DEFAULT_HTTP_TIMEOUT",
]

# ============================================================================
# LOCATION PREFIXES
# ============================================================================

# Pseudo URL prefix for loading from the embedding application's classpath.
CLASSPATH_URL_PREFIX: str = "classpath:"

FOLDER_SEPARATOR: str = "/"

# Separator between the archive location and the entry path,
# e.g. "jar:file:/opt/app/i18n.zip!/messages.properties".
ARCHIVE_URL_SEPARATOR: str = "!/"

URL_PROTOCOL_FILE: str = "file"

# Schemes whose resources live inside a zip archive.
ARCHIVE_PROTOCOLS: frozenset[str] = frozenset({"jar", "zip", "war", "wsjar"})

# Schemes served over the network (stream-backed handles).
NETWORK_PROTOCOLS: frozenset[str] = frozenset({"http", "https"})

# ============================================================================
# BUNDLE NAMING
# ============================================================================

# basename + "_" + "en_GB" + extension, e.g. "messages_en_GB.properties".
LOCALE_SEPARATOR: str = "_"

DEFAULT_FILE_EXTENSIONS: tuple[str, ...] = (".properties",)

DEFAULT_ENCODING: str = "utf-8"

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum cached LocaleContext instances.
# 128 covers typical multi-region applications (major locales + variants).
MAX_LOCALE_CACHE_SIZE: int = 128

# Maximum compiled message templates kept per process.
MAX_TEMPLATE_CACHE_SIZE: int = 2048

# Seconds before a network-backed resource read gives up.
DEFAULT_HTTP_TIMEOUT: float = 10.0
