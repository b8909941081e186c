"""Runtime: bundle caching and message formatting.

Public API:
    BundleCache - Thread-safe (basename, locale) -> Bundle cache
    CacheConfig - Freshness policy (permanent or TTL-checked)
    MessageFormatter - Positional {0}/{1,number} template rendering
    LocaleContext - Babel-backed locale-aware value formatting

Python 3.13+.
"""

from .bundle_cache import Bundle, BundleCache, BundleEntry, bundle_name
from .cache_config import CacheConfig
from .formatter import MessageFormatter, Placeholder, compile_template
from .locale_context import LocaleContext

__all__ = [
    "Bundle",
    "BundleCache",
    "BundleEntry",
    "CacheConfig",
    "LocaleContext",
    "MessageFormatter",
    "Placeholder",
    "bundle_name",
    "compile_template",
]
