"""msgsource - hierarchical, locale-aware message resolution.

Resolves message codes to localized text from ordered families of bundle
resources (``messages.properties``, ``messages_en_GB.properties``, ...),
walking locale fallback, basename precedence and parent sources, with a
thread-safe bundle cache that notices changed resources.

Public API:
    ResourceBundleMessageSource - Message source over bundle resources
    StaticMessageSource - In-memory message source
    MessageSourceAccessor - Wrapper fixing a default locale
    MessageResolvable - Codes + arguments + default message
    MessageSourceConfig - Validated configuration snapshot
    CacheConfig - Bundle freshness policy
    ResourceLocator - Location string to resource handle resolution
    ClassPath - Package and directory roots for "classpath:" locations
    Locale - Parsed locale identifier

Exceptions:
    MessageSourceError - Base exception class
    NoSuchMessageError - Code unresolved and no default supplied
    ConfigurationError - Invalid construction-time settings
    BundleParseError - Bundle resource cannot be decoded or parsed
    ResourceAccessError - Resource exists but cannot be read

Submodules:
    msgsource.localization - Message sources, fallback and protocols
    msgsource.resources - Resource handles, locator and classpath
    msgsource.runtime - Bundle cache, formatting, LocaleContext
    msgsource.parsing - .properties bundle parser
    msgsource.diagnostics - Error types and structured diagnostics
"""

# Essential Public API - Minimal exports for clean namespace
from .config import MessageSourceConfig
from .diagnostics import (
    BundleParseError,
    ConfigurationError,
    MessageSourceError,
    NoSuchMessageError,
    ResourceAccessError,
)
from .locale_utils import Locale
from .localization import (
    MessageResolvable,
    MessageSource,
    MessageSourceAccessor,
    ResourceBundleMessageSource,
    StaticMessageSource,
)
from .resources import ClassPath, ResourceLocator
from .runtime import CacheConfig

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("msgsource")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "BundleParseError",
    "CacheConfig",
    "ClassPath",
    "ConfigurationError",
    "Locale",
    "MessageResolvable",
    "MessageSource",
    "MessageSourceAccessor",
    "MessageSourceConfig",
    "MessageSourceError",
    "NoSuchMessageError",
    "ResourceAccessError",
    "ResourceBundleMessageSource",
    "ResourceLocator",
    "StaticMessageSource",
    "__version__",
]
