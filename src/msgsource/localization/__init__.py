"""Hierarchical message resolution.

Provides the message source protocols, the resource-bundle and in-memory
implementations, locale fallback and the Resolvable contract.

Submodules:
    types      - PEP 695 type aliases (MessageCode, Basename, MessageArgs, LocaleLike)
    source     - MessageSource / HierarchicalMessageSource protocols
    resolvable - Resolvable protocol and MessageResolvable
    fallback   - fallback_chain() and LocaleFallbackResolver
    resolver   - MessageResolver (shared lookup contracts)
    engine     - ResourceBundleMessageSource
    static     - StaticMessageSource
    accessor   - MessageSourceAccessor

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from msgsource.localization.accessor import MessageSourceAccessor
from msgsource.localization.engine import ResourceBundleMessageSource
from msgsource.localization.fallback import LocaleFallbackResolver, fallback_chain
from msgsource.localization.resolvable import MessageResolvable, Resolvable
from msgsource.localization.resolver import MessageLookup, MessageResolver
from msgsource.localization.source import (
    HierarchicalMessageSource,
    MessageSource,
    SupportsResolveOrDefault,
)
from msgsource.localization.static import StaticMessageSource
from msgsource.localization.types import Basename, LocaleLike, MessageArgs, MessageCode

__all__ = [
    # Message sources
    "ResourceBundleMessageSource",
    "StaticMessageSource",
    "MessageSourceAccessor",
    # Protocols
    "MessageSource",
    "HierarchicalMessageSource",
    "SupportsResolveOrDefault",
    "Resolvable",
    "MessageResolvable",
    # Building blocks
    "LocaleFallbackResolver",
    "fallback_chain",
    "MessageResolver",
    "MessageLookup",
    # Type aliases for user code type annotations
    "Basename",
    "LocaleLike",
    "MessageArgs",
    "MessageCode",
]
