"""Thread Safety Example - Sharing one message source across threads.

Demonstrates:
1. Concurrent resolution from a shared source (bundles load once)
2. TTL-checked caching picking up edited bundles while threads read

Thread Safety:
    ResourceBundleMessageSource is safe to share. Each (basename, locale)
    bundle is loaded by exactly one thread; other threads needing the same
    bundle wait for that load instead of parsing it again.

Python 3.13+.
"""

from __future__ import annotations

import os
import tempfile
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from msgsource import (
    CacheConfig,
    MessageSourceConfig,
    ResourceBundleMessageSource,
    ResourceLocator,
)


def example_1_shared_source(root: Path) -> None:
    """Example 1: Many threads, one source."""
    print("=" * 60)
    print("Example 1: Concurrent Resolution")
    print("=" * 60)

    source = ResourceBundleMessageSource(
        "messages",
        config=MessageSourceConfig(fallback_to_system_locale=False),
        locator=ResourceLocator(root),
    )
    requests = [("greeting", locale) for locale in ("en", "de", "fr", "en_US")] * 250

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(
            pool.map(lambda req: source.resolve_or_throw(req[0], ["Ada"], req[1]), requests)
        )

    print(f"Resolved {len(results)} messages, e.g. {sorted(set(results))}")
    stats = source.get_cache_stats()
    print(f"Bundles parsed: {stats['loads']}, cache hit rate: {stats['hit_rate']}%")


def example_2_ttl_refresh(root: Path) -> None:
    """Example 2: Edited bundles become visible after the TTL."""
    print("\n" + "=" * 60)
    print("Example 2: TTL-checked Cache")
    print("=" * 60)

    source = ResourceBundleMessageSource(
        "messages",
        config=MessageSourceConfig(
            fallback_to_system_locale=False,
            cache=CacheConfig.ttl(0.2, concurrent_refresh=True),
        ),
        locator=ResourceLocator(root),
    )
    print(source.resolve_or_throw("greeting", ["Ada"], "de"))

    path = root / "messages_de.properties"
    path.write_text("greeting=Servus {0}\n", encoding="utf-8")
    modified = time.time() + 5
    os.utime(path, (modified, modified))

    time.sleep(0.3)
    print(source.resolve_or_throw("greeting", ["Ada"], "de"))
    # Output: Servus Ada


if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        bundle_root = Path(tmp)
        (bundle_root / "messages.properties").write_text("greeting=Hi {0}\n", encoding="utf-8")
        (bundle_root / "messages_en.properties").write_text(
            "greeting=Hello {0}\n", encoding="utf-8"
        )
        (bundle_root / "messages_de.properties").write_text(
            "greeting=Hallo {0}\n", encoding="utf-8"
        )
        example_1_shared_source(bundle_root)
        example_2_ttl_refresh(bundle_root)
