"""Pytest configuration for the msgsource test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 500 examples (thorough property testing)
- ci: GitHub Actions with 50 examples (fast CI feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- CI=true environment variable -> "ci" profile (GitHub Actions sets this)
- HYPOTHESIS_PROFILE env var -> explicit override
- Otherwise -> "dev" profile (local development)

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/

Shared fixtures write .properties bundle trees under tmp_path and build
message sources over them.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from msgsource.runtime import LocaleContext
from msgsource.runtime.formatter import compile_template

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

# Development profile: thorough local testing (500 examples, silent)
settings.register_profile(
    "dev",
    max_examples=500,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
)

# CI profile: fast feedback for GitHub Actions (50 examples)
settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
)

# Verbose profile: debug mode with progress visibility (100 examples)
settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
)


def _detect_profile() -> str:
    """Detect appropriate Hypothesis profile based on execution context.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var (GitHub Actions auto-detection)
    3. Default to "dev" (local development)
    """
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit
    if os.environ.get("CI") == "true":
        return "ci"
    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# FUZZING TEST SEPARATION
# =============================================================================


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip fuzz-marked tests unless explicitly requested with -m fuzz."""
    if "fuzz" in str(config.getoption("-m", default="")):
        return
    skip_fuzz = pytest.mark.skip(reason="Fuzzing test - run with: pytest -m fuzz")
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip_fuzz)


# =============================================================================
# SHARED FIXTURES
# =============================================================================

type BundleWriter = Callable[[str, str], Path]


@pytest.fixture(autouse=True)
def _isolate_process_caches() -> None:
    """Start every test with empty process-wide formatting caches."""
    LocaleContext.clear_cache()
    compile_template.cache_clear()


@pytest.fixture
def write_bundle(tmp_path: Path) -> BundleWriter:
    """Write a UTF-8 bundle file below tmp_path and return its path.

    Usage: write_bundle("messages_en.properties", "greeting=Hello")
    """

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def bundle_tree(write_bundle: BundleWriter, tmp_path: Path) -> Path:
    """Bundle tree with the "message" and "another" basenames.

    message:   root, en_US, zh_CN
    another:   root, en, zh_CN
    messages:  en, de (separate family used by the accessor tests)
    """
    write_bundle(
        "message.properties",
        "user.name=username\n"
        "welcome=Welcome {0} to {1}, {2}\n"
        "only.root=root value\n",
    )
    write_bundle(
        "message_en_US.properties",
        "user.name=username-us\n"
        "welcome=Welcome {0} to {1}, {2}\n",
    )
    write_bundle(
        "message_zh_CN.properties",
        "user.name=用户名\n"
        "welcome=欢迎 {0} 来到 {1}, {2}\n",
    )
    write_bundle("another.properties", "hotel.name=hotel name\n")
    write_bundle("another_en.properties", "hotel.name=hotel name[us]\n")
    write_bundle("another_zh_CN.properties", "hotel.name=酒店名称\n")
    write_bundle("messages_en.properties", "code1=message1\n")
    write_bundle("messages_de.properties", "code2=nachricht2\n")
    return tmp_path
