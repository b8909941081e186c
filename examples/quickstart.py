"""Quickstart example for msgsource.

Writes a small .properties bundle tree to a temporary directory and
resolves messages from it with ResourceBundleMessageSource.

Python 3.13+.
"""

import tempfile
from pathlib import Path

from msgsource import (
    MessageResolvable,
    MessageSourceAccessor,
    MessageSourceConfig,
    NoSuchMessageError,
    ResourceBundleMessageSource,
    ResourceLocator,
    StaticMessageSource,
)

BUNDLES = {
    "messages.properties": "user.name=username\nwelcome=Welcome {0} to {1}\n",
    "messages_en_US.properties": "user.name=username-us\n",
    "messages_zh_CN.properties": "user.name=用户名\nwelcome=欢迎 {0} 来到 {1}\n",
    "errors.properties": "required={0} is required\ntotal=Total: {0,number,#,##0.00}\n",
}

with tempfile.TemporaryDirectory() as tmp:
    root = Path(tmp)
    for name, content in BUNDLES.items():
        (root / name).write_text(content, encoding="utf-8")

    source = ResourceBundleMessageSource(
        "messages",
        "errors",
        config=MessageSourceConfig(fallback_to_system_locale=False),
        locator=ResourceLocator(root),
    )

    # Example 1: Simple lookups
    print("=" * 50)
    print("Example 1: Simple Lookups")
    print("=" * 50)

    print(source.resolve_or_throw("user.name", locale="en_US"))
    # Output: username-us
    print(source.resolve_or_throw("user.name", locale="zh_CN"))
    # Output: 用户名
    print(source.resolve_or_throw("user.name", locale="fr"))
    # Output: username (root bundle)

    # Example 2: Arguments
    print("\n" + "=" * 50)
    print("Example 2: Positional Arguments")
    print("=" * 50)

    print(source.resolve_or_throw("welcome", ["Ryan", "EasyI18n"], "zh_CN"))
    # Output: 欢迎 Ryan 来到 EasyI18n
    print(source.resolve_or_throw("total", [1234.5], "en_US"))
    # Output: Total: 1,234.50

    # Example 3: Defaults and missing codes
    print("\n" + "=" * 50)
    print("Example 3: Defaults and Missing Codes")
    print("=" * 50)

    print(source.resolve_or_default("notExist", ["x"], "Default for {0}", "en_US"))
    # Output: Default for x
    try:
        source.resolve_or_throw("notExist", locale="en_US")
    except NoSuchMessageError as e:
        print(f"NoSuchMessageError: {e}")

    # Example 4: Resolvables (e.g. validation errors)
    print("\n" + "=" * 50)
    print("Example 4: Resolvables")
    print("=" * 50)

    error = MessageResolvable(
        ["required.user.email", "required"],
        arguments=[MessageResolvable("user.name")],
    )
    print(source.resolve_resolvable(error, "zh_CN"))
    # Output: 用户名 is required

    # Example 5: Parent sources and the accessor
    print("\n" + "=" * 50)
    print("Example 5: Parent Source and Accessor")
    print("=" * 50)

    framework = StaticMessageSource()
    framework.add_message("app.title", None, "msgsource demo")
    source.parent = framework

    messages = MessageSourceAccessor(source, "en_US")
    print(messages.get("app.title"))
    # Output: msgsource demo
    print(messages.get("user.name"))
    # Output: username-us
    print(source.get_cache_stats())
