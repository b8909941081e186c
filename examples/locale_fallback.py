"""Locale fallback example for msgsource.

Shows the candidate locale chain, the effect of a default locale and the
precedence of basenames over locale specificity.

Python 3.13+.
"""

import tempfile
from pathlib import Path

from msgsource import MessageSourceConfig, ResourceBundleMessageSource, ResourceLocator
from msgsource.locale_utils import Locale
from msgsource.localization import fallback_chain

# Example 1: Candidate chains
print("=" * 60)
print("Example 1: Fallback Chains")
print("=" * 60)

for requested, fallback in [("en_GB", None), ("en_GB", "de_DE"), ("sr_Latn_RS", "en")]:
    chain = fallback_chain(
        Locale.parse(requested), Locale.parse(fallback) if fallback else None
    )
    print(f"{requested:<12} fallback={fallback!s:<6} -> {[str(loc) for loc in chain]}")
# Output:
# en_GB        fallback=None   -> ['en_GB', 'en', 'root']
# en_GB        fallback=de_DE  -> ['en_GB', 'en', 'de_DE', 'de', 'root']
# sr_Latn_RS   fallback=en     -> ['sr_Latn_RS', 'sr_Latn', 'sr', 'en', 'root']

with tempfile.TemporaryDirectory() as tmp:
    root = Path(tmp)
    (root / "app.properties").write_text("title=Application\n", encoding="utf-8")
    (root / "app_de.properties").write_text("title=Anwendung\n", encoding="utf-8")
    (root / "labels.properties").write_text("title=Labels\nsave=Save\n", encoding="utf-8")
    (root / "labels_fr.properties").write_text(
        "title=Étiquettes\nsave=Enregistrer\n", encoding="utf-8"
    )

    # Example 2: Default locale
    print("\n" + "=" * 60)
    print("Example 2: Default Locale")
    print("=" * 60)

    source = ResourceBundleMessageSource(
        "app",
        "labels",
        config=MessageSourceConfig(default_locale="de", fallback_to_system_locale=False),
        locator=ResourceLocator(root),
    )
    print(source.resolve_or_throw("title"))
    # Output: Anwendung (locale=None runs in the default locale)
    print(source.resolve_or_throw("title", locale="it"))
    # Output: Anwendung (it -> de -> root)

    # Example 3: Basename order beats locale specificity
    print("\n" + "=" * 60)
    print("Example 3: Basename Precedence")
    print("=" * 60)

    print(source.resolve_or_throw("title", locale="fr"))
    # Output: Application (root entry of "app" shadows labels_fr)
    print(source.resolve_or_throw("save", locale="fr"))
    # Output: Enregistrer
