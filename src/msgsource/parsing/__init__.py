"""Bundle-format parsing.

Public API:
    BundleParser - Protocol for bundle-format parsers
    PropertiesParser - Parser for line-oriented key=value (.properties) files
    parse_properties - Parse .properties text into a dict
    decode_bundle - Decode bundle bytes, reporting failures as BundleParseError

Python 3.13+. Zero external dependencies.
"""

from .properties import BundleParser, PropertiesParser, decode_bundle, parse_properties

__all__ = [
    "BundleParser",
    "PropertiesParser",
    "decode_bundle",
    "parse_properties",
]
