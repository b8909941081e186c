"""Resource location abstraction.

Turns symbolic location strings (classpath paths, absolute paths, URLs,
custom schemes) into ResourceHandle objects, independent of where the
bytes live.

Python 3.13+.
"""

from .classpath import ClassPath
from .handles import (
    ArchiveEntryResource,
    ClassPathResource,
    FileResource,
    InMemoryResource,
    ResourceHandle,
    UrlResource,
)
from .locator import ProtocolResolver, ResourceLocator, SchemeResolver
from .paths import apply_relative_path, clean_path

__all__ = [
    "ArchiveEntryResource",
    "ClassPath",
    "ClassPathResource",
    "FileResource",
    "InMemoryResource",
    "ProtocolResolver",
    "ResourceHandle",
    "ResourceLocator",
    "SchemeResolver",
    "UrlResource",
    "apply_relative_path",
    "clean_path",
]
