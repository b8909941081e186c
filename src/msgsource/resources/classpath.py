"""Classpath-equivalent resource lookup.

A ClassPath is an ordered list of resource roots supplied by the embedding
application: importable packages (via importlib.resources, so zip-imported
and frozen packages work) and plain directories. "classpath:" locations and
root-relative basenames are looked up root by root; the first root holding
the file wins.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import threading
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING

from msgsource.constants import FOLDER_SEPARATOR
from msgsource.diagnostics import ErrorTemplate, ResourceAccessError
from msgsource.resources.paths import clean_path, strip_leading_separator

if TYPE_CHECKING:
    from collections.abc import Iterable
    from importlib.resources.abc import Traversable
    from os import PathLike

__all__ = ["ClassPath", "normalize_classpath_path"]


def normalize_classpath_path(path: str) -> str | None:
    """Clean a classpath path and make it root-relative.

    Returns None when the cleaned path escapes the roots via '..'.

    Example:
        >>> normalize_classpath_path("/i18n/./messages.properties")
        'i18n/messages.properties'
        >>> normalize_classpath_path("../secret.properties") is None
        True
    """
    cleaned = strip_leading_separator(clean_path(path))
    if cleaned == ".." or cleaned.startswith(f"..{FOLDER_SEPARATOR}"):
        return None
    return cleaned


class ClassPath:
    """Ordered, thread-safe collection of resource roots.

    Example:
        >>> cp = ClassPath.from_packages("myapp.i18n")
        >>> cp.add_directory("/etc/myapp/messages")
        >>> cp.find("messages_en.properties")  # first root holding it
    """

    __slots__ = ("_lock", "_roots")

    def __init__(self, roots: Iterable[Traversable | str | PathLike[str]] = ()) -> None:
        self._lock = threading.Lock()
        self._roots: tuple[Traversable, ...] = tuple(_as_traversable(root) for root in roots)

    @classmethod
    def from_packages(cls, *packages: str) -> ClassPath:
        """Build a ClassPath whose roots are the given importable packages.

        Raises:
            ModuleNotFoundError: If a package cannot be imported
        """
        return cls(resources.files(package) for package in packages)

    @property
    def roots(self) -> tuple[Traversable, ...]:
        """Snapshot of the configured roots in search order."""
        return self._roots

    def add_package(self, package: str) -> None:
        """Append an importable package as the lowest-precedence root."""
        root = resources.files(package)
        with self._lock:
            self._roots = (*self._roots, root)

    def add_directory(self, directory: str | PathLike[str]) -> None:
        """Append a filesystem directory as the lowest-precedence root."""
        root = Path(directory)
        with self._lock:
            self._roots = (*self._roots, root)

    def find(self, path: str) -> Traversable | None:
        """Return the first file matching path across all roots, or None.

        Raises:
            ResourceAccessError: If a root cannot be searched (e.g. permission
                denied on a parent directory)
        """
        normalized = normalize_classpath_path(path)
        if not normalized:
            return None
        segments = normalized.split(FOLDER_SEPARATOR)
        for root in self._roots:
            candidate = root.joinpath(*segments)
            try:
                if candidate.is_file():
                    return candidate
            except (FileNotFoundError, NotADirectoryError):
                continue
            except PermissionError as exc:
                raise ResourceAccessError(
                    ErrorTemplate.resource_access_denied(_describe(root, normalized), str(exc))
                ) from exc
            except OSError as exc:
                raise ResourceAccessError(
                    ErrorTemplate.resource_io_failure(_describe(root, normalized), str(exc))
                ) from exc
        return None

    def __bool__(self) -> bool:
        return bool(self._roots)

    def __repr__(self) -> str:
        return f"ClassPath(roots={list(map(str, self._roots))!r})"


def _as_traversable(root: Traversable | str | PathLike[str]) -> Traversable:
    if isinstance(root, str):
        return Path(root)
    if hasattr(root, "joinpath") and hasattr(root, "is_file"):
        return root  # type: ignore[return-value]
    return Path(root)


def _describe(root: Traversable, path: str) -> str:
    return f"class path resource [{path}] under {root}"
