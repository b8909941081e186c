"""ResourceLocator: maps symbolic location strings to resource handles.

Resolution order:
    1. Registered protocol resolvers, in registration order (first non-None wins)
    2. "/..." absolute paths: under the configured root, else on the
       classpath, else on the filesystem
    3. "classpath:..." locations: looked up on the ClassPath
    4. URIs: "file:" -> FileResource, "http(s):" -> UrlResource,
       "jar:/zip:...!/entry" -> ArchiveEntryResource
    5. Anything else: a path relative to the root (or the classpath)

Resolution performs no I/O. resolve() returns None when no strategy
applies; structurally invalid strings raise MalformedLocationError.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol
from urllib.parse import unquote, urlsplit
from urllib.request import url2pathname

from msgsource.constants import (
    ARCHIVE_PROTOCOLS,
    ARCHIVE_URL_SEPARATOR,
    CLASSPATH_URL_PREFIX,
    DEFAULT_HTTP_TIMEOUT,
    FOLDER_SEPARATOR,
    NETWORK_PROTOCOLS,
    URL_PROTOCOL_FILE,
)
from msgsource.diagnostics import ErrorTemplate, MalformedLocationError, ResourceNotFoundError
from msgsource.resources.classpath import ClassPath, normalize_classpath_path
from msgsource.resources.handles import (
    ArchiveEntryResource,
    ClassPathResource,
    FileResource,
    ResourceHandle,
    UrlResource,
)
from msgsource.resources.paths import clean_path, strip_leading_separator

if TYPE_CHECKING:
    from collections.abc import Callable
    from os import PathLike

    import httpx

__all__ = [
    "ProtocolResolver",
    "ResourceLocator",
    "SchemeResolver",
]

logger = logging.getLogger(__name__)

_LOCALHOST = frozenset({"", "localhost"})


class ProtocolResolver(Protocol):
    """Strategy consulted before built-in location handling.

    Return None to let the next resolver (or the built-in strategies)
    handle the location.
    """

    def resolve(self, location: str, locator: ResourceLocator) -> ResourceHandle | None:
        """Resolve location to a handle, or None if not applicable."""
        ...


@dataclass(frozen=True, slots=True)
class SchemeResolver:
    """ProtocolResolver for a custom "scheme:" prefix.

    The factory receives the remainder of the location after the prefix.

    Example:
        >>> db = {"messages.properties": b"greeting=Hello"}
        >>> resolver = SchemeResolver(
        ...     "mem", lambda path, _locator: InMemoryResource(db[path], path)
        ... )
        >>> locator.add_protocol_resolver(resolver)
        >>> locator.resolve("mem:messages.properties")
    """

    scheme: str
    factory: Callable[[str, ResourceLocator], ResourceHandle | None]

    def resolve(self, location: str, locator: ResourceLocator) -> ResourceHandle | None:
        prefix = f"{self.scheme}:"
        if not location.startswith(prefix):
            return None
        return self.factory(location[len(prefix) :], locator)


class ResourceLocator:
    """Thread-safe location-string to ResourceHandle resolver.

    Also owns explicit per-value-type resource caches (get_resource_cache)
    whose lifetime is the locator's, cleared with clear_resource_caches().

    Args:
        root: Base directory for absolute ("/x") and relative locations.
            When None, those go to the classpath (or, for "/x", the
            filesystem root).
        classpath: Roots for "classpath:" lookups. Empty when None.
        http_client: Shared httpx.Client handed to UrlResource handles
        http_timeout: Timeout for URL handles, in seconds
    """

    __slots__ = (
        "_caches",
        "_classpath",
        "_http_client",
        "_http_timeout",
        "_lock",
        "_resolvers",
        "_root",
    )

    def __init__(
        self,
        root: str | PathLike[str] | None = None,
        *,
        classpath: ClassPath | None = None,
        http_client: httpx.Client | None = None,
        http_timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        self._root = Path(root) if root is not None else None
        self._classpath = classpath if classpath is not None else ClassPath()
        self._http_client = http_client
        self._http_timeout = http_timeout
        self._lock = threading.Lock()
        self._resolvers: tuple[ProtocolResolver, ...] = ()
        self._caches: dict[type, dict[Any, Any]] = {}

    @property
    def root(self) -> Path | None:
        """Configured base directory, if any."""
        return self._root

    @property
    def classpath(self) -> ClassPath:
        """ClassPath used for "classpath:" locations."""
        return self._classpath

    @property
    def protocol_resolvers(self) -> tuple[ProtocolResolver, ...]:
        """Registered resolvers in registration order."""
        return self._resolvers

    def add_protocol_resolver(self, resolver: ProtocolResolver) -> None:
        """Register a resolver; it runs after all earlier registrations."""
        if resolver is None:
            msg = "ProtocolResolver must not be None"
            raise TypeError(msg)
        with self._lock:
            self._resolvers = (*self._resolvers, resolver)

    def get_resource_cache[T](self, kind: type[T]) -> dict[Any, T]:
        """Return the locator-owned cache for values of type kind.

        The same dict is returned for the same kind until
        clear_resource_caches() is called. Callers synchronize their own
        compound operations on it.
        """
        with self._lock:
            cache = self._caches.get(kind)
            if cache is None:
                cache = {}
                self._caches[kind] = cache
            return cache

    def clear_resource_caches(self) -> None:
        """Empty every cache handed out by get_resource_cache()."""
        with self._lock:
            for cache in self._caches.values():
                cache.clear()

    def get_resource(self, location: str) -> ResourceHandle:
        """Resolve location, raising when no strategy applies.

        Raises:
            MalformedLocationError: If location is structurally invalid
            ResourceNotFoundError: If no strategy produced a handle
        """
        handle = self.resolve(location)
        if handle is None:
            raise ResourceNotFoundError(ErrorTemplate.resource_not_found(f"[{location}]"))
        return handle

    def resolve(self, location: str) -> ResourceHandle | None:
        """Resolve location to a handle without performing I/O.

        Raises:
            MalformedLocationError: If location is structurally invalid
        """
        self._validate(location)

        for resolver in self._resolvers:
            handle = resolver.resolve(location, self)
            if handle is not None:
                return handle

        if location.startswith(FOLDER_SEPARATOR):
            return self._resolve_absolute(location)

        if location.startswith(CLASSPATH_URL_PREFIX):
            return self._resolve_classpath(location, location[len(CLASSPATH_URL_PREFIX) :])

        handle = self._resolve_uri(location)
        if handle is not None:
            return handle

        return self._resolve_relative(location)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(location: str) -> None:
        if not isinstance(location, str):
            msg = f"Location must be str, got {type(location).__name__}"
            raise TypeError(msg)
        if not location.strip():
            raise MalformedLocationError(
                ErrorTemplate.malformed_location(location, "location is empty"),
                location=location,
            )
        if "\x00" in location:
            raise MalformedLocationError(
                ErrorTemplate.malformed_location(location, "location contains a NUL character"),
                location=location,
            )

    def _resolve_absolute(self, location: str) -> ResourceHandle | None:
        if self._root is not None:
            return self._under_root(location, strip_leading_separator(clean_path(location)))
        if self._classpath:
            return ClassPathResource(location, self._classpath)
        return FileResource(Path(location))

    def _resolve_classpath(self, location: str, path: str) -> ResourceHandle | None:
        if not path.strip(FOLDER_SEPARATOR).strip():
            raise MalformedLocationError(
                ErrorTemplate.malformed_location(location, "classpath location has no path"),
                location=location,
            )
        if normalize_classpath_path(path) is None:
            raise MalformedLocationError(
                ErrorTemplate.malformed_location(location, "path escapes the classpath roots"),
                location=location,
            )
        if not self._classpath:
            logger.debug("No classpath roots configured for %s", location)
            return None
        return ClassPathResource(path, self._classpath)

    def _resolve_uri(self, location: str) -> ResourceHandle | None:
        try:
            parts = urlsplit(location)
        except ValueError as exc:
            raise MalformedLocationError(
                ErrorTemplate.malformed_location(location, str(exc)),
                location=location,
            ) from exc

        scheme = parts.scheme.lower()
        # Single-letter "schemes" are Windows drive letters ("C:\\...")
        if len(scheme) < 2:
            return None

        if scheme == URL_PROTOCOL_FILE:
            return FileResource(self._file_url_path(location, parts.netloc, parts.path))
        if scheme in NETWORK_PROTOCOLS:
            if not parts.netloc:
                raise MalformedLocationError(
                    ErrorTemplate.malformed_location(location, "URL has no host"),
                    location=location,
                )
            return UrlResource(location, client=self._http_client, timeout=self._http_timeout)
        if scheme in ARCHIVE_PROTOCOLS:
            return self._resolve_archive(location, scheme)
        return None

    def _resolve_archive(self, location: str, scheme: str) -> ResourceHandle:
        body = location[len(scheme) + 1 :]
        archive_url, separator, entry = body.partition(ARCHIVE_URL_SEPARATOR)
        if not separator or not entry:
            raise MalformedLocationError(
                ErrorTemplate.malformed_location(location, "archive URL has no '!/' entry part"),
                location=location,
            )
        archive_parts = urlsplit(archive_url)
        if archive_parts.scheme.lower() == URL_PROTOCOL_FILE:
            archive = self._file_url_path(location, archive_parts.netloc, archive_parts.path)
        elif len(archive_parts.scheme) < 2:
            archive = Path(archive_url)
        else:
            raise MalformedLocationError(
                ErrorTemplate.malformed_location(
                    location, f"archives are only supported on the filesystem, got {archive_url!r}"
                ),
                location=location,
            )
        return ArchiveEntryResource(archive, unquote(entry), scheme)

    @staticmethod
    def _file_url_path(location: str, netloc: str, path: str) -> Path:
        if netloc.lower() not in _LOCALHOST:
            raise MalformedLocationError(
                ErrorTemplate.malformed_location(
                    location, f"file URL names remote host {netloc!r}"
                ),
                location=location,
            )
        return Path(url2pathname(path))

    def _resolve_relative(self, location: str) -> ResourceHandle | None:
        if self._root is not None:
            return self._under_root(location, clean_path(location))
        if self._classpath:
            return ClassPathResource(location, self._classpath)
        logger.debug("No root or classpath configured for relative location %s", location)
        return None

    def _under_root(self, location: str, relative: str) -> FileResource:
        if relative == ".." or relative.startswith(f"..{FOLDER_SEPARATOR}"):
            raise MalformedLocationError(
                ErrorTemplate.malformed_location(location, "path escapes the configured root"),
                location=location,
            )
        return FileResource(self._root / relative)  # type: ignore[operator]

    def __repr__(self) -> str:
        return (
            f"ResourceLocator(root={self._root!r}, classpath={self._classpath!r}, "
            f"resolvers={len(self._resolvers)})"
        )
