"""Resource handles: opaque, polymorphic handles to a byte source.

Every variant satisfies the ResourceHandle protocol. Shared behaviour
(reading whole contents, translating OS errors into the msgsource error
taxonomy) lives in module-level helpers instead of a base class.

Variants:
    FileResource - Filesystem path
    ClassPathResource - Path looked up on a ClassPath
    UrlResource - http/https URL fetched with httpx
    ArchiveEntryResource - Entry inside a zip archive ("jar:file:...!/entry")
    InMemoryResource - Byte string held in memory

Handles are cheap value objects: no I/O happens until a query method is
called, and every query goes back to the source (no handle-level caching).

Python 3.13+.
"""

from __future__ import annotations

import io
import logging
import os
import zipfile
from dataclasses import dataclass, field
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Protocol, runtime_checkable
from urllib.parse import urljoin, urlsplit

import httpx

from msgsource.constants import (
    ARCHIVE_URL_SEPARATOR,
    DEFAULT_ENCODING,
    DEFAULT_HTTP_TIMEOUT,
)
from msgsource.diagnostics import (
    ErrorTemplate,
    ResourceAccessError,
    ResourceNotFoundError,
)
from msgsource.resources.paths import apply_relative_path, clean_path, filename_of

if TYPE_CHECKING:
    from importlib.resources.abc import Traversable

    from msgsource.resources.classpath import ClassPath

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "ResourceHandle",
    # Variants
    "FileResource",
    "ClassPathResource",
    "UrlResource",
    "ArchiveEntryResource",
    "InMemoryResource",
]

logger = logging.getLogger(__name__)


@runtime_checkable
class ResourceHandle(Protocol):
    """Capability interface for a readable byte source.

    last_modified() returning None means "unknown": callers treat the
    resource as always fresh and never refresh it automatically.
    """

    @property
    def description(self) -> str:
        """Human-readable description used in diagnostics and equality."""
        ...

    @property
    def filename(self) -> str | None:
        """Last path segment, or None when the source has no name."""
        ...

    @property
    def uri(self) -> str | None:
        """URI identifying the source, or None for anonymous sources."""
        ...

    def exists(self) -> bool:
        """Check whether the source physically exists (no exceptions)."""
        ...

    def is_readable(self) -> bool:
        """Check whether open() is expected to succeed."""
        ...

    def open(self) -> BinaryIO:
        """Open a fresh binary stream; caller closes it.

        Raises:
            ResourceNotFoundError: If the source does not exist
            ResourceAccessError: If it exists but cannot be read
        """
        ...

    def read_bytes(self) -> bytes:
        """Read the whole source."""
        ...

    def read_text(self, encoding: str = DEFAULT_ENCODING) -> str:
        """Read and decode the whole source.

        Raises:
            UnicodeDecodeError: If the bytes are invalid for encoding
        """
        ...

    def content_length(self) -> int:
        """Size of the source in bytes."""
        ...

    def last_modified(self) -> float | None:
        """Modification timestamp (seconds since epoch), None if unknown."""
        ...

    def create_relative(self, relative_path: str) -> ResourceHandle:
        """Derive a sibling handle by applying relative_path to this one."""
        ...


# ============================================================================
# SHARED HELPERS
# ============================================================================


def _read_all(handle: ResourceHandle) -> bytes:
    with handle.open() as stream:
        return stream.read()


def _decode(handle: ResourceHandle, encoding: str) -> str:
    return handle.read_bytes().decode(encoding)


def _os_error(description: str, exc: OSError) -> ResourceNotFoundError | ResourceAccessError:
    """Translate an OSError from opening/stat-ing into the msgsource taxonomy."""
    match exc:
        case FileNotFoundError():
            return ResourceNotFoundError(ErrorTemplate.resource_not_found(description))
        case PermissionError():
            return ResourceAccessError(
                ErrorTemplate.resource_access_denied(description, str(exc))
            )
        case _:
            return ResourceAccessError(ErrorTemplate.resource_io_failure(description, str(exc)))


class _DescriptionEquality:
    """Mixin: handles compare and hash by type and description."""

    __slots__ = ()

    description: str

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.description == other.description  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.description))

    def __str__(self) -> str:
        return self.description


# ============================================================================
# FILESYSTEM
# ============================================================================


@dataclass(frozen=True, slots=True, eq=False)
class FileResource(_DescriptionEquality):
    """Handle to a file on the local filesystem.

    Attributes:
        path: Filesystem path (made absolute for description and URI)
    """

    path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))

    @property
    def description(self) -> str:
        return f"file [{self.path.absolute()}]"

    @property
    def filename(self) -> str | None:
        return self.path.name

    @property
    def uri(self) -> str | None:
        return self.path.absolute().as_uri()

    def exists(self) -> bool:
        return self.path.exists()

    def is_readable(self) -> bool:
        return self.path.is_file() and os.access(self.path, os.R_OK)

    def open(self) -> BinaryIO:
        try:
            return self.path.open("rb")
        except OSError as exc:
            raise _os_error(self.description, exc) from exc

    def read_bytes(self) -> bytes:
        return _read_all(self)

    def read_text(self, encoding: str = DEFAULT_ENCODING) -> str:
        return _decode(self, encoding)

    def content_length(self) -> int:
        try:
            return self.path.stat().st_size
        except OSError as exc:
            raise _os_error(self.description, exc) from exc

    def last_modified(self) -> float | None:
        try:
            return self.path.stat().st_mtime
        except OSError as exc:
            raise _os_error(self.description, exc) from exc

    def create_relative(self, relative_path: str) -> FileResource:
        return FileResource(
            Path(clean_path(apply_relative_path(self.path.as_posix(), relative_path)))
        )


# ============================================================================
# CLASSPATH
# ============================================================================


@dataclass(frozen=True, slots=True, eq=False)
class ClassPathResource(_DescriptionEquality):
    """Handle to a path looked up on a ClassPath.

    The lookup runs on every query, so a file added to a directory root
    later becomes visible. Entries inside zip-imported packages report an
    unknown modification time.

    Attributes:
        path: Root-relative, cleaned path
        classpath: Roots searched in order
    """

    path: str
    classpath: ClassPath = field(repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", clean_path(self.path).lstrip("/"))

    @property
    def description(self) -> str:
        return f"class path resource [{self.path}]"

    @property
    def filename(self) -> str | None:
        return filename_of(self.path) or None

    @property
    def uri(self) -> str | None:
        target = self.classpath.find(self.path)
        if isinstance(target, Path):
            return target.absolute().as_uri()
        return None

    def _target(self) -> Traversable:
        target = self.classpath.find(self.path)
        if target is None:
            raise ResourceNotFoundError(ErrorTemplate.resource_not_found(self.description))
        return target

    def exists(self) -> bool:
        return self.classpath.find(self.path) is not None

    def is_readable(self) -> bool:
        target = self.classpath.find(self.path)
        if target is None:
            return False
        if isinstance(target, Path):
            return os.access(target, os.R_OK)
        return True

    def open(self) -> BinaryIO:
        target = self._target()
        try:
            return target.open("rb")  # type: ignore[return-value]
        except OSError as exc:
            raise _os_error(self.description, exc) from exc

    def read_bytes(self) -> bytes:
        return _read_all(self)

    def read_text(self, encoding: str = DEFAULT_ENCODING) -> str:
        return _decode(self, encoding)

    def content_length(self) -> int:
        target = self._target()
        if isinstance(target, Path):
            return target.stat().st_size
        return len(self.read_bytes())

    def last_modified(self) -> float | None:
        target = self._target()
        if isinstance(target, Path):
            try:
                return target.stat().st_mtime
            except OSError as exc:
                raise _os_error(self.description, exc) from exc
        return None

    def create_relative(self, relative_path: str) -> ClassPathResource:
        return ClassPathResource(apply_relative_path(self.path, relative_path), self.classpath)


# ============================================================================
# NETWORK
# ============================================================================


@dataclass(frozen=True, slots=True, eq=False)
class UrlResource(_DescriptionEquality):
    """Handle to an http/https URL, fetched with httpx.

    Opening downloads the whole body. Calls block the calling thread up to
    the configured timeout; there is no cancellation.

    Attributes:
        url: Absolute http(s) URL
        client: Optional shared httpx.Client (connection pooling, test
            transports). Module-level httpx functions are used when None.
        timeout: Per-request timeout in seconds
    """

    url: str
    client: httpx.Client | None = field(default=None, repr=False)
    timeout: float = DEFAULT_HTTP_TIMEOUT

    @property
    def description(self) -> str:
        return f"URL [{self.url}]"

    @property
    def filename(self) -> str | None:
        return filename_of(urlsplit(self.url).path) or None

    @property
    def uri(self) -> str | None:
        return self.url

    def _request(self, method: str) -> httpx.Response:
        try:
            if self.client is not None:
                return self.client.request(
                    method, self.url, timeout=self.timeout, follow_redirects=True
                )
            return httpx.request(method, self.url, timeout=self.timeout, follow_redirects=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ResourceAccessError(
                ErrorTemplate.resource_io_failure(self.description, str(exc))
            ) from exc

    def _checked(self, response: httpx.Response) -> httpx.Response:
        status = response.status_code
        if status in (404, 410):
            raise ResourceNotFoundError(ErrorTemplate.resource_not_found(self.description))
        if status in (401, 403):
            raise ResourceAccessError(
                ErrorTemplate.resource_access_denied(self.description, f"HTTP {status}")
            )
        if status >= 400:
            raise ResourceAccessError(
                ErrorTemplate.resource_io_failure(self.description, f"HTTP {status}")
            )
        return response

    def exists(self) -> bool:
        """Report whether the server has the resource.

        Only 404 and 410 mean absent. Other error statuses count as present
        so that reading reports them as ResourceAccessError.

        Raises:
            ResourceAccessError: If the request fails at the transport level
        """
        return self._request("HEAD").status_code not in (404, 410)

    def is_readable(self) -> bool:
        try:
            self._checked(self._request("HEAD"))
        except (ResourceNotFoundError, ResourceAccessError) as exc:
            logger.debug("HEAD %s not readable: %s", self.url, exc)
            return False
        return True

    def open(self) -> BinaryIO:
        response = self._checked(self._request("GET"))
        return io.BytesIO(response.content)

    def read_bytes(self) -> bytes:
        return self._checked(self._request("GET")).content

    def read_text(self, encoding: str = DEFAULT_ENCODING) -> str:
        return _decode(self, encoding)

    def content_length(self) -> int:
        response = self._checked(self._request("HEAD"))
        header = response.headers.get("content-length")
        if header is not None and header.isdigit():
            return int(header)
        return len(self.read_bytes())

    def last_modified(self) -> float | None:
        response = self._checked(self._request("HEAD"))
        header = response.headers.get("last-modified")
        if header is None:
            return None
        try:
            return parsedate_to_datetime(header).timestamp()
        except (TypeError, ValueError):
            logger.debug("Unparseable Last-Modified %r for %s", header, self.url)
            return None

    def create_relative(self, relative_path: str) -> UrlResource:
        return UrlResource(
            urljoin(self.url, relative_path.lstrip("/")),
            client=self.client,
            timeout=self.timeout,
        )


# ============================================================================
# ARCHIVE
# ============================================================================


@dataclass(frozen=True, slots=True, eq=False)
class ArchiveEntryResource(_DescriptionEquality):
    """Handle to one entry of a zip archive on the local filesystem.

    Archive entries carry no usable modification metadata for freshness,
    so last_modified() always reports unknown.

    Attributes:
        archive: Path to the zip/jar file
        entry: Entry name inside the archive ('/'-separated, no leading '/')
        scheme: URL scheme used in uri ("jar", "zip", ...)
    """

    archive: Path
    entry: str
    scheme: str = "jar"

    def __post_init__(self) -> None:
        object.__setattr__(self, "archive", Path(self.archive))
        object.__setattr__(self, "entry", clean_path(self.entry).lstrip("/"))

    @property
    def description(self) -> str:
        return f"archive entry [{self.entry}] in [{self.archive.absolute()}]"

    @property
    def filename(self) -> str | None:
        return filename_of(self.entry) or None

    @property
    def uri(self) -> str | None:
        archive_uri = self.archive.absolute().as_uri()
        return f"{self.scheme}:{archive_uri}{ARCHIVE_URL_SEPARATOR}{self.entry}"

    def _info(self, archive: zipfile.ZipFile) -> zipfile.ZipInfo:
        try:
            return archive.getinfo(self.entry)
        except KeyError:
            raise ResourceNotFoundError(
                ErrorTemplate.resource_not_found(self.description)
            ) from None

    def _zip(self) -> zipfile.ZipFile:
        try:
            return zipfile.ZipFile(self.archive)
        except OSError as exc:
            raise _os_error(self.description, exc) from exc
        except zipfile.BadZipFile as exc:
            raise ResourceAccessError(
                ErrorTemplate.resource_io_failure(self.description, str(exc))
            ) from exc

    def exists(self) -> bool:
        if not self.archive.is_file():
            return False
        try:
            with zipfile.ZipFile(self.archive) as archive:
                return self.entry in archive.namelist()
        except zipfile.BadZipFile:
            # Present but unreadable; open() reports the failure
            return True
        except OSError:
            return False

    def is_readable(self) -> bool:
        try:
            with self._zip() as archive:
                self._info(archive)
        except (ResourceNotFoundError, ResourceAccessError):
            return False
        return True

    def open(self) -> BinaryIO:
        return io.BytesIO(self.read_bytes())

    def read_bytes(self) -> bytes:
        with self._zip() as archive:
            return archive.read(self._info(archive))

    def read_text(self, encoding: str = DEFAULT_ENCODING) -> str:
        return _decode(self, encoding)

    def content_length(self) -> int:
        with self._zip() as archive:
            return self._info(archive).file_size

    def last_modified(self) -> float | None:
        return None

    def create_relative(self, relative_path: str) -> ArchiveEntryResource:
        return ArchiveEntryResource(
            self.archive, apply_relative_path(self.entry, relative_path), self.scheme
        )


# ============================================================================
# IN-MEMORY
# ============================================================================


@dataclass(frozen=True, slots=True, eq=False)
class InMemoryResource(_DescriptionEquality):
    """Handle to bytes held in memory.

    Useful for embedding bundles in code and for tests. Has no location,
    so relative handles cannot be derived from it.

    Attributes:
        data: Resource contents
        label: Description suffix ("in-memory resource [label]")
        modified: Value reported by last_modified() (None = unknown)
    """

    data: bytes
    label: str = "bytes"
    modified: float | None = None

    @property
    def description(self) -> str:
        return f"in-memory resource [{self.label}]"

    @property
    def filename(self) -> str | None:
        return None

    @property
    def uri(self) -> str | None:
        return None

    def exists(self) -> bool:
        return True

    def is_readable(self) -> bool:
        return True

    def open(self) -> BinaryIO:
        return io.BytesIO(self.data)

    def read_bytes(self) -> bytes:
        return self.data

    def read_text(self, encoding: str = DEFAULT_ENCODING) -> str:
        return self.data.decode(encoding)

    def content_length(self) -> int:
        return len(self.data)

    def last_modified(self) -> float | None:
        return self.modified

    def create_relative(self, relative_path: str) -> ResourceHandle:
        raise ResourceNotFoundError(ErrorTemplate.relative_resource_unsupported(self.description))
