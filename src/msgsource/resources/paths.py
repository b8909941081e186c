"""Path string helpers shared by resource handles and the locator.

Operates on '/'-separated logical paths (classpath paths, URL paths, archive
entry names), never on OS paths; pathlib covers the filesystem side.

Python 3.13+. Zero external dependencies.
"""

from msgsource.constants import FOLDER_SEPARATOR

__all__ = [
    "apply_relative_path",
    "clean_path",
    "filename_of",
    "strip_leading_separator",
]

_CURRENT_PATH = "."
_TOP_PATH = ".."


def clean_path(path: str) -> str:
    """Normalize a logical path by collapsing '.' and '..' segments.

    Backslashes become forward slashes. A "scheme:" prefix (no slash before
    the colon) is kept apart from the first path element, so
    "file:core/../core/io" becomes "file:core/io". Leading '..' segments
    that cannot be collapsed are retained.

    Example:
        >>> clean_path("mypath/../other/./file.txt")
        'other/file.txt'
        >>> clean_path("..\\\\a\\\\b")
        '../a/b'
    """
    if not path:
        return path

    normalized = path.replace("\\", FOLDER_SEPARATOR)
    if "." not in normalized:
        return normalized

    remainder = normalized
    prefix = ""
    colon = remainder.find(":")
    if colon != -1:
        candidate = remainder[: colon + 1]
        if FOLDER_SEPARATOR not in candidate:
            prefix = candidate
            remainder = remainder[colon + 1 :]
    if remainder.startswith(FOLDER_SEPARATOR):
        prefix += FOLDER_SEPARATOR
        remainder = remainder[1:]

    segments = remainder.split(FOLDER_SEPARATOR)
    kept: list[str] = []
    tops = 0
    for segment in reversed(segments):
        if segment == _CURRENT_PATH:
            continue
        if segment == _TOP_PATH:
            tops += 1
        elif tops > 0:
            tops -= 1
        else:
            kept.insert(0, segment)

    if len(kept) == len(segments):
        return normalized

    kept[:0] = [_TOP_PATH] * tops
    if len(kept) == 1 and not kept[0] and not prefix.endswith(FOLDER_SEPARATOR):
        kept.insert(0, _CURRENT_PATH)

    return prefix + FOLDER_SEPARATOR.join(kept)


def apply_relative_path(path: str, relative_path: str) -> str:
    """Resolve relative_path against the folder containing path.

    Example:
        >>> apply_relative_path("i18n/messages.properties", "other.properties")
        'i18n/other.properties'
        >>> apply_relative_path("messages.properties", "other.properties")
        'other.properties'
    """
    separator = path.rfind(FOLDER_SEPARATOR)
    if separator == -1:
        return relative_path
    folder = path[:separator]
    if not relative_path.startswith(FOLDER_SEPARATOR):
        folder += FOLDER_SEPARATOR
    return folder + relative_path


def filename_of(path: str) -> str:
    """Return the last segment of a logical path ("" for a folder path)."""
    return path.rsplit(FOLDER_SEPARATOR, 1)[-1]


def strip_leading_separator(path: str) -> str:
    """Remove leading '/' characters so the path is root-relative."""
    return path.lstrip(FOLDER_SEPARATOR)
