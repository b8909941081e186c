"""Tests for logical path helpers.

Python 3.13+.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from msgsource.resources.paths import (
    apply_relative_path,
    clean_path,
    filename_of,
    strip_leading_separator,
)


class TestCleanPath:
    """Test clean_path normalization."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("mypath/myfile", "mypath/myfile"),
            ("mypath/../mypath/myfile", "mypath/myfile"),
            ("mypath/myfile/../../mypath/myfile", "mypath/myfile"),
            ("./mypath/../mypath/myfile", "mypath/myfile"),
            ("/a/./b/../c", "/a/c"),
            ("../mypath/myfile", "../mypath/myfile"),
            ("../mypath/../mypath/myfile", "../mypath/myfile"),
            ("mypath/../../mypath/myfile", "../mypath/myfile"),
            ("file:core/../core/io/Resource.class", "file:core/io/Resource.class"),
            ("file:/core/../core/io", "file:/core/io"),
            ("classpath:/i18n/./messages", "classpath:/i18n/messages"),
        ],
    )
    def test_collapses_segments(self, path: str, expected: str) -> None:
        """'.' and '..' segments collapse; leading '..' and prefixes are kept."""
        assert clean_path(path) == expected

    def test_backslashes_normalized(self) -> None:
        """Windows separators become forward slashes."""
        assert clean_path("i18n\\sub\\..\\messages.properties") == "i18n/messages.properties"

    def test_empty(self) -> None:
        """The empty path is returned unchanged."""
        assert clean_path("") == ""

    @given(st.lists(st.sampled_from(["a", "b", "c", ".", ".."]), min_size=1, max_size=8))
    def test_idempotent(self, segments: list[str]) -> None:
        """Cleaning an already clean path changes nothing."""
        once = clean_path("/".join(segments))
        assert clean_path(once) == once


class TestApplyRelativePath:
    """Test apply_relative_path."""

    def test_sibling(self) -> None:
        """The relative path replaces the last segment."""
        assert apply_relative_path("i18n/messages.properties", "errors.properties") == (
            "i18n/errors.properties"
        )

    def test_no_folder(self) -> None:
        """A bare filename is replaced entirely."""
        assert apply_relative_path("messages.properties", "errors.properties") == (
            "errors.properties"
        )

    def test_leading_separator_not_doubled(self) -> None:
        """A relative path starting with '/' does not get a second '/'."""
        assert apply_relative_path("i18n/messages.properties", "/x.properties") == (
            "i18n/x.properties"
        )


class TestSmallHelpers:
    """Test filename_of and strip_leading_separator."""

    def test_filename_of(self) -> None:
        """Last segment is the filename; a folder path has none."""
        assert filename_of("i18n/messages.properties") == "messages.properties"
        assert filename_of("i18n/") == ""

    def test_strip_leading_separator(self) -> None:
        """All leading '/' are removed."""
        assert strip_leading_separator("//i18n/messages") == "i18n/messages"
