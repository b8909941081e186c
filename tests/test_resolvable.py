"""Tests for MessageResolvable and the Resolvable protocol.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError, dataclass

import pytest

from msgsource import MessageResolvable, MessageSourceConfig, StaticMessageSource
from msgsource.localization import Resolvable


class TestMessageResolvable:
    """Test MessageResolvable construction."""

    def test_single_code(self) -> None:
        """A single code string becomes a one-element tuple."""
        resolvable = MessageResolvable("typeMismatch")
        assert resolvable.codes == ("typeMismatch",)
        assert resolvable.arguments == ()
        assert resolvable.default_message is None
        assert resolvable.code == "typeMismatch"

    def test_codes_and_arguments(self) -> None:
        """Iterables are frozen into tuples; code is the last one."""
        resolvable = MessageResolvable(
            ["typeMismatch.user.age", "typeMismatch"], arguments=["age"], default_message="Bad"
        )
        assert resolvable.codes == ("typeMismatch.user.age", "typeMismatch")
        assert resolvable.arguments == ("age",)
        assert resolvable.code == "typeMismatch"

    def test_no_codes(self) -> None:
        """A resolvable may carry only a default."""
        resolvable = MessageResolvable([], default_message="only default")
        assert resolvable.code is None

    @pytest.mark.parametrize("codes", [[""], ["ok", 3]])
    def test_invalid_codes(self, codes: list[object]) -> None:
        """Codes must be non-empty strings."""
        with pytest.raises(ValueError, match="non-empty strings"):
            MessageResolvable(codes)  # type: ignore[arg-type]

    def test_frozen(self) -> None:
        """Resolvables are immutable."""
        resolvable = MessageResolvable("a")
        with pytest.raises(FrozenInstanceError):
            resolvable.default_message = "x"  # type: ignore[misc]

    def test_str(self) -> None:
        """str() lists codes, arguments and default."""
        text = str(MessageResolvable(["a", "b"], arguments=[1, 2], default_message="d"))
        assert text == "codes [a,b]; arguments [1, 2]; default message [d]"


@dataclass(frozen=True)
class FieldError:
    """Validation error satisfying the Resolvable protocol structurally."""

    codes: tuple[str, ...]
    arguments: tuple[object, ...] = ()
    default_message: str | None = None


class TestResolvableProtocol:
    """Custom Resolvable implementations."""

    def test_structural_match(self) -> None:
        """Any object with the three attributes is a Resolvable."""
        assert isinstance(FieldError(("required",)), Resolvable)
        assert isinstance(MessageResolvable("x"), Resolvable)

    def test_custom_resolvable_resolves(self) -> None:
        """Sources accept custom Resolvables."""
        source = StaticMessageSource(config=MessageSourceConfig(fallback_to_system_locale=False))
        source.add_message("required", "en", "{0} is required")
        error = FieldError(("required.email", "required"), arguments=("Email",))
        assert source.resolve_resolvable(error, "en") == "Email is required"
