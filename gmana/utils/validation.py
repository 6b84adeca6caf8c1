"""
Input validation utilities for gmana.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional

from ..exceptions import ValidationError

MIN_PASSWORD_LENGTH = 4
MAX_PASSWORD_LENGTH = 128
DEFAULT_PASSWORD_LENGTH = 12

_FLAG_FIELDS = (
    "include_uppercase",
    "include_lowercase",
    "include_numbers",
    "include_symbols",
    "include_extra_symbols",
    "exclude_similar",
    "exclude_ambiguous",
)


def is_strict_int(value: Any) -> bool:
    """Check for a real int; bool is rejected even though it subclasses int."""
    return isinstance(value, int) and not isinstance(value, bool)


def validate_length(length: Any) -> bool:
    """
    Validate a password length.

    Args:
        length: The length to validate

    Returns:
        True if length is an int within bounds, False otherwise
    """
    if not is_strict_int(length):
        return False

    return MIN_PASSWORD_LENGTH <= length <= MAX_PASSWORD_LENGTH


def get_length_error_message(length: Any) -> str:
    """
    Get a descriptive error message for an invalid length.

    Args:
        length: The invalid length

    Returns:
        Error message describing why the length is invalid
    """
    if not is_strict_int(length):
        return f"Length must be an integer, got {type(length).__name__}"

    if length < MIN_PASSWORD_LENGTH:
        return f"Length must be at least {MIN_PASSWORD_LENGTH}, got {length}"

    if length > MAX_PASSWORD_LENGTH:
        return f"Length cannot be greater than {MAX_PASSWORD_LENGTH}, got {length}"

    return "Length is invalid"


@dataclass(frozen=True)
class PasswordOptions:
    """Validated options for a single password generation."""

    length: int = DEFAULT_PASSWORD_LENGTH
    include_uppercase: bool = True
    include_lowercase: bool = True
    include_numbers: bool = True
    include_symbols: bool = True
    include_extra_symbols: bool = False
    exclude_similar: bool = False
    exclude_ambiguous: bool = False
    custom_chars: Optional[str] = None
    # Reserved; accepted but not used by generation.
    pattern: Optional[str] = None

    def __post_init__(self) -> None:
        if not validate_length(self.length):
            raise ValidationError(get_length_error_message(self.length))

        for name in _FLAG_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValidationError(
                    f"Option '{name}' must be a boolean, got {type(value).__name__}"
                )

        for name in ("custom_chars", "pattern"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ValidationError(
                    f"Option '{name}' must be a string, got {type(value).__name__}"
                )

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "PasswordOptions":
        """
        Build options from a mapping, filling defaults for missing keys.

        Unknown keys are ignored.

        Args:
            raw: Mapping of option names to values

        Returns:
            Validated PasswordOptions

        Raises:
            ValidationError: If the mapping or any value is invalid
        """
        if not isinstance(raw, Mapping):
            raise ValidationError(f"Options must be a mapping, got {type(raw).__name__}")

        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in raw.items() if key in known})

    @property
    def uses_custom_chars(self) -> bool:
        """Whether the custom pool replaces class-based construction."""
        return bool(self.custom_chars)

    def to_dict(self) -> Dict[str, Any]:
        """Return the options as a plain dict."""
        return asdict(self)
