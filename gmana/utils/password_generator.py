"""
Secure password generation utilities.
"""

import secrets
import string
from typing import Any, Callable, Mapping, Optional, Union

from ..exceptions import GenerationError
from .validation import PasswordOptions

# Uniform integer source over [0, n)
RandBelow = Callable[[int], int]

OptionsLike = Union[PasswordOptions, Mapping[str, Any], None]


class PasswordGenerator:
    """Generate secure passwords with customizable character sets."""

    # Character sets
    LOWERCASE = string.ascii_lowercase
    UPPERCASE = string.ascii_uppercase
    NUMBERS = string.digits
    SYMBOLS = "!@#$%^&*"
    EXTRA_SYMBOLS = "()_+-=[]{}|;:,.<>?"

    # Characters that are easily confused with each other
    SIMILAR_CHARS = frozenset("il1Lo0O")

    # Brackets, quotes and punctuation that are awkward to read or type
    AMBIGUOUS_CHARS = frozenset("{}[]()/\\'\"`~,;.<>")

    def __init__(self, options: Optional[PasswordOptions] = None,
                 randbelow: Optional[RandBelow] = None):
        """
        Initialize password generator with options.

        Args:
            options: Validated generation options (defaults if omitted)
            randbelow: Uniform integer source, secrets.randbelow by default

        Raises:
            GenerationError: If the options leave no characters to choose from
        """
        self.options = options if options is not None else PasswordOptions()
        self.randbelow = randbelow or secrets.randbelow

        # Build character set
        self.charset = build_charset(self.options)

    def generate(self) -> str:
        """
        Generate a secure password.

        Returns:
            Generated password string
        """
        return sample_password(self.charset, self.options.length, self.randbelow)

    def get_charset_info(self) -> str:
        """
        Get human-readable description of character set.

        Returns:
            Description of enabled character types
        """
        if self.options.uses_custom_chars:
            return f"custom characters ({len(self.charset)} in pool)"

        parts = []

        if self.options.include_lowercase:
            parts.append("lowercase")
        if self.options.include_uppercase:
            parts.append("uppercase")
        if self.options.include_numbers:
            parts.append("numbers")
        if self.options.include_symbols:
            parts.append("symbols")
        if self.options.include_extra_symbols:
            parts.append("extra symbols")

        info = ", ".join(parts)

        excluded = []
        if self.options.exclude_similar:
            excluded.append("similar")
        if self.options.exclude_ambiguous:
            excluded.append("ambiguous")

        if excluded:
            info += f" (excluding {' and '.join(excluded)} chars)"

        return info


def build_charset(options: PasswordOptions) -> str:
    """
    Build the character pool for the given options.

    A non-empty custom pool is returned verbatim, duplicates included.
    Otherwise enabled classes are concatenated in a fixed order and the
    exclusion filters are applied, keeping the order of what remains.

    Args:
        options: Validated generation options

    Returns:
        Character pool to sample from

    Raises:
        GenerationError: If the resulting pool is empty
    """
    if options.uses_custom_chars:
        return options.custom_chars

    charset = ""

    if options.include_lowercase:
        charset += PasswordGenerator.LOWERCASE
    if options.include_uppercase:
        charset += PasswordGenerator.UPPERCASE
    if options.include_numbers:
        charset += PasswordGenerator.NUMBERS
    if options.include_symbols:
        charset += PasswordGenerator.SYMBOLS
    if options.include_extra_symbols:
        charset += PasswordGenerator.EXTRA_SYMBOLS

    if options.exclude_similar:
        charset = "".join(c for c in charset if c not in PasswordGenerator.SIMILAR_CHARS)

    if options.exclude_ambiguous:
        charset = "".join(c for c in charset if c not in PasswordGenerator.AMBIGUOUS_CHARS)

    if not charset:
        raise GenerationError("No character types selected for password generation")

    return charset


def sample_password(charset: str, length: int,
                    randbelow: RandBelow = secrets.randbelow) -> str:
    """
    Draw `length` characters uniformly, with replacement, from `charset`.

    Args:
        charset: Non-empty pool of candidate characters
        length: Number of characters to draw
        randbelow: Uniform integer source over [0, n)

    Returns:
        Generated password string

    Raises:
        GenerationError: If the pool is empty
    """
    if not charset:
        raise GenerationError("No characters available for password generation")

    size = len(charset)
    return "".join(charset[randbelow(size)] for _ in range(length))


def generate_password(options: OptionsLike = None,
                      randbelow: Optional[RandBelow] = None) -> str:
    """
    Convenience function to generate a password.

    Args:
        options: PasswordOptions, a mapping of option values, or None for defaults
        randbelow: Uniform integer source, secrets.randbelow by default

    Returns:
        Generated password string

    Raises:
        ValidationError: If the options are invalid
        GenerationError: If the options leave no characters to choose from
    """
    if options is None:
        options = PasswordOptions()
    elif not isinstance(options, PasswordOptions):
        options = PasswordOptions.from_dict(options)

    generator = PasswordGenerator(options, randbelow=randbelow)

    return generator.generate()
