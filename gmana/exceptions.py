"""
Custom exceptions for gmana.
"""


class GmanaException(Exception):
    """Base exception for gmana."""

    pass


class ValidationError(GmanaException):
    """Options or settings violate their constraints."""

    pass


class GenerationError(GmanaException):
    """No characters available to generate a password from."""

    pass


class ConfigError(GmanaException):
    """Configuration key or value could not be understood."""

    pass


class HistoryError(GmanaException):
    """History file could not be written or removed."""

    pass
