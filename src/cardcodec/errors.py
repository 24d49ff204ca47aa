"""
Exception hierarchy for the card codec.

Every failure raised by the codec derives from CardCodecError so callers
can catch the whole family in one place.
"""

from typing import Optional


class CardCodecError(Exception):
    """Base class for all codec failures."""
    pass


class InvalidInputError(CardCodecError, ValueError):
    """Raised when a required argument is missing or unusable."""
    pass


class UnknownCharsetError(CardCodecError):
    """Raised when a charset name is not in the charset table."""
    pass


class UnmappableTextError(CardCodecError):
    """Raised when text cannot be encoded to, or decoded from, a charset."""
    pass


class MalformedCardError(CardCodecError):
    """Raised when card text cannot be split into cards or properties."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class UnknownStyleError(CardCodecError):
    """Raised when a style is neither registered nor mapped."""
    pass


class UnknownLanguageError(CardCodecError):
    """Raised when a style has no mapping for the requested language."""
    pass


class UnknownVersionError(CardCodecError):
    """Raised for a vCard version the codec or a mapping does not know."""
    pass


class DuplicateStyleError(CardCodecError):
    """Raised when two styles register under the same name."""
    pass


__all__ = [
    "CardCodecError",
    "InvalidInputError",
    "UnknownCharsetError",
    "UnmappableTextError",
    "MalformedCardError",
    "UnknownStyleError",
    "UnknownLanguageError",
    "UnknownVersionError",
    "DuplicateStyleError",
]
