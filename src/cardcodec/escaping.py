"""
Escaping of reserved characters in vCard values.

Each version reserves a different set of characters:

    Version   simple value    compound value (ADR, N)
    4.0       \\ , ; newline  \\ , newline
    3.0       , ; newline     , newline
    2.1       ;               (none)

Compound values never escape semicolons; they separate positional
sub-fields.

A line break (LF, CRLF or CR) is written as \\n and read back from \\n
or \\N. 2.1 has no escape for it; see line_breaks_allowed().
"""

from typing import Iterable, Tuple

from cardcodec.errors import InvalidInputError
from cardcodec.model import Version


BACKSLASH = "\\"
NEWLINE = "\n"

_RESERVED = {
    Version.V40: {False: (BACKSLASH, ",", ";", NEWLINE), True: (BACKSLASH, ",", NEWLINE)},
    Version.V30: {False: (",", ";", NEWLINE), True: (",", NEWLINE)},
    Version.V21: {False: (";",), True: ()},
}


def reserved_characters(version: Version, compound: bool) -> Tuple[str, ...]:
    """Return the characters a value must escape under version."""
    return _RESERVED[Version.from_string(version)][bool(compound)]


def escape(value: str, charset: Iterable[str]) -> str:
    """
    Prefix every character of charset found in value with a backslash.

    Backslash is always handled first so that the backslashes added for
    the other characters are not escaped a second time.

    Args:
        value: Text to escape (any string, including empty)
        charset: Characters to escape, in the order they are applied

    Returns:
        Escaped text

    Raises:
        InvalidInputError: If value or charset is None
    """
    if charset is None:
        raise InvalidInputError("escape() needs a set of characters to escape")
    if value is None:
        raise InvalidInputError("escape() needs a value")

    chars = list(charset)
    if BACKSLASH in chars:
        value = value.replace(BACKSLASH, BACKSLASH + BACKSLASH)
    for char in chars:
        if char == BACKSLASH:
            continue
        if char == NEWLINE:
            value = _normalise_line_breaks(value).replace(NEWLINE, BACKSLASH + "n")
            continue
        value = value.replace(char, BACKSLASH + char)
    return value


def _normalise_line_breaks(value: str) -> str:
    return value.replace("\r\n", NEWLINE).replace("\r", NEWLINE)


def has_line_break(value: str) -> bool:
    return "\n" in value or "\r" in value


def line_breaks_allowed(version: Version) -> bool:
    """True if version can carry a line break inside a value."""
    return NEWLINE in reserved_characters(version, False)


def unescape(value: str, charset: Iterable[str]) -> str:
    """
    Inverse of escape() for the characters in charset.

    A backslash followed by a character of charset yields that character;
    any other backslash is kept as written. If charset holds a newline,
    \\n and \\N yield a newline.
    """
    if charset is None:
        raise InvalidInputError("unescape() needs a set of characters to unescape")
    if value is None:
        raise InvalidInputError("unescape() needs a value")

    chars = set(charset)
    if not chars or BACKSLASH not in value:
        return value

    line_breaks = NEWLINE in chars
    result = []
    i = 0
    while i < len(value):
        char = value[i]
        if char == BACKSLASH and i + 1 < len(value):
            following = value[i + 1]
            if line_breaks and following in ("n", "N"):
                result.append(NEWLINE)
                i += 2
                continue
            if following in chars:
                result.append(following)
                i += 2
                continue
        result.append(char)
        i += 1
    return "".join(result)


def escape_value(value: str, version: Version, compound: bool = False) -> str:
    return escape(value, reserved_characters(version, compound))


def unescape_value(value: str, version: Version, compound: bool = False) -> str:
    return unescape(value, reserved_characters(version, compound))


__all__ = [
    "BACKSLASH",
    "NEWLINE",
    "has_line_break",
    "line_breaks_allowed",
    "reserved_characters",
    "escape",
    "unescape",
    "escape_value",
    "unescape_value",
]
