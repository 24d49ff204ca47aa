"""
Line serializer (Canonical Records → vCard text bytes).

Produces one escaped, terminated and encoded line per record. Every
version ends lines with CRLF; they differ in what they escape and how
they encode:

    - 4.0: escapes \\ , ; and line breaks (as \\n), encodes the line as UTF-8
    - 3.0: escapes , ; and line breaks (as \\n), encodes the line as UTF-8
    - 2.1: escapes ; only and refuses values with line breaks. The
      property is US-ASCII, the value is encoded in the configured
      charset, and every line except BEGIN, VERSION and END carries
      ';CHARSET=<name>' right after the property name. BEGIN, VERSION
      and END are always US-ASCII.

ADR and N never escape semicolons.

Properties are expected in canonical form; see qualifiers.canonicalise().
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from cardcodec.charsets import DEFAULT_V21_CHARSET, codec_for_charset, output_charset
from cardcodec.errors import InvalidInputError, UnmappableTextError
from cardcodec.escaping import escape, has_line_break, line_breaks_allowed, reserved_characters
from cardcodec.model import (
    COMPOUND_PROPERTIES,
    STRUCTURAL_PROPERTIES,
    Card,
    Version,
    property_name,
)

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineRules:
    """How one version terminates and encodes a line."""
    terminator: str
    encoding: Optional[str]  # None: per-value CHARSET (2.1)
    charset_tagged: bool


_LINE_RULES = {
    Version.V40: LineRules(terminator="\r\n", encoding="utf-8", charset_tagged=False),
    Version.V30: LineRules(terminator="\r\n", encoding="utf-8", charset_tagged=False),
    Version.V21: LineRules(terminator="\r\n", encoding=None, charset_tagged=True),
}


def _encode(text: str, codec: str, what: str) -> bytes:
    try:
        return text.encode(codec)
    except UnicodeEncodeError as e:
        raise UnmappableTextError(f"Cannot encode {what} {text!r} as {codec}: {e.reason}") from e


def _insert_charset(prop: str, charset: str) -> str:
    """'TEL;CELL' -> 'TEL;CHARSET=UTF-8;CELL'"""
    name, sep, params = prop.partition(";")
    tagged = f"{name};CHARSET={charset}"
    return f"{tagged};{params}" if sep else tagged


def serialize_line(
    prop: str,
    value: str,
    version: Version,
    suppress_value_separator: bool = False,
    v21_charset: str = DEFAULT_V21_CHARSET,
) -> bytes:
    """
    Serialize one property/value pair as a complete vCard line.

    Args:
        prop: Canonical property, e.g. 'TEL;TYPE="cell"'
        value: Unescaped value
        version: Output version
        suppress_value_separator: Omit the ':' between property and value
        v21_charset: Charset for 2.1 values (ignored for 3.0 and 4.0)

    Returns:
        The encoded line including its terminator

    Raises:
        InvalidInputError: If prop or value is None, if a 2.1 value
            holds a line break, or if v21_charset is not ASCII compatible
        UnknownCharsetError: If v21_charset is not registered
        UnmappableTextError: If the line cannot be encoded
    """
    if prop is None or value is None:
        raise InvalidInputError("serialize_line() needs a property and a value")
    version = Version.from_string(version)
    rules = _LINE_RULES[version]

    name = property_name(prop)
    if not line_breaks_allowed(version) and has_line_break(value):
        raise InvalidInputError(
            f"vCard {version.value} cannot carry a line break in the value of {prop}"
        )
    escaped = escape(value, reserved_characters(version, name in COMPOUND_PROPERTIES))
    separator = "" if suppress_value_separator else ":"

    if rules.charset_tagged:
        charset = output_charset(v21_charset)
        if name in STRUCTURAL_PROPERTIES:
            return _encode(prop + separator + escaped + rules.terminator, "ascii", "line")
        prop = _insert_charset(prop, charset)
        return (
            _encode(prop + separator, "ascii", "property")
            + _encode(escaped, codec_for_charset(charset), "value")
            + _encode(rules.terminator, "ascii", "terminator")
        )

    return _encode(prop + separator + escaped + rules.terminator, rules.encoding, "line")


def serialize_card(card: Card, version: Version, v21_charset: str = DEFAULT_V21_CHARSET) -> bytes:
    """
    Serialize a card with its BEGIN, VERSION and END lines.

    Raises:
        InvalidInputError: If a record is itself a BEGIN, VERSION or END line
    """
    version = Version.from_string(version)
    lines = [serialize_line("BEGIN", "VCARD", version, v21_charset=v21_charset),
             serialize_line("VERSION", version.value, version, v21_charset=v21_charset)]
    for record in card:
        if record.base_name() in STRUCTURAL_PROPERTIES:
            raise InvalidInputError(f"Card records may not contain {record.property!r}")
        lines.append(serialize_line(record.property, record.value, version, v21_charset=v21_charset))
    lines.append(serialize_line("END", "VCARD", version, v21_charset=v21_charset))
    return b"".join(lines)


def serialize_cards(
    cards: Iterable[Card], version: Version, v21_charset: str = DEFAULT_V21_CHARSET
) -> bytes:
    """Serialize a batch of cards; the first failure aborts the batch."""
    chunks = [serialize_card(card, version, v21_charset) for card in cards]
    _LOGGER.debug("Serialized %d card(s) as vCard %s", len(chunks), Version.from_string(version).value)
    return b"".join(chunks)


def save_cards_file(
    cards: Iterable[Card],
    filename: str,
    version: Version,
    v21_charset: str = DEFAULT_V21_CHARSET,
) -> None:
    """
    Serialize cards and write them to a file.

    Args:
        cards: Cards to write
        filename: Output file path (.vcf extension recommended)
        version: Output version
        v21_charset: Charset for 2.1 values
    """
    data = serialize_cards(cards, version, v21_charset)
    with open(filename, 'wb') as f:
        f.write(data)


__all__ = [
    "serialize_line",
    "serialize_card",
    "serialize_cards",
    "save_cards_file",
]
