"""
Card Parser (vCard text → Canonical Cards).

Scans text for BEGIN:VCARD / END:VCARD pairs and turns every line in
between into a canonical Record.

Per line:
    1. Split on the first unescaped, unquoted colon into property/value
    2. Remove CHARSET (and, on 2.1, QUOTED-PRINTABLE) parameters;
       on 2.1 decode the value with the named charset
    3. Canonicalise the property (see qualifiers.canonicalise)
    4. Unescape the value with the version's reserved characters

Input may be str or bytes. Bytes are decoded as UTF-8 for 3.0 and 4.0.
For 2.1 they are read octet for octet so each value can be decoded
with its own CHARSET; lines without one use the configured default.

Syntax Notes:
    - LF and CRLF line endings are both accepted
    - Lines starting with a space or tab continue the previous line
    - Text outside of cards is ignored
    - On 2.1, a card embedded right after an empty AGENT property becomes
      that AGENT's value, its lines joined with newlines. Any other
      BEGIN:VCARD inside a card is an error.
"""

import logging
import quopri
import re
import warnings
from typing import List, Optional, Tuple, Union

from cardcodec.charsets import DEFAULT_V21_CHARSET, codec_for_charset
from cardcodec.errors import InvalidInputError, MalformedCardError, UnmappableTextError
from cardcodec.escaping import reserved_characters, unescape
from cardcodec.model import Card, Record, Version, is_compound, property_name
from cardcodec.qualifiers import canonicalise

_LOGGER = logging.getLogger(__name__)

_CHARSET_RE = re.compile(r';\s*CHARSET=("[^"]*"|[^;:]*)', re.IGNORECASE)
_QUOTED_PRINTABLE_RE = re.compile(r";\s*(?:ENCODING=)?QUOTED-PRINTABLE(?=;|$)", re.IGNORECASE)

# Octet-transparent codec: one character per byte, both directions.
_OCTETS = "latin-1"

Text = Union[str, bytes, bytearray]


def _is_marker(line: str, marker: str) -> bool:
    return line.rstrip().upper() == marker


def _continues_quoted_printable(line: str) -> bool:
    head = line.split(":", 1)[0]
    return line.endswith("=") and bool(_QUOTED_PRINTABLE_RE.search(head))


def _logical_lines(text: str, version: Version, unfold: bool) -> List[Tuple[int, str]]:
    """Split text into (line_number, line) pairs with continuations joined."""
    logical: List[List] = []
    for number, physical in enumerate(text.split("\n"), start=1):
        if physical.endswith("\r"):
            physical = physical[:-1]
        if logical and version is Version.V21 and _continues_quoted_printable(logical[-1][1]):
            logical[-1][1] = logical[-1][1][:-1] + physical
        elif unfold and logical and physical[:1] in (" ", "\t"):
            logical[-1][1] += physical[1:]
        else:
            logical.append([number, physical])
    return [(number, line) for number, line in logical]


def _split_line(line: str) -> Optional[Tuple[str, str]]:
    """Split at the first colon that is neither escaped nor inside quotes."""
    in_quotes = False
    escaped = False
    for index, char in enumerate(line):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            in_quotes = not in_quotes
        elif char == ":" and not in_quotes:
            return line[:index], line[index + 1:]
    return None


def _decode_v21(
    value: str,
    charset: Optional[str],
    quoted_printable: bool,
    raw: bool,
    default_charset: str,
    line_number: int,
) -> str:
    if not raw and charset is None and not quoted_printable:
        return value

    codec = codec_for_charset(charset or default_charset)
    try:
        data = value.encode(_OCTETS)
    except UnicodeEncodeError:
        # str input that is already decoded text
        return value
    if quoted_printable:
        data = quopri.decodestring(data)

    try:
        return data.decode(codec)
    except UnicodeDecodeError as e:
        if raw or quoted_printable:
            raise UnmappableTextError(
                f"line {line_number}: value is not valid {charset or default_charset}"
            ) from e
        warnings.warn(
            f"line {line_number}: value could not be re-decoded as {charset}; kept as read",
            UserWarning,
        )
        return value


def parse_line(
    line: str,
    version: Version,
    v21_charset: str = DEFAULT_V21_CHARSET,
    raw: bool = False,
    line_number: int = 0,
) -> Tuple[str, str]:
    """
    Parse one content line into a canonical (property, value) pair.

    Args:
        line: A single unfolded line without terminator
        version: Version the line is read as
        v21_charset: Default charset for 2.1 lines read from bytes
        raw: True if the line holds undecoded octets (2.1 bytes input)
        line_number: Used in error messages

    Returns:
        (canonical property, unescaped value)

    Raises:
        MalformedCardError: If the line has no property/value separator
        UnknownCharsetError: If a 2.1 CHARSET parameter is not registered
    """
    if line is None:
        raise InvalidInputError("parse_line() needs a line")
    version = Version.from_string(version)

    split = _split_line(line)
    if split is None:
        raise MalformedCardError(f"no ':' separator in {line!r}", line_number)
    prop, value = split
    prop = prop.strip()
    if not prop:
        raise MalformedCardError(f"empty property name in {line!r}", line_number)

    charset = None
    match = _CHARSET_RE.search(prop)
    if match:
        charset = match.group(1).strip().strip('"')
        prop = _CHARSET_RE.sub("", prop)

    if version is Version.V21:
        quoted_printable = bool(_QUOTED_PRINTABLE_RE.search(prop))
        if quoted_printable:
            prop = _QUOTED_PRINTABLE_RE.sub("", prop)
        value = _decode_v21(value, charset, quoted_printable, raw, v21_charset, line_number)

    canonical = canonicalise(prop, version)
    value = unescape(value, reserved_characters(version, is_compound(canonical)))
    return canonical, value


def _awaits_agent(card: Card) -> bool:
    """True if the card's last record is an AGENT with an empty value."""
    if not card.records:
        return False
    last = card.records[-1]
    return last.base_name() == "AGENT" and not last.value.strip()


def _attach_agent(card: Card, lines: List[str], raw: bool, v21_charset: str, line_number: int) -> None:
    """Store an embedded 2.1 card, one line per line, as the AGENT value."""
    value = "\n".join(lines)
    if raw:
        value = _decode_v21(value, None, False, True, v21_charset, line_number)
    card.records[-1] = Record(card.records[-1].property, value)


def parse(
    text: Text,
    version: Version,
    v21_charset: str = DEFAULT_V21_CHARSET,
    unfold: bool = True,
) -> List[Card]:
    """
    Parse vCard text into an ordered list of cards.

    Args:
        text: vCard text as str or bytes
        version: Version the text is read as
        v21_charset: Default charset for 2.1 byte input without CHARSET
        unfold: Join folded continuation lines

    Returns:
        Cards in source order; each card's records in source order.
        Empty if the text contains no BEGIN:VCARD.

    Raises:
        InvalidInputError: If text is None
        MalformedCardError: On an unterminated card, a nested card that is
            not a 2.1 AGENT, or a line without a property/value separator
        UnknownCharsetError: If a 2.1 CHARSET names an unregistered charset
        UnmappableTextError: If bytes cannot be decoded
    """
    if text is None:
        raise InvalidInputError("parse() needs text")
    version = Version.from_string(version)

    raw = isinstance(text, (bytes, bytearray))
    if raw:
        encoding = _OCTETS if version is Version.V21 else "utf-8"
        try:
            text = bytes(text).decode(encoding)
        except UnicodeDecodeError as e:
            raise UnmappableTextError(f"vCard {version.value} input is not valid {encoding}") from e

    cards: List[Card] = []
    current: Optional[Card] = None
    opened_at = 0
    agent: Optional[List[str]] = None
    agent_at = 0
    depth = 0

    for number, line in _logical_lines(text, version, unfold):
        if agent is not None:
            agent.append(line)
            if _is_marker(line, "BEGIN:VCARD"):
                depth += 1
            elif _is_marker(line, "END:VCARD"):
                depth -= 1
                if depth == 0:
                    _attach_agent(current, agent, raw, v21_charset, agent_at)
                    agent = None
            continue

        if current is None:
            if _is_marker(line, "BEGIN:VCARD"):
                current = Card()
                opened_at = number
            continue

        if _is_marker(line, "END:VCARD"):
            cards.append(current)
            current = None
            continue
        if _is_marker(line, "BEGIN:VCARD"):
            if version is Version.V21 and _awaits_agent(current):
                agent = [line]
                agent_at = number
                depth = 1
                continue
            raise MalformedCardError(
                f"BEGIN:VCARD inside the card opened on line {opened_at}", number
            )
        if not line.strip():
            continue

        prop, value = parse_line(line, version, v21_charset, raw, number)
        if property_name(prop) == "VERSION":
            if value.strip() != version.value:
                warnings.warn(
                    f"line {number}: card declares VERSION:{value.strip()} "
                    f"but is read as {version.value}",
                    UserWarning,
                )
            continue
        current.add(prop, value)

    if agent is not None:
        raise MalformedCardError("embedded AGENT card has no END:VCARD", agent_at)
    if current is not None:
        raise MalformedCardError("card has no END:VCARD", opened_at)

    _LOGGER.debug("Parsed %d card(s) as vCard %s", len(cards), version.value)
    return cards


def parse_file(
    filepath: str,
    version: Version,
    v21_charset: str = DEFAULT_V21_CHARSET,
    unfold: bool = True,
) -> List[Card]:
    """
    Parse a .vcf file into cards.

    The file is read as bytes so 2.1 CHARSET parameters can be honoured.

    Raises:
        FileNotFoundError: If file doesn't exist
        MalformedCardError: If parsing fails
    """
    try:
        with open(filepath, 'rb') as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"vCard file not found: {filepath}")

    return parse(content, version, v21_charset=v21_charset, unfold=unfold)


__all__ = [
    "parse",
    "parse_line",
    "parse_file",
]
