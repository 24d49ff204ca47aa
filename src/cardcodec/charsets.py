"""
Charset table for vCard 2.1.

vCard 2.1 tags each value with a CHARSET parameter. This module maps the
registered charset names used on the wire to the Python codec that
encodes and decodes them, and back.
"""

import codecs
from typing import Dict

from cardcodec.errors import InvalidInputError, UnknownCharsetError


# Charset assumed for 2.1 values when nothing else is configured.
DEFAULT_V21_CHARSET = "US-ASCII"

CHARSET_CODECS: Dict[str, str] = {
    "US-ASCII": "ascii",
    "ISO-8859-1": "latin_1",
    "ISO-8859-2": "iso8859_2",
    "ISO-8859-3": "iso8859_3",
    "ISO-8859-4": "iso8859_4",
    "ISO-8859-5": "iso8859_5",
    "ISO-8859-6": "iso8859_6",
    "ISO-8859-7": "iso8859_7",
    "ISO-8859-8": "iso8859_8",
    "ISO-8859-9": "iso8859_9",
    "ISO-8859-10": "iso8859_10",
    "ISO-8859-11": "iso8859_11",
    "ISO-8859-13": "iso8859_13",
    "ISO-8859-14": "iso8859_14",
    "ISO-8859-15": "iso8859_15",
    "ISO-8859-16": "iso8859_16",
    "UTF-8": "utf_8",
    "UTF-16": "utf_16",
    "UTF-16BE": "utf_16_be",
    "UTF-16LE": "utf_16_le",
    "UTF-32": "utf_32",
    "WINDOWS-1250": "cp1250",
    "WINDOWS-1251": "cp1251",
    "WINDOWS-1252": "cp1252",
    "WINDOWS-1253": "cp1253",
    "WINDOWS-1254": "cp1254",
    "WINDOWS-1255": "cp1255",
    "WINDOWS-1256": "cp1256",
    "WINDOWS-1257": "cp1257",
    "WINDOWS-1258": "cp1258",
    "KOI8-R": "koi8_r",
    "KOI8-U": "koi8_u",
    "SHIFT_JIS": "shift_jis",
    "EUC-JP": "euc_jp",
    "ISO-2022-JP": "iso2022_jp",
    "EUC-KR": "euc_kr",
    "GB2312": "gb2312",
    "GBK": "gbk",
    "GB18030": "gb18030",
    "BIG5": "big5",
}

# Reverse table keyed by the codec registry's normalized name, so any
# alias Python accepts ("latin-1", "iso-8859-1", "l1") resolves.
_CODEC_CHARSETS: Dict[str, str] = {
    codecs.lookup(codec).name: charset for charset, codec in CHARSET_CODECS.items()
}


def canonical_charset_name(name: str) -> str:
    """
    Return the table spelling of a registered charset name.

    Raises:
        InvalidInputError: If name is None
        UnknownCharsetError: If the name is not registered
    """
    if name is None:
        raise InvalidInputError("No charset given")
    key = name.strip().strip('"').upper()
    if key not in CHARSET_CODECS:
        raise UnknownCharsetError(f"Unknown charset: {name!r}")
    return key


def codec_for_charset(name: str) -> str:
    """Map a charset name (case-insensitive) to its Python codec."""
    return CHARSET_CODECS[canonical_charset_name(name)]


# Line structure of a 2.1 card: markers, separators, escapes, terminator.
_ASCII_PROBE = "BEGIN:VCARD\r\n;=,\\"


def is_ascii_compatible(name: str) -> bool:
    """True if the charset writes ASCII text as the same single bytes."""
    probe = _ASCII_PROBE.encode("ascii")
    return _ASCII_PROBE.encode(codec_for_charset(name)) == probe


def output_charset(name: str) -> str:
    """
    Validate a charset for 2.1 output and return its table spelling.

    2.1 lines are scanned byte for byte, so values must be written in a
    charset that leaves ASCII untouched (not UTF-16 or UTF-32).

    Raises:
        InvalidInputError: If name is None or not ASCII compatible
        UnknownCharsetError: If the name is not registered
    """
    charset = canonical_charset_name(name)
    if not is_ascii_compatible(charset):
        raise InvalidInputError(f"{charset} cannot carry vCard 2.1 lines")
    return charset


def charset_for_codec(codec: str) -> str:
    """
    Map a Python codec name or alias back to its registered charset name.

    Raises:
        UnknownCharsetError: If the codec is unknown to Python or unregistered
    """
    try:
        normalized = codecs.lookup(codec).name
    except (LookupError, TypeError):
        raise UnknownCharsetError(f"Unknown codec: {codec!r}") from None
    if normalized not in _CODEC_CHARSETS:
        raise UnknownCharsetError(f"Codec {codec!r} has no registered charset name")
    return _CODEC_CHARSETS[normalized]


def is_registered_charset(name: str) -> bool:
    return name is not None and name.strip().strip('"').upper() in CHARSET_CODECS


__all__ = [
    "DEFAULT_V21_CHARSET",
    "CHARSET_CODECS",
    "canonical_charset_name",
    "codec_for_charset",
    "charset_for_codec",
    "is_registered_charset",
    "is_ascii_compatible",
    "output_charset",
]
