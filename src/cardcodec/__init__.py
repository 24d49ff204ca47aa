"""
Card Codec Package

Reads and writes contact cards in vCard 2.1, 3.0 and 4.0.

ARCHITECTURAL GUARANTEE:
------------------------
The codec (charsets, escaping, qualifiers, parser, serializer) works on
in-memory text and bytes only. It contains ZERO knowledge of:
    - Where cards come from or go to (files, editors, buffers)
    - How contacts are presented to a user
    - How style plugins are discovered

Styles and their field mappings are supplied by the host; the
transcoder only looks them up.
"""

from cardcodec.errors import (
    CardCodecError,
    DuplicateStyleError,
    InvalidInputError,
    MalformedCardError,
    UnknownCharsetError,
    UnknownLanguageError,
    UnknownStyleError,
    UnknownVersionError,
    UnmappableTextError,
)
from cardcodec.model import Card, Record, Session, Version
from cardcodec.parser import parse, parse_file
from cardcodec.qualifiers import canonicalise
from cardcodec.serializer import serialize_card, serialize_cards, serialize_line
from cardcodec.settings import CodecSettings
from cardcodec.transcoder import Transcoder, convert

__version__ = "0.1.0"

__all__ = [
    "Card",
    "Record",
    "Session",
    "Version",
    "CodecSettings",
    "Transcoder",
    "canonicalise",
    "convert",
    "parse",
    "parse_file",
    "serialize_line",
    "serialize_card",
    "serialize_cards",
    "CardCodecError",
    "DuplicateStyleError",
    "InvalidInputError",
    "MalformedCardError",
    "UnknownCharsetError",
    "UnknownLanguageError",
    "UnknownStyleError",
    "UnknownVersionError",
    "UnmappableTextError",
]
